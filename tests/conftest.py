import os
import sys
from pathlib import Path

# Ensure the 'src' directory is on sys.path for imports in tests
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Keep CLI runs quiet unless a test asks otherwise
os.environ.setdefault("HASHTREE_LOG_LEVEL", "WARNING")
