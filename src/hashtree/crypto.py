from __future__ import annotations
import hashlib
import re

from .errors import EnvironmentFailure

DIGEST_ALGORITHM = "sha256"
DIGEST_HEX_LENGTH = 64
DIGEST_PATTERN = r"^[0-9a-f]{64}$"

_DIGEST_RE = re.compile(DIGEST_PATTERN)


def sha256_hex(data: bytes) -> str:
    """Lowercase hex SHA-256 of ``data``."""
    try:
        h = hashlib.new(DIGEST_ALGORITHM)
    except ValueError as e:
        raise EnvironmentFailure(f"{DIGEST_ALGORITHM} is not available") from e
    h.update(data)
    return h.hexdigest()


def leaf_digest(data: bytes) -> str:
    return sha256_hex(data)


def node_digest(left: str, right: str) -> str:
    """Hash two child digests.

    The hex strings are concatenated, not the raw digest bytes, so roots stay
    comparable with other implementations of the same tree.
    """
    return sha256_hex((left + right).encode("ascii"))


def is_digest(value: object) -> bool:
    return isinstance(value, str) and _DIGEST_RE.match(value) is not None
