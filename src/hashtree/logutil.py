import logging
import re
from typing import Iterable, Union


_DIGEST = re.compile(r"\b([0-9a-f]{12})[0-9a-f]{52}\b")


class DigestAbbreviatingFilter(logging.Filter):
    """Shorten full hex digests in log records to their first 12 characters."""

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        record.msg = _DIGEST.sub(r"\1...", msg)
        record.args = ()
        return True


def setup_logging(
    level: Union[int, str] = logging.INFO,
    loggers: Iterable[str] = ("hashtree", "hashtree_sdk", "hashtree_cli"),
) -> None:
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level)
    for name in loggers:
        logging.getLogger(name).setLevel(level)
    # Logger filters skip records propagated from child loggers; handler filters do not.
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, DigestAbbreviatingFilter) for f in handler.filters):
            handler.addFilter(DigestAbbreviatingFilter())
