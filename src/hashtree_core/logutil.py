import logging
import re
from typing import Iterable, List


_LONG_HEX = re.compile(r"\b([0-9a-f]{16})[0-9a-f]{16,}\b")


class HexTruncatingFilter(logging.Filter):
    """Shorten full-length hex digests in log records to a 16-char prefix."""

    def filter(self, record: logging.LogRecord) -> bool:
        msg = str(record.getMessage())
        record.msg = _LONG_HEX.sub(r"\1…", msg)
        record.args = None
        return True


def _with_descendants(name: str) -> List[logging.Logger]:
    """`name` plus every already-created logger beneath it.

    Logger filters only see records created at that logger, not ones
    propagated from children, so the filter goes on each module logger.
    """
    found = [logging.getLogger(name)]
    prefix = name + "."
    for other, lg in list(logging.Logger.manager.loggerDict.items()):
        if other.startswith(prefix) and isinstance(lg, logging.Logger):
            found.append(lg)
    return found


def setup_logging(
    level: int = logging.INFO,
    loggers: Iterable[str] = ("hashtree_core", "hashtree_sdk", "hashtree_cli"),
    truncate_hex: bool = False,
) -> None:
    logging.basicConfig(level=level)
    f = HexTruncatingFilter() if truncate_hex else None
    for name in loggers:
        lg = logging.getLogger(name)
        lg.setLevel(level)
        if f is None:
            continue
        for target in _with_descendants(name):
            if not any(isinstance(x, HexTruncatingFilter) for x in target.filters):
                target.addFilter(f)
