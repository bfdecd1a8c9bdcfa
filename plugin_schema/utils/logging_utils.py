import logging
import sys
from typing import List, Optional, TextIO


class _BelowLevelFilter(logging.Filter):
    """Passes records strictly below ``level``."""

    def __init__(self, level: int) -> None:
        super().__init__()
        self._level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self._level


def _stream_handler(stream: TextIO, level: int, formatter: logging.Formatter) -> logging.StreamHandler:
    handler = logging.StreamHandler(stream=stream)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_split_stream_logging(
    *,
    level: int = logging.INFO,
    stderr_level: int = logging.WARNING,
    formatter: Optional[logging.Formatter] = None,
    low_stream: Optional[TextIO] = None,
) -> List[logging.Handler]:
    """Replace the root handlers with a two-stream pair.

    Records below ``stderr_level`` go to ``low_stream`` (stdout by default),
    the rest to stderr. Both the linter and the language server pass
    ``low_stream=sys.stderr``: the linter's stdout carries its report and the
    server's stdout carries the protocol.

    Returns:
        The installed handlers, low stream first
    """
    formatter = formatter or logging.Formatter("%(name)s - %(levelname)s - %(message)s")
    stderr_level = max(stderr_level, logging.DEBUG)

    low_handler = _stream_handler(low_stream or sys.stdout, logging.DEBUG, formatter)
    low_handler.addFilter(_BelowLevelFilter(stderr_level))
    handlers = [low_handler, _stream_handler(sys.stderr, stderr_level, formatter)]

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in handlers:
        root.addHandler(handler)
    return handlers
