# ==============================================
# Console Logging
# ==============================================
#
# PURPOSE:
#   Give the "sconfig" logger a console handler when sconfig runs
#   inside a host that has not configured logging itself.
#   SConfigPlugin installs it in on_initialize(), once the debug
#   flag is known, and removes it in on_shutdown().
#
# FUNCTIONS:
# ----------
# - setup_logging(debug, use_colors, stream) → install (or replace) the handler
# - teardown_logging(handler)                → remove it again
#
# Output:  12:00:00 : WARNING  : sconfig.storage.store : message
#
# ==============================================

import logging
from typing import Optional

LOGGER_NAME = "sconfig"
LOG_FORMAT = "%(asctime)s : %(levelname)-8s : %(name)s : %(message)s"
DATE_FORMAT = "%H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Wraps the level name in an ANSI colour picked by level number."""

    LEVEL_COLORS = {
        logging.DEBUG: "36",
        logging.INFO: "32",
        logging.WARNING: "33",
        logging.ERROR: "31",
        logging.CRITICAL: "35",
    }

    def format(self, record: logging.LogRecord) -> str:
        code = self.LEVEL_COLORS.get(record.levelno)
        if code is None:
            return super().format(record)
        # Other handlers see the same record; colour a copy
        tinted = logging.makeLogRecord(record.__dict__)
        tinted.levelname = f"\033[{code}m{record.levelname}\033[0m"
        return super().format(tinted)


def _is_console_handler(handler: logging.Handler) -> bool:
    return getattr(handler, "_sconfig_console", False)


def setup_logging(debug: bool = False, use_colors: bool = True,
                  stream: Optional[object] = None) -> logging.Handler:
    """
    Attach a console handler to the "sconfig" logger.

    Args:
        debug: Show DEBUG records as well as INFO and above
        use_colors: Colour level names with ANSI codes
        stream: Target stream (defaults to stderr)

    Returns:
        The installed handler
    """
    formatter_cls = ColoredFormatter if use_colors else logging.Formatter
    handler = logging.StreamHandler(stream)  # type: ignore[arg-type]
    handler.setFormatter(formatter_cls(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._sconfig_console = True  # type: ignore[attr-defined]

    logger = logging.getLogger(LOGGER_NAME)
    for old in [h for h in logger.handlers if _is_console_handler(h)]:
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    return handler


def teardown_logging(handler: logging.Handler) -> None:
    """Remove a handler installed by setup_logging and reset the level."""
    logger = logging.getLogger(LOGGER_NAME)
    if handler in logger.handlers:
        logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
    handler.close()
