"""
Logging configuration for the service.

``setup_logging`` attaches a console handler to the root logger and,
when ``LOG_FILE`` (or ``run.py --log-file``) names a path, a file
handler writing the same records.  Handlers added here are named so a
repeated call, such as one ``create_app`` per test, recognises them and
does not add duplicates.  Handlers installed by someone else (pytest,
uvicorn) are left alone.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_HANDLER_NAME = "mailinglist.console"
FILE_HANDLER_PREFIX = "mailinglist.file:"


def _has_handler(logger: logging.Logger, name: str) -> bool:
    return any(h.get_name() == name for h in logger.handlers)


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``).  Case insensitive;
        unknown names fall back to ``INFO``.
    logfile : Optional[str]
        File to append log records to, in addition to the console.
        Relative paths resolve against the current working directory.
    """
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if not _has_handler(logger, CONSOLE_HANDLER_NAME):
        console_handler = logging.StreamHandler()
        console_handler.set_name(CONSOLE_HANDLER_NAME)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        name = FILE_HANDLER_PREFIX + str(log_path)
        if not _has_handler(logger, name):
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.set_name(name)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
