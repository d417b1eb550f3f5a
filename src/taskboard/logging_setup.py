# src/taskboard/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

_PACKAGE = "taskboard"

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the interactive console readable:
    - taskboard logs pass (the handler level still applies)
    - store internals only at WARNING+ (their DEBUG/INFO goes to the file)
    - Python warnings and third-party noise only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == _PACKAGE or name.startswith(_PACKAGE + "."):
            if name.endswith("_store"):
                return record.levelno >= logging.WARNING
            return True
        return record.levelno >= logging.ERROR


def parse_level(name: object, default: int = logging.INFO) -> int:
    """TASKBOARD_LOG_LEVEL value -> logging level; unknown names fall back to default."""
    level = logging.getLevelName(str(name or "").strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(settings, *, file_level: int = logging.DEBUG) -> Path:
    """
    Configure the root logger from Settings:
    - stderr at settings.log_level, filtered for interactive use
    - <data_dir>/<app_name>.log with everything down to file_level

    Replaces any handlers already installed, so call it once at startup.
    Returns the log file path.
    """
    log_dir = Path(settings.data_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{settings.app_name or _PACKAGE}.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(parse_level(settings.log_level))
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
