"""Logging setup for todolist."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_level(level: Union[int, str]) -> int:
    """Accept 'info', 'DEBUG', 20 and the like."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: Union[int, str] = "info", log_file: Optional[Path] = None) -> None:
    """
    Configure root logging.

    The TUI owns the terminal, so records go to log_file only; without a file
    a NullHandler is installed. Call this once, before the app starts.
    """
    root = logging.getLogger()
    root.setLevel(parse_level(level))

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    if log_file is None:
        root.addHandler(logging.NullHandler())
    else:
        log_file = Path(log_file).expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
