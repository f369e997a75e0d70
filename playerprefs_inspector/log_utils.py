"""Logging-related utilities.

This module has no third-party dependencies so both the CLI and library
callers can use it.
"""

from __future__ import annotations

import logging
import re
import sys
from pathlib import Path
from typing import Optional

from .locations import inspector_home

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

# A reasonably complete ANSI escape sequence matcher (CSI + single-character).
_ANSI_ESCAPE_RE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")


def setup_logging(verbose: bool = False, home: Optional[Path] = None) -> Optional[Path]:
    """Configure logging to a persistent file plus stderr.

    Returns the log file path, or None when the file could not be opened
    (logging then goes to stderr only).
    """

    root = logging.getLogger()
    level = logging.DEBUG if verbose else logging.INFO

    # Don't clobber an existing logging configuration (e.g. when embedded).
    if root.handlers:
        return None

    stream = logging.StreamHandler(sys.stderr)
    stream.setLevel(level if verbose else logging.WARNING)
    handlers: list[logging.Handler] = [stream]

    log_path: Optional[Path] = None
    try:
        log_dir = Path(home) if home is not None else inspector_home()
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / "inspector.log"
        handlers.append(logging.FileHandler(str(log_path), mode="a", encoding="utf-8"))
    except OSError as e:
        log_path = None
        print(f"[warn] file logging disabled: {e}", file=sys.stderr)

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)

    # Hook unhandled exceptions so we get a traceback in the log file.
    def _excepthook(exc_type, exc, tb):
        logging.error("Unhandled exception", exc_info=(exc_type, exc, tb))
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _excepthook
    return log_path


def sanitize_key(text: str) -> str:
    """Make a key or value safe to print in a terminal listing.

    - Strip ANSI escape sequences (colors, cursor movement, etc.).
    - Replace remaining control characters (except tab/newline) with ``?``.
    - Show newlines as ``\\n`` so one record stays on one line.
    """

    if not text:
        return ""

    text = _ANSI_ESCAPE_RE.sub("", text)
    text = _CONTROL_RE.sub("?", text)
    return text.replace("\n", "\\n")


__all__ = ["LOG_FORMAT", "sanitize_key", "setup_logging"]
