from __future__ import annotations

import logging
from pathlib import Path

from playerprefs_inspector.log_utils import sanitize_key, setup_logging


def test_sanitize_key_removes_ansi_and_controls() -> None:
    raw = "\x1b[0;93mHigh\x1b[mScore\x07\ttab\nnext"

    cleaned = sanitize_key(raw)

    assert "\x1b" not in cleaned
    assert "\x07" not in cleaned
    assert cleaned == "HighScore?\ttab\\nnext"
    assert sanitize_key("") == ""


def test_setup_logging_keeps_existing_configuration(tmp_path: Path) -> None:
    root = logging.getLogger()
    marker = logging.NullHandler()
    root.addHandler(marker)
    try:
        assert setup_logging(home=tmp_path) is None
        assert not (tmp_path / "inspector.log").exists()
    finally:
        root.removeHandler(marker)
