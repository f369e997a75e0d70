#!/usr/bin/env python3
"""Convenience entry point.

The implementation lives in the `playerprefs_inspector` package; this file
lets the tool run from a checkout without installing it.
"""

from playerprefs_inspector.cli import main as _main


if __name__ == "__main__":
    raise SystemExit(_main())
