"""Error taxonomy for store decoding and record handling."""

from __future__ import annotations

from typing import Optional


class PrefsInspectorError(Exception):
    """Base class for all inspector failures."""


class StoreUnavailable(PrefsInspectorError):
    """Raised when the native store is missing, inaccessible or unparseable as a whole."""


class UnrecognizedEncoding(PrefsInspectorError):
    """Raised when an entry's stored kind or layout matches no supported value type."""

    def __init__(self, message: str, *, key: Optional[str] = None, offset: Optional[int] = None) -> None:
        details = []
        if key is not None:
            details.append(f"key={key!r}")
        if offset is not None:
            details.append(f"offset={offset}")
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)
        self.key = key
        self.offset = offset


class ValueTypeMismatch(PrefsInspectorError, TypeError):
    """Raised when a value does not match the record's value type."""


__all__ = [
    "PrefsInspectorError",
    "StoreUnavailable",
    "UnrecognizedEncoding",
    "ValueTypeMismatch",
]
