"""macOS property-list store: a root <dict> of <key> and <integer>/<real>/<string> pairs."""

from __future__ import annotations

import logging
import plistlib
from pathlib import Path
from typing import Any, List, Optional
from xml.parsers.expat import ExpatError

from ..errors import StoreUnavailable, UnrecognizedEncoding, ValueTypeMismatch
from ..locations import AppIdentity, plist_path
from ..records import INT32_MAX, INT32_MIN, PlayerPref, ValueType, to_float32
from .base import collect, is_reserved

logger = logging.getLogger(__name__)


def _element_name(value: Any) -> str:
    # Name of the property-list element plistlib decoded *value* from.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray)):
        return "data"
    if isinstance(value, dict):
        return "dict"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def decode_entry(key: str, value: Any) -> Optional[PlayerPref]:
    """Map one ``<key>``/value pair of the root dictionary to a record."""

    if is_reserved(key):
        logger.debug("Skipping reserved key %r", key)
        return None
    if not key:
        raise UnrecognizedEncoding("Property list contains an empty preference key")

    # bool is an int subclass: <true/>/<false/> must not pass as <integer>
    if isinstance(value, bool):
        raise UnrecognizedEncoding(f"Unexpected <{_element_name(value)}/> element", key=key)
    if isinstance(value, int):
        if not INT32_MIN <= value <= INT32_MAX:
            raise UnrecognizedEncoding(f"<integer> value {value} does not fit 32 bits", key=key)
        return PlayerPref(key, ValueType.INT, value)
    if isinstance(value, float):
        try:
            f32 = to_float32(value)
        except ValueTypeMismatch as exc:
            raise UnrecognizedEncoding(f"<real> value {value!r} does not fit 32 bits", key=key) from exc
        return PlayerPref(key, ValueType.FLOAT, f32)
    if isinstance(value, str):
        return PlayerPref(key, ValueType.STRING, value)
    raise UnrecognizedEncoding(f"Unexpected <{_element_name(value)}> element", key=key)


class PlistReader:
    """macOS property-list backend.

    ``plistlib`` handles both the XML and the binary flavour; decimal values
    in ``<real>`` are parsed locale-independently by it.
    """

    name = "plist"

    def __init__(self, app: AppIdentity, *, path: Optional[Path] = None) -> None:
        self.app = app
        self.path = Path(path) if path is not None else plist_path(app)

    @property
    def location(self) -> str:
        return str(self.path)

    def list_preferences(self) -> List[PlayerPref]:
        try:
            with self.path.open("rb") as fp:
                root = plistlib.load(fp)
        except OSError as exc:
            raise StoreUnavailable(f"Couldn't read property list: {self.path}") from exc
        except (plistlib.InvalidFileException, ExpatError, ValueError, TypeError) as exc:
            raise StoreUnavailable(f"Malformed property list: {self.path}: {exc}") from exc

        if not isinstance(root, dict):
            raise StoreUnavailable(f"Property list root is not a dictionary: {self.path}")

        return collect((decode_entry(str(k), v) for k, v in root.items()), source=self.location)
