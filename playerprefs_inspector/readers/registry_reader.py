"""Windows registry store.

Value names carry a "_h<digits>" hash suffix; floats are stored as the raw
float32 bits in the low half of a REG_QWORD.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Optional

import numpy as np

from ..errors import StoreUnavailable, UnrecognizedEncoding
from ..locations import AppIdentity, registry_key_path
from ..records import PlayerPref, ValueType
from .base import collect, is_reserved

logger = logging.getLogger(__name__)

# The runtime appends "_h<hash>" to every value name it writes.
_HASH_SUFFIX_RE = re.compile(r"_h\d+$")


def strip_hash_suffix(value_name: str) -> str:
    return _HASH_SUFFIX_RE.sub("", value_name)


def dword_to_int(data: int) -> int:
    """REG_DWORD values come back unsigned; reinterpret them as signed 32-bit."""
    raw = np.array([int(data) & 0xFFFFFFFF], dtype="<u4")
    return int(raw.view("<i4")[0])


def qword_to_float(data: int) -> float:
    """Recover a float the runtime widened bit-for-bit into a REG_QWORD slot.

    The low 4 bytes of the little-endian 64-bit value are the IEEE-754 single
    precision pattern. This is a reinterpretation, not a numeric conversion.
    """
    raw = np.array([int(data) & 0xFFFFFFFFFFFFFFFF], dtype="<u8")
    return float(raw.view("<f4")[0])


def binary_to_text(data: bytes, *, key: str) -> str:
    # zero-length REG_BINARY values come back as None
    raw = bytes(data) if data is not None else b""
    # strings are written with a trailing NUL terminator
    if raw.endswith(b"\x00"):
        raw = raw[:-1]
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise UnrecognizedEncoding("String preference is not valid UTF-8", key=key) from exc


class RegistryReader:
    """Windows registry backend.

    Notes:
    - ``winreg`` is imported lazily so the module imports on every platform.
    - Any object exposing the ``winreg`` surface used here can be injected as
      ``registry`` (tests use a fake).
    """

    name = "registry"

    def __init__(self, app: AppIdentity, *, player: bool = False, registry: Optional[Any] = None) -> None:
        self.app = app
        self.player = player
        self._registry = registry

    @property
    def location(self) -> str:
        return "HKEY_CURRENT_USER\\" + registry_key_path(self.app, player=self.player)

    def _winreg(self) -> Any:
        if self._registry is not None:
            return self._registry
        try:
            import winreg  # type: ignore
        except ImportError as exc:
            raise StoreUnavailable("The Windows registry is not available on this platform") from exc
        return winreg

    def list_preferences(self) -> List[PlayerPref]:
        winreg = self._winreg()
        path = registry_key_path(self.app, player=self.player)
        try:
            key = winreg.OpenKey(winreg.HKEY_CURRENT_USER, path)
        except OSError as exc:
            raise StoreUnavailable(f"Couldn't open preference key in registry: {self.location}") from exc

        with key:
            try:
                n_values = winreg.QueryInfoKey(key)[1]
                entries = [winreg.EnumValue(key, i) for i in range(n_values)]
            except OSError as exc:
                raise StoreUnavailable(f"Couldn't enumerate preference values: {self.location}") from exc

        return collect((self._decode(winreg, *entry[:3]) for entry in entries), source=self.location)

    def _decode(self, winreg: Any, value_name: str, data: Any, kind: int) -> Optional[PlayerPref]:
        key = strip_hash_suffix(value_name)
        if is_reserved(key):
            logger.debug("Skipping reserved key %r", key)
            return None
        if not key:
            raise UnrecognizedEncoding("Registry value has an empty preference name", key=value_name)

        if kind == winreg.REG_DWORD:
            return PlayerPref(key, ValueType.INT, dword_to_int(data))
        if kind == winreg.REG_QWORD:
            return PlayerPref(key, ValueType.FLOAT, qword_to_float(data))
        if kind == winreg.REG_BINARY:
            return PlayerPref(key, ValueType.STRING, binary_to_text(data, key=key))
        raise UnrecognizedEncoding(f"Unexpected registry value kind {kind}", key=key)
