"""Flat binary preference files.

Layout: a sequence of variable-length records with no header, index or checksum::

    [u32 LE key length][UTF-8 key][u8 type tag][payload]

    tag 0  Int     payload: i32 LE
    tag 1  Float   payload: f32 LE (IEEE-754)
    tag 2  String  payload: u32 LE length + UTF-8 bytes

Record boundaries cannot be trusted past a corrupt record, so any unknown tag
or truncated record aborts the whole decode.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

import numpy as np

from ..errors import StoreUnavailable, UnrecognizedEncoding
from ..locations import AppIdentity, binary_prefs_path
from ..records import PlayerPref, ValueType
from .base import collect, is_reserved

logger = logging.getLogger(__name__)

TAG_INT = 0
TAG_FLOAT = 1
TAG_STRING = 2

_TAGS = {
    ValueType.INT: TAG_INT,
    ValueType.FLOAT: TAG_FLOAT,
    ValueType.STRING: TAG_STRING,
}


class _Cursor:
    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def exhausted(self) -> bool:
        return self.pos >= len(self.data)

    def take(self, n: int, what: str, *, key: Optional[str] = None) -> bytes:
        if self.pos + n > len(self.data):
            raise UnrecognizedEncoding(
                f"Truncated record: {what} needs {n} byte(s), {len(self.data) - self.pos} left",
                key=key,
                offset=self.pos,
            )
        chunk = self.data[self.pos : self.pos + n]
        self.pos += n
        return chunk

    def scalar(self, dtype: str, what: str, *, key: Optional[str] = None):
        return np.frombuffer(self.take(4, what, key=key), dtype=dtype)[0]

    def text(self, n: int, what: str, *, key: Optional[str] = None) -> str:
        start = self.pos
        raw = self.take(n, what, key=key)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise UnrecognizedEncoding(f"{what} is not valid UTF-8", key=key, offset=start) from exc


def iter_records(data: bytes) -> Iterator[PlayerPref]:
    """Decode every record in *data*, reserved keys included."""

    cur = _Cursor(data)
    while not cur.exhausted():
        start = cur.pos
        key_len = int(cur.scalar("<u4", "key length"))
        if key_len == 0:
            raise UnrecognizedEncoding("Record has an empty key", offset=start)
        key = cur.text(key_len, "key")

        tag_offset = cur.pos
        tag = cur.take(1, "type tag", key=key)[0]
        if tag == TAG_INT:
            yield PlayerPref(key, ValueType.INT, int(cur.scalar("<i4", "int payload", key=key)))
        elif tag == TAG_FLOAT:
            yield PlayerPref(key, ValueType.FLOAT, float(cur.scalar("<f4", "float payload", key=key)))
        elif tag == TAG_STRING:
            n = int(cur.scalar("<u4", "string length", key=key))
            yield PlayerPref(key, ValueType.STRING, cur.text(n, "string payload", key=key))
        else:
            raise UnrecognizedEncoding(f"Unknown type tag {tag}", key=key, offset=tag_offset)


def decode_prefs(data: bytes, *, source: str = "<bytes>") -> List[PlayerPref]:
    # fully decode before filtering so a corrupt tail fails the whole call
    records = list(iter_records(data))
    kept = []
    for rec in records:
        if is_reserved(rec.key):
            logger.debug("Skipping reserved key %r", rec.key)
            continue
        kept.append(rec)
    return collect(kept, source=source)


def encode_records(records: Iterable[PlayerPref]) -> bytes:
    """Serialize records in the same flat layout ``decode_prefs`` reads."""

    parts: List[bytes] = []
    for rec in records:
        key = rec.key.encode("utf-8")
        parts.append(np.array([len(key)], dtype="<u4").tobytes())
        parts.append(key)
        parts.append(bytes([_TAGS[rec.value_type]]))
        if rec.value_type is ValueType.INT:
            parts.append(np.array([rec.value], dtype="<i4").tobytes())
        elif rec.value_type is ValueType.FLOAT:
            parts.append(np.array([rec.value], dtype="<f4").tobytes())
        else:
            payload = str(rec.value).encode("utf-8")
            parts.append(np.array([len(payload)], dtype="<u4").tobytes())
            parts.append(payload)
    return b"".join(parts)


class BinaryPrefsReader:
    """Flat binary file backend (Linux and other platforms)."""

    name = "binary"

    def __init__(self, app: AppIdentity, *, path: Optional[Path] = None) -> None:
        self.app = app
        self.path = Path(path) if path is not None else binary_prefs_path(app)

    @property
    def location(self) -> str:
        return str(self.path)

    def list_preferences(self) -> List[PlayerPref]:
        try:
            with self.path.open("rb") as fp:
                data = fp.read()
        except OSError as exc:
            raise StoreUnavailable(f"Couldn't read preference file: {self.path}") from exc
        return decode_prefs(data, source=self.location)


def write_prefs_file(path: Path, records: Iterable[PlayerPref]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_records(records))
    return path
