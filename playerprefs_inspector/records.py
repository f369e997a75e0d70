"""Typed preference records.

A record is a key, a value type from a closed set, and a value that always
agrees with that type. Records are immutable; edits go through
``dataclasses.replace`` which re-runs the consistency check.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Any, Dict, Union

import numpy as np

from .errors import ValueTypeMismatch

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

PrefValue = Union[int, float, str]


class ValueType(enum.Enum):
    """Closed set of value kinds a preference can hold."""

    INT = "int"
    FLOAT = "float"
    STRING = "string"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, text: str) -> "ValueType":
        """Accept either the serialized value (``int``) or the display name (``Int``)."""
        t = (text or "").strip().lower()
        for vt in cls:
            if t in (vt.value, vt.display_name.lower()):
                return vt
        raise ValueError(f"Unknown value type: {text!r}")


_DISPLAY_NAMES = {
    ValueType.INT: "Int",
    ValueType.FLOAT: "Float",
    ValueType.STRING: "String",
}

_ZERO_VALUES: Dict[ValueType, PrefValue] = {
    ValueType.INT: 0,
    ValueType.FLOAT: 0.0,
    ValueType.STRING: "",
}


def to_float32(value: float) -> float:
    """Round *value* to IEEE-754 single precision and return it as a Python float."""
    with np.errstate(over="ignore"):
        f32 = np.float32(value)
    if math.isinf(f32) and not math.isinf(value):
        raise ValueTypeMismatch(f"Float value {value!r} is outside the 32-bit float range")
    return float(f32)


def check_value(value_type: ValueType, value: Any) -> PrefValue:
    """Return *value* normalized for *value_type*, or raise ValueTypeMismatch.

    Nothing is coerced across kinds: an int is not a float, a bool is not an int.
    """

    if value_type is ValueType.INT:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueTypeMismatch(f"Int preference needs an int value, got {type(value).__name__}")
        if not INT32_MIN <= value <= INT32_MAX:
            raise ValueTypeMismatch(f"Int value {value} is outside the signed 32-bit range")
        return value
    if value_type is ValueType.FLOAT:
        if not isinstance(value, float):
            raise ValueTypeMismatch(f"Float preference needs a float value, got {type(value).__name__}")
        return to_float32(value)
    if value_type is ValueType.STRING:
        if not isinstance(value, str):
            raise ValueTypeMismatch(f"String preference needs a str value, got {type(value).__name__}")
        return value
    raise ValueTypeMismatch(f"Not a preference value type: {value_type!r}")


def float32_bits(value: float) -> int:
    return int(np.array([value], dtype="<f4").view("<u4")[0])


@dataclass(frozen=True, eq=False)
class PlayerPref:
    """One typed key/value preference.

    Float values compare by their 32-bit pattern, so a decoded NaN equals itself.
    """

    key: str
    value_type: ValueType
    value: PrefValue

    def __post_init__(self) -> None:
        if not isinstance(self.key, str) or not self.key:
            raise ValueError("Preference key must be a non-empty string")
        if not isinstance(self.value_type, ValueType):
            raise ValueTypeMismatch(f"Not a preference value type: {self.value_type!r}")
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "value", check_value(self.value_type, self.value))

    def _value_id(self) -> Any:
        if self.value_type is ValueType.FLOAT:
            return float32_bits(self.value)
        return self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlayerPref):
            return NotImplemented
        return (self.key, self.value_type, self._value_id()) == (other.key, other.value_type, other._value_id())

    def __hash__(self) -> int:
        return hash((self.key, self.value_type, self._value_id()))

    @classmethod
    def default(cls, value_type: ValueType, key: str) -> "PlayerPref":
        return cls(key=key, value_type=value_type, value=_ZERO_VALUES[value_type])

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "type": self.value_type.value, "value": self.value}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "PlayerPref":
        return PlayerPref(
            key=str(d.get("key", "")),
            value_type=ValueType.parse(str(d.get("type", ""))),
            value=d.get("value"),
        )


__all__ = ["INT32_MAX", "INT32_MIN", "PlayerPref", "PrefValue", "ValueType", "check_value", "float32_bits", "to_float32"]
