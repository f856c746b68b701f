"""Typed values stored in a settings file.

A value is one of six frozen dataclasses joined in the :data:`Value` alias.
The kinds share no base class; code that behaves differently per kind
checks all six explicitly and raises ``TypeError`` for anything else.

The module also holds the text conversions shared by the parser and the
writer, and a tagged ``{"type": ..., "data": ...}`` mapping form used for
JSON/YAML output and for values handed in by a UI.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from . import grammar
from .errors import ValueFormatError

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_INT_RE = re.compile(r"[+-]?\d+")


@dataclass(frozen=True)
class NumRange:
    """Half-open ``[start, end)`` interval from an ``Acceptable value range`` comment."""

    start: int | float
    end: int | float


@dataclass(frozen=True)
class BoolValue:
    value: bool


@dataclass(frozen=True)
class StringValue:
    value: str


@dataclass(frozen=True)
class IntValue:
    value: int
    range: NumRange | None = None


@dataclass(frozen=True)
class FloatValue:
    value: float
    range: NumRange | None = None


@dataclass(frozen=True)
class EnumValue:
    """Single choice out of ``options``; ``index`` is a position in ``options``."""

    index: int
    options: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", tuple(self.options))

    @property
    def selected(self) -> str | None:
        if 0 <= self.index < len(self.options):
            return self.options[self.index]
        return None


@dataclass(frozen=True)
class FlagsValue:
    """Any number of choices out of ``options``."""

    indices: frozenset[int] = frozenset()
    options: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "indices", frozenset(self.indices))
        object.__setattr__(self, "options", tuple(self.options))

    @property
    def selected(self) -> list[str]:
        return [self.options[i] for i in sorted(self.indices) if 0 <= i < len(self.options)]


Value = BoolValue | StringValue | IntValue | FloatValue | EnumValue | FlagsValue


# ---------------------------------------------------------------------------
# Scalar text conversion
# ---------------------------------------------------------------------------


def parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"invalid boolean: {raw!r}")


def parse_int(raw: str) -> int:
    text = raw.strip()
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer: {raw!r}")
    number = int(text)
    if not INT32_MIN <= number <= INT32_MAX:
        raise ValueError(f"integer out of 32-bit range: {raw!r}")
    return number


def parse_float(raw: str) -> float:
    # Some locales write the decimal separator as a comma.
    text = raw.strip().replace(",", ".")
    if not text or "_" in text:
        raise ValueError(f"invalid number: {raw!r}")
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"invalid number: {raw!r}") from None


def format_float(number: float) -> str:
    return repr(float(number))


def decode_string(raw: str) -> str:
    return raw.replace("\\n", "\n")


def encode_string(text: str) -> str:
    return text.replace("\n", "\\n")


def parse_range(bounds: tuple[str, str] | None, convert) -> NumRange | None:
    if bounds is None:
        return None
    low, high = bounds
    return NumRange(convert(low), convert(high))


def format_number(number: int | float) -> str:
    if isinstance(number, float):
        return format_float(number)
    return str(number)


# ---------------------------------------------------------------------------
# Value level helpers
# ---------------------------------------------------------------------------


def type_name(value: Value) -> str:
    """Return the ``# Setting type:`` name written for *value*."""

    if isinstance(value, BoolValue):
        return grammar.BOOLEAN
    if isinstance(value, StringValue):
        return grammar.STRING
    if isinstance(value, IntValue):
        return grammar.INT32
    if isinstance(value, FloatValue):
        return grammar.SINGLE
    if isinstance(value, (EnumValue, FlagsValue)):
        return grammar.STRING
    raise TypeError(f"unsupported value: {value!r}")


def value_options(value: Value) -> tuple[str, ...] | None:
    if isinstance(value, (EnumValue, FlagsValue)):
        return value.options
    return None


def value_range(value: Value) -> NumRange | None:
    if isinstance(value, (IntValue, FloatValue)):
        return value.range
    return None


def value_to_text(value: Value) -> str:
    """Render *value* the way it appears after ``name =`` in a file."""

    if isinstance(value, BoolValue):
        return "true" if value.value else "false"
    if isinstance(value, StringValue):
        return encode_string(value.value)
    if isinstance(value, IntValue):
        return str(value.value)
    if isinstance(value, FloatValue):
        return format_float(value.value)
    if isinstance(value, EnumValue):
        return value.selected or ""
    if isinstance(value, FlagsValue):
        if not value.indices:
            return grammar.EMPTY_FLAGS
        return grammar.OPTIONS_SEPARATOR.join(value.selected)
    raise TypeError(f"unsupported value: {value!r}")


def value_from_text(text: str, like: Value) -> Value:
    """Return a value of the same kind as *like* parsed from user *text*.

    Options and ranges are carried over from *like*.  Unlike the file parser,
    unknown enum or flag names are rejected rather than normalised.
    """

    try:
        if isinstance(like, BoolValue):
            return BoolValue(parse_bool(text))
        if isinstance(like, StringValue):
            return StringValue(decode_string(text))
        if isinstance(like, IntValue):
            return replace(like, value=parse_int(text))
        if isinstance(like, FloatValue):
            return replace(like, value=parse_float(text))
    except ValueError as exc:
        raise ValueFormatError(str(exc)) from exc
    if isinstance(like, EnumValue):
        try:
            return replace(like, index=like.options.index(text.strip()))
        except ValueError:
            raise ValueFormatError(
                f"{text!r} is not one of: {', '.join(like.options)}"
            ) from None
    if isinstance(like, FlagsValue):
        tokens = [t.strip() for t in text.split(",") if t.strip()]
        if tokens == [grammar.EMPTY_FLAGS]:
            tokens = []
        unknown = [t for t in tokens if t not in like.options]
        if unknown:
            raise ValueFormatError(f"unknown flags: {', '.join(unknown)}")
        return replace(like, indices=frozenset(like.options.index(t) for t in tokens))
    raise TypeError(f"unsupported value: {like!r}")


def simple_value_from_text(text: str, setting_type: str) -> Value:
    """Build a non enum value from *text* for the given ``Setting type`` name."""

    if setting_type == grammar.BOOLEAN:
        return BoolValue(parse_bool(text))
    if setting_type in grammar.INT_TYPES:
        return IntValue(parse_int(text))
    if setting_type in grammar.FLOAT_TYPES:
        return FloatValue(parse_float(text))
    return StringValue(decode_string(text))


# ---------------------------------------------------------------------------
# Tagged mapping form
# ---------------------------------------------------------------------------


def _range_to_dict(rng: NumRange | None) -> dict[str, Any] | None:
    if rng is None:
        return None
    return {"start": rng.start, "end": rng.end}


def value_to_dict(value: Value) -> dict[str, Any]:
    if isinstance(value, BoolValue):
        return {"type": "Bool", "data": value.value}
    if isinstance(value, StringValue):
        return {"type": "String", "data": value.value}
    if isinstance(value, IntValue):
        return {"type": "Int", "data": {"value": value.value, "range": _range_to_dict(value.range)}}
    if isinstance(value, FloatValue):
        return {"type": "Float", "data": {"value": value.value, "range": _range_to_dict(value.range)}}
    if isinstance(value, EnumValue):
        return {"type": "Enum", "data": {"index": value.index, "options": list(value.options)}}
    if isinstance(value, FlagsValue):
        return {
            "type": "Flags",
            "data": {"indices": sorted(value.indices), "options": list(value.options)},
        }
    raise TypeError(f"unsupported value: {value!r}")


def _options(data: Mapping[str, Any]) -> tuple[str, ...]:
    options = data.get("options")
    if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
        raise ValueFormatError("options must be a list of strings")
    return tuple(options)


def _number(data: Any, kind: type) -> Any:
    if isinstance(data, bool) or not isinstance(data, (int, float)):
        raise ValueFormatError(f"expected a number, got {data!r}")
    if kind is int:
        if isinstance(data, float) and not data.is_integer():
            raise ValueFormatError(f"expected an integer, got {data!r}")
        number = int(data)
        if not INT32_MIN <= number <= INT32_MAX:
            raise ValueFormatError(f"integer out of 32-bit range: {data!r}")
        return number
    return float(data)


def _num_value(data: Any, kind: type) -> tuple[Any, NumRange | None]:
    if not isinstance(data, Mapping) or "value" not in data:
        raise ValueFormatError("numeric data must be a mapping with a 'value' key")
    rng = data.get("range")
    if rng is not None:
        if not isinstance(rng, Mapping) or "start" not in rng or "end" not in rng:
            raise ValueFormatError("range must have 'start' and 'end'")
        rng = NumRange(_number(rng["start"], kind), _number(rng["end"], kind))
    return _number(data["value"], kind), rng


def _indices(raw: Iterable[Any]) -> frozenset[int]:
    out = set()
    for item in raw:
        if isinstance(item, bool) or not isinstance(item, int) or item < 0:
            raise ValueFormatError(f"invalid index: {item!r}")
        out.add(item)
    return frozenset(out)


def value_from_dict(data: Mapping[str, Any]) -> Value:
    """Inverse of :func:`value_to_dict`."""

    if not isinstance(data, Mapping):
        raise ValueFormatError(f"expected a mapping, got {type(data).__name__}")
    kind = data.get("type")
    payload = data.get("data")
    if kind == "Bool":
        if not isinstance(payload, bool):
            raise ValueFormatError("Bool data must be true or false")
        return BoolValue(payload)
    if kind == "String":
        if not isinstance(payload, str):
            raise ValueFormatError("String data must be a string")
        return StringValue(payload)
    if kind == "Int":
        number, rng = _num_value(payload, int)
        return IntValue(number, rng)
    if kind == "Float":
        number, rng = _num_value(payload, float)
        return FloatValue(number, rng)
    if kind == "Enum":
        if not isinstance(payload, Mapping):
            raise ValueFormatError("Enum data must be a mapping")
        index = payload.get("index")
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            raise ValueFormatError(f"invalid index: {index!r}")
        return EnumValue(index, _options(payload))
    if kind == "Flags":
        if not isinstance(payload, Mapping):
            raise ValueFormatError("Flags data must be a mapping")
        raw = payload.get("indices")
        if not isinstance(raw, list):
            raise ValueFormatError("Flags data needs an 'indices' list")
        return FlagsValue(_indices(raw), _options(payload))
    raise ValueFormatError(f"unknown value type: {kind!r}")
