"""Evaluable values.

Data bags and condition specs carry JSON-shaped values: strings, numbers, booleans and lists of strings, plus two
informal encodings inherited from the wire format:

- the string "null" (or a JSON null) means "not captured"
- a data value such as "NUMBER.35" is an integer carried as a string

Both encodings are decoded exactly once, when a value is read from a data bag or a condition spec. Everything past
that point works on the tagged variants below and never looks at string prefixes again.
"""

from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Tuple, Union

from .errors import InvalidOperandError

NULL_SENTINEL = "null"
NUMBER_PREFIX = "NUMBER."

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

Number = Union[int, float]


class EvaluableValue(ABC):
    """Base of the closed value union."""

    __slots__ = ()

    @property
    @abstractmethod
    def raw(self) -> Any: ...

    @property
    @abstractmethod
    def is_empty(self) -> bool:
        """Falsy in the JSON sense: null, "", [], 0 or false."""


@dataclass(frozen=True)
class NullValue(EvaluableValue):
    @property
    def raw(self) -> None:
        return None

    @property
    def is_empty(self) -> bool:
        return True


NULL = NullValue()


@dataclass(frozen=True)
class StringValue(EvaluableValue):
    text: str

    @property
    def raw(self) -> str:
        return self.text

    @property
    def is_empty(self) -> bool:
        return self.text == ""

    def display_text(self, rewrite_compound: bool = True) -> str:
        # gender.MALE -> MALE
        if rewrite_compound:
            return self.text.rsplit(".", 1)[-1].upper()
        return self.text.upper()


@dataclass(frozen=True)
class NumberValue(EvaluableValue):
    number: Number

    @property
    def raw(self) -> Number:
        return self.number

    @property
    def is_empty(self) -> bool:
        return self.number == 0 or math.isnan(self.number)

    def display_text(self) -> str:
        return format_number(self.number)


@dataclass(frozen=True)
class BooleanValue(EvaluableValue):
    flag: bool

    @property
    def raw(self) -> bool:
        return self.flag

    @property
    def is_empty(self) -> bool:
        return not self.flag


@dataclass(frozen=True)
class SequenceValue(EvaluableValue):
    items: Tuple[Any, ...]

    @property
    def raw(self) -> list:
        return list(self.items)

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0

    def display_text(self) -> str:
        return ", ".join(to_text(i) for i in self.items)


def format_number(x: Number) -> str:
    """Render a number the way JSON/JS would (3.0 -> "3")."""

    if isinstance(x, float):
        if math.isnan(x):
            return "NaN"
        if math.isinf(x):
            return "Infinity" if x > 0 else "-Infinity"
        if x.is_integer():
            return str(int(x))
        return repr(x)
    return str(x)


def to_text(raw: Any) -> str:
    """Stringify a raw value for templates and readouts."""

    if raw is None:
        return NULL_SENTINEL
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, (int, float)):
        return format_number(raw)
    if isinstance(raw, (list, tuple)):
        return ",".join(to_text(i) for i in raw)
    return str(raw)


def parse_number_string(text: str) -> int:
    """Parse the integer after the NUMBER. prefix (leading digits only)."""

    m = _LEADING_INT.match(text[len(NUMBER_PREFIX):])
    if not m:
        raise InvalidOperandError(f"Cannot parse numeric string: {text!r}")
    return int(m.group(1))


def coerce_numeric_string(raw: Any) -> Any:
    if isinstance(raw, str) and raw.startswith(NUMBER_PREFIX):
        return parse_number_string(raw)
    return raw


def decode_reference(raw: Any) -> EvaluableValue:
    """Decode a condition reference value (or any already-plain value)."""

    if raw is None or raw == NULL_SENTINEL:
        return NULL
    if isinstance(raw, bool):
        return BooleanValue(raw)
    if isinstance(raw, (int, float)):
        return NumberValue(raw)
    if isinstance(raw, str):
        return StringValue(raw)
    if isinstance(raw, (list, tuple)):
        return SequenceValue(tuple(raw))
    raise InvalidOperandError(f"Unsupported value type: {type(raw).__name__}")


def decode_datum(raw: Any) -> EvaluableValue:
    """Decode a data-bag value, interpreting NUMBER.<n> strings."""

    return decode_reference(coerce_numeric_string(raw))


def infer_datatype(raw: Any) -> str:
    if isinstance(raw, bool):
        return "boolean"
    if isinstance(raw, (int, float)):
        return "number"
    if isinstance(raw, (list, tuple)):
        return "array"
    return "string"
