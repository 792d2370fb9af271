"""Comparison operators.

The operator set is closed. Parsing happens when a condition is built, so a typo in a rule file fails before any
data is looked at.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from .errors import InvalidOperandError, InvalidOperatorError
from .values import (
    NULL_SENTINEL,
    EvaluableValue,
    NullValue,
    NumberValue,
    SequenceValue,
    StringValue,
    decode_reference,
)

DEFAULT_OPERATOR = "="


class Operator(str, Enum):
    EQ = "="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    INCLUDES = "~"
    EXCLUDES = "!~"

    @classmethod
    def parse(cls, text: Any) -> "Operator":
        if isinstance(text, Operator):
            return text
        if text is None or text == "":
            return cls.EQ
        try:
            return cls(text)
        except ValueError:
            raise InvalidOperatorError(text) from None

    @property
    def is_inclusion(self) -> bool:
        return self in (Operator.INCLUDES, Operator.EXCLUDES)

    def apply(self, left: EvaluableValue, right: EvaluableValue) -> bool:
        if self is Operator.EQ:
            return left == right
        if self is Operator.NE:
            return left != right
        if self is Operator.INCLUDES:
            if left.is_empty:
                return False
            return _contains(left, right)
        if self is Operator.EXCLUDES:
            if left.is_empty:
                return True
            return not _contains(left, right)

        a, b = _orderable_pair(left, right, self)
        if self is Operator.LT:
            return a < b
        if self is Operator.LE:
            return a <= b
        if self is Operator.GT:
            return a > b
        return a >= b


def _contains(left: EvaluableValue, right: EvaluableValue) -> bool:
    if isinstance(left, SequenceValue):
        # items are compared as decoded values, so "null" matches the sentinel and True never matches 1
        return any(decode_reference(item) == right for item in left.items)
    if isinstance(left, StringValue):
        if isinstance(right, NullValue):
            return NULL_SENTINEL in left.text
        if not isinstance(right, StringValue):
            raise InvalidOperandError(f"Cannot search a string for {type(right).__name__}")
        return right.text in left.text
    raise InvalidOperandError(f"Inclusion needs a string or sequence, got {type(left).__name__}")


def _orderable_pair(left: EvaluableValue, right: EvaluableValue, op: Operator) -> tuple:
    if isinstance(left, NumberValue) and isinstance(right, NumberValue):
        return left.number, right.number
    if isinstance(left, StringValue) and isinstance(right, StringValue):
        return left.text, right.text
    raise InvalidOperandError(
        f"Cannot order {type(left).__name__} and {type(right).__name__} with '{op.value}'"
    )
