"""A single `key <operator> referenceValue` test against a data bag."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .config import DEFAULT_DISPLAY, DisplayOptions, Localizer, identity_localizer
from .errors import NoKeyError, UnevaluableError
from .helpers import DEFAULT_HELPERS, DataBag, HelperRegistry, helper_name_for_key
from .operators import Operator
from .values import (
    NULL,
    NULL_SENTINEL,
    BooleanValue,
    EvaluableValue,
    NullValue,
    NumberValue,
    SequenceValue,
    StringValue,
    decode_datum,
    decode_reference,
)

NOT = "NOT"
NO = "NO"
IS_NOT_CAPTURED = "IS NOT CAPTURED"
IS_CAPTURED = "IS CAPTURED"


@dataclass(frozen=True)
class ConditionSpec:
    data_key: Optional[str]
    operator: Operator
    reference_value: Any

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "ConditionSpec":
        return cls(
            data_key=d.get("dataKey") or None,
            operator=Operator.parse(d.get("operator")),
            reference_value=d.get("referenceValue"),
        )


class Condition:
    def __init__(
        self,
        spec: Union[ConditionSpec, Mapping[str, Any]],
        default_key: Optional[str] = None,
        *,
        helpers: Optional[HelperRegistry] = None,
        display: Optional[DisplayOptions] = None,
    ) -> None:
        if not isinstance(spec, ConditionSpec):
            spec = ConditionSpec.from_dict(spec)
        self.data_key: Optional[str] = spec.data_key or default_key or None
        self.operator: Operator = spec.operator
        self.reference_value: Any = spec.reference_value
        self.reference: EvaluableValue = decode_reference(spec.reference_value)
        # only the literal sentinel asks "is this key captured?"; an absent reference is not a null check
        self.is_null_check: bool = spec.reference_value == NULL_SENTINEL
        self.helpers = helpers or DEFAULT_HELPERS
        self.display = display or DEFAULT_DISPLAY

    def __repr__(self) -> str:
        return f"Condition({self.data_key!r} {self.operator.value} {self.reference_value!r})"

    def _resolve(self, data: DataBag) -> EvaluableValue:
        key = self.data_key
        if not key:
            raise NoKeyError()

        helper = helper_name_for_key(key)
        if helper is not None:
            return decode_reference(self.helpers.resolve(helper, data))

        entry = data.get(key) if data is not None else None
        value = decode_datum(entry.get("value")) if entry is not None else NULL

        # Null data is only comparable against the null sentinel, except that inclusion checks
        # against an uncaptured collection are well defined (X is not in "none of the above").
        if value is NULL and not self.is_null_check and not self.operator.is_inclusion:
            raise UnevaluableError(key)
        return value

    def is_true_for_data(self, data: DataBag) -> bool:
        return self.operator.apply(self._resolve(data), self.reference)

    def condition_string_with_localized(self, localize: Optional[Localizer] = None) -> str:
        localized = localize or identity_localizer
        key = self.data_key
        op = self.operator
        ref = self.reference

        if not key or self.reference_value is None:
            return ""

        if isinstance(ref, NullValue):
            # checking for null means checking that the key is NOT being captured
            return f"{key} {localized(IS_NOT_CAPTURED if op is Operator.EQ else IS_CAPTURED)}"

        if isinstance(ref, BooleanValue):
            # victorious = true / victorious != false -> "victorious"
            if (op is Operator.EQ and ref.flag) or (op is Operator.NE and not ref.flag):
                return key
            return f"{localized(NOT)} {key}"

        if isinstance(ref, StringValue):
            if op.is_inclusion and key in self.display.rewrite_inclusion_keys:
                item = ref.text.upper()
                if op is Operator.INCLUDES:
                    return f"|*{item}|"
                return f"|*{localized(NO)} {item}|"
            value_text = ref.display_text(self.display.rewrite_compound_strings)
        elif isinstance(ref, (NumberValue, SequenceValue)):
            value_text = ref.display_text()
        else:  # pragma: no cover
            value_text = ""

        return f"{key} {op.value} {value_text}"
