from __future__ import annotations

import pytest

from picklogic import (
    Condition,
    DisplayOptions,
    InvalidOperandError,
    InvalidOperatorError,
    NoKeyError,
    UnevaluableError,
    UnknownHelperError,
)

DATA = {
    "capital": {"value": "Washington", "datatype": "string"},
    "capitals": {"value": ["Sacramento", "Trenton", "Albany", "Austin"], "datatype": "array"},
    "cities": {"value": None, "datatype": "array"},
    "democracy": {"value": True, "datatype": "boolean"},
    "perfect": {"value": False, "datatype": "boolean"},
    "founding": {"value": 1776, "datatype": "number"},
    "vibranium": {"value": 0, "datatype": "number"},
    "pi": {"value": 3.1415, "datatype": "number"},
    "constitution": {"value": 1787, "datatype": "number"},
    "declaration": {"value": 1776, "datatype": "number"},
    "emptyString": {"value": "", "datatype": "string"},
    "numberString": {"value": "NUMBER.35", "datatype": "string"},
}


def _true(spec: dict, default_key: str | None = None) -> bool:
    return Condition(spec, default_key).is_true_for_data(DATA)


class TestStrings:
    def test_identity(self) -> None:
        assert _true({"dataKey": "capital", "operator": "=", "referenceValue": "Washington"})

    def test_tacit_identity(self) -> None:
        assert _true({"dataKey": "capital", "referenceValue": "Washington"})

    def test_non_identity(self) -> None:
        assert _true({"dataKey": "capital", "operator": "!=", "referenceValue": "Moscow"})
        assert not _true({"dataKey": "capital", "operator": "!=", "referenceValue": "Washington"})

    def test_inclusion(self) -> None:
        assert _true({"dataKey": "capital", "operator": "~", "referenceValue": "Wash"})
        assert _true({"dataKey": "capital", "operator": "!~", "referenceValue": "Moscow"})

    def test_empty_string_inclusion(self) -> None:
        assert not _true({"dataKey": "emptyString", "operator": "~", "referenceValue": "Wash"})
        assert _true({"dataKey": "emptyString", "operator": "!~", "referenceValue": "Wash"})

    def test_number_string_parsed_as_number(self) -> None:
        assert _true({"dataKey": "numberString", "operator": "=", "referenceValue": 35})
        assert _true({"dataKey": "numberString", "operator": ">", "referenceValue": 34})

    def test_string_ordering(self) -> None:
        assert _true({"dataKey": "capital", "operator": ">", "referenceValue": "Austin"})


class TestBooleans:
    @pytest.mark.parametrize(
        "key,op,value",
        [
            ("democracy", "=", True),
            ("democracy", None, True),
            ("democracy", "!=", False),
            ("perfect", "=", False),
            ("perfect", None, False),
            ("perfect", "!=", True),
        ],
    )
    def test_boolean_expressions(self, key: str, op: str | None, value: bool) -> None:
        spec = {"dataKey": key, "referenceValue": value}
        if op:
            spec["operator"] = op
        assert _true(spec)

    def test_boolean_never_equals_number(self) -> None:
        assert not _true({"dataKey": "democracy", "referenceValue": 1})
        assert not _true({"dataKey": "vibranium", "referenceValue": False})


class TestNumbers:
    @pytest.mark.parametrize(
        "op,value,expected",
        [
            ("=", 1776, True),
            ("!=", 1066, True),
            (">", 1775, True),
            (">", 1776, False),
            (">=", 1775, True),
            (">=", 1776, True),
            ("<", 1777, True),
            ("<", 1776, False),
            ("<=", 1777, True),
            ("<=", 1776, True),
        ],
    )
    def test_integer(self, op: str, value: int, expected: bool) -> None:
        assert _true({"dataKey": "founding", "operator": op, "referenceValue": value}) is expected

    @pytest.mark.parametrize(
        "op,value,expected",
        [
            ("=", 3.1415, True),
            ("!=", 3.1416, True),
            (">", 3.1414, True),
            (">", 3.1415, False),
            (">=", 3.1415, True),
            ("<", 3.1416, True),
            ("<", 3.1415, False),
            ("<=", 3.1415, True),
        ],
    )
    def test_decimal(self, op: str, value: float, expected: bool) -> None:
        assert _true({"dataKey": "pi", "operator": op, "referenceValue": value}) is expected

    def test_zero(self) -> None:
        assert _true({"dataKey": "vibranium", "operator": "=", "referenceValue": 0})
        assert _true({"dataKey": "vibranium", "referenceValue": 0})
        assert _true({"dataKey": "vibranium", "operator": "!=", "referenceValue": 1000})

    @pytest.mark.parametrize("x", [-3, 0, 7, 2.5, 1e9])
    def test_ordering_is_strict(self, x: float) -> None:
        data = {"x": {"value": x, "datatype": "number"}}

        def check(op: str) -> bool:
            return Condition({"dataKey": "x", "operator": op, "referenceValue": x}).is_true_for_data(data)

        assert not check("<")
        assert check("<=")
        assert not check(">")
        assert check(">=")


class TestInclusion:
    def test_sequence(self) -> None:
        assert _true({"dataKey": "capitals", "operator": "~", "referenceValue": "Austin"})
        assert not _true({"dataKey": "capitals", "operator": "!~", "referenceValue": "Austin"})
        assert _true({"dataKey": "capitals", "operator": "!~", "referenceValue": "Spokane"})

    def test_null_collection(self) -> None:
        assert not _true({"dataKey": "cities", "operator": "~", "referenceValue": "Austin"})
        assert _true({"dataKey": "cities", "operator": "!~", "referenceValue": "Austin"})

    def test_absent_collection_does_not_raise(self) -> None:
        assert not _true({"dataKey": "towns", "operator": "~", "referenceValue": "Austin"})
        assert _true({"dataKey": "towns", "operator": "!~", "referenceValue": "Austin"})

    def test_null_sentinel_reference(self) -> None:
        data = {"tags": {"value": ["null", "x"]}, "note": {"value": "nullable"}}
        assert Condition({"dataKey": "tags", "operator": "~", "referenceValue": "null"}).is_true_for_data(data)
        assert Condition({"dataKey": "note", "operator": "~", "referenceValue": "null"}).is_true_for_data(data)
        assert not Condition({"dataKey": "tags", "operator": "!~", "referenceValue": "null"}).is_true_for_data(data)

    def test_boolean_reference_does_not_match_number_item(self) -> None:
        data = {"flags": {"value": [1, 0]}}
        assert not Condition({"dataKey": "flags", "operator": "~", "referenceValue": True}).is_true_for_data(data)
        assert Condition({"dataKey": "flags", "operator": "~", "referenceValue": 1}).is_true_for_data(data)

    def test_number_operand_raises(self) -> None:
        with pytest.raises(InvalidOperandError):
            _true({"dataKey": "founding", "operator": "~", "referenceValue": "1776"})


class TestNullsAndKeys:
    def test_null_sentinel(self) -> None:
        assert _true({"dataKey": "emperor", "operator": "=", "referenceValue": "null"})
        assert _true({"dataKey": "capital", "operator": "!=", "referenceValue": "null"})
        assert not _true({"dataKey": "capital", "operator": "=", "referenceValue": "null"})

    def test_null_value_checked_for_nullity(self) -> None:
        assert _true({"dataKey": "cities", "referenceValue": "null"})

    @pytest.mark.parametrize("spec", [{"dataKey": "emperor"}, {"dataKey": "emperor", "referenceValue": None}])
    def test_absent_reference_is_not_a_null_check(self, spec: dict) -> None:
        with pytest.raises(UnevaluableError) as exc:
            _true(spec)
        assert exc.value.key == "emperor"
        assert not _true({"dataKey": "capital", "referenceValue": None})

    def test_missing_key_raises(self) -> None:
        with pytest.raises(UnevaluableError) as exc:
            _true({"dataKey": "e", "operator": "=", "referenceValue": 2.7183})
        assert exc.value.key == "e"

    def test_null_value_raises_under_ordering(self) -> None:
        with pytest.raises(UnevaluableError):
            _true({"dataKey": "cities", "operator": "<", "referenceValue": 3})

    def test_no_data_key(self) -> None:
        with pytest.raises(NoKeyError):
            _true({"operator": "~", "referenceValue": "1776"})

    def test_default_key_injected(self) -> None:
        assert _true({"operator": "!=", "referenceValue": "Moscow"}, "capital")
        assert _true({"referenceValue": "Washington"}, "capital")

    def test_explicit_key_wins_over_default(self) -> None:
        assert _true({"dataKey": "founding", "referenceValue": 1776}, "capital")

    def test_invalid_operator_fails_at_construction(self) -> None:
        with pytest.raises(InvalidOperatorError):
            Condition({"dataKey": "pi", "operator": "***", "referenceValue": 3.1416})

    def test_mismatched_ordering_raises(self) -> None:
        with pytest.raises(InvalidOperandError):
            _true({"dataKey": "capital", "operator": "<", "referenceValue": 5})


class TestHelperKeys:
    def test_reference_helper(self) -> None:
        assert _true({"dataKey": "HELPERS.referenceHelper", "operator": "=", "referenceValue": 11})

    def test_unmet_helper_dependency(self) -> None:
        cond = Condition({"dataKey": "HELPERS.referenceHelper", "referenceValue": 11})
        with pytest.raises(UnevaluableError) as exc:
            cond.is_true_for_data({"constitution": {"value": 1787}})
        assert exc.value.key == "declaration"

    def test_unmet_helper_dependency_raises_even_for_inclusion(self) -> None:
        cond = Condition({"dataKey": "HELPERS.referenceHelper", "operator": "!~", "referenceValue": 11})
        with pytest.raises(UnevaluableError):
            cond.is_true_for_data({"constitution": {"value": 1787}})

    def test_unknown_helper(self) -> None:
        with pytest.raises(UnknownHelperError):
            _true({"dataKey": "HELPERS.nonexistentHelper", "operator": "=", "referenceValue": 11})


class TestConditionStrings:
    @pytest.mark.parametrize(
        "spec,expected",
        [
            ({"dataKey": "capital", "operator": "=", "referenceValue": "Washington"}, "capital = WASHINGTON"),
            ({"dataKey": "capital", "operator": "=", "referenceValue": "capital.WASHINGTON"}, "capital = WASHINGTON"),
            ({"dataKey": "capital", "referenceValue": "Washington"}, "capital = WASHINGTON"),
            ({"referenceValue": "Washington"}, ""),
            ({"dataKey": "democracy", "operator": "=", "referenceValue": True}, "democracy"),
            ({"dataKey": "democracy", "operator": "!=", "referenceValue": False}, "democracy"),
            ({"dataKey": "empire", "operator": "=", "referenceValue": False}, "NOT empire"),
            ({"dataKey": "empire", "operator": "!=", "referenceValue": True}, "NOT empire"),
            ({"dataKey": "president", "operator": "=", "referenceValue": "null"}, "president IS NOT CAPTURED"),
            ({"dataKey": "capital", "operator": "!=", "referenceValue": "null"}, "capital IS CAPTURED"),
            ({"dataKey": "founding", "operator": "=", "referenceValue": 1776}, "founding = 1776"),
            ({"dataKey": "pi", "operator": ">", "referenceValue": 3}, "pi > 3"),
            ({"dataKey": "temperature", "operator": "<=", "referenceValue": 37.8}, "temperature <= 37.8"),
            ({"dataKey": "capitals", "operator": "=", "referenceValue": ["Albany", "Austin"]}, "capitals = Albany, Austin"),
            ({"dataKey": "availableEquipment", "operator": "~", "referenceValue": "light-saber"}, "|*LIGHT-SABER|"),
            ({"dataKey": "availableEquipment", "operator": "!~", "referenceValue": "droid"}, "|*NO DROID|"),
            ({"dataKey": "cities", "operator": "~", "referenceValue": "Austin"}, "cities ~ AUSTIN"),
        ],
    )
    def test_rendering(self, spec: dict, expected: str) -> None:
        assert Condition(spec).condition_string_with_localized() == expected

    def test_localized_labels(self) -> None:
        french = {"NOT": "PAS", "IS NOT CAPTURED": "N'EST PAS SAISI", "NO": "AUCUN"}.get
        localize = lambda m: french(m, m)  # noqa: E731
        assert Condition({"dataKey": "empire", "referenceValue": False}).condition_string_with_localized(
            localize
        ) == "PAS empire"
        assert Condition({"dataKey": "roi", "referenceValue": "null"}).condition_string_with_localized(
            localize
        ) == "roi N'EST PAS SAISI"
        cond = Condition({"dataKey": "availableEquipment", "operator": "!~", "referenceValue": "droid"})
        assert cond.condition_string_with_localized(localize) == "|*AUCUN DROID|"

    def test_display_options(self) -> None:
        display = DisplayOptions(rewrite_inclusion_keys=("inventory",), rewrite_compound_strings=False)
        cond = Condition({"dataKey": "gender", "referenceValue": "gender.male"}, display=display)
        assert cond.condition_string_with_localized() == "gender = GENDER.MALE"
        cond = Condition({"dataKey": "inventory", "operator": "~", "referenceValue": "rope"}, display=display)
        assert cond.condition_string_with_localized() == "|*ROPE|"
        cond = Condition({"dataKey": "availableEquipment", "operator": "~", "referenceValue": "rope"}, display=display)
        assert cond.condition_string_with_localized() == "availableEquipment ~ ROPE"
