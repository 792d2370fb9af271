"""Error kinds raised by the pick logic engine.

None of these are caught inside the engine. A single unevaluable condition aborts the whole
`do_data_satisfy_criteria` / `pick_for_data` call; callers decide what "insufficient data" means for them.
"""

from __future__ import annotations

from typing import Any


class PickLogicError(Exception):
    """Base class for every engine error."""


class UnevaluableError(PickLogicError):
    """A data key (or a helper dependency) needed for evaluation is missing."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Unevaluable: no data for '{key}'")


class NoKeyError(PickLogicError):
    """A condition has neither its own dataKey nor an injected default key."""

    def __init__(self) -> None:
        super().__init__("Condition has no data key")


class InvalidOperatorError(PickLogicError, ValueError):
    def __init__(self, operator: Any) -> None:
        self.operator = operator
        super().__init__(f"Invalid operator: {operator!r}")


class InvalidOperandError(PickLogicError, TypeError):
    """Operands cannot be combined under the requested operator."""


class UnknownHelperError(PickLogicError, LookupError):
    def __init__(self, name: str, detail: str = "no calculation function") -> None:
        self.name = name
        super().__init__(f"{detail} for helper '{name}'")


class InvalidCriteriaError(PickLogicError, ValueError):
    """A pickable's pickCriteria are not a list of {sufficientToPick: [...]} groups."""
