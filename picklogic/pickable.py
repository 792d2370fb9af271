"""Pickables: candidate outcomes guarded by OR-of-AND condition groups.

Schematized, a pickable is picked if::

    [{sufficientToPick: [x AND y AND z]} OR {sufficientToPick: [a AND b]}]

A pickable without criteria is always picked.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .condition import Condition
from .config import DisplayOptions, Localizer, identity_localizer
from .errors import InvalidCriteriaError
from .helpers import DataBag, HelperRegistry

ALWAYS = "ALWAYS"
OR = "OR"
IF = "IF"
NOT_PREV_DIVERTED = "not previously diverted"

CONDITION_JOINER = " & "


@dataclass(frozen=True)
class ConditionReadout:
    conjunction: str
    condition_string: str

    def as_dict(self) -> Dict[str, str]:
        return {"conjunction": self.conjunction, "conditionString": self.condition_string}


def _condition_groups(pickable: Mapping[str, Any]) -> List[List[Any]]:
    criteria = pickable.get("pickCriteria") or []
    if not isinstance(criteria, list):
        raise InvalidCriteriaError(f"pickable {pickable.get('id')!r}: 'pickCriteria' must be a list")
    groups = []
    for i, stp in enumerate(criteria):
        # a misspelled or missing list must not read as an empty, always-true group
        conditions = stp.get("sufficientToPick") if isinstance(stp, Mapping) else None
        if not isinstance(conditions, list):
            raise InvalidCriteriaError(
                f"pickable {pickable.get('id')!r}: pickCriteria[{i}] needs a 'sufficientToPick' list"
            )
        groups.append(conditions)
    return groups


class Pickable:
    def __init__(
        self,
        pickable: Mapping[str, Any],
        default_key: Optional[str] = None,
        is_sole_pickable: bool = True,
        *,
        helpers: Optional[HelperRegistry] = None,
        display: Optional[DisplayOptions] = None,
    ) -> None:
        # a default key can be passed in separately, to avoid repeating it in every condition
        self.id = pickable.get("id")
        self.default_key = default_key or None
        self.is_sole_pickable = is_sole_pickable is not False
        self.groups: List[List[Condition]] = [
            [Condition(raw, self.default_key, helpers=helpers, display=display) for raw in conditions]
            for conditions in _condition_groups(pickable)
        ]

    def __repr__(self) -> str:
        return f"Pickable(id={self.id!r}, groups={len(self.groups)})"

    def do_data_satisfy_criteria(self, data: DataBag) -> bool:
        if not self.groups:
            return True
        return any(all(cond.is_true_for_data(data) for cond in group) for group in self.groups)

    def readouts_for_pickable_with_localized(
        self, localize: Optional[Localizer] = None
    ) -> List[ConditionReadout]:
        """One readout per sufficientToPick group, e.g.

        [IF "city = NEW YORK & state = NY", OR "city = SAN FRANCISCO & state = CA"]
        """

        localized = localize or identity_localizer
        if not self.groups:
            if self.is_sole_pickable:
                return [ConditionReadout(localized(ALWAYS), "")]
            return [ConditionReadout(localized(IF), localized(NOT_PREV_DIVERTED))]

        readouts: List[ConditionReadout] = []
        for i, group in enumerate(self.groups):
            conjunction = localized(IF) if i == 0 else localized(OR)
            condition_string = CONDITION_JOINER.join(
                cond.condition_string_with_localized(localized) for cond in group
            )
            readouts.append(ConditionReadout(conjunction, condition_string))
        return readouts
