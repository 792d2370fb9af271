"""Picker: choose the first satisfied pickable from a ranked candidate list."""

from __future__ import annotations

import logging
from typing import Any, Collection, Dict, List, Mapping, Optional, Sequence, Tuple

from .config import DisplayOptions, Localizer
from .helpers import DataBag, HelperRegistry
from .pickable import ConditionReadout, Pickable

logger = logging.getLogger(__name__)

PickableObject = Mapping[str, Any]


class Picker:
    def __init__(
        self,
        pickables: Optional[Sequence[PickableObject]],
        default_key: Optional[str] = None,
        *,
        helpers: Optional[HelperRegistry] = None,
        display: Optional[DisplayOptions] = None,
    ) -> None:
        items = list(pickables or [])
        if any("logicRank" in p for p in items):
            # ranked candidates are evaluated in rank order; sorted() is stable for ties
            items = sorted(items, key=lambda p: p.get("logicRank") or 0)
        self.pickables: List[PickableObject] = items
        self.default_key = default_key
        self.helpers = helpers
        self.display = display

    def __len__(self) -> int:
        return len(self.pickables)

    def _pickable(self, raw: PickableObject, is_sole: bool = True) -> Pickable:
        return Pickable(raw, self.default_key, is_sole, helpers=self.helpers, display=self.display)

    def pick_for_data(
        self, data: DataBag, excluded_ids: Optional[Collection[str]] = None
    ) -> Optional[PickableObject]:
        """Return the first non-excluded pickable whose criteria the data satisfy, or None.

        Evaluation errors are not "no match": they propagate and abort the pick.
        """

        # a lone id is one exclusion, not a set of characters
        excluded = {excluded_ids} if isinstance(excluded_ids, str) else set(excluded_ids or ())
        for raw in self.pickables:
            pid = raw.get("id")
            if pid and pid in excluded:
                logger.debug("Skipping excluded pickable %s", pid)
                continue
            if self._pickable(raw).do_data_satisfy_criteria(data):
                logger.debug("Picked %s", pid)
                return raw
        return None

    def readouts(
        self, localize: Optional[Localizer] = None
    ) -> List[Tuple[PickableObject, List[ConditionReadout]]]:
        """Readouts for every candidate, in evaluation order.

        With more than one candidate an unconditional pickable is a fallback, so it reads
        "IF not previously diverted" rather than "ALWAYS".
        """

        is_sole = len(self.pickables) <= 1
        return [
            (raw, self._pickable(raw, is_sole).readouts_for_pickable_with_localized(localize))
            for raw in self.pickables
        ]

    def describe(self, localize: Optional[Localizer] = None) -> List[Dict[str, Any]]:
        """JSON-friendly form of `readouts`."""

        return [
            {
                "id": raw.get("id"),
                "name": raw.get("name"),
                "readouts": [r.as_dict() for r in readouts],
            }
            for raw, readouts in self.readouts(localize)
        ]
