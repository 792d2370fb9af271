"""Built-in pickable sets.

These double as worked examples of the pickables format. `temperature` is equivalent to::

    if (system == F and temperature < 95) or (system == C and temperature < 35): dangerously low
    if (system == F and 95 <= temperature <= 100) or (system == C and 35 <= temperature <= 37.8): normal
    if (system == F and temperature > 100) or (system == C and temperature > 37.8): dangerously high
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from .config import PickableSet


def _cond(key: str, op: str, value: Any) -> Dict[str, Any]:
    return {"dataKey": key, "operator": op, "referenceValue": value}


def _temperature_bands() -> List[Dict[str, Any]]:
    # (system, low bound, high bound) for each scale
    scales: Tuple[Tuple[str, float, float], ...] = (("F", 95, 100), ("C", 35, 37.8))

    def groups(*conds_for_scale) -> List[Dict[str, Any]]:
        return [
            {"sufficientToPick": [_cond("system", "=", system)] + [c(low, high) for c in conds_for_scale]}
            for system, low, high in scales
        ]

    return [
        {
            "id": "hypothermia",
            "pickCriteria": groups(lambda lo, hi: _cond("temperature", "<", lo)),
            "payload": {"message": "Your temperature is dangerously low."},
        },
        {
            "id": "normal",
            "pickCriteria": groups(
                lambda lo, hi: _cond("temperature", ">=", lo),
                lambda lo, hi: _cond("temperature", "<=", hi),
            ),
            "payload": {"message": "Your temperature is normal."},
        },
        {
            "id": "fever",
            "pickCriteria": groups(lambda lo, hi: _cond("temperature", ">", hi)),
            "payload": {"message": "Your temperature is dangerously high."},
        },
    ]


BUILTIN_PICKABLES: Dict[str, PickableSet] = {
    "temperature": PickableSet(pickables=_temperature_bands()),
}
