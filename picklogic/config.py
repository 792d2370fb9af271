"""Configuration: display options and JSON/YAML loaders.

Pickables, data bags and message tables are plain data so that decision logic can be changed without code changes.
Expected pickables shape::

    {
      "defaultKey": "temperature",          # optional
      "pickables": [
        {
          "id": "fever",
          "logicRank": 3,
          "pickCriteria": [
            {"sufficientToPick": [{"dataKey": "system", "referenceValue": "F"},
                                  {"dataKey": "temperature", "operator": ">", "referenceValue": 100}]}
          ],
          "payload": {"message": "Your temperature is dangerously high."}
        }
      ]
    }

or a dict mapping id -> pickable ({"pickables": {"fever": {...}}}), or a bare list.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import yaml

from .values import infer_datatype

Localizer = Callable[[str], str]


def identity_localizer(message: str) -> str:
    return message


@dataclass(frozen=True)
class DisplayOptions:
    """Readout rendering switches.

    `rewrite_inclusion_keys` lists keys whose values are "available item" collections; inclusion checks on them
    render as |*ITEM| / |*NO ITEM| markers for downstream formatting.
    """

    rewrite_inclusion_keys: Sequence[str] = ("availableEquipment",)
    rewrite_compound_strings: bool = True


DEFAULT_DISPLAY = DisplayOptions()


@dataclass(frozen=True)
class PickableSet:
    pickables: List[Dict[str, Any]]
    default_key: Optional[str] = None


def _read_document(path: str | Path, kind: str) -> Any:
    """Parse a pickables, data bag or message file. YAML for .yaml/.yml, JSON otherwise."""

    p = Path(path)
    text = p.read_text(encoding="utf-8")
    try:
        if p.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(text)
        return json.loads(text)
    except (ValueError, yaml.YAMLError) as e:
        raise ValueError(f"{p}: not a readable {kind} file ({e})") from e


def validate_pickable(spec: Any, where: str) -> Dict[str, Any]:
    if not isinstance(spec, Mapping):
        raise ValueError(f"{where}: pickable must be an object")
    criteria = spec.get("pickCriteria")
    if criteria is None:
        return dict(spec)
    if not isinstance(criteria, list):
        raise ValueError(f"{where}: 'pickCriteria' must be a list")
    for i, group in enumerate(criteria):
        if not isinstance(group, Mapping) or not isinstance(group.get("sufficientToPick"), list):
            raise ValueError(f"{where}: pickCriteria[{i}] needs a 'sufficientToPick' list")
        for j, cond in enumerate(group["sufficientToPick"]):
            if not isinstance(cond, Mapping):
                raise ValueError(f"{where}: pickCriteria[{i}].sufficientToPick[{j}] must be an object")
    return dict(spec)


def parse_pickables(raw: Any) -> PickableSet:
    default_key: Optional[str] = None
    if isinstance(raw, Mapping):
        default_key = raw.get("defaultKey")
        pls = raw.get("pickables", [])
    else:
        pls = raw

    items: List[Any]
    if isinstance(pls, Mapping):
        items = []
        for k, v in pls.items():
            vv = dict(v) if isinstance(v, Mapping) else v
            if isinstance(vv, dict):
                vv.setdefault("id", k)
            items.append(vv)
    elif isinstance(pls, list):
        items = pls
    else:
        raise ValueError("Config 'pickables' must be a list or dict")

    pickables = []
    for n, it in enumerate(items):
        where = f"pickables[{n}]"
        if isinstance(it, Mapping) and it.get("id"):
            where = f"pickable '{it['id']}'"
        pickables.append(validate_pickable(it, where))
    return PickableSet(pickables=pickables, default_key=default_key)


def load_pickables(path: str | Path) -> PickableSet:
    """Load pickables from a JSON/YAML file."""

    return parse_pickables(_read_document(path, "pickables"))


def datapoint(value: Any, datatype: Optional[str] = None, unit: Optional[str] = None) -> Dict[str, Any]:
    dp: Dict[str, Any] = {"value": value, "datatype": datatype or infer_datatype(value)}
    if unit:
        dp["unit"] = unit
    return dp


def parse_data_bag(raw: Any) -> Dict[str, Dict[str, Any]]:
    """Normalize a data bag; bare values are wrapped as datapoints."""

    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValueError("Data bag must be an object of key -> datapoint")

    bag: Dict[str, Dict[str, Any]] = {}
    for k, v in raw.items():
        if isinstance(v, Mapping) and "value" in v:
            bag[str(k)] = dict(v)
        else:
            bag[str(k)] = datapoint(v)
    return bag


def load_data_bag(path: str | Path) -> Dict[str, Dict[str, Any]]:
    return parse_data_bag(_read_document(path, "data bag"))


def load_messages(path: str | Path) -> Localizer:
    """Build a localizer from a message table ({"IF": "SI", ...})."""

    table = _read_document(path, "message table") or {}
    if not isinstance(table, Mapping):
        raise ValueError("Message table must be an object of message -> translation")
    messages = {str(k): str(v) for k, v in table.items()}

    def localize(message: str) -> str:
        return messages.get(message, message)

    return localize
