"""Helper functions: computed values that behave like virtual data keys.

A helper declares the data keys it depends on and a pure `calculate` function over those keys. Conditions refer to a
helper as `HELPERS.<name>`; strings refer to one as `{HELPERS.<name>}` and get the value filled in.

Registries are immutable values. The built-in table is `DEFAULT_HELPERS`; callers that need more helpers build an
extended copy and pass it down, for example::

    helpers = DEFAULT_HELPERS.extended(bmi=HelperDefinition(
        dependencies=("weight", "height"),
        calculate=lambda d: d["weight"] / d["height"] ** 2,
    ))
    Picker(specs, helpers=helpers).pick_for_data(data)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Sequence

from .errors import UnevaluableError, UnknownHelperError
from .values import NULL_SENTINEL, coerce_numeric_string, to_text

logger = logging.getLogger(__name__)

HELPERS_PREFIX = "HELPERS."
TEMPLATE_OPEN = "{"
TEMPLATE_CLOSE = "}"

DataBag = Mapping[str, Mapping[str, Any]]


@dataclass(frozen=True)
class HelperDefinition:
    calculate: Callable[[Dict[str, Any]], Any]
    dependencies: Sequence[str] = ()
    calculation: Optional[Callable[[Dict[str, Any]], str]] = None


class HelperRegistry:
    """Name -> HelperDefinition lookup."""

    def __init__(self, definitions: Optional[Mapping[str, HelperDefinition]] = None) -> None:
        self._definitions = MappingProxyType(dict(definitions or {}))

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def names(self) -> list[str]:
        return sorted(self._definitions)

    def get(self, name: str) -> HelperDefinition:
        try:
            return self._definitions[name]
        except KeyError:
            raise UnknownHelperError(name) from None

    def extended(self, **definitions: HelperDefinition) -> "HelperRegistry":
        """Return a new registry with extra (or overriding) helpers."""

        merged = dict(self._definitions)
        merged.update(definitions)
        return HelperRegistry(merged)

    def narrowed_data(self, name: str, data: Optional[DataBag]) -> Dict[str, Any]:
        """Collect the helper's dependency values, failing on the first absent or uncaptured key."""

        helper = self.get(name)
        narrowed: Dict[str, Any] = {}
        for dep in helper.dependencies:
            value = data[dep].get("value") if data is not None and dep in data else None
            if value is None or value == NULL_SENTINEL:
                raise UnevaluableError(dep)
            narrowed[dep] = coerce_numeric_string(value)
        return narrowed

    def resolve(self, name: str, data: Optional[DataBag]) -> Any:
        helper = self.get(name)
        value = helper.calculate(self.narrowed_data(name, data))
        logger.debug("Helper %s resolved to %r", name, value)
        return value

    def display(self, name: str, data: Optional[DataBag]) -> str:
        helper = self.get(name)
        if helper.calculation is None:
            raise UnknownHelperError(name, detail="no calculation display")
        return helper.calculation(self.narrowed_data(name, data))


def _now_string(_: Dict[str, Any]) -> str:
    return datetime.now().strftime("%a %b %d %Y %H:%M:%S")


DEFAULT_HELPERS = HelperRegistry(
    {
        "date": HelperDefinition(calculate=_now_string),
        "referenceHelper": HelperDefinition(
            dependencies=("constitution", "declaration"),
            calculate=lambda d: d["constitution"] - d["declaration"],
            calculation=lambda d: f"{to_text(d['constitution'])} - {to_text(d['declaration'])}",
        ),
    }
)


def helper_name_for_key(key: str) -> Optional[str]:
    """Return the helper name for a HELPERS.<name> data key, else None."""

    if key.startswith(HELPERS_PREFIX):
        return key[len(HELPERS_PREFIX):]
    return None


def calculate_for_helper_function(
    name: str, data: Optional[DataBag], helpers: Optional[HelperRegistry] = None
) -> Any:
    return (helpers or DEFAULT_HELPERS).resolve(name, data)


def calculation_for_helper_function(
    name: str, data: Optional[DataBag], helpers: Optional[HelperRegistry] = None
) -> str:
    return (helpers or DEFAULT_HELPERS).display(name, data)


def is_templated_string(text: Optional[str]) -> bool:
    return bool(text) and TEMPLATE_OPEN in text  # type: ignore[operator]


def fill_template(
    text: Optional[str], data: Optional[DataBag], helpers: Optional[HelperRegistry] = None
) -> Optional[str]:
    """Replace every {HELPERS.<name>} token with the helper's value.

    Tokens are consumed left to right. Anything between braces that is not a helper reference is treated as an
    unknown helper.
    """

    if not text:
        return None
    registry = helpers or DEFAULT_HELPERS

    filled = text
    while TEMPLATE_OPEN in filled:
        start = filled.index(TEMPLATE_OPEN)
        end = filled.find(TEMPLATE_CLOSE, start)
        if end == -1:
            raise UnknownHelperError(filled[start:], detail="unterminated template token")
        token = filled[start + 1:end]
        name = helper_name_for_key(token)
        if name is None:
            raise UnknownHelperError(token, detail="not a helper reference")
        value = registry.resolve(name, data)
        filled = filled[:start] + to_text(value) + filled[end + 1:]
    return filled
