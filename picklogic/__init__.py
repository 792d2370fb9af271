"""PickLogic (importable package).

Declarative boolean conditions evaluated against a keyed data bag, used to pick exactly one candidate from a
ranked list, plus helper-derived values and `{HELPERS.<name>}` template filling.

The engine is pure and synchronous; pickables, data bags and message tables are plain JSON/YAML-shaped data.
"""

from __future__ import annotations

# ruff: noqa: F401

from .condition import Condition, ConditionSpec
from .config import DisplayOptions, PickableSet, load_data_bag, load_messages, load_pickables
from .errors import (
    InvalidCriteriaError,
    InvalidOperandError,
    InvalidOperatorError,
    NoKeyError,
    PickLogicError,
    UnevaluableError,
    UnknownHelperError,
)
from .helpers import (
    DEFAULT_HELPERS,
    HelperDefinition,
    HelperRegistry,
    calculate_for_helper_function,
    calculation_for_helper_function,
    fill_template,
    is_templated_string,
)
from .operators import Operator
from .pickable import ConditionReadout, Pickable
from .picker import Picker

__version__ = "0.3.0"
