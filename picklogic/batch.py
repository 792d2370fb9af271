"""Run a Picker over every row of a table.

Each row becomes a data bag (column -> datapoint). Missing cells (NaN/None) become uncaptured values, so a
condition that needs them raises `UnevaluableError` exactly as it would for a hand-built data bag.

Error policy:
- "raise" (default): the first engine error aborts the batch
- "skip": the row gets no pick and a warning naming the row and the problem

Tables are CSV, TSV (.tsv/.tab) or Parquet (.parquet/.pq, needs the `parquet` extra).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Collection, Dict, List, Literal, Optional, Sequence

import numpy as np
import pandas as pd

from .config import datapoint
from .errors import PickLogicError, UnevaluableError
from .picker import Picker

logger = logging.getLogger(__name__)

ErrorPolicy = Literal["raise", "skip"]

PICK_ID_COLUMN = "Pick_ID"
PICK_NAME_COLUMN = "Pick_Name"

_PARQUET_SUFFIXES = (".parquet", ".pq")
_TAB_SUFFIXES = (".tsv", ".tab")


@dataclass(frozen=True)
class BatchResult:
    df: pd.DataFrame
    warnings: Sequence[str]


def _plain(value: Any) -> Any:
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, float) and np.isnan(value):
        return None
    if value is None or value is pd.NA or value is pd.NaT:
        return None
    return value


def row_to_data_bag(row: pd.Series) -> Dict[str, Dict[str, Any]]:
    return {str(col): datapoint(_plain(v)) for col, v in row.items()}


def pick_for_table(
    df: pd.DataFrame,
    picker: Picker,
    *,
    id_col: Optional[str] = None,
    excluded_ids: Optional[Collection[str]] = None,
    on_error: ErrorPolicy = "raise",
) -> BatchResult:
    if on_error not in ("raise", "skip"):
        raise ValueError(f"Unknown error policy: {on_error}")

    warnings: List[str] = []
    pick_ids: List[Optional[str]] = []
    pick_names: List[Optional[str]] = []

    for idx, row in df.iterrows():
        label = row[id_col] if id_col and id_col in df.columns else idx
        try:
            pick = picker.pick_for_data(row_to_data_bag(row), excluded_ids)
        except PickLogicError as e:
            if on_error == "raise":
                raise
            if isinstance(e, UnevaluableError):
                warnings.append(f"Row {label}: missing '{e.key}' → no pick")
            else:
                warnings.append(f"Row {label}: {e} → no pick")
            pick = None

        pick_ids.append(pick.get("id") if pick is not None else None)
        pick_names.append(pick.get("name") if pick is not None else None)

    out = df.copy()
    out[PICK_ID_COLUMN] = pick_ids
    out[PICK_NAME_COLUMN] = pick_names
    logger.debug("Picked %d of %d rows", sum(p is not None for p in pick_ids), len(df))
    return BatchResult(df=out, warnings=warnings)


def read_observations(path: str | Path) -> pd.DataFrame:
    """Read a table of observations, one future data bag per row.

    Only empty cells count as missing. Text such as "NA", "null" or "NUMBER.35" is kept verbatim so the value
    decoder sees exactly what the author wrote.
    """

    p = Path(path)
    suffix = p.suffix.lower()
    if suffix in _PARQUET_SUFFIXES:
        return pd.read_parquet(p)
    sep = "\t" if suffix in _TAB_SUFFIXES else ","
    return pd.read_csv(p, sep=sep, keep_default_na=False, na_values=[""])


def write_picks(result: BatchResult, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    suffix = p.suffix.lower()
    if suffix in _PARQUET_SUFFIXES:
        result.df.to_parquet(p, index=False)
    else:
        result.df.to_csv(p, sep="\t" if suffix in _TAB_SUFFIXES else ",", index=False)
    logger.debug("Wrote %d picks to %s", len(result.df), p)
    return p
