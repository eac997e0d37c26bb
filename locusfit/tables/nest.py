# locusfit/tables/nest.py
from __future__ import annotations
from typing import Hashable, Sequence

import pandas as pd


def nest_by(df: pd.DataFrame, keys: Sequence[str]) -> dict[tuple, pd.DataFrame]:
    """
    Partition df into {key tuple -> sub-table}.
    - Keys come out sorted; row order and columns are kept inside each group.
    - Rows with a null in any key column belong to no group.
    """
    keys = list(keys)
    missing = set(keys) - set(df.columns)
    if missing:
        raise KeyError(f"Grouping columns not in frame: {sorted(missing)}")
    if df.empty:
        return {}

    out: dict[tuple, pd.DataFrame] = {}
    for key, sub in df.groupby(keys, sort=True, dropna=True, observed=True):
        out[_as_tuple(key)] = sub.copy()
    return out


def _as_tuple(key: Hashable) -> tuple:
    return key if isinstance(key, tuple) else (key,)
