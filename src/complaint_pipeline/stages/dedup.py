from __future__ import annotations

import warnings
from typing import List, Optional, Tuple

import pandas as pd

from ..utils.error_handler import CardinalityWarning, SchemaError


def deduplicate(
    df: pd.DataFrame, subset: Optional[List[str]] = None, *, table: str = "table"
) -> Tuple[pd.DataFrame, int]:
    """Drop duplicate rows keeping the first occurrence.

    With ``subset`` rows are compared on those columns only, otherwise on
    all columns. Order of kept rows is preserved. Returns the new frame
    and the number of rows removed.
    """
    if subset is not None:
        subset = list(subset)
        absent = [c for c in subset if c not in df.columns]
        if absent:
            raise SchemaError(f"Cannot deduplicate '{table}': key columns {absent} not found")
    out = df.drop_duplicates(subset=subset, keep="first").reset_index(drop=True)
    return out, len(df) - len(out)


def check_unique_key(df: pd.DataFrame, key: List[str], *, table: str = "table") -> Optional[str]:
    """Warn when rows sharing ``key`` survive the exact-duplicate pass.

    Such rows disagree on some other column. They are kept as they are;
    the warning message is returned for the audit, ``None`` when the key
    is unique. Rows with any part of the key missing are not compared.
    """
    key = list(key)
    absent = [c for c in key if c not in df.columns]
    if absent:
        raise SchemaError(f"Cannot check key of '{table}': key columns {absent} not found")
    keys = df[key].dropna()
    clashes = keys.duplicated(keep=False)
    if not clashes.any():
        return None
    n_keys = len(keys[clashes].drop_duplicates())
    message = (
        f"{table}: key {key} expected unique but {n_keys} key(s) appear on "
        f"{int(clashes.sum())} rows with differing content"
    )
    warnings.warn(message, CardinalityWarning, stacklevel=2)
    return message
