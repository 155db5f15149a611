from __future__ import annotations

import pandas as pd

from ..config.schema import FeatureSpec
from ..utils.error_handler import SchemaError


def _sort_key(s: pd.Series) -> pd.Series:
    # text ids that are all digits sort by value ("9" < "10" < "100")
    if isinstance(s.dtype, pd.CategoricalDtype) or not (
        pd.api.types.is_object_dtype(s.dtype) or pd.api.types.is_string_dtype(s.dtype)
    ):
        return s
    present = s.dropna()
    numeric = pd.to_numeric(present, errors="coerce")
    if present.empty or numeric.isna().any():
        return s
    return pd.to_numeric(s, errors="coerce")


def project_features(df: pd.DataFrame, spec: FeatureSpec) -> pd.DataFrame:
    """Select, rename, type and order the final feature table.

    Columns come out in ``spec.columns`` order under their renamed names,
    ``spec.categorical`` (output names) become ``category`` dtype and rows
    are stably sorted by ``spec.sort_by``. A sort column holding only
    numeric text is ordered by value, any other column lexicographically.
    """
    absent = [c for c in spec.columns if c not in df.columns]
    if absent:
        raise SchemaError(f"Feature columns not found in the resolved table: {absent}")

    out = df[list(spec.columns)].rename(columns=spec.renames)
    for col in spec.categorical:
        out[col] = out[col].astype("category")
    if spec.sort_by:
        out = out.sort_values(list(spec.sort_by), kind="mergesort", key=_sort_key)
    return out.reset_index(drop=True)
