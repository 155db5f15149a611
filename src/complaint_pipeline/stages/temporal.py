from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

import pandas as pd
from pandas.api.types import is_datetime64_any_dtype

from ..utils.error_handler import SchemaError


@dataclass
class TemporalStats:
    date_column: str
    window_start: pd.Timestamp
    window_end: pd.Timestamp
    rows_in: int = 0
    rows_out: int = 0
    out_of_window: int = 0
    unknown_excluded: int = 0
    unknown_kept: int = 0

    def to_dict(self) -> Dict:
        return {
            "date_column": self.date_column,
            "window_start": self.window_start.strftime("%Y-%m-%d"),
            "window_end": self.window_end.strftime("%Y-%m-%d"),
            "rows_in": self.rows_in,
            "rows_out": self.rows_out,
            "out_of_window": self.out_of_window,
            "unknown_excluded": self.unknown_excluded,
            "unknown_kept": self.unknown_kept,
        }


def recency_window(
    window_years: int = 10, reference_date: Optional[Union[str, pd.Timestamp]] = None
) -> Tuple[pd.Timestamp, pd.Timestamp]:
    """Return ``(start, end)`` of the window; both ends are inclusive."""
    end = pd.Timestamp(reference_date) if reference_date is not None else pd.Timestamp.today()
    end = end.normalize()
    start = end - pd.DateOffset(years=window_years)
    return start, end


def filter_recent(
    df: pd.DataFrame,
    date_column: str = "incident_date",
    *,
    window_years: int = 10,
    reference_date: Optional[Union[str, pd.Timestamp]] = None,
    include_unknown: bool = False,
) -> Tuple[pd.DataFrame, TemporalStats]:
    """Keep rows whose incident date lies in ``[reference - window_years, reference]``.

    Rows with an unknown (NaT) date are dropped unless ``include_unknown``.
    """
    if date_column not in df.columns:
        raise SchemaError(f"Temporal filter: date column '{date_column}' not found")
    if window_years < 1:
        raise ValueError("window_years must be at least 1")

    start, end = recency_window(window_years, reference_date)
    dates = df[date_column]
    if not is_datetime64_any_dtype(dates):
        raise SchemaError(f"Temporal filter: column '{date_column}' is not a parsed date ({dates.dtype})")

    unknown = dates.isna()
    in_window = dates.between(start, end, inclusive="both")
    keep = in_window | (unknown & include_unknown)

    stats = TemporalStats(date_column=date_column, window_start=start, window_end=end, rows_in=len(df))
    stats.out_of_window = int((~unknown & ~in_window).sum())
    if include_unknown:
        stats.unknown_kept = int(unknown.sum())
    else:
        stats.unknown_excluded = int(unknown.sum())

    out = df[keep].reset_index(drop=True)
    stats.rows_out = len(out)
    return out, stats
