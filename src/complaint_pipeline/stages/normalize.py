from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd
from pandas.api.types import is_datetime64_any_dtype, is_object_dtype, is_string_dtype

from ..utils.error_handler import SchemaError

DEFAULT_DATE_FORMAT = "%m/%d/%Y"

_SEPARATOR_RUN = re.compile(r"[^0-9A-Za-z]+")


@dataclass
class NormalizationStats:
    table: str
    rows: int = 0
    renamed: Dict[str, str] = field(default_factory=dict)
    blanks: Dict[str, int] = field(default_factory=dict)
    date_parse_failures: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            "table": self.table,
            "rows": self.rows,
            "renamed": dict(self.renamed),
            "blanks": dict(self.blanks),
            "date_parse_failures": dict(self.date_parse_failures),
        }


def normalize_column_name(name) -> str:
    """Canonical column name: runs of dots, spaces, slashes, dashes and
    underscores become one ``_``; lower case. ``Complaint.Id``,
    ``Complaint Id`` and ``complaint__id`` all map to ``complaint_id``.
    """
    return _SEPARATOR_RUN.sub("_", str(name)).strip("_").lower()


def normalize_columns(df: pd.DataFrame, *, table: str = "table") -> pd.DataFrame:
    if df.columns.duplicated().any():
        dupes = sorted(set(map(str, df.columns[df.columns.duplicated()])))
        raise SchemaError(f"Table '{table}' has duplicated column headers: {dupes}")

    mapping = {c: normalize_column_name(c) for c in df.columns}
    empty = [raw for raw, canon in mapping.items() if not canon]
    if empty:
        raise SchemaError(f"Table '{table}' has headers with no usable characters: {empty}")

    sources: Dict[str, List[str]] = {}
    for raw, canon in mapping.items():
        sources.setdefault(canon, []).append(str(raw))
    clashes = {canon: raws for canon, raws in sources.items() if len(raws) > 1}
    if clashes:
        raise SchemaError(f"Table '{table}' has headers that collide after normalization: {clashes}")

    return df.rename(columns=mapping)


def blank_to_na(df: pd.DataFrame) -> Tuple[pd.DataFrame, Dict[str, int]]:
    """Replace empty and whitespace-only strings with NaN.

    Returns the new frame and the per-column number of replaced cells.
    """
    out = df.copy()
    counts: Dict[str, int] = {}
    for col in out.columns:
        s = out[col]
        if not (is_object_dtype(s) or is_string_dtype(s)):
            continue
        mask = s.map(lambda v: isinstance(v, str) and not v.strip()).astype(bool)
        n = int(mask.sum())
        if n:
            out[col] = s.mask(mask)
            counts[str(col)] = n
    return out, counts


def parse_dates(
    df: pd.DataFrame,
    date_columns: Iterable[str],
    *,
    date_format: str = DEFAULT_DATE_FORMAT,
    table: str = "table",
) -> Tuple[pd.DataFrame, Dict[str, int]]:
    """Convert date columns from fixed-format strings.

    Unparseable values become NaT and are counted; columns that are
    already datetime are left as they are.
    """
    date_columns = list(date_columns)
    absent = [c for c in date_columns if c not in df.columns]
    if absent:
        raise SchemaError(f"Table '{table}' is missing date columns: {absent}")

    out = df.copy()
    failures: Dict[str, int] = {}
    for col in date_columns:
        s = out[col]
        if is_datetime64_any_dtype(s):
            continue
        parsed = pd.to_datetime(s, format=date_format, errors="coerce")
        bad = int((s.notna() & parsed.isna()).sum())
        if bad:
            failures[col] = bad
        out[col] = parsed
    return out, failures


def normalize_table(
    df: pd.DataFrame,
    *,
    table: str = "table",
    date_columns: Optional[Iterable[str]] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> Tuple[pd.DataFrame, NormalizationStats]:
    """Canonical names, blanks as NaN, dates parsed. Idempotent."""
    stats = NormalizationStats(table=table, rows=len(df))

    renamed = normalize_columns(df, table=table)
    stats.renamed = {
        str(raw): canon for raw, canon in zip(df.columns, renamed.columns) if str(raw) != canon
    }

    blanked, stats.blanks = blank_to_na(renamed)

    if date_columns is None:
        date_columns = [c for c in blanked.columns if c.endswith("_date")]
    else:
        date_columns = [normalize_column_name(c) for c in date_columns]

    parsed, stats.date_parse_failures = parse_dates(
        blanked, date_columns, date_format=date_format, table=table
    )
    return parsed, stats
