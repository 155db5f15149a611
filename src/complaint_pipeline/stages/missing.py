"""Missing-value resolution.

Rules run in a fixed order, each on its own list of columns:

1. column elimination - drop columns that are mostly absent or redundant
2. semantic substitution - a domain label where absence has a meaning
3. explicit unknown - a ``"Missing"`` category kept as observable data
4. carry forward - last value seen earlier in the same complaint
5. row elimination - whatever is still missing removes its row

Every function returns a new frame plus per-column counts of the values it
touched, so the resolver can report what each rule did.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from ..config.schema import ResolutionPolicy, Substitution
from ..utils.error_handler import ResolutionError, SchemaError
from .normalize import blank_to_na

RULES = (
    "column_elimination",
    "semantic_substitution",
    "explicit_unknown",
    "carry_forward",
    "row_elimination",
)


@dataclass
class ResolutionReport:
    rows_in: int = 0
    rows_eliminated: int = 0
    rows_out: int = 0
    affected: Dict[str, Dict[str, int]] = field(default_factory=lambda: {r: {} for r in RULES})
    blanks_normalized: Dict[str, int] = field(default_factory=dict)
    eliminated_columns: List[str] = field(default_factory=list)
    residual_missing: Dict[str, int] = field(default_factory=dict)
    unassigned_columns: List[str] = field(default_factory=list)
    reasons: Dict[str, str] = field(default_factory=dict)

    @property
    def conserved(self) -> bool:
        return self.rows_eliminated + self.rows_out == self.rows_in

    def to_frame(self) -> pd.DataFrame:
        """One row per (rule, column) with the number of values affected."""
        rows = [
            {"rule": rule, "column": col, "affected": n}
            for rule in RULES
            for col, n in self.affected.get(rule, {}).items()
        ]
        return pd.DataFrame(rows, columns=["rule", "column", "affected"])

    def to_dict(self) -> Dict:
        return {
            "rows_in": self.rows_in,
            "rows_eliminated": self.rows_eliminated,
            "rows_out": self.rows_out,
            "affected": {rule: dict(cols) for rule, cols in self.affected.items()},
            "blanks_normalized": dict(self.blanks_normalized),
            "eliminated_columns": list(self.eliminated_columns),
            "residual_missing": dict(self.residual_missing),
            "unassigned_columns": list(self.unassigned_columns),
            "reasons": dict(self.reasons),
        }


def _require(df: pd.DataFrame, columns: Iterable[str], rule: str) -> None:
    absent = [c for c in columns if c not in df.columns]
    if absent:
        raise SchemaError(f"Rule '{rule}' refers to columns not in the table: {absent}")


def _fill_constant(df: pd.DataFrame, values: Mapping[str, object]) -> Tuple[pd.DataFrame, Dict[str, int]]:
    out = df.copy()
    counts: Dict[str, int] = {}
    for col, value in values.items():
        s = out[col]
        n = int(s.isna().sum())
        if not n:
            continue
        if isinstance(s.dtype, pd.CategoricalDtype) and value not in s.cat.categories:
            s = s.cat.add_categories([value])
        out[col] = s.fillna(value)
        counts[col] = n
    return out, counts


def eliminate_columns(df: pd.DataFrame, columns: Iterable[str]) -> Tuple[pd.DataFrame, Dict[str, int]]:
    """Drop the listed columns; absent ones are skipped.

    Counts are the missing values each dropped column held.
    """
    present = [c for c in columns if c in df.columns]
    counts = {c: int(df[c].isna().sum()) for c in present}
    return df.drop(columns=present), counts


def substitute_semantic(
    df: pd.DataFrame, substitutions: Iterable[Substitution]
) -> Tuple[pd.DataFrame, Dict[str, int]]:
    substitutions = list(substitutions)
    _require(df, [s.column for s in substitutions], "semantic_substitution")
    return _fill_constant(df, {s.column: s.value for s in substitutions})


def substitute_unknown(
    df: pd.DataFrame, columns: Iterable[str], label: str = "Missing"
) -> Tuple[pd.DataFrame, Dict[str, int]]:
    columns = list(columns)
    _require(df, columns, "explicit_unknown")
    return _fill_constant(df, {c: label for c in columns})


def carry_forward(
    df: pd.DataFrame, columns: Iterable[str], group_column: str = "complaint_id"
) -> Tuple[pd.DataFrame, Dict[str, int]]:
    """Fill a missing value with the last non-missing value seen earlier
    in the same complaint, in current row order.

    Filling is keyed by ``group_column``, so rows of one complaint do not
    have to be adjacent. A complaint whose first rows lack the value keeps
    them missing; rows without a group key are never filled.
    """
    columns = list(columns)
    _require(df, columns + [group_column], "carry_forward")
    out = df.copy()
    if not columns or out.empty:
        return out, {}

    filled = out.groupby(group_column, sort=False)[columns].ffill()
    counts: Dict[str, int] = {}
    for col in columns:
        before = out[col].isna()
        out[col] = out[col].where(~before, filled[col])
        n = int((before & out[col].notna()).sum())
        if n:
            counts[col] = n
    return out, counts


def eliminate_rows(
    df: pd.DataFrame, required_columns: Optional[Iterable[str]] = None
) -> Tuple[pd.DataFrame, Dict[str, int]]:
    """Drop every row that still has a missing value.

    Counts are per column: how many of the eliminated rows were missing it.
    ``required_columns`` must all be present.
    """
    _require(df, required_columns or [], "required")
    missing = df.isna()
    counts = {str(c): int(n) for c, n in missing.sum().items() if n}
    out = df[~missing.any(axis=1)].reset_index(drop=True)
    return out, counts


def resolve_missing(
    df: pd.DataFrame, policy: Optional[ResolutionPolicy] = None
) -> Tuple[pd.DataFrame, ResolutionReport]:
    """Apply the resolution policy; the result has no missing values."""
    policy = policy or ResolutionPolicy()
    report = ResolutionReport(rows_in=len(df))
    report.reasons = {s.column: s.reason for s in policy.substitutions if s.reason}

    out, report.blanks_normalized = blank_to_na(df)

    out, counts = eliminate_columns(out, policy.drop_columns)
    report.affected["column_elimination"] = counts
    report.eliminated_columns = list(counts)

    out, report.affected["semantic_substitution"] = substitute_semantic(out, policy.substitutions)
    out, report.affected["explicit_unknown"] = substitute_unknown(
        out, policy.missing_columns, policy.missing_label
    )
    out, report.affected["carry_forward"] = carry_forward(
        out, policy.carry_forward_columns, policy.carry_forward_group
    )

    out, residual = eliminate_rows(out, policy.required_columns)
    report.affected["row_elimination"] = residual
    report.residual_missing = residual
    assigned = policy.rule_assignments()
    report.unassigned_columns = [c for c in residual if c not in assigned]

    report.rows_out = len(out)
    report.rows_eliminated = report.rows_in - report.rows_out

    leftover = int(out.isna().sum().sum())
    if leftover:
        raise ResolutionError(f"{leftover} missing values survived resolution")
    return out, report
