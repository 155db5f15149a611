from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from ..config.schema import JoinStep
from ..utils.error_handler import CardinalityWarning, SchemaError
from .dedup import deduplicate

SUFFIXES = ("_x", "_y")
_MATCH = "_join_match"


@dataclass
class JoinStats:
    step: str
    how: str
    on: str
    left_rows: int = 0
    right_rows: int = 0
    result_rows: int = 0
    right_null_keys: int = 0
    unmatched_left: int = 0
    dropped_columns: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "step": self.step,
            "how": self.how,
            "on": self.on,
            "left_rows": self.left_rows,
            "right_rows": self.right_rows,
            "result_rows": self.result_rows,
            "right_null_keys": self.right_null_keys,
            "unmatched_left": self.unmatched_left,
            "dropped_columns": list(self.dropped_columns),
            "warnings": list(self.warnings),
        }


@dataclass
class JoinResult:
    frame: pd.DataFrame
    steps: List[JoinStats]
    composite_duplicates_removed: int = 0
    intermediates: Dict[str, pd.DataFrame] = field(default_factory=dict)

    @property
    def cardinality_warnings(self) -> List[str]:
        return [w for s in self.steps for w in s.warnings]


def _warn(stats: JoinStats, message: str) -> None:
    stats.warnings.append(message)
    warnings.warn(message, CardinalityWarning, stacklevel=3)


def _duplicated_keys(frame: pd.DataFrame, key: str) -> int:
    keys = frame[key].dropna()
    return int(keys.duplicated().sum())


def merge_step(left: pd.DataFrame, right: pd.DataFrame, step: JoinStep) -> Tuple[pd.DataFrame, JoinStats]:
    """Run one declared join.

    Same-named non-key columns are suffixed ``_x`` (left) / ``_y`` (right);
    afterwards the step's drop and rename lists are applied by name.
    """
    key = step.on
    for side, frame in (("left", left), ("right", right)):
        if key not in frame.columns:
            raise SchemaError(
                f"Join '{step.name}': key '{key}' is missing from the {side} side "
                f"(columns: {list(frame.columns)})"
            )

    stats = JoinStats(step=step.name, how=step.how, on=key, left_rows=len(left), right_rows=len(right))

    # NaN keys would match each other in pandas
    right_valid = right[right[key].notna()]
    stats.right_null_keys = len(right) - len(right_valid)

    if step.expect_unique_left:
        n = _duplicated_keys(left, key)
        if n:
            _warn(stats, f"Join '{step.name}': left key '{key}' expected unique but has {n} duplicated values")
    if step.expect_unique_right:
        n = _duplicated_keys(right_valid, key)
        if n:
            _warn(stats, f"Join '{step.name}': right key '{key}' expected unique but has {n} duplicated values")

    try:
        merged = left.merge(right_valid, on=key, how=step.how, suffixes=SUFFIXES, indicator=_MATCH)
    except ValueError as e:
        raise SchemaError(f"Join '{step.name}' on '{key}' cannot be performed: {e}") from e

    stats.unmatched_left = int((merged[_MATCH] == "left_only").sum())
    merged = merged.drop(columns=[_MATCH])
    stats.result_rows = len(merged)

    if step.how == "left" and stats.result_rows < stats.left_rows:
        _warn(stats, f"Join '{step.name}': left join lost rows ({stats.left_rows} -> {stats.result_rows})")
    if step.expect_unique_right and stats.result_rows > stats.left_rows:
        _warn(
            stats,
            f"Join '{step.name}': many-to-one join fanned out ({stats.left_rows} -> {stats.result_rows} rows)",
        )

    present = [c for c in step.drop_columns if c in merged.columns]
    absent = [c for c in step.drop_columns if c not in merged.columns]
    if absent:
        stats.warnings.append(f"Join '{step.name}': configured drop columns not produced: {absent}")
    merged = merged.drop(columns=present)
    stats.dropped_columns = present

    renames = {old: new for old, new in step.rename_columns.items() if old in merged.columns}
    clobbered = [new for new in renames.values() if new in merged.columns]
    if clobbered:
        raise SchemaError(f"Join '{step.name}': rename targets already exist: {clobbered}")
    merged = merged.rename(columns=renames)

    leftover = [c for c in merged.columns if c.endswith(SUFFIXES)]
    if leftover:
        stats.warnings.append(f"Join '{step.name}': suffixed columns kept: {leftover}")

    return merged, stats


def join_all(
    tables: Mapping[str, pd.DataFrame],
    joins: Sequence[JoinStep],
    *,
    base_table: str = "complaints",
    composite_key: Optional[List[str]] = None,
    dedup_after: Optional[str] = None,
) -> JoinResult:
    """Compose the source tables through ``joins`` in order.

    The composite-key dedup runs right after the step named ``dedup_after``.
    """
    if base_table not in tables:
        raise SchemaError(f"Base table '{base_table}' was not provided")

    frame = tables[base_table]
    steps: List[JoinStats] = []
    intermediates: Dict[str, pd.DataFrame] = {}
    removed = 0

    for step in joins:
        if step.right not in tables:
            raise SchemaError(f"Join '{step.name}': table '{step.right}' was not provided")
        frame, stats = merge_step(frame, tables[step.right], step)
        steps.append(stats)
        intermediates[step.name] = frame

        if composite_key and step.name == dedup_after:
            frame, removed = deduplicate(frame, composite_key, table=f"join:{step.name}")
            intermediates[f"{step.name}_dedup"] = frame

    return JoinResult(
        frame=frame,
        steps=steps,
        composite_duplicates_removed=removed,
        intermediates=intermediates,
    )
