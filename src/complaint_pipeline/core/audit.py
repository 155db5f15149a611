"""Audit record of one pipeline run"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..stages.join import JoinStats
from ..stages.missing import ResolutionReport
from ..stages.normalize import NormalizationStats
from ..stages.temporal import TemporalStats


@dataclass
class AuditReport:
    """Counts collected along the run: what every stage removed, filled or flagged."""

    run_id: Optional[str] = None
    tables: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    key_warnings: List[str] = field(default_factory=list)
    joins: List[JoinStats] = field(default_factory=list)
    composite_duplicates_removed: int = 0
    temporal: Optional[TemporalStats] = None
    resolution: Optional[ResolutionReport] = None
    stage_rows: Dict[str, int] = field(default_factory=dict)

    def record_table(self, stats: NormalizationStats, duplicates_removed: int) -> None:
        entry = stats.to_dict()
        entry["duplicates_removed"] = int(duplicates_removed)
        entry["rows_out"] = stats.rows - int(duplicates_removed)
        self.tables[stats.table] = entry

    @property
    def cardinality_warnings(self) -> List[str]:
        return list(self.key_warnings) + [w for s in self.joins for w in s.warnings]

    @property
    def date_parse_failures(self) -> Dict[str, Dict[str, int]]:
        return {
            name: entry["date_parse_failures"]
            for name, entry in self.tables.items()
            if entry.get("date_parse_failures")
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "tables": self.tables,
            "joins": [s.to_dict() for s in self.joins],
            "composite_duplicates_removed": self.composite_duplicates_removed,
            "cardinality_warnings": self.cardinality_warnings,
            "temporal": self.temporal.to_dict() if self.temporal else None,
            "resolution": self.resolution.to_dict() if self.resolution else None,
            "stage_rows": dict(self.stage_rows),
        }

    def summary_lines(self) -> List[str]:
        lines = []
        for name, entry in self.tables.items():
            failures = sum(entry["date_parse_failures"].values())
            lines.append(
                f"  {name}: {entry['rows']} rows, {entry['duplicates_removed']} duplicates, "
                f"{sum(entry['blanks'].values())} blanks, {failures} unparseable dates"
            )
        for s in self.joins:
            lines.append(f"  join {s.step} ({s.how}): {s.left_rows} x {s.right_rows} -> {s.result_rows}")
        lines.append(f"  composite-key duplicates removed: {self.composite_duplicates_removed}")
        for w in self.cardinality_warnings:
            lines.append(f"  WARNING: {w}")
        if self.temporal:
            t = self.temporal
            lines.append(
                f"  window {t.window_start:%Y-%m-%d}..{t.window_end:%Y-%m-%d}: {t.rows_in} -> {t.rows_out} "
                f"({t.out_of_window} outside, {t.unknown_excluded} unknown dates)"
            )
        if self.resolution:
            r = self.resolution
            lines.append(f"  resolver: {r.rows_in} -> {r.rows_out} ({r.rows_eliminated} rows eliminated)")
            for rule, cols in r.affected.items():
                if cols:
                    lines.append(f"    {rule}: {sum(cols.values())} values in {len(cols)} columns")
            if r.unassigned_columns:
                lines.append(f"    columns without a rule: {r.unassigned_columns}")
        return lines
