"""
Complaint Reconciliation Pipeline - four source tables in, one feature table out
"""

from typing import Dict, Optional, Union

import pandas as pd

from .core.audit import AuditReport
from .core.base import BasePipeline
from .core.config import SOURCE_TABLES, Config
from .core.utils import Timer, count_missing
from .stages.dedup import check_unique_key, deduplicate
from .stages.join import join_all
from .stages.missing import resolve_missing
from .stages.normalize import normalize_table
from .stages.project import project_features
from .stages.temporal import filter_recent
from .utils.error_handler import ErrorHandler


class ReconciliationPipeline(BasePipeline):
    """
    Runs normalize -> dedup -> join -> temporal filter -> missing-value
    resolution -> projection over the four source tables.

    Every stage returns a new frame; all of them are kept in ``stages_``
    so intermediate results can be inspected after the run.
    """

    N_STEPS = 6

    def __init__(self, config: Optional[Union[Config, dict]] = None):
        if config is None:
            config = Config()
        elif isinstance(config, dict):
            config = Config(**config)
        super().__init__(config)

        self.error_handler = ErrorHandler(log_dir=self.cfg.output_folder)
        self.audit_ = AuditReport(run_id=self.cfg.run_id)
        self.stages_: Dict[str, object] = {}
        self.features_: Optional[pd.DataFrame] = None

    def _step(self, number: int, title: str):
        self._log(f"\n[Step {number}/{self.N_STEPS}] {title}...")
        self._activate(title)
        return Timer(title, logger=self._log)

    def run(
        self,
        complaints: pd.DataFrame,
        allegations: pd.DataFrame,
        penalties: pd.DataFrame,
        officers: pd.DataFrame,
    ) -> pd.DataFrame:
        """Reconcile the four tables and return the feature table."""
        raw = {
            'complaints': complaints,
            'allegations': allegations,
            'penalties': penalties,
            'officers': officers,
        }
        for name in SOURCE_TABLES:
            if raw[name] is None:
                raise ValueError(f"Source table '{name}' is required.")

        self._log("=" * 80)
        self._log(f"COMPLAINT RECONCILIATION RUN {self.cfg.run_id}")
        self._log("=" * 80)

        try:
            with self._step(1, "Schema normalization"):
                normalized = {
                    name: self._normalize_one(name, raw[name]) for name in SOURCE_TABLES
                }
            self.stages_['normalized'] = {name: pair[0] for name, pair in normalized.items()}

            with self._step(2, "Deduplication"):
                deduplicated = {}
                for name in SOURCE_TABLES:
                    frame, stats = normalized[name]
                    deduplicated[name], removed = self.error_handler.safe_execute(
                        deduplicate, frame, table=name, stage=f"dedup:{name}"
                    )
                    self.audit_.record_table(stats, removed)
                    self._log(f"  {name}: {stats.rows} rows, {removed} exact duplicates removed")
                    schema = self.cfg.tables[name]
                    if schema.unique_key:
                        clash = self.error_handler.safe_execute(
                            check_unique_key, deduplicated[name], schema.key, table=name,
                            stage=f"dedup:{name}",
                        )
                        if clash:
                            self.audit_.key_warnings.append(clash)
                            self._log(f"  WARNING: {clash}")
            self.stages_['deduplicated'] = deduplicated

            with self._step(3, "Joining"):
                joined = self.error_handler.safe_execute(
                    join_all,
                    deduplicated,
                    self.cfg.joins,
                    base_table=self.cfg.base_table,
                    composite_key=self.cfg.composite_key,
                    dedup_after=self.cfg.dedup_after_join,
                    stage="join",
                )
                self.audit_.joins = joined.steps
                self.audit_.composite_duplicates_removed = joined.composite_duplicates_removed
                for s in joined.steps:
                    self._log(f"  {s.step} ({s.how} on {s.on}): {s.left_rows} -> {s.result_rows} rows")
                for w in joined.cardinality_warnings:
                    self._log(f"  WARNING: {w}")
            self.stages_['joins'] = joined.intermediates
            self.stages_['joined'] = joined.frame

            with self._step(4, "Temporal filter"):
                recent, temporal = self.error_handler.safe_execute(
                    filter_recent,
                    joined.frame,
                    self.cfg.incident_date_column,
                    window_years=self.cfg.window_years,
                    reference_date=self.cfg.reference_date,
                    include_unknown=self.cfg.include_unknown_dates,
                    stage="temporal_filter",
                )
                self.audit_.temporal = temporal
                self._log(
                    f"  window {temporal.window_start:%Y-%m-%d}..{temporal.window_end:%Y-%m-%d}: "
                    f"{temporal.rows_in} -> {temporal.rows_out} rows"
                )
            self.stages_['recent'] = recent

            with self._step(5, "Missing-value resolution"):
                missing_before = count_missing(recent)
                if missing_before:
                    self._log(f"  missing values before resolution: {missing_before}")
                resolved, report = self.error_handler.safe_execute(
                    resolve_missing, recent, self.cfg.policy, stage="missing_values"
                )
                self.audit_.resolution = report
                self._log(f"  {report.rows_in} -> {report.rows_out} rows ({report.rows_eliminated} eliminated)")
                if report.unassigned_columns:
                    self._log(f"  WARNING: rows eliminated for columns without a rule: {report.unassigned_columns}")
            self.stages_['resolved'] = resolved

            with self._step(6, "Feature projection"):
                features = self.error_handler.safe_execute(
                    project_features, resolved, self.cfg.features, stage="projection"
                )
            self.stages_['features'] = features

            self.audit_.stage_rows = {
                'complaints': len(deduplicated['complaints']),
                'joined': len(joined.frame),
                'recent': len(recent),
                'resolved': len(resolved),
                'features': len(features),
            }
            self.features_ = features

            self._log("\nAudit summary:")
            for line in self.audit_.summary_lines():
                self._log(line)
            self._log(f"\nFeature table: {features.shape[0]} rows x {features.shape[1]} columns")
            return features
        finally:
            self.close()

    def _normalize_one(self, name: str, df: pd.DataFrame):
        schema = self.cfg.tables[name]

        def normalize_and_check(raw: pd.DataFrame):
            frame, stats = normalize_table(
                raw, table=name, date_columns=schema.date_columns, date_format=self.cfg.date_format
            )
            schema.check_frame(frame)
            return frame, stats

        frame, stats = self.error_handler.safe_execute(
            normalize_and_check, df, stage=f"normalize:{name}"
        )
        failures = sum(stats.date_parse_failures.values())
        if failures:
            self._log(f"  {name}: {failures} unparseable dates set to unknown {stats.date_parse_failures}")
        return frame, stats

    def summary(self) -> Dict:
        """Audit of the last run as a JSON-friendly dict."""
        return self.audit_.to_dict()
