"""
Unified Configuration System for the Complaint Reconciliation Pipeline
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Union

import pandas as pd
from pydantic import BaseModel

from ..config.schema import (
    FeatureSpec,
    JoinStep,
    ResolutionPolicy,
    TableSchema,
    default_features,
    default_joins,
    default_policy,
    default_tables,
)

SOURCE_TABLES = ('complaints', 'allegations', 'penalties', 'officers')


@dataclass
class Config:
    """
    Configuration for the complaint reconciliation pipeline.
    Column layouts, join steps, the missing-value policy and the
    feature set are all data here, not literals in the stages.
    """

    # ==================== SOURCE LAYOUT ====================
    tables: Dict[str, TableSchema] = field(default_factory=default_tables)
    date_format: str = '%m/%d/%Y'

    # ==================== JOINS ====================
    base_table: str = 'complaints'
    joins: List[JoinStep] = field(default_factory=default_joins)
    # Composite key of the Complaint/Allegation/Penalty relation
    composite_key: List[str] = field(default_factory=lambda: [
        'complaint_id',
        'tax_id',
        'allegation_record_identity',
    ])
    # Composite-key dedup runs right after this join step
    dedup_after_join: str = 'penalty'

    # ==================== TEMPORAL FILTER ====================
    incident_date_column: str = 'incident_date'
    window_years: int = 10
    reference_date: Optional[Union[str, pd.Timestamp]] = None  # None -> today
    include_unknown_dates: bool = False

    # ==================== MISSING VALUES ====================
    policy: ResolutionPolicy = field(default_factory=default_policy)

    # ==================== FEATURES ====================
    features: FeatureSpec = field(default_factory=default_features)

    # ==================== OUTPUT ====================
    output_folder: Optional[str] = None
    run_id: Optional[str] = None

    # ==================== SYSTEM ====================
    verbose: bool = True
    enable_run_logging: bool = False
    logs_folder: str = 'logs'
    log_filename: str = 'last_run.log'

    def _coerce_nested(self) -> None:
        """Accept plain dicts (JSON configs) for the nested records."""
        self.tables = {
            name: schema if isinstance(schema, TableSchema) else TableSchema(**{'name': name, **schema})
            for name, schema in (self.tables or {}).items()
        }
        self.joins = [j if isinstance(j, JoinStep) else JoinStep(**j) for j in (self.joins or [])]
        if isinstance(self.policy, dict):
            self.policy = ResolutionPolicy(**self.policy)
        if isinstance(self.features, dict):
            self.features = FeatureSpec(**self.features)
        if self.reference_date is not None:
            self.reference_date = pd.Timestamp(self.reference_date).normalize()

    def validate(self) -> None:
        """Validate configuration parameters"""
        missing_tables = [t for t in SOURCE_TABLES if t not in self.tables]
        if missing_tables:
            raise ValueError(f"tables must declare a layout for: {missing_tables}")

        if self.base_table not in self.tables:
            raise ValueError(f"base_table '{self.base_table}' has no layout")

        if self.window_years < 1:
            raise ValueError("window_years must be at least 1")

        if not self.composite_key:
            raise ValueError("composite_key cannot be empty")

        valid_how = ['left', 'inner']
        step_names = []
        for step in self.joins:
            if step.how not in valid_how:
                raise ValueError(f"join '{step.name}': how must be one of {valid_how}")
            if step.right not in self.tables:
                raise ValueError(f"join '{step.name}' references unknown table '{step.right}'")
            step_names.append(step.name)
        if self.dedup_after_join not in step_names:
            raise ValueError(f"dedup_after_join '{self.dedup_after_join}' is not a join step")

        overlap = self.policy.overlapping_columns()
        if overlap:
            raise ValueError(f"Columns assigned to more than one resolution rule: {overlap}")

        dropped_and_ruled = set(self.policy.drop_columns) & set(self.policy.rule_assignments())
        if dropped_and_ruled:
            raise ValueError(f"Columns both eliminated and assigned a rule: {sorted(dropped_and_ruled)}")

        outputs = self.features.output_names()
        if len(set(outputs)) != len(outputs):
            raise ValueError("feature output names must be unique")
        unknown_cat = [c for c in self.features.categorical if c not in outputs]
        if unknown_cat:
            raise ValueError(f"categorical columns not in the feature set: {unknown_cat}")
        unknown_sort = [c for c in self.features.sort_by if c not in outputs]
        if unknown_sort:
            raise ValueError(f"sort_by columns not in the feature set: {unknown_sort}")

        eliminated_features = set(self.policy.drop_columns) & set(self.features.columns)
        if eliminated_features:
            raise ValueError(f"Eliminated columns are also selected as features: {sorted(eliminated_features)}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a JSON-friendly dictionary"""
        out: Dict[str, Any] = {}
        for k, v in self.__dict__.items():
            if k.startswith('_'):
                continue
            out[k] = _plain(v)
        return out

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'Config':
        """Create configuration from dictionary"""
        return cls(**config_dict)

    def __post_init__(self):
        """Post-initialization coercion and validation"""
        self._coerce_nested()
        self.validate()


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return {name: _plain(item) for name, item in vars(value).items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, pd.Timestamp):
        return value.strftime('%Y-%m-%d')
    return value
