from .dedup import check_unique_key, deduplicate
from .join import JoinResult, JoinStats, join_all, merge_step
from .missing import (
    ResolutionReport,
    carry_forward,
    eliminate_columns,
    eliminate_rows,
    resolve_missing,
    substitute_semantic,
    substitute_unknown,
)
from .normalize import (
    NormalizationStats,
    blank_to_na,
    normalize_column_name,
    normalize_columns,
    normalize_table,
    parse_dates,
)
from .project import project_features
from .temporal import TemporalStats, filter_recent, recency_window

__all__ = [
    "normalize_column_name",
    "normalize_columns",
    "blank_to_na",
    "parse_dates",
    "normalize_table",
    "NormalizationStats",
    "deduplicate",
    "check_unique_key",
    "merge_step",
    "join_all",
    "JoinStats",
    "JoinResult",
    "filter_recent",
    "recency_window",
    "TemporalStats",
    "eliminate_columns",
    "substitute_semantic",
    "substitute_unknown",
    "carry_forward",
    "eliminate_rows",
    "resolve_missing",
    "ResolutionReport",
    "project_features",
]
