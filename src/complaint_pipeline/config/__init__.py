from .schema import (
    FeatureSpec,
    JoinStep,
    ResolutionPolicy,
    Substitution,
    TableSchema,
    default_features,
    default_joins,
    default_policy,
    default_tables,
)

__all__ = [
    "TableSchema",
    "JoinStep",
    "Substitution",
    "ResolutionPolicy",
    "FeatureSpec",
    "default_tables",
    "default_joins",
    "default_policy",
    "default_features",
]
