from __future__ import annotations

from typing import Optional

import pandas as pd

from .core.config import Config
from .pipeline import ReconciliationPipeline


def run_pipeline(
    complaints: pd.DataFrame,
    allegations: pd.DataFrame,
    penalties: pd.DataFrame,
    officers: pd.DataFrame,
    config: Optional[Config] = None,
    **config_kwargs,
) -> ReconciliationPipeline:
    """Run the reconciliation pipeline on in-memory tables.

    Returns the pipeline object; the feature table is ``pipe.features_``,
    the run audit ``pipe.audit_`` and every intermediate frame ``pipe.stages_``.
    """
    cfg = config or Config(**config_kwargs)
    pipe = ReconciliationPipeline(cfg)
    pipe.run(complaints, allegations, penalties, officers)
    return pipe


def reconcile(
    complaints: pd.DataFrame,
    allegations: pd.DataFrame,
    penalties: pd.DataFrame,
    officers: pd.DataFrame,
    config: Optional[Config] = None,
    **config_kwargs,
) -> pd.DataFrame:
    """Same as :func:`run_pipeline` but returns only the feature table."""
    return run_pipeline(complaints, allegations, penalties, officers, config, **config_kwargs).features_
