"""
Complaint Pipeline - reconciles complaint, allegation, penalty and officer
tables into one analysis-ready feature table
"""

from ._version import __version__, __version_info__
from .api import reconcile, run_pipeline
from .core.config import Config
from .pipeline import ReconciliationPipeline

import warnings

warnings.filterwarnings(
    "ignore", message="Downcasting object dtype arrays on .fillna", category=FutureWarning
)
from .data.sample import (
    ComplaintSample,
    make_complaint_sample,
    write_complaint_sample,
)
from .utils.error_handler import (
    CardinalityWarning,
    PipelineError,
    ResolutionError,
    SchemaError,
)

__all__ = [
    "__version__",
    "__version_info__",
    "run_pipeline",
    "reconcile",
    "ReconciliationPipeline",
    "Config",
    "ComplaintSample",
    "make_complaint_sample",
    "write_complaint_sample",
    "PipelineError",
    "SchemaError",
    "ResolutionError",
    "CardinalityWarning",
]
