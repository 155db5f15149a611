"""Core pipeline modules"""

from .audit import AuditReport
from .base import BasePipeline
from .config import SOURCE_TABLES, Config
from .run_logger import RunLogger
from .utils import Timer, count_missing, safe_print

__all__ = [
    "AuditReport",
    "BasePipeline",
    "Config",
    "SOURCE_TABLES",
    "RunLogger",
    "Timer",
    "count_missing",
    "safe_print",
]
