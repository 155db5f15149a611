"""Error types and stage error handling."""

import json
import traceback
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional


class PipelineError(Exception):
    """Base class for every error the pipeline raises on purpose."""


class SchemaError(PipelineError):
    """A declared column, join key or feature is missing. Always fatal."""


class ResolutionError(PipelineError):
    """Missing values survived the resolver."""


class CardinalityWarning(RuntimeWarning):
    """A join produced more rows than the declared grain allows."""


class ErrorHandler:
    """Runs pipeline stages and keeps a log of their failures.

    With ``log_dir`` set, every failure is also appended to
    ``<log_dir>/error_log.json`` as one JSON object per line.
    """

    LOG_FILE = "error_log.json"

    def __init__(self, log_dir: Optional[str] = None):
        self.log_dir = Path(log_dir) if log_dir else None
        self.error_log: List[Dict[str, str]] = []

    def safe_execute(self, func, *args, stage: Optional[str] = None, **kwargs):
        """Call ``func``; PipelineErrors propagate as they are, anything else
        is re-raised as a PipelineError naming the stage."""
        stage = stage or func.__name__
        try:
            return func(*args, **kwargs)
        except PipelineError as e:
            self.log_error(e, stage)
            raise
        except Exception as e:
            self.log_error(e, stage)
            raise PipelineError(f"Stage '{stage}' failed: {type(e).__name__}: {e}") from e

    def log_error(self, error: Exception, stage: str):
        entry = {
            'timestamp': datetime.now().isoformat(timespec='seconds'),
            'stage': stage,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': "".join(traceback.format_exception(type(error), error, error.__traceback__)),
        }
        self.error_log.append(entry)

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            with open(self.log_dir / self.LOG_FILE, 'a', encoding='utf-8') as f:
                f.write(json.dumps(entry) + '\n')

    def failed_stages(self) -> List[str]:
        return [e['stage'] for e in self.error_log]
