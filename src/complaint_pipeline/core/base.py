"""Shared run plumbing for pipelines: run id, log file, stdout mirror."""

import os
import uuid
from datetime import datetime
from typing import List, Optional

from .run_logger import RunLogger
from .utils import now_str, safe_print


class BasePipeline:
    """Owns the per-run log outputs; subclasses call ``_log`` and ``_activate``."""

    def __init__(self, config):
        self.cfg = config
        self.log_fh = None
        self.log_path: Optional[str] = None
        self._run_logger: Optional[RunLogger] = None
        self.artifacts = {"active_steps": []}

        if not self.cfg.run_id:
            self.cfg.run_id = self.new_run_id()

        self.setup_logger()

    @staticmethod
    def new_run_id() -> str:
        """``YYYYmmdd_HHMMSS_<8 hex>``"""
        return f"{datetime.now():%Y%m%d_%H%M%S}_{uuid.uuid4().hex[:8]}"

    @property
    def active_steps(self) -> List[str]:
        return list(self.artifacts["active_steps"])

    def setup_logger(self):
        if self.cfg.output_folder:
            os.makedirs(self.cfg.output_folder, exist_ok=True)
            self.log_path = os.path.join(self.cfg.output_folder, f"pipeline_log_{self.cfg.run_id}.txt")
            self.log_fh = open(self.log_path, "w", encoding="utf-8")

        if self.cfg.enable_run_logging:
            self._run_logger = RunLogger(self.cfg.logs_folder, self.cfg.log_filename, self.cfg.run_id)
            self._run_logger.install()

    def _log(self, msg: str):
        """Console (unless ``verbose`` is off) and the run's log file, which
        always gets a time prefix."""
        if self.cfg.verbose:
            safe_print(msg)
        if self.log_fh is not None:
            for line in msg.split("\n"):
                self.log_fh.write(f"{now_str()} {line}\n" if line else "\n")
            self.log_fh.flush()

    def _activate(self, step_name: str):
        self.artifacts["active_steps"].append(step_name)

    def close(self):
        if self.log_fh is not None:
            self.log_fh.close()
            self.log_fh = None
        if self._run_logger is not None:
            self._run_logger.uninstall()
            self._run_logger = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
