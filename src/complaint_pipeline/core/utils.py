"""Console output, timing and resource helpers"""

import sys
import time
from datetime import datetime

import pandas as pd
import psutil


def safe_print(msg, file=None):
    """print() that degrades to ASCII on consoles that cannot encode ``msg``."""
    stream = file or sys.stdout
    try:
        stream.write(f"{msg}\n")
    except UnicodeEncodeError:
        stream.write(f"{msg}\n".encode("ascii", errors="replace").decode("ascii"))
    stream.flush()


def now_str() -> str:
    return datetime.now().strftime("%H:%M:%S")


def sys_metrics() -> str:
    """System CPU, system RAM and this process's resident memory."""
    try:
        cpu = psutil.cpu_percent(interval=None)
        ram = psutil.virtual_memory().percent
        rss_mb = psutil.Process().memory_info().rss / 2**20
    except (psutil.Error, OSError):
        return ""
    return f" | CPU={cpu:.0f}% RAM={ram:.0f}% RSS={rss_mb:.0f}MB"


def count_missing(df: pd.DataFrame) -> dict:
    """Per-column count of missing values, only columns with any."""
    counts = df.isna().sum()
    return {str(c): int(n) for c, n in counts.items() if n > 0}


class Timer:
    """Logs start and end of a stage with elapsed seconds and resource use.

    Exceptions are never suppressed.
    """

    def __init__(self, label: str, logger=print):
        self.label = label
        self.logger = logger
        self.elapsed = None
        self._t0 = None

    def __enter__(self):
        self._t0 = time.perf_counter()
        self.logger(f"[{now_str()}] >> {self.label}{sys_metrics()}")
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self._t0
        outcome = f"failed: {exc}" if exc_type else "done"
        self.logger(f"[{now_str()}] << {self.label} {outcome} ({self.elapsed:.2f}s){sys_metrics()}")
        return False
