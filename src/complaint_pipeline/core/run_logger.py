import os
import sys
import time
from datetime import datetime
from typing import Optional, TextIO


class _TeeStream:
    """Writes go to the console stream and the run log; everything else
    (encoding, isatty, fileno) is answered by the console stream."""

    def __init__(self, console: TextIO, log: TextIO):
        self._console = console
        self._log = log

    def write(self, data):
        n = self._console.write(data)
        self._log.write(data)
        self._log.flush()
        return n

    def flush(self):
        self._console.flush()
        self._log.flush()

    def __getattr__(self, name):
        return getattr(self._console, name)


class RunLogger:
    """Mirror stdout/stderr of one pipeline run into ``<folder>/<filename>``.

    The file is rewritten on every run and framed by RUN START / RUN END
    lines carrying the run id and the elapsed time.
    """

    def __init__(self, folder: str = 'logs', filename: str = 'last_run.log', run_id: Optional[str] = None):
        self.folder = folder or 'logs'
        self.filename = filename or 'last_run.log'
        self.run_id = run_id
        self._saved = None
        self._file = None
        self._t0 = None

    @property
    def path(self) -> str:
        return os.path.join(self.folder, self.filename)

    @property
    def installed(self) -> bool:
        return self._saved is not None

    def _stamp(self, event: str) -> str:
        label = f" {self.run_id}" if self.run_id else ""
        return f"[{datetime.now().isoformat(timespec='seconds')}] {event}{label}"

    def install(self):
        if self.installed:
            return
        os.makedirs(self.folder, exist_ok=True)
        self._file = open(self.path, 'w', encoding='utf-8')
        self._file.write(self._stamp("RUN START") + "\n")
        self._file.flush()
        self._t0 = time.time()
        self._saved = (sys.stdout, sys.stderr)
        sys.stdout = _TeeStream(self._saved[0], self._file)
        sys.stderr = _TeeStream(self._saved[1], self._file)

    def uninstall(self):
        if not self.installed:
            return
        sys.stdout, sys.stderr = self._saved
        self._saved = None
        try:
            self._file.write(self._stamp("RUN END") + f" ({time.time() - self._t0:.2f}s)\n")
        finally:
            self._file.close()
            self._file = None

    def __enter__(self):
        self.install()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.uninstall()
