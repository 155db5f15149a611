"""Input validation for source files and tables."""

from pathlib import Path
from typing import Iterable

import pandas as pd

from .error_handler import SchemaError


class ValidationError(Exception):
    """A source file cannot be used."""
    pass


class InputValidator:
    """Checks applied to source files before loading and to frames before use."""

    MAX_FILE_SIZE_MB = 1000
    ALLOWED_EXTENSIONS = {'.csv'}

    @classmethod
    def validate_file_path(cls, file_path: str) -> Path:
        """Resolved path of an existing, not oversized CSV file."""
        try:
            path = Path(file_path).expanduser().resolve()
        except (OSError, RuntimeError) as e:
            raise ValidationError(f"Invalid file path {file_path!r}: {e}") from e

        if not path.is_file():
            raise ValidationError(f"File not found: {file_path}")
        if path.suffix.lower() not in cls.ALLOWED_EXTENSIONS:
            raise ValidationError(
                f"Invalid file type '{path.suffix}' for {path.name}; "
                f"expected one of {sorted(cls.ALLOWED_EXTENSIONS)}"
            )

        size_mb = path.stat().st_size / 2**20
        if size_mb > cls.MAX_FILE_SIZE_MB:
            raise ValidationError(
                f"File too large: {path.name} is {size_mb:.2f}MB, limit {cls.MAX_FILE_SIZE_MB}MB"
            )
        return path

    @staticmethod
    def require_columns(df: pd.DataFrame, columns: Iterable[str], table: str) -> None:
        """Raise SchemaError naming every declared column absent from ``df``."""
        missing = [c for c in columns if c not in df.columns]
        if missing:
            raise SchemaError(
                f"Table '{table}' is missing required columns: {missing}. "
                f"Available: {list(df.columns)}"
            )
