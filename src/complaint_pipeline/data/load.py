from pathlib import Path
from typing import Dict, Mapping

import pandas as pd

from ..core.config import SOURCE_TABLES
from ..utils.validation import InputValidator


def load_csv(path: str) -> pd.DataFrame:
    """Read a source CSV with every cell as text.

    Blank cells stay ``""`` so the normalizer can count them.
    """
    p = InputValidator.validate_file_path(path)
    return pd.read_csv(p, dtype=str, keep_default_na=False)


def load_tables(paths: Mapping[str, str]) -> Dict[str, pd.DataFrame]:
    missing = [name for name in SOURCE_TABLES if not paths.get(name)]
    if missing:
        raise ValueError(f"No path given for source tables: {missing}")
    return {name: load_csv(str(Path(paths[name]))) for name in SOURCE_TABLES}
