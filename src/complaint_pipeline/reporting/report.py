import json
from pathlib import Path

import pandas as pd

from ..core.audit import AuditReport


def save_audit(audit: AuditReport, out_dir: str) -> Path:
    """Persist the run audit and the per-rule resolution counts to disk."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    with open(out / "audit.json", "w", encoding="utf-8") as f:
        json.dump(audit.to_dict(), f, indent=2, default=str)
    if audit.resolution is not None:
        audit.resolution.to_frame().to_csv(out / "missing_resolution.csv", index=False)
    else:
        pd.DataFrame(columns=["rule", "column", "affected"]).to_csv(
            out / "missing_resolution.csv", index=False
        )
    return out / "audit.json"


def save_features(features: pd.DataFrame, out_dir: str, filename: str = "features.csv") -> Path:
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    path = out / filename
    features.to_csv(path, index=False, date_format="%Y-%m-%d")
    return path
