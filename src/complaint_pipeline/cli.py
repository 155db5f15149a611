"""Command Line Interface for the Complaint Reconciliation Pipeline"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import typer

from .core.config import Config
from .data.load import load_tables
from .data.sample import write_complaint_sample
from .pipeline import ReconciliationPipeline
from .reporting.report import save_audit, save_features
from .utils.error_handler import PipelineError
from .utils.validation import ValidationError

CONFIG_FIELD_NAMES = set(Config.__dataclass_fields__.keys())


def _split_config_payload(data: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    known: Dict[str, Any] = {}
    unknown: Dict[str, Any] = {}
    for key, value in (data or {}).items():
        if key in CONFIG_FIELD_NAMES:
            known[key] = value
        else:
            unknown[key] = value
    return known, unknown


def _read_config_json(config_json: str) -> Dict[str, Any]:
    try:
        if os.path.exists(config_json):
            with open(config_json, "r", encoding="utf-8") as f:
                payload = json.load(f)
        else:
            payload = json.loads(config_json)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"config_json is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise typer.BadParameter("config_json must resolve to a JSON object.")
    return payload


os.environ.setdefault("PYTHONUTF8", "1")
try:
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8")
    if hasattr(sys.stderr, "reconfigure"):
        sys.stderr.reconfigure(encoding="utf-8")
except (ValueError, OSError):
    pass

app = typer.Typer(help="Complaint Reconciliation Pipeline CLI")


@app.command()
def run(
    complaints: str = typer.Option(..., help="Path to the complaints CSV"),
    allegations: str = typer.Option(..., help="Path to the allegations CSV"),
    penalties: str = typer.Option(..., help="Path to the penalties CSV"),
    officers: str = typer.Option(..., help="Path to the officers CSV"),
    output_dir: str = typer.Option("output", help="Directory for features.csv and the audit"),
    window_years: Optional[int] = typer.Option(None, help="Recency window in years (default 10)"),
    reference_date: Optional[str] = typer.Option(None, help="End of the recency window, YYYY-MM-DD (default today)"),
    include_unknown_dates: Optional[bool] = typer.Option(
        None,
        "--include-unknown-dates/--exclude-unknown-dates",
        help="Keep rows whose incident date is unknown",
    ),
    config_json: Optional[str] = typer.Option(None, help="Path to a JSON config file or inline JSON string"),
):
    """Reconcile the four source tables into one feature table."""
    payload: Dict[str, Any] = {}
    if config_json:
        payload.update(_read_config_json(config_json))

    overrides = {
        "window_years": window_years,
        "reference_date": reference_date,
        "include_unknown_dates": include_unknown_dates,
    }
    payload.update({k: v for k, v in overrides.items() if v is not None})
    payload["output_folder"] = output_dir

    known, unknown = _split_config_payload(payload)
    if unknown:
        raise typer.BadParameter(f"Unknown configuration keys: {sorted(unknown)}")
    try:
        cfg = Config(**known)
    except (ValueError, TypeError) as exc:
        raise typer.BadParameter(f"Invalid configuration: {exc}") from exc

    try:
        tables = load_tables({
            "complaints": complaints,
            "allegations": allegations,
            "penalties": penalties,
            "officers": officers,
        })
    except (ValidationError, ValueError) as exc:
        typer.echo(f"Cannot load inputs: {exc}", err=True)
        raise typer.Exit(code=1)

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    pipe = ReconciliationPipeline(cfg)
    try:
        features = pipe.run(**tables)
    except PipelineError as exc:
        save_audit(pipe.audit_, str(out))
        stages = pipe.error_handler.failed_stages()
        where = f" in stage {stages[-1]}" if stages else ""
        typer.echo(f"Pipeline failed{where}: {exc}", err=True)
        raise typer.Exit(code=1)

    save_features(features, str(out))
    save_audit(pipe.audit_, str(out))
    typer.echo(f"Done. {len(features)} rows x {features.shape[1]} columns | Reports -> {out}")


@app.command()
def sample(
    dest: str = typer.Argument(..., help="Directory to write the sample CSVs into"),
    n: int = typer.Option(200, help="Number of complaints"),
    seed: int = typer.Option(42, help="Random seed"),
    reference_date: str = typer.Option("2024-06-30", help="Date the sample is generated as of"),
):
    """Write a synthetic set of the four source CSVs."""
    paths = write_complaint_sample(dest, n=n, random_state=seed, reference_date=reference_date)
    for name, path in paths.items():
        typer.echo(f"{name}: {path}")


def main():
    app()


if __name__ == "__main__":
    main()
