"""Synthetic complaint tables in the raw published layout."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

__all__ = [
    "ComplaintSample",
    "make_complaint_sample",
    "write_complaint_sample",
]

RAW_DATE_FORMAT = "%m/%d/%Y"
ACRONYMS = {"id", "ccrb", "nypd", "apu", "fado"}

COLUMNS: Dict[str, List[str]] = {
    "complaints": [
        "as_of_date",
        "complaint_id",
        "incident_date",
        "incident_hour",
        "incident_borough",
        "incident_precinct",
        "location_type_of_incident",
        "reason_for_police_contact",
        "outcome_of_police_encounter",
        "ccrb_received_date",
        "close_date",
        "complaint_status",
    ],
    "allegations": [
        "as_of_date",
        "complaint_id",
        "allegation_record_identity",
        "tax_id",
        "officer_rank_at_incident",
        "officer_command_at_incident",
        "officer_days_on_force_at_incident",
        "fado_type",
        "allegation",
        "ccrb_allegation_disposition",
        "victim_age_range_at_incident",
        "victim_gender",
        "victim_race",
        "victim_ethnicity",
    ],
    "penalties": [
        "as_of_date",
        "complaint_id",
        "tax_id",
        "case_type",
        "ccrb_recommended_penalty",
        "apu_plea_agreed_penalty",
        "apu_trial_commissioner_recommended_penalty",
        "apu_case_status",
        "apu_closing_date",
        "nypd_officer_penalty",
        "non_apu_nypd_penalty_report_date",
    ],
    "officers": [
        "as_of_date",
        "tax_id",
        "active_per_last_reported_status",
        "last_reported_active_date",
        "officer_race",
        "officer_gender",
        "current_rank",
        "total_complaints",
    ],
}

BOROUGHS = ["Bronx", "Brooklyn", "Manhattan", "Queens", "Staten Island"]
LOCATIONS = ["Street/highway", "Apartment/house", "Police building", "Commercial building", "Subway"]
CONTACT_REASONS = ["Traffic stop", "Report of crime", "Suspected narcotics", "Moving violation", "Other"]
OUTCOMES = ["No arrest made or summons issued", "Arrest", "Summons", "Moving violation summons"]
FADO = {
    "Force": ["Physical force", "Gun pointed", "Nightstick as club"],
    "Abuse of Authority": ["Frisk", "Search (of person)", "Refusal to provide name"],
    "Discourtesy": ["Word", "Action"],
    "Offensive Language": ["Race", "Gender"],
}
DISPOSITIONS = ["Substantiated", "Unsubstantiated", "Exonerated", "Unfounded"]
RANKS = ["Police Officer", "Detective", "Sergeant", "Lieutenant", "Captain"]
AGE_RANGES = ["Under 18", "18-24", "25-34", "35-44", "45-54", "55+"]
GENDERS = ["Male", "Female"]
RACES = ["Black", "Hispanic", "White", "Asian", "Other Race"]
CCRB_PENALTIES = ["Command Discipline A", "Command Discipline B", "Formalized Training", "Charges"]
NYPD_PENALTIES = ["Command Discipline A", "Instructions", "Formalized Training", "Forfeit vacation 5 days"]


def raw_header(column: str) -> str:
    """``ccrb_received_date`` -> ``CCRB Received Date``."""
    return " ".join(w.upper() if w in ACRONYMS else w.capitalize() for w in column.split("_"))


@dataclass
class ComplaintSample:
    """The four source tables as they are published: Title Case headers,
    ``MM/DD/YYYY`` date strings and empty strings for missing values."""

    complaints: pd.DataFrame
    allegations: pd.DataFrame
    penalties: pd.DataFrame
    officers: pd.DataFrame
    reference_date: pd.Timestamp

    def tables(self) -> Dict[str, pd.DataFrame]:
        return {
            "complaints": self.complaints,
            "allegations": self.allegations,
            "penalties": self.penalties,
            "officers": self.officers,
        }


def _blank(values, rng: np.random.Generator, rate: float) -> np.ndarray:
    out = np.asarray(values, dtype=object).copy()
    out[rng.random(len(out)) < rate] = ""
    return out


def _fmt(dates: pd.Series) -> np.ndarray:
    return dates.dt.strftime(RAW_DATE_FORMAT).to_numpy(dtype=object)


def _frame(name: str, data: Dict[str, object]) -> pd.DataFrame:
    df = pd.DataFrame(data, columns=COLUMNS[name]).fillna("")
    return df.astype(str).rename(columns=raw_header)


def make_complaint_sample(
    n: int = 200,
    random_state: int = 42,
    reference_date: Optional[str] = "2024-06-30",
) -> ComplaintSample:
    """Generate ``n`` complaints with their allegations, penalties and officers.

    The tables carry the defects the pipeline is built for: blank cells,
    unparseable and absent incident dates, exact duplicate rows, complaints
    without allegations or penalties, and allegations against officers the
    officer table does not know.
    """
    if n < 1:
        raise ValueError("n must be at least 1")
    rng = np.random.default_rng(random_state)
    ref = pd.Timestamp(reference_date).normalize() if reference_date else pd.Timestamp.today().normalize()
    as_of = ref.strftime(RAW_DATE_FORMAT)

    # ---- officers ----
    n_officers = max(5, n // 3)
    tax_ids = np.array([str(900000 + i) for i in range(n_officers)], dtype=object)
    known = tax_ids[: max(1, int(n_officers * 0.9))]
    n_known = len(known)
    active_dates = pd.Series(ref - pd.to_timedelta(rng.integers(0, 3 * 365, n_known), unit="D"))
    officers = _frame("officers", {
        "as_of_date": as_of,
        "tax_id": known,
        "active_per_last_reported_status": _blank(rng.choice(["Yes", "No"], n_known), rng, 0.03),
        "last_reported_active_date": _blank(_fmt(active_dates), rng, 0.2),
        "officer_race": _blank(rng.choice(RACES, n_known), rng, 0.05),
        "officer_gender": _blank(rng.choice(GENDERS, n_known), rng, 0.03),
        "current_rank": rng.choice(RANKS, n_known),
        "total_complaints": _blank(rng.integers(1, 30, n_known).astype(str), rng, 0.1),
    })

    # ---- complaints ----
    complaint_ids = np.array([str(10000 + i) for i in range(n)], dtype=object)
    incident = pd.Series(ref - pd.to_timedelta(rng.integers(0, 15 * 365, n), unit="D"))
    received = incident + pd.to_timedelta(rng.integers(0, 60, n), unit="D")
    closed = received + pd.to_timedelta(rng.integers(30, 500, n), unit="D")
    incident_raw = _blank(_fmt(incident), rng, 0.03)
    bad = rng.random(n) < 0.02
    incident_raw[bad] = "13/45/2019"
    complaints = _frame("complaints", {
        "as_of_date": as_of,
        "complaint_id": complaint_ids,
        "incident_date": incident_raw,
        "incident_hour": rng.integers(0, 24, n).astype(str),
        "incident_borough": _blank(rng.choice(BOROUGHS, n), rng, 0.03),
        "incident_precinct": _blank(rng.choice([str(p) for p in range(1, 124, 4)], n), rng, 0.03),
        "location_type_of_incident": _blank(rng.choice(LOCATIONS, n), rng, 0.05),
        "reason_for_police_contact": _blank(rng.choice(CONTACT_REASONS, n), rng, 0.1),
        "outcome_of_police_encounter": _blank(rng.choice(OUTCOMES, n), rng, 0.1),
        "ccrb_received_date": _fmt(received),
        "close_date": _blank(_fmt(closed), rng, 0.2),
        "complaint_status": rng.choice(["Closed", "Open"], n, p=[0.85, 0.15]),
    })

    # ---- allegations ----
    alleged = complaint_ids[rng.random(n) >= 0.1]
    rows = []
    for cid in alleged:
        officers_in_case = rng.choice(tax_ids, size=int(rng.integers(1, 3)), replace=False)
        for j in range(int(rng.integers(1, 4))):
            fado = rng.choice(list(FADO))
            rows.append({
                "complaint_id": cid,
                "allegation_record_identity": f"{cid}{j + 1:02d}",
                "tax_id": officers_in_case[j % len(officers_in_case)],
                "fado_type": fado,
                "allegation": rng.choice(FADO[fado]),
            })
    m = len(rows)
    allegation_data = pd.DataFrame(rows, columns=["complaint_id", "allegation_record_identity", "tax_id", "fado_type", "allegation"])
    allegations = _frame("allegations", {
        "as_of_date": as_of,
        "complaint_id": allegation_data["complaint_id"].to_numpy(),
        "allegation_record_identity": allegation_data["allegation_record_identity"].to_numpy(),
        "tax_id": allegation_data["tax_id"].to_numpy(),
        "officer_rank_at_incident": _blank(rng.choice(RANKS, m), rng, 0.05),
        "officer_command_at_incident": _blank(np.array([f"{p:03d} PCT" for p in rng.integers(1, 124, m)]), rng, 0.3),
        "officer_days_on_force_at_incident": rng.integers(100, 8000, m).astype(str),
        "fado_type": allegation_data["fado_type"].to_numpy(),
        "allegation": allegation_data["allegation"].to_numpy(),
        "ccrb_allegation_disposition": rng.choice(DISPOSITIONS, m),
        "victim_age_range_at_incident": _blank(rng.choice(AGE_RANGES, m), rng, 0.15),
        "victim_gender": _blank(rng.choice(GENDERS, m), rng, 0.1),
        "victim_race": _blank(rng.choice(RACES, m), rng, 0.15),
        "victim_ethnicity": _blank(rng.choice(RACES, m), rng, 0.6),
    })

    # ---- penalties ----
    penalty_rows = []
    for cid, group in allegation_data.groupby("complaint_id", sort=False):
        if rng.random() >= 0.7:
            continue
        for tax_id in group["tax_id"].unique()[: int(rng.integers(1, 3))]:
            penalty_rows.append({"complaint_id": cid, "tax_id": tax_id})
    p = len(penalty_rows)
    penalty_data = pd.DataFrame(penalty_rows, columns=["complaint_id", "tax_id"])
    report_dates = pd.Series(ref - pd.to_timedelta(rng.integers(0, 5 * 365, p), unit="D"))
    penalties = _frame("penalties", {
        "as_of_date": as_of,
        "complaint_id": penalty_data["complaint_id"].to_numpy(),
        "tax_id": penalty_data["tax_id"].to_numpy(),
        "case_type": rng.choice(["CCRB", "APU"], p),
        "ccrb_recommended_penalty": _blank(rng.choice(CCRB_PENALTIES, p), rng, 0.3),
        "apu_plea_agreed_penalty": _blank(rng.choice(NYPD_PENALTIES, p), rng, 0.9),
        "apu_trial_commissioner_recommended_penalty": _blank(rng.choice(NYPD_PENALTIES, p), rng, 0.95),
        "apu_case_status": _blank(rng.choice(["Closed", "Pending"], p), rng, 0.85),
        "apu_closing_date": _blank(_fmt(report_dates), rng, 0.9),
        "nypd_officer_penalty": _blank(rng.choice(NYPD_PENALTIES, p), rng, 0.4),
        "non_apu_nypd_penalty_report_date": _blank(_fmt(report_dates), rng, 0.5),
    })

    # exact duplicates, as found in the published extracts
    complaints = pd.concat([complaints, complaints.head(max(1, n // 50))], ignore_index=True)
    allegations = pd.concat([allegations, allegations.head(max(1, m // 50))], ignore_index=True)

    return ComplaintSample(
        complaints=complaints,
        allegations=allegations,
        penalties=penalties,
        officers=officers,
        reference_date=ref,
    )


def write_complaint_sample(
    dest: str,
    n: int = 200,
    random_state: int = 42,
    reference_date: Optional[str] = "2024-06-30",
) -> Dict[str, Path]:
    """Write the sample tables to ``dest`` as ``<table>.csv``; returns the paths."""
    out = Path(dest)
    out.mkdir(parents=True, exist_ok=True)
    sample = make_complaint_sample(n, random_state=random_state, reference_date=reference_date)
    paths: Dict[str, Path] = {}
    for name, frame in sample.tables().items():
        path = out / f"{name}.csv"
        frame.to_csv(path, index=False)
        paths[name] = path
    return paths
