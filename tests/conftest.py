import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"

if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

import pandas as pd
import pytest

from complaint_pipeline.data.sample import COLUMNS, raw_header

REFERENCE_DATE = "2024-06-30"


def raw_table(name, rows):
    """Source table in the published layout; unspecified cells are blank."""
    records = [{c: str(row.get(c, "")) for c in COLUMNS[name]} for row in rows]
    return pd.DataFrame(records, columns=COLUMNS[name]).rename(columns=raw_header)


def complaint_row(complaint_id, incident_date="03/15/2020", **extra):
    row = {
        "as_of_date": "06/30/2024",
        "complaint_id": complaint_id,
        "incident_date": incident_date,
        "incident_hour": "14",
        "incident_borough": "Brooklyn",
        "incident_precinct": "75",
        "location_type_of_incident": "Street/highway",
        "reason_for_police_contact": "Traffic stop",
        "outcome_of_police_encounter": "Arrest",
        "complaint_status": "Closed",
    }
    row.update(extra)
    return row


def allegation_row(complaint_id, allegation_id, tax_id, **extra):
    row = {
        "as_of_date": "06/30/2024",
        "complaint_id": complaint_id,
        "allegation_record_identity": allegation_id,
        "tax_id": tax_id,
        "officer_rank_at_incident": "Police Officer",
        "officer_days_on_force_at_incident": "1200",
        "fado_type": "Force",
        "allegation": "Physical force",
        "ccrb_allegation_disposition": "Substantiated",
        "victim_age_range_at_incident": "25-34",
        "victim_gender": "Male",
        "victim_race": "Hispanic",
    }
    row.update(extra)
    return row


def penalty_row(complaint_id, tax_id, **extra):
    row = {
        "as_of_date": "06/30/2024",
        "complaint_id": complaint_id,
        "tax_id": tax_id,
        "case_type": "CCRB",
        "ccrb_recommended_penalty": "Command Discipline A",
        "nypd_officer_penalty": "Formalized Training",
    }
    row.update(extra)
    return row


def officer_row(tax_id, **extra):
    row = {
        "as_of_date": "06/30/2024",
        "tax_id": tax_id,
        "active_per_last_reported_status": "Yes",
        "officer_race": "Black",
        "officer_gender": "Male",
        "current_rank": "Detective",
        "total_complaints": "3",
    }
    row.update(extra)
    return row


@pytest.fixture
def c1_tables():
    """Complaint C1 with allegations A1 and A2, one penalty P1 and only
    A1's officer on file."""
    return {
        "complaints": raw_table("complaints", [complaint_row("1001")]),
        "allegations": raw_table("allegations", [
            allegation_row("1001", "1", "900001"),
            allegation_row("1001", "2", "900002", fado_type="Discourtesy", allegation="Word"),
        ]),
        "penalties": raw_table("penalties", [penalty_row("1001", "900001")]),
        "officers": raw_table("officers", [officer_row("900001")]),
    }


@pytest.fixture
def quiet_config():
    from complaint_pipeline.core.config import Config

    return Config(reference_date=REFERENCE_DATE, verbose=False)
