import numpy as np
import pandas as pd
import pytest

from complaint_pipeline.stages.normalize import (
    blank_to_na,
    normalize_column_name,
    normalize_columns,
    normalize_table,
    parse_dates,
)
from complaint_pipeline.utils.error_handler import SchemaError


@pytest.mark.parametrize(
    "raw, canonical",
    [
        ("Complaint Id", "complaint_id"),
        ("Complaint.Id", "complaint_id"),
        ("complaint__id", "complaint_id"),
        (" Tax ID ", "tax_id"),
        ("CCRB Received Date", "ccrb_received_date"),
        ("FADO Type", "fado_type"),
    ],
)
def test_normalize_column_name(raw, canonical):
    assert normalize_column_name(raw) == canonical


def test_normalize_columns_rejects_collisions():
    df = pd.DataFrame([["1", "2"]], columns=["Complaint Id", "Complaint.Id"])
    with pytest.raises(SchemaError, match="collide"):
        normalize_columns(df, table="complaints")


def test_normalize_columns_rejects_duplicated_headers():
    df = pd.DataFrame([["1", "2"]], columns=["a", "a"])
    with pytest.raises(SchemaError, match="duplicated"):
        normalize_columns(df, table="complaints")


def test_blank_to_na_counts_blank_and_whitespace():
    df = pd.DataFrame({"borough": ["", "  ", "Bronx", None], "hour": [1, 2, 3, 4]})
    out, counts = blank_to_na(df)

    assert counts == {"borough": 2}
    assert out["borough"].isna().tolist() == [True, True, False, True]
    assert out["hour"].tolist() == [1, 2, 3, 4]
    # input untouched
    assert df.loc[0, "borough"] == ""


def test_parse_dates_counts_failures_but_not_blanks():
    df = pd.DataFrame({"incident_date": ["01/31/2020", "13/45/2019", np.nan]})
    out, failures = parse_dates(df, ["incident_date"])

    assert failures == {"incident_date": 1}
    assert out.loc[0, "incident_date"] == pd.Timestamp("2020-01-31")
    assert out["incident_date"].isna().tolist() == [False, True, True]


def test_parse_dates_missing_column():
    with pytest.raises(SchemaError, match="close_date"):
        parse_dates(pd.DataFrame({"a": ["1"]}), ["close_date"], table="complaints")


def test_normalize_table_end_state():
    raw = pd.DataFrame({
        "Complaint Id": ["1", "2"],
        "Incident Date": ["02/29/2020", ""],
        "Incident Borough": ["Queens", " "],
    })
    out, stats = normalize_table(raw, table="complaints", date_columns=["Incident Date"])

    assert list(out.columns) == ["complaint_id", "incident_date", "incident_borough"]
    assert str(out["incident_date"].dtype).startswith("datetime64")
    assert stats.renamed["Complaint Id"] == "complaint_id"
    assert stats.blanks == {"incident_date": 1, "incident_borough": 1}
    assert stats.date_parse_failures == {}
    assert stats.rows == 2


def test_normalize_table_infers_date_columns():
    raw = pd.DataFrame({"Close Date": ["05/01/2021"], "Status": ["Closed"]})
    out, _ = normalize_table(raw)
    assert out.loc[0, "close_date"] == pd.Timestamp("2021-05-01")
    assert out.loc[0, "status"] == "Closed"


def test_normalize_table_is_idempotent():
    raw = pd.DataFrame({
        "Complaint.Id": ["1", "2", "3"],
        "Incident Date": ["02/29/2020", "", "99/99/9999"],
        "Reason For Police Contact": ["", "Other", "Traffic stop"],
    })
    once, _ = normalize_table(raw, date_columns=["incident_date"])
    twice, stats = normalize_table(once, date_columns=["incident_date"])

    pd.testing.assert_frame_equal(once, twice)
    assert stats.blanks == {}
    assert stats.date_parse_failures == {}
    assert stats.renamed == {}
