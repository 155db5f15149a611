import pandas as pd
import pytest

from complaint_pipeline.config.schema import FeatureSpec
from complaint_pipeline.stages.project import project_features
from complaint_pipeline.utils.error_handler import SchemaError


def _resolved():
    return pd.DataFrame({
        "complaint_id": ["2", "1", "1", "2"],
        "tax_id": ["900002", "900009", "900001", "900002"],
        "allegation_record_identity": ["2", "1", "3", "1"],
        "incident_borough": ["Queens", "Bronx", "Bronx", "Queens"],
        "dropped_later": ["x", "y", "z", "w"],
    })


SPEC = FeatureSpec(
    columns=["complaint_id", "tax_id", "allegation_record_identity", "incident_borough"],
    renames={"tax_id": "officer_id", "allegation_record_identity": "allegation_id", "incident_borough": "borough"},
    categorical=["borough"],
    sort_by=["complaint_id", "officer_id", "allegation_id"],
)


def test_projection_selects_renames_and_orders_columns():
    out = project_features(_resolved(), SPEC)
    assert list(out.columns) == ["complaint_id", "officer_id", "allegation_id", "borough"]


def test_projection_sorts_rows_and_resets_index():
    out = project_features(_resolved(), SPEC)
    assert list(zip(out["complaint_id"], out["officer_id"], out["allegation_id"])) == [
        ("1", "900001", "3"),
        ("1", "900009", "1"),
        ("2", "900002", "1"),
        ("2", "900002", "2"),
    ]
    assert list(out.index) == [0, 1, 2, 3]


def test_projection_casts_categoricals():
    out = project_features(_resolved(), SPEC)
    assert isinstance(out["borough"].dtype, pd.CategoricalDtype)


def test_unsorted_projection_keeps_input_order():
    spec = FeatureSpec(columns=["complaint_id"])
    out = project_features(_resolved(), spec)
    assert out["complaint_id"].tolist() == ["2", "1", "1", "2"]


def test_absent_feature_is_schema_error():
    spec = FeatureSpec(columns=["complaint_id", "victim_race"])
    with pytest.raises(SchemaError, match="victim_race"):
        project_features(_resolved(), spec)


def test_numeric_text_ids_sort_by_value():
    df = pd.DataFrame({"complaint_id": ["100", "9", "10"], "borough": ["Bronx", "Queens", "Bronx"]})
    spec = FeatureSpec(columns=["complaint_id", "borough"], sort_by=["complaint_id"])
    out = project_features(df, spec)

    assert out["complaint_id"].tolist() == ["9", "10", "100"]


def test_non_numeric_sort_column_stays_lexicographic():
    df = pd.DataFrame({"borough": ["Queens", "Bronx", "10"]})
    out = project_features(df, FeatureSpec(columns=["borough"], sort_by=["borough"]))
    assert out["borough"].tolist() == ["10", "Bronx", "Queens"]
