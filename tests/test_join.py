import numpy as np
import pandas as pd
import pytest

from complaint_pipeline.config.schema import JoinStep, default_joins
from complaint_pipeline.stages.join import join_all, merge_step
from complaint_pipeline.utils.error_handler import CardinalityWarning, SchemaError

AS_OF = pd.Timestamp("2024-06-30")
COMPOSITE_KEY = ["complaint_id", "tax_id", "allegation_record_identity"]


def _tables():
    complaints = pd.DataFrame({
        "as_of_date": [AS_OF] * 3,
        "complaint_id": ["1", "2", "3"],
        "incident_borough": ["Bronx", "Queens", "Brooklyn"],
    })
    allegations = pd.DataFrame({
        "as_of_date": [AS_OF] * 3,
        "complaint_id": ["1", "1", "2"],
        "allegation_record_identity": ["1", "2", "1"],
        "tax_id": ["900001", "900002", "900003"],
        "fado_type": ["Force", "Discourtesy", "Force"],
    })
    penalties = pd.DataFrame({
        "as_of_date": [AS_OF] * 3,
        "complaint_id": ["1", "1", "2"],
        "tax_id": ["900001", "900002", "900003"],
        "nypd_officer_penalty": ["Instructions", np.nan, "Command Discipline A"],
    })
    officers = pd.DataFrame({
        "as_of_date": [AS_OF] * 2,
        "tax_id": ["900001", "900003"],
        "officer_race": ["Black", "White"],
    })
    return {
        "complaints": complaints,
        "allegations": allegations,
        "penalties": penalties,
        "officers": officers,
    }


def _steps():
    return {s.name: s for s in default_joins()}


def test_complaint_allegation_left_join_keeps_every_complaint():
    t = _tables()
    out, stats = merge_step(t["complaints"], t["allegations"], _steps()["complaint_allegation"])

    assert set(out["complaint_id"]) == {"1", "2", "3"}
    assert len(out) == 4
    assert stats.unmatched_left == 1
    orphan = out[out["complaint_id"] == "3"]
    assert orphan["tax_id"].isna().all()


def test_suffixed_columns_are_resolved_by_name():
    t = _tables()
    out, stats = merge_step(t["complaints"], t["allegations"], _steps()["complaint_allegation"])

    assert "as_of_date" in out.columns
    assert not [c for c in out.columns if c.endswith(("_x", "_y"))]
    assert stats.dropped_columns == ["as_of_date_y"]


def test_penalty_inner_join_narrows_to_penalised_complaints():
    t = _tables()
    result = join_all(t, default_joins(), composite_key=COMPOSITE_KEY, dedup_after="penalty")

    assert set(result.frame["complaint_id"]) <= set(t["penalties"]["complaint_id"])
    assert "3" not in set(result.frame["complaint_id"])
    assert "tax_id" in result.frame.columns
    assert "tax_id_x" not in result.frame.columns


def test_join_cardinality_before_and_after_composite_dedup():
    t = _tables()
    result = join_all(t, default_joins(), composite_key=COMPOSITE_KEY, dedup_after="penalty")

    before = result.intermediates["penalty"]
    # complaint 1: 2 allegations x 2 penalties
    assert (before["complaint_id"] == "1").sum() == 4
    after = result.frame
    assert (after["complaint_id"] == "1").sum() == 2
    assert not after.duplicated(COMPOSITE_KEY).any()
    assert result.composite_duplicates_removed == 2


def test_officer_left_join_leaves_unknown_officers_missing():
    t = _tables()
    result = join_all(t, default_joins(), composite_key=COMPOSITE_KEY, dedup_after="penalty")
    frame = result.frame.set_index("tax_id")

    assert frame.loc["900001", "officer_race"] == "Black"
    assert pd.isna(frame.loc["900002", "officer_race"])


def test_duplicate_officer_keys_warn():
    t = _tables()
    t["officers"] = pd.concat([t["officers"], t["officers"].head(1)], ignore_index=True)
    with pytest.warns(CardinalityWarning, match="expected unique"):
        result = join_all(t, default_joins(), composite_key=COMPOSITE_KEY, dedup_after="penalty")
    assert result.cardinality_warnings


def test_null_right_keys_never_match():
    t = _tables()
    extra = pd.DataFrame({
        "as_of_date": [AS_OF],
        "complaint_id": [np.nan],
        "tax_id": ["900009"],
        "nypd_officer_penalty": ["Charges"],
    })
    penalties = pd.concat([t["penalties"], extra], ignore_index=True)
    left, _ = merge_step(t["complaints"], t["allegations"], _steps()["complaint_allegation"])
    out, stats = merge_step(left, penalties, _steps()["penalty"])

    assert stats.right_null_keys == 1
    # complaint 1: 2 x 2, complaint 2: 1 x 1; the keyless penalty adds nothing
    assert len(out) == 5
    assert "Charges" not in set(out["nypd_officer_penalty"].dropna())


def test_missing_join_key_is_schema_error():
    t = _tables()
    with pytest.raises(SchemaError, match="complaint_id"):
        merge_step(t["complaints"].drop(columns=["complaint_id"]), t["allegations"], _steps()["complaint_allegation"])


def test_rename_onto_existing_column_is_schema_error():
    t = _tables()
    step = JoinStep(
        name="bad",
        right="allegations",
        on="complaint_id",
        rename_columns={"as_of_date_x": "fado_type"},
    )
    with pytest.raises(SchemaError, match="rename"):
        merge_step(t["complaints"], t["allegations"], step)


def test_missing_table_is_schema_error():
    t = _tables()
    del t["officers"]
    with pytest.raises(SchemaError, match="officers"):
        join_all(t, default_joins())
