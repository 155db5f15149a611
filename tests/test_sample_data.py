import pandas as pd

from complaint_pipeline.data.load import load_csv, load_tables
from complaint_pipeline.data.sample import ComplaintSample, make_complaint_sample, raw_header, write_complaint_sample


def test_raw_header_title_cases_with_acronyms():
    assert raw_header("complaint_id") == "Complaint ID"
    assert raw_header("ccrb_received_date") == "CCRB Received Date"
    assert raw_header("non_apu_nypd_penalty_report_date") == "Non APU NYPD Penalty Report Date"


def test_sample_is_in_published_layout():
    sample = make_complaint_sample(60, random_state=7)

    assert isinstance(sample, ComplaintSample)
    assert set(sample.tables()) == {"complaints", "allegations", "penalties", "officers"}
    assert "Complaint ID" in sample.complaints.columns
    assert "Tax ID" in sample.officers.columns
    for frame in sample.tables().values():
        assert not frame.empty
        assert frame.isna().sum().sum() == 0
        assert (frame == "").any().any()


def test_sample_carries_the_usual_defects():
    sample = make_complaint_sample(200, random_state=42)
    complaints, allegations = sample.complaints, sample.allegations

    assert complaints.duplicated().any()
    assert allegations.duplicated().any()
    with_allegations = set(allegations["Complaint ID"])
    assert set(complaints["Complaint ID"]) - with_allegations
    assert set(allegations["Tax ID"]) - set(sample.officers["Tax ID"])
    assert set(complaints["Complaint ID"]) - set(sample.penalties["Complaint ID"])


def test_sample_is_deterministic():
    a = make_complaint_sample(30, random_state=3)
    b = make_complaint_sample(30, random_state=3)
    for name in a.tables():
        pd.testing.assert_frame_equal(a.tables()[name], b.tables()[name])


def test_written_sample_loads_back_as_text(tmp_path):
    paths = write_complaint_sample(str(tmp_path / "sample"), n=40, random_state=1)

    assert {p.name for p in paths.values()} == {
        "complaints.csv",
        "allegations.csv",
        "penalties.csv",
        "officers.csv",
    }
    tables = load_tables({name: str(p) for name, p in paths.items()})
    complaints = tables["complaints"]
    assert complaints["Complaint ID"].map(type).eq(str).all()
    assert (complaints == "").any().any()
    pd.testing.assert_frame_equal(load_csv(str(paths["officers"])), tables["officers"])
