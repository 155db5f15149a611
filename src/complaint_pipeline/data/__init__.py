"""Loading and sample data for complaint_pipeline."""

from .load import load_csv, load_tables
from .sample import ComplaintSample, make_complaint_sample, write_complaint_sample

__all__ = [
    "load_csv",
    "load_tables",
    "ComplaintSample",
    "make_complaint_sample",
    "write_complaint_sample",
]
