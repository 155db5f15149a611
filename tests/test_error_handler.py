"""Tests for error handling module."""

import json

import pytest

from complaint_pipeline.utils.error_handler import (
    ErrorHandler,
    PipelineError,
    ResolutionError,
    SchemaError,
)


class TestErrorHandler:
    """Test stage execution and error logging."""

    def test_safe_execute_success(self):
        handler = ErrorHandler()

        def good_function(x, y):
            return x + y

        assert handler.safe_execute(good_function, 2, 3) == 5
        assert handler.error_log == []

    def test_foreign_errors_are_wrapped_with_stage(self):
        handler = ErrorHandler()

        def failing_function():
            raise KeyError("borough")

        with pytest.raises(PipelineError, match="join") as excinfo:
            handler.safe_execute(failing_function, stage="join")

        assert isinstance(excinfo.value.__cause__, KeyError)
        assert handler.error_log[0]['stage'] == 'join'
        assert handler.error_log[0]['error_type'] == 'KeyError'

    def test_pipeline_errors_propagate_unchanged(self):
        handler = ErrorHandler()

        def failing_function():
            raise SchemaError("Table 'complaints' is missing required columns")

        with pytest.raises(SchemaError):
            handler.safe_execute(failing_function, stage="normalize:complaints")
        assert len(handler.error_log) == 1

    def test_stage_defaults_to_function_name(self):
        handler = ErrorHandler()

        def resolve():
            raise ResolutionError("3 missing values survived resolution")

        with pytest.raises(ResolutionError):
            handler.safe_execute(resolve)
        assert handler.error_log[0]['stage'] == 'resolve'

    def test_errors_written_to_log_dir(self, tmp_path):
        handler = ErrorHandler(log_dir=str(tmp_path / "out"))

        with pytest.raises(PipelineError):
            handler.safe_execute(lambda: 1 / 0, stage="projection")

        lines = (tmp_path / "out" / "error_log.json").read_text(encoding="utf-8").splitlines()
        entry = json.loads(lines[0])
        assert entry['stage'] == 'projection'
        assert entry['error_type'] == 'ZeroDivisionError'
        assert 'Traceback' in entry['traceback']


def test_error_hierarchy():
    assert issubclass(SchemaError, PipelineError)
    assert issubclass(ResolutionError, PipelineError)


def test_failed_stages_in_order():
    handler = ErrorHandler()
    for stage in ("normalize:officers", "join"):
        with pytest.raises(PipelineError):
            handler.safe_execute(lambda: {}["x"], stage=stage)
    assert handler.failed_stages() == ["normalize:officers", "join"]
