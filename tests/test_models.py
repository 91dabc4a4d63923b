"""Tests for bulk_uploader models."""
import pytest
from bulk_uploader.models import (
    RunConfig,
    UploadOutcome,
    UploadStatus,
    UploadTarget,
)
from bulk_uploader.orchestrator.models import RunState, RunSummary


class TestUploadOutcome:
    def test_ok_outcome(self):
        outcome = UploadOutcome.ok("/data/b.json", 201)
        assert outcome.success is True
        assert outcome.status == UploadStatus.SUCCESS
        assert outcome.status_code == 201
        assert outcome.error is None

    def test_fail_outcome(self):
        outcome = UploadOutcome.fail("/data/a.json", "connection refused")
        assert outcome.success is False
        assert outcome.status == UploadStatus.FAILED
        assert outcome.error == "connection refused"
        assert outcome.status_code is None

    def test_fail_outcome_keeps_http_status(self):
        outcome = UploadOutcome.fail("/data/a.json", "HTTP 500", status_code=500)
        assert outcome.success is False
        assert outcome.status_code == 500

    def test_immutable(self):
        outcome = UploadOutcome.ok("/data/b.json", 200)
        with pytest.raises(Exception):
            outcome.status_code = 500


class TestUploadTarget:
    def test_immutable(self):
        target = UploadTarget("/data/x.json")
        with pytest.raises(Exception):
            target.file_path = "/other"


class TestRunConfig:
    def test_defaults(self):
        config = RunConfig(endpoint_url="http://localhost:8080/api", source_dir="/data")
        assert config.concurrency == 4
        assert config.batch_size == 200
        assert config.label == "aaa"
        assert config.error_log_path == "errors.log"
        assert config.timeout == 30.0

    @pytest.mark.parametrize(
        "overrides",
        [
            {"concurrency": 0},
            {"batch_size": 0},
            {"timeout": 0},
            {"endpoint_url": ""},
            {"source_dir": ""},
        ],
    )
    def test_rejects_invalid_values(self, overrides):
        kwargs = {"endpoint_url": "http://localhost", "source_dir": "/data"}
        kwargs.update(overrides)
        with pytest.raises(ValueError):
            RunConfig(**kwargs)


class TestRunSummary:
    def test_all_success(self):
        summary = RunSummary(3, 3, 0, 1, "errors.log")
        assert summary.all_success is True
        assert summary.state == RunState.DONE

    def test_with_failures(self):
        summary = RunSummary(3, 2, 1, 1, "errors.log")
        assert summary.all_success is False
