# tests/unit/logging/test_unit_logging.py - v1
"""Tests for logging/: context variables, formatters, handlers, setup."""

from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler

import pytest

from sitesync.logging.context import (
    clear_context,
    get_context,
    set_deploy_context,
    set_phase,
)
from sitesync.logging.handlers import create_rotating_handler, parse_size
from sitesync.logging.logger import (
    ROOT_LOGGER,
    JsonFormatter,
    TextFormatter,
    get_logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _reset_context():
    clear_context()
    yield
    clear_context()
    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.NOTSET)


def _record(msg: str = "hello", **attrs) -> logging.LogRecord:
    record = logging.LogRecord("sitesync.test", logging.INFO, __file__, 1, msg, (), None)
    for name, value in attrs.items():
        setattr(record, name, value)
    return record


class TestContext:
    def test_empty_by_default(self):
        assert get_context().as_dict() == {}

    def test_deploy_context_resets_phase(self):
        set_phase("files")
        set_deploy_context("prod", "abc123")
        assert get_context().as_dict() == {"namespace": "prod", "run_id": "abc123"}

    def test_phase(self):
        set_deploy_context("prod", "abc123")
        set_phase("redirects")
        assert get_context().phase == "redirects"


class TestFormatters:
    def test_json_includes_context_and_data(self):
        set_deploy_context("prod", "abc123")
        set_phase("files")
        line = JsonFormatter().format(_record(data={"files_uploaded": 3}))
        entry = json.loads(line)
        assert entry["message"] == "hello"
        assert entry["level"] == "INFO"
        assert entry["context"] == {"namespace": "prod", "run_id": "abc123", "phase": "files"}
        assert entry["data"] == {"files_uploaded": 3}

    def test_json_without_context(self):
        entry = json.loads(JsonFormatter().format(_record()))
        assert "context" not in entry
        assert "data" not in entry

    def test_text_shows_phase(self):
        set_phase("invalidation")
        line = TextFormatter().format(_record("Invalidating 2 CloudFront paths"))
        assert "(invalidation)" in line
        assert line.endswith("- Invalidating 2 CloudFront paths")


class TestHandlers:
    @pytest.mark.parametrize(
        "text, expected",
        [("10MB", 10 * 1024**2), ("512kb", 512 * 1024), ("1 GB", 1024**3), ("100", 100)],
    )
    def test_parse_size(self, text, expected):
        assert parse_size(text) == expected

    def test_parse_size_invalid(self):
        with pytest.raises(ValueError):
            parse_size("ten megs")

    def test_rotating_handler_creates_parent(self, tmp_path):
        handler = create_rotating_handler(tmp_path / "logs" / "deploy.log", "1KB", 2)
        try:
            assert (tmp_path / "logs").is_dir()
            assert handler.maxBytes == 1024
            assert handler.backupCount == 2
        finally:
            handler.close()


class TestSetupLogging:
    def test_level_and_single_console_handler(self):
        setup_logging(level="DEBUG")
        setup_logging(level="WARNING")
        root = logging.getLogger(ROOT_LOGGER)
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1

    def test_json_file_output(self, tmp_path):
        log_file = tmp_path / "deploy.log"
        setup_logging(level="INFO", log_format="json", log_file=log_file)
        root = logging.getLogger(ROOT_LOGGER)
        assert any(isinstance(h, RotatingFileHandler) for h in root.handlers)

        get_logger("deploy").info("Deploy complete")
        for handler in root.handlers:
            handler.flush()
        entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert entry["logger"] == "sitesync.deploy"
        assert entry["message"] == "Deploy complete"

    def test_quiets_botocore(self):
        setup_logging(level="DEBUG")
        assert logging.getLogger("botocore").level == logging.WARNING
