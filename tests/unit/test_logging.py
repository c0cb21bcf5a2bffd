"""
Unit tests for logging setup and the JSON formatter.
"""

import json
import logging

import pytest
from rich.logging import RichHandler

from shared.utils import LoggerAdapter, setup_logging
from shared.utils.logging import JSONFormatter


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_text_format_uses_rich(self, restore_root_logger):
        logger = setup_logging("test-service", log_level="DEBUG")

        assert logger.name == "test-service"
        assert logger.level == logging.DEBUG
        assert any(isinstance(h, RichHandler) for h in restore_root_logger.handlers)

    def test_json_format(self, restore_root_logger):
        setup_logging("test-service", log_format="json", log_output="stderr")

        handlers = restore_root_logger.handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, JSONFormatter)

    def test_file_output(self, restore_root_logger, tmp_path):
        setup_logging("filelog", log_output="file", log_dir=str(tmp_path / "logs"))
        logging.getLogger("filelog.child").warning("written to disk")

        for handler in restore_root_logger.handlers:
            handler.flush()

        lines = (tmp_path / "logs" / "filelog.log").read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["message"] == "written to disk"


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def make_record(self, **extra):
        record = logging.LogRecord(
            name="api.publications",
            level=logging.INFO,
            pathname=__file__,
            lineno=10,
            msg="Loaded %d publications",
            args=(4,),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_formats_core_fields(self):
        payload = json.loads(JSONFormatter(service_name="api").format(self.make_record()))

        assert payload["service"] == "api"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "api.publications"
        assert payload["message"] == "Loaded 4 publications"

    def test_includes_extra_fields(self):
        record = self.make_record(source_path="/data/citations.bib", records=4)
        payload = json.loads(JSONFormatter(service_name="api").format(record))

        assert payload["source_path"] == "/data/citations.bib"
        assert payload["records"] == 4


class TestLoggerAdapter:
    """Tests for LoggerAdapter context injection."""

    def test_merges_context_into_extra(self):
        adapter = LoggerAdapter(logging.getLogger("api"), {"path": "/api/publications"})

        msg, kwargs = adapter.process("hello", {"extra": {"page": 2}})

        assert msg == "hello"
        assert kwargs["extra"] == {"page": 2, "path": "/api/publications"}
