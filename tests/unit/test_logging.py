"""
Unit tests for logging setup and formatters.
"""

import json
import logging
import sys

import pytest

from datamigrations.observability import JSONFormatter, TextFormatter, setup_logging


def _record(msg="hello", exc_info=None, **extra):
    record = logging.LogRecord(
        name="datamigrations.store",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_base_fields(self):
        entry = json.loads(JSONFormatter().format(_record()))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "datamigrations.store"
        assert entry["message"] == "hello"
        assert entry["service"] == "datamigrations"
        assert entry["where"].endswith(":10")
        assert "context" not in entry and "error" not in entry

    def test_extra_context(self):
        entry = json.loads(JSONFormatter().format(_record(table="t", obj=object())))

        assert entry["context"]["table"] == "t"
        assert entry["context"]["obj"].startswith("<object")

    def test_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            exc_info = sys.exc_info()

        entry = json.loads(JSONFormatter().format(_record(exc_info=exc_info)))

        assert entry["error"]["type"] == "ValueError"
        assert entry["error"]["message"] == "boom"
        assert "ValueError: boom" in entry["error"]["traceback"]

    def test_service_name(self):
        entry = json.loads(JSONFormatter(service_name="seeder").format(_record()))
        assert entry["service"] == "seeder"

    def test_time_comes_from_record(self):
        record = _record()
        record.created = 0.0
        entry = json.loads(JSONFormatter().format(record))
        assert entry["time"].startswith("1970-01-01T00:00:00")


class TestTextFormatter:
    def test_format(self):
        text = TextFormatter().format(_record(table="t"))

        assert "INFO" in text
        assert "datamigrations.store: hello table=t" in text

    def test_context_stays_on_first_line(self):
        try:
            raise ValueError("boom")
        except ValueError:
            exc_info = sys.exc_info()

        text = TextFormatter().format(_record(exc_info=exc_info, table="t"))
        first, _, rest = text.partition("\n")

        assert first.endswith("hello table=t")
        assert "ValueError: boom" in rest

    def test_no_context(self):
        assert TextFormatter().format(_record()).endswith("datamigrations.store: hello")


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def restore_logger(self):
        logger = logging.getLogger("datamigrations")
        handlers, level = logger.handlers[:], logger.level
        yield
        logger.handlers = handlers
        logger.setLevel(level)

    def test_json(self):
        logger = setup_logging(level="DEBUG", format_type="json", output="stdout")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_text_to_file(self, tmp_path):
        log_file = tmp_path / "dm.log"
        logger = setup_logging(format_type="text", output=str(log_file))

        logging.getLogger("datamigrations.store").info("to file")
        logger.handlers[0].flush()
        logger.handlers[0].close()

        assert "to file" in log_file.read_text()

    def test_replaces_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1
