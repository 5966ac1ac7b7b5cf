"""
Structured logger.
"""

import io
import sys

import orjson
import pytest

from validex.utils.logger import (
    JsonFormatter,
    Logger,
    LogLevel,
    LogRecord,
    MemoryHandler,
    StreamHandler,
    TextFormatter,
    configure_logging,
    get_logger,
)
from validex.validation.registry import RuleRegistry


class Broken(MemoryHandler):
    def emit(self, record):
        raise RuntimeError("handler down")


@pytest.fixture
def memory():
    return MemoryHandler()


class TestLogger:
    def test_context_is_recorded(self, memory):
        logger = Logger("test", level=LogLevel.DEBUG, handlers=[memory])

        logger.debug("Rule registered", identifier="email")

        assert memory.messages() == ["Rule registered"]
        assert memory.records[0].context == {"identifier": "email"}

    def test_level_filtering(self, memory):
        logger = Logger("test", level=LogLevel.WARNING, handlers=[memory])

        logger.debug("hidden")
        logger.warning("shown")

        assert memory.messages() == ["shown"]

    def test_with_context_merges(self, memory):
        logger = Logger("test", level=LogLevel.DEBUG, handlers=[memory])

        logger.with_context(attribute="email").info("Bypassed", rule="sometimes")

        assert memory.records[0].context == {"attribute": "email", "rule": "sometimes"}

    def test_handler_errors_do_not_propagate(self, memory):
        logger = Logger("test", level=LogLevel.DEBUG, handlers=[Broken(), memory])

        logger.error("still logged", exception=ValueError("boom"))

        assert memory.messages() == ["still logged"]

    def test_level_parsing(self):
        assert LogLevel.parse("debug") is LogLevel.DEBUG
        assert LogLevel.parse(40) is LogLevel.ERROR


class TestFormatters:
    def test_text(self):
        record = LogRecord(LogLevel.INFO, "hello", context={"k": "v"}, logger_name="t")

        assert "[INFO] t: hello k=v" in TextFormatter().format(record)

    def test_json(self):
        record = LogRecord(LogLevel.ERROR, "failed", exception=ValueError("boom"))

        data = orjson.loads(JsonFormatter().format(record))

        assert data["message"] == "failed"
        assert data["level"] == "ERROR"
        assert data["exception"]["type"] == "ValueError"

    def test_stream_handler(self):
        stream = io.StringIO()
        handler = StreamHandler(stream=stream, formatter=JsonFormatter())

        handler.handle(LogRecord(LogLevel.INFO, "hello"))

        assert orjson.loads(stream.getvalue())["message"] == "hello"


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def restore(self):
        yield
        configure_logging(level=LogLevel.WARNING, stream=sys.stderr)

    def test_library_loggers_follow_configuration(self, memory):
        configure_logging(level="DEBUG", handlers=[memory])

        RuleRegistry().parser.parse("required|email")

        assert "Parsed rule string" in memory.messages()

    def test_get_logger_returns_same_instance(self):
        assert get_logger("validex.test") is get_logger("validex.test")
