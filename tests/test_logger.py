"""Tests for logging setup and formatters."""

import json
import logging

import pytest

from blocklist_manager.utils.logger import (
    ColoredFormatter,
    JSONFormatter,
    log_execution_time,
    setup_logging,
)


def _record(msg="Failed to import IP to Access Rule", **extra):
    record = logging.LogRecord(
        name="blocklist_manager.services.importer",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    def test_json_formatter_merges_extra_fields(self):
        record = _record(extra_fields={"access_rule_id": "abc", "ip": "10.0.0.1", "error": "boom"})

        data = json.loads(JSONFormatter().format(record))

        assert data["level"] == "WARNING"
        assert data["message"] == "Failed to import IP to Access Rule"
        assert data["ip"] == "10.0.0.1"
        assert data["access_rule_id"] == "abc"

    def test_colored_formatter_appends_fields_and_restores_record(self):
        record = _record(extra_fields={"ip": "10.0.0.1"})
        formatter = ColoredFormatter(fmt="%(levelname)s %(name)s %(message)s")

        line = formatter.format(record)

        assert "ip=10.0.0.1" in line
        assert "\033[33m" in line
        assert record.levelname == "WARNING"
        assert record.name == "blocklist_manager.services.importer"


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def _restore_root(self):
        root = logging.getLogger()
        level = root.level
        yield
        root.handlers = [
            h for h in root.handlers if not isinstance(h.formatter, (JSONFormatter, ColoredFormatter))
        ]
        root.setLevel(level)

    def test_installs_single_json_handler_in_prod(self, monkeypatch):
        monkeypatch.setenv("ENV", "prod")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        setup_logging()
        setup_logging()

        root = logging.getLogger()
        ours = [h for h in root.handlers if isinstance(h.formatter, JSONFormatter)]
        assert len(ours) == 1
        assert root.level == logging.DEBUG

    def test_colored_in_dev_and_bad_level_falls_back_to_info(self, monkeypatch):
        monkeypatch.setenv("ENV", "dev")
        monkeypatch.setenv("LOG_LEVEL", "chatty")

        setup_logging()

        root = logging.getLogger()
        assert any(isinstance(h.formatter, ColoredFormatter) for h in root.handlers)
        assert root.level == logging.INFO


class TestLogExecutionTime:
    @pytest.mark.asyncio
    async def test_coroutine_timed_in_dev(self, monkeypatch, caplog):
        monkeypatch.setenv("ENV", "dev")

        @log_execution_time(level="INFO")
        async def work():
            return 42

        with caplog.at_level(logging.INFO):
            assert await work() == 42
        assert any("Function 'work' executed in" in r.getMessage() for r in caplog.records)

    def test_plain_function_is_rejected(self):
        with pytest.raises(TypeError):
            @log_execution_time
            def work():
                return 42

    @pytest.mark.asyncio
    async def test_async_function_silent_in_prod(self, monkeypatch, caplog):
        monkeypatch.setenv("ENV", "prod")

        @log_execution_time
        async def work():
            return "done"

        with caplog.at_level(logging.DEBUG):
            assert await work() == "done"
        assert not any("executed in" in r.getMessage() for r in caplog.records)
