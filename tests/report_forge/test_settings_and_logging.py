"""Tests for document settings resolution and structured logging helpers."""

from __future__ import annotations

import io
import json
import logging

import pytest
from pydantic import ValidationError

from ReportForge.Documents import DocumentSettings, copy_stream, get_settings, reset_settings
from ReportForge.Documents.logging import JSONFormatter, StructuredLogger, get_logger, log_event
from ReportForge.Documents.settings import DEFAULT_STORED_EXTENSIONS, LogFormat, LogLevel


class ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def test_defaults():
    settings = DocumentSettings()
    assert settings.copy_buffer_size == 2048
    assert settings.stored_extensions == DEFAULT_STORED_EXTENSIONS
    assert settings.deflate_level == 1
    assert settings.log_level is LogLevel.INFO
    assert settings.log_format is LogFormat.CONSOLE


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("REPORTFORGE_STORED_EXTENSIONS", "gif, .WEBP,gif")
    monkeypatch.setenv("REPORTFORGE_DEFLATE_LEVEL", "9")
    monkeypatch.setenv("REPORTFORGE_LOG_FORMAT", "json")

    settings = DocumentSettings()

    assert settings.stored_extensions == ("gif", "webp")
    assert settings.deflate_level == 9
    assert settings.log_format is LogFormat.JSON


@pytest.mark.parametrize("field, value", [("deflate_level", 0), ("deflate_level", 10), ("copy_buffer_size", 0)])
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValidationError):
        DocumentSettings(**{field: value})


def test_get_settings_is_cached_until_reset(fresh_settings):
    first = get_settings()
    assert get_settings() is first
    custom = DocumentSettings(copy_buffer_size=7)
    reset_settings(custom)
    assert get_settings() is custom


def test_copy_buffer_size_follows_settings(fresh_settings):
    class Sink(io.BytesIO):
        def __init__(self) -> None:
            super().__init__()
            self.sizes = []

        def write(self, data):
            self.sizes.append(len(data))
            return super().write(data)

    reset_settings(DocumentSettings(copy_buffer_size=4))
    sink = Sink()
    copy_stream(io.BytesIO(b"0123456789"), sink)
    assert sink.sizes == [4, 4, 2]


def test_json_formatter_includes_structured_fields():
    record = logging.makeLogRecord(
        {
            "name": "ReportForge.test",
            "levelname": "DEBUG",
            "levelno": logging.DEBUG,
            "msg": "Loaded %s entries",
            "args": (3,),
            "extra_fields": {"entry_count": 3, "bytes": 42},
        }
    )
    payload = json.loads(JSONFormatter().format(record))
    assert payload["message"] == "Loaded 3 entries"
    assert payload["level"] == "DEBUG"
    assert payload["entry_count"] == 3
    assert payload["bytes"] == 42
    assert payload["timestamp"].endswith("Z")


def test_structured_logger_merges_bound_fields():
    base = logging.getLogger("ReportForge.tests.structured")
    base.setLevel(logging.DEBUG)
    handler = ListHandler()
    base.addHandler(handler)
    try:
        adapter = StructuredLogger(base, {"document": "template.xlsx"})
        log_event(adapter, "info", "loaded")
        adapter.bind(stage="render", skipped=None)
        log_event(adapter, "debug", "rendered", bytes=10, document="copy.xlsx")
    finally:
        base.removeHandler(handler)

    assert handler.records[0].extra_fields == {"document": "template.xlsx"}
    assert handler.records[1].extra_fields == {"document": "copy.xlsx", "stage": "render", "bytes": 10}
    assert adapter.base_fields == {"document": "template.xlsx", "stage": "render"}


def test_module_loggers_tag_their_component():
    import ReportForge.Documents.zipped as zipped_module
    import ReportForge.Templating.template as template_module

    assert zipped_module.logger.base_fields["component"] == "store"
    assert template_module.logger.base_fields["component"] == "renderer"


def test_log_event_skips_disabled_levels_and_rejects_unknown():
    base = logging.getLogger("ReportForge.tests.levels")
    base.setLevel(logging.WARNING)
    handler = ListHandler()
    base.addHandler(handler)
    try:
        log_event(base, "debug", "hidden")
        log_event(base, "warning", "shown", code="X")
        with pytest.raises(AttributeError):
            log_event(base, "loud", "nope")
    finally:
        base.removeHandler(handler)

    assert [record.getMessage() for record in handler.records] == ["shown"]


def test_get_logger_reuses_adapter(fresh_settings):
    first = get_logger("ReportForge.tests.reuse", "DEBUG")
    second = get_logger("ReportForge.tests.reuse", base_fields={"component": "store"})
    assert first is second
    assert second.base_fields["component"] == "store"
    assert second.logger.level == logging.INFO
