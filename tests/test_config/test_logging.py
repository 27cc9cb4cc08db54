"""Testes para config.logging.

Cobre: configure_logging, get_logger, ImportRunFilter,
SecretRedactionFilter, create_json_formatter.
"""

from __future__ import annotations

import json
import logging
from datetime import date

import pytest
from pythonjsonlogger.json import JsonFormatter

from app.observability import get_run_id, import_run
from config.logging import (
    FIELD_RENAME_MAP,
    REDACTED,
    REQUIRED_LOG_FIELDS,
    SENSITIVE_KEYS,
    ImportRunFilter,
    SecretRedactionFilter,
    configure_logging,
    create_json_formatter,
    get_logger,
)
from config.logging.config import DEFAULT_SERVICE_NAME, NOISY_LOGGERS, VALID_LOG_LEVELS


def _record(msg: str = "schedule_import_committed", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="app.services.import_committer",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestConfigureLogging:
    """Testes para configure_logging."""

    @pytest.mark.parametrize(
        ("level", "expected"),
        [("INFO", logging.INFO), ("debug", logging.DEBUG), ("ERROR", logging.ERROR)],
    )
    def test_configure_logging_sets_level(self, level: str, expected: int) -> None:
        configure_logging(level=level)

        assert logging.getLogger().level == expected

    def test_configure_logging_invalid_level_raises(self) -> None:
        with pytest.raises(ValueError, match="inválido"):
            configure_logging(level="VERBOSE")

    def test_configure_logging_replaces_handlers_with_filtered_handler(self) -> None:
        configure_logging()
        configure_logging()

        root = logging.getLogger()
        assert len(root.handlers) == 1
        filter_types = {type(f) for f in root.handlers[0].filters}
        assert filter_types == {ImportRunFilter, SecretRedactionFilter}
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_constants(self) -> None:
        assert DEFAULT_SERVICE_NAME == "schedule-sync"
        assert VALID_LOG_LEVELS == {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class TestGetLogger:
    def test_get_logger_same_name_returns_same_instance(self) -> None:
        assert get_logger("app.test") is get_logger("app.test")
        assert get_logger("app.test").name == "app.test"


class TestImportRunFilter:
    """run_id e service em todo record."""

    def test_filter_adds_run_id_from_getter(self) -> None:
        record = _record()

        assert ImportRunFilter("schedule-sync", lambda: "run-001").filter(record) is True
        assert record.run_id == "run-001"
        assert record.service == "schedule-sync"

    def test_filter_preserves_explicit_run_id(self) -> None:
        record = _record(run_id="explicit")

        ImportRunFilter("schedule-sync", lambda: "from-context").filter(record)

        assert record.run_id == "explicit"

    def test_filter_uses_empty_string_without_getter(self) -> None:
        record = _record()

        ImportRunFilter("schedule-sync").filter(record)

        assert record.run_id == ""

    def test_filter_reads_current_import_run(self) -> None:
        log_filter = ImportRunFilter("schedule-sync", get_run_id)

        with import_run("run-ctx") as run_id:
            inside = _record()
            log_filter.filter(inside)
        outside = _record()
        log_filter.filter(outside)

        assert run_id == "run-ctx"
        assert inside.run_id == "run-ctx"
        assert outside.run_id == ""


class TestSecretRedactionFilter:
    """Tokens e verifier nunca chegam ao output."""

    def test_sensitive_keys(self) -> None:
        assert {"access_token", "refresh_token", "code_verifier"} <= SENSITIVE_KEYS

    def test_sensitive_extra_values_are_masked(self) -> None:
        record = _record(access_token="ya29.secret", code_verifier="v" * 64, user_id="user-1")

        assert SecretRedactionFilter().filter(record) is True
        assert record.access_token == REDACTED
        assert record.code_verifier == REDACTED
        assert record.user_id == "user-1"

    def test_formatted_output_has_no_secret(self) -> None:
        record = _record(refresh_token="1//refresh-secret", run_id="r", service="s")
        SecretRedactionFilter().filter(record)

        output = create_json_formatter().format(record)

        assert "refresh-secret" not in output
        assert json.loads(output)["refresh_token"] == REDACTED


class TestCreateJsonFormatter:
    def test_required_fields_and_rename_map(self) -> None:
        assert set(REQUIRED_LOG_FIELDS) == {
            "asctime",
            "levelname",
            "name",
            "message",
            "run_id",
            "service",
        }
        assert FIELD_RENAME_MAP == {"levelname": "level", "name": "logger"}

    def test_json_formatter_formats_record(self) -> None:
        record = _record(run_id="run-1", service="schedule-sync", created_count=3)

        payload = json.loads(create_json_formatter().format(record))

        assert payload["message"] == "schedule_import_committed"
        assert payload["logger"] == "app.services.import_committer"
        assert payload["level"] == "INFO"
        assert payload["run_id"] == "run-1"
        assert payload["service"] == "schedule-sync"
        assert payload["created_count"] == 3

    def test_json_formatter_serializes_dates_and_unknown_objects(self) -> None:
        record = _record(event_date=date(2026, 10, 19), source=_Opaque())

        payload = json.loads(create_json_formatter().format(record))

        assert payload["event_date"] == "2026-10-19"
        assert payload["source"] == "opaque"


class TestNoisyLoggers:
    def test_http_library_loggers_raised_to_warning(self) -> None:
        configure_logging(level="INFO")

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_debug_level_leaves_http_loggers_untouched(self) -> None:
        logging.getLogger("httpx").setLevel(logging.NOTSET)

        configure_logging(level="DEBUG")

        assert logging.getLogger("httpx").level == logging.NOTSET


class _Opaque:
    def __str__(self) -> str:
        return "opaque"
