"""
Tests for the ambient stack: logging, correlation IDs, settings, sessions
and exceptions.
"""

import json
import logging

import pytest
from pydantic import ValidationError
from unittest.mock import MagicMock

import shared.config

from persistence.repositories import FilterableRepository
from shared.config.logging import (
    DevelopmentFormatter,
    StructuredFormatter,
    StructuredLogger,
    get_logger,
    setup_logging,
)
from shared.config.settings import Settings
from shared.infrastructure.correlation import (
    CorrelationIdFilter,
    correlation_scope,
    get_correlation_id,
)
from shared.infrastructure.db import build_engine, safe_commit
from shared.utils.exceptions import InvalidFilterError, OutOfRangeError
from tests.models import BlogPost


# =============================================================================
# Correlation Tests
# =============================================================================

class TestCorrelation:
    """Tests for correlation IDs."""

    def test_no_id_outside_scope(self):
        assert get_correlation_id() == ""

    def test_scope_sets_and_resets(self):
        with correlation_scope("job-42") as cid:
            assert cid == "job-42"
            assert get_correlation_id() == "job-42"

        assert get_correlation_id() == ""

    def test_scope_generates_id(self):
        with correlation_scope() as cid:
            assert len(cid) == 36

    def test_filter_adds_id_to_record(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", (), None)

        with correlation_scope("abc"):
            CorrelationIdFilter().filter(record)

        assert record.correlation_id == "abc"

    def test_filter_placeholder_without_scope(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", (), None)

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "-"


# =============================================================================
# Logging Tests
# =============================================================================

class TestStructuredLogging:
    """Tests for the structured logger and formatters."""

    def test_get_logger_returns_structured_logger(self):
        assert isinstance(get_logger("persistence.tests.sample"), StructuredLogger)

    def test_keyword_arguments_become_extra_data(self, caplog):
        logger = get_logger("persistence.tests.extra")

        with caplog.at_level(logging.INFO, logger="persistence.tests.extra"):
            logger.info("Loaded rows", rows=3, alias="bp")

        record = caplog.records[-1]
        assert record.extra_data == {"rows": 3, "alias": "bp"}

    def test_structured_formatter_outputs_json(self):
        record = logging.LogRecord("persistence", logging.INFO, __file__, 1, "Populated", (), None)
        record.extra_data = {"rows": 2}
        record.correlation_id = "abc"

        data = json.loads(StructuredFormatter().format(record))

        assert data["message"] == "Populated"
        assert data["data"] == {"rows": 2}
        assert data["correlation_id"] == "abc"

    def test_development_formatter_includes_data(self):
        record = logging.LogRecord("persistence", logging.DEBUG, __file__, 1, "Populated", (), None)
        record.extra_data = {"rows": 2}

        assert "rows=2" in DevelopmentFormatter().format(record)

    def test_development_formatter_plain_text(self):
        record = logging.LogRecord("persistence", logging.INFO, __file__, 1, "Populated", (), None)
        record.correlation_id = "0123456789abcdef"

        line = DevelopmentFormatter().format(record)

        assert line == "INFO     persistence [01234567]: Populated"

    def test_structured_formatter_skips_placeholder_correlation(self):
        record = logging.LogRecord("persistence", logging.INFO, __file__, 1, "Populated", (), None)
        record.correlation_id = "-"

        data = json.loads(StructuredFormatter().format(record))

        assert "correlation_id" not in data
        assert "data" not in data

    def test_setup_logging_installs_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging()

            assert len(root.handlers) == 1
            handler = root.handlers[0]
            assert any(isinstance(f, CorrelationIdFilter) for f in handler.filters)
            assert isinstance(handler.formatter, DevelopmentFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_repository_logs_population(self, caplog, db_session, seed_posts):
        repo = FilterableRepository(db_session, BlogPost)

        with caplog.at_level(logging.DEBUG, logger="persistence.repositories.filterable"):
            repo.count()

        messages = [r.getMessage() for r in caplog.records]
        assert "Populating result cache" in messages
        populated = next(r for r in caplog.records if r.getMessage() == "Populating result cache")
        assert populated.extra_data["alias"] == "bp"


# =============================================================================
# Exception Tests
# =============================================================================

class TestExceptions:
    """Tests for self-logging library exceptions."""

    def test_out_of_range_logs_error(self, caplog):
        with caplog.at_level(logging.ERROR, logger="shared.utils.exceptions"):
            error = OutOfRangeError(index=4, length=2, entity="BlogPost")

        assert isinstance(error, IndexError)
        assert str(error) == "Cursor index 4 out of range for 2 rows"
        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.extra_data["entity"] == "BlogPost"

    def test_out_of_range_empty_message(self):
        error = OutOfRangeError(index=0, length=0)

        assert "result set is empty" in str(error)

    def test_invalid_filter_context(self):
        error = InvalidFilterError(42)

        assert isinstance(error, TypeError)
        assert error.context["filter_type"] == "int"


# =============================================================================
# Settings and Session Tests
# =============================================================================

class TestSettings:
    """Tests for Settings validation."""

    def test_development_defaults_valid(self):
        assert Settings(environment="development").validate_production_settings() == []

    def test_production_rejects_debug_and_sqlite(self):
        errors = Settings(
            environment="production",
            debug=True,
            database_url="sqlite:///x.db",
        ).validate_production_settings()

        assert len(errors) == 2

    def test_log_level_normalized(self):
        assert Settings(log_level=" warning ").log_level == "WARNING"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_level="verbose")

    def test_unknown_log_level_from_env_rejected(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "VERBOSE")

        with pytest.raises(ValidationError):
            Settings()

    def test_config_package_exports(self):
        assert set(shared.config.__all__) == {
            "settings", "get_settings", "get_logger", "setup_logging", "Limits", "SortDirection",
        }
        assert not hasattr(shared.config, "DATABASE_URL")

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("REPOSITORY_HYDRATE_DEFAULT", "false")

        assert Settings().repository_hydrate_default is False


class TestSessions:
    """Tests for engine and session helpers."""

    def test_build_sqlite_engine(self):
        engine = build_engine("sqlite:///:memory:", echo=False)

        assert engine.dialect.name == "sqlite"
        engine.dispose()

    def test_safe_commit_rolls_back(self):
        db = MagicMock()
        db.commit.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            safe_commit(db)

        db.rollback.assert_called_once()
