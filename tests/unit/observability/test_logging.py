"""Tests for observability/logging.py."""

from __future__ import annotations

import io
import logging
from types import SimpleNamespace

import pytest
import structlog
from structlog.contextvars import get_contextvars

from ats_gate_scoring.observability.logging import (
    _resolve_level,
    bind_scoring_context,
    clear_scoring_context,
    configure_logging,
)


def _make_settings(**overrides: object) -> object:
    """Create a minimal settings stand-in."""
    defaults: dict[str, object] = {"log_format": "console", "log_level": "INFO"}
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_configure_logging_console_mode(self) -> None:
        """Console mode configures without error."""
        configure_logging(_make_settings(log_format="console"))  # type: ignore[arg-type]
        assert structlog.get_logger() is not None
        assert len(logging.getLogger().handlers) == 1

    def test_configure_logging_json_mode(self) -> None:
        """JSON mode renders stdlib records through the shared formatter."""
        configure_logging(_make_settings(log_format="json"))  # type: ignore[arg-type]

        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.getLogger().handlers[0].formatter)
        log = logging.getLogger("test_json_mode")
        log.addHandler(handler)
        log.setLevel(logging.INFO)
        log.info("test_event")
        log.removeHandler(handler)

        output = stream.getvalue()
        assert "{" in output
        assert "test_event" in output

    def test_configure_logging_sets_level(self) -> None:
        """Log level is applied to the root logger."""
        configure_logging(_make_settings(log_level="WARNING"))  # type: ignore[arg-type]
        assert logging.getLogger().level == logging.WARNING

    def test_noisy_libraries_quietened(self) -> None:
        """Third-party loggers never go below WARNING."""
        configure_logging(_make_settings(log_level="DEBUG"))  # type: ignore[arg-type]
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("anthropic").level == logging.WARNING


@pytest.mark.unit
class TestScoringContext:
    """Tests for bind/clear scoring context."""

    def test_bind_and_clear(self) -> None:
        """Identifiers are bound; None values are skipped; clear removes all."""
        clear_scoring_context()
        bind_scoring_context(candidate_id="cand-1", job_id=None, profile="C")
        context = get_contextvars()
        assert context == {"candidate_id": "cand-1", "profile": "C"}
        clear_scoring_context()
        assert get_contextvars() == {}


@pytest.mark.unit
class TestResolveLevel:
    """Tests for _resolve_level."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("CRITICAL", logging.CRITICAL),
            ("debug", logging.DEBUG),
            ("unknown", logging.INFO),
        ],
    )
    def test_resolve_level(self, name: str, expected: int) -> None:
        """Level names resolve to correct logging constants."""
        assert _resolve_level(name) == expected
