"""Tests for structlog setup."""

import pytest
import structlog

from eligibility_agents.config import EngineSettings, ReconciliationConfig
from eligibility_agents.logging_config import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_development_uses_console_renderer(self):
        configure_logging(EngineSettings(env="development"))

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_other_environments_emit_json(self):
        settings = EngineSettings(env="production", reconciliation=ReconciliationConfig(api_key="k"))
        configure_logging(settings)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert structlog.contextvars.merge_contextvars in processors
