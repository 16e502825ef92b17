"""Tests for configuration and logging setup."""

from decimal import Decimal

import pytest
import structlog
from pydantic import ValidationError as PydanticValidationError

from dealcheck_core.config import AnalysisSettings, DealCheckConfig
from dealcheck_core.log_config import configure_logging


class TestAnalysisSettings:
    """Test suite for AnalysisSettings."""

    def test_defaults(self):
        settings = AnalysisSettings()
        assert settings.payment_discrepancy_tolerance == Decimal("2")

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("DEALCHECK_ANALYSIS_PAYMENT_DISCREPANCY_TOLERANCE", "0.50")

        settings = AnalysisSettings()

        assert settings.payment_discrepancy_tolerance == Decimal("0.50")

    def test_negative_tolerance_rejected(self):
        with pytest.raises(PydanticValidationError):
            AnalysisSettings(payment_discrepancy_tolerance=Decimal("-1"))


class TestDealCheckConfig:
    """Test suite for DealCheckConfig."""

    def test_defaults(self):
        config = DealCheckConfig()

        assert config.env == "development"
        assert config.log_level == "INFO"
        assert config.log_json is False
        assert config.is_development is True
        assert config.is_production is False
        assert config.is_debug is False
        assert isinstance(config.analysis, AnalysisSettings)

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("DEALCHECK_ENV", "production")
        monkeypatch.setenv("DEALCHECK_LOG_LEVEL", "warning")

        config = DealCheckConfig()

        assert config.env == "production"
        assert config.log_level == "WARNING"
        assert config.is_production is True

    def test_env_is_normalized(self):
        assert DealCheckConfig(env="  Staging ").env == "staging"

    def test_invalid_env(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            DealCheckConfig(env="qa")
        assert "Invalid environment" in str(exc_info.value)

    def test_invalid_log_level(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            DealCheckConfig(log_level="verbose")
        assert "Invalid log level" in str(exc_info.value)

    def test_is_debug(self):
        assert DealCheckConfig(log_level="debug").is_debug is True

    @pytest.mark.parametrize(
        "env,log_json,expected",
        [
            ("development", False, False),
            ("development", True, True),
            ("production", False, True),
            ("test", False, False),
        ],
    )
    def test_use_json_logs(self, env, log_json, expected):
        assert DealCheckConfig(env=env, log_json=log_json).use_json_logs is expected

    def test_nested_analysis_settings(self):
        config = DealCheckConfig(analysis=AnalysisSettings(payment_discrepancy_tolerance=Decimal("5")))
        assert config.analysis.payment_discrepancy_tolerance == Decimal("5")


class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_json_renderer_in_production(self):
        configure_logging(DealCheckConfig(env="production"))

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer_in_development(self):
        configure_logging(DealCheckConfig(env="development"))

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_level_filtering(self, capsys):
        configure_logging(DealCheckConfig(log_level="WARNING", log_json=True))
        logger = structlog.get_logger()

        logger.info("hidden_event")
        logger.warning("shown_event", reason="test")

        out = capsys.readouterr().out
        assert "hidden_event" not in out
        assert '"event": "shown_event"' in out
        assert '"level": "warning"' in out
