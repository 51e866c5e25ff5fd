"""
Tests for environment-driven configuration and the central logger.
"""

import logging

import pytest

from fieldgrade.config import Config, GradingConfig, LogConfig, get_config
from fieldgrade.utils.logger import GraderLogger, get_logger, setup_logger


@pytest.fixture
def clean_env(monkeypatch):
    """Known values for every GRADER_* variable, restored afterwards."""
    monkeypatch.setenv("GRADER_LOG_LEVEL", "INFO")
    monkeypatch.setenv("GRADER_LOG_DIR", "")
    monkeypatch.setenv("GRADER_DATE_TIME_FORMAT", "%Y-%m-%d %H:%M")
    monkeypatch.setenv("GRADER_RULES_DIR", "configs/rules")
    return monkeypatch


class TestSubConfigs:
    """Test dataclass validation."""

    def test_log_level_normalized(self):
        assert LogConfig(level=" debug ").level == "DEBUG"

    def test_bad_log_level(self):
        with pytest.raises(ValueError, match="GRADER_LOG_LEVEL must be one of"):
            LogConfig(level="LOUD")

    def test_blank_log_dir_is_console_only(self):
        assert LogConfig(log_dir="  ").log_dir is None

    def test_date_time_format_needs_directives(self):
        with pytest.raises(ValueError, match="strftime format"):
            GradingConfig(date_time_format="yyyy-MM-dd")


class TestConfig:
    """Test loading from the environment and .env files."""

    def test_defaults(self, fresh_config, clean_env, tmp_path):
        config = Config(str(tmp_path / "missing.env"))

        assert config.log.level == "INFO"
        assert config.log.log_dir is None
        assert config.grading.date_time_format == "%Y-%m-%d %H:%M"
        assert config.grading.rules_dir == "configs/rules"

    def test_environment_overrides(self, fresh_config, clean_env, tmp_path):
        clean_env.setenv("GRADER_LOG_LEVEL", "warning")
        clean_env.setenv("GRADER_DATE_TIME_FORMAT", "%d/%m/%Y %H:%M")

        config = Config(str(tmp_path / "missing.env"))

        assert config.log.level == "WARNING"
        assert config.grading.date_time_format == "%d/%m/%Y %H:%M"

    def test_env_file_loaded(self, fresh_config, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("GRADER_RULES_DIR=/srv/rules\nGRADER_LOG_LEVEL=ERROR\n", encoding="utf-8")

        config = Config(str(env_file))

        assert config.grading.rules_dir == "/srv/rules"
        assert config.log.level == "ERROR"

    def test_singleton_and_reload(self, fresh_config, clean_env, tmp_path):
        env_file = str(tmp_path / "missing.env")
        first = get_config(env_file)
        assert get_config(env_file) is first

        clean_env.setenv("GRADER_RULES_DIR", "other")
        reloaded = Config.reload(env_file)

        assert reloaded is not first
        assert reloaded.grading.rules_dir == "other"


class TestLogger:
    """Test the central logger."""

    def test_get_logger_is_shared(self):
        assert get_logger() is get_logger()

    def test_setup_logger_replaces_instance(self, tmp_path):
        first = get_logger()
        second = setup_logger(str(tmp_path / "logs"), "DEBUG")
        try:
            assert second is not first
            assert second.main_logger.level == logging.DEBUG
            assert any(p.name.startswith("grader_") for p in (tmp_path / "logs").iterdir())
        finally:
            setup_logger()

    def test_verdict_logged_at_debug(self, caplog):
        logger = setup_logger(log_level="DEBUG")
        try:
            with caplog.at_level(logging.DEBUG, logger="fieldgrade"):
                logger.verdict("callsign", False, 0, "", reason="must not be blank")
        finally:
            setup_logger()

        assert "[FAIL] | key=callsign | points=0 | value='' | reason=must not be blank" in caplog.text

    def test_singleton_class(self):
        assert GraderLogger() is GraderLogger()
