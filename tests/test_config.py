"""Tests for environment-driven configuration."""

import pytest

from eml_triage.config import TriageConfig

_ENV_KEYS = (
    "REDACT_EMAILS",
    "REDACT_PHONES",
    "REDACT_CREDIT_CARDS",
    "REDACT_SSN",
    "REDACT_NAMES",
    "REDACT_CUSTOM_PATTERNS",
    "REPORT_DEFANG",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestFromEnv:
    def test_defaults(self, tmp_path):
        config = TriageConfig.from_env(str(tmp_path / "missing.env"))
        assert config == TriageConfig()
        assert config.report_defang is True
        assert config.log_file is None

    def test_environment_values(self, tmp_path, monkeypatch):
        monkeypatch.setenv("REDACT_SSN", "false")
        monkeypatch.setenv("REDACT_PHONES", "0")
        monkeypatch.setenv("REDACT_NAMES", "yes")
        monkeypatch.setenv("REDACT_CUSTOM_PATTERNS", r"ABC-\d+;;;;secret")
        monkeypatch.setenv("REPORT_DEFANG", "off")
        monkeypatch.setenv("LOG_FILE", "/tmp/triage.log")
        config = TriageConfig.from_env(str(tmp_path / "missing.env"))
        assert config.redact_ssn is False
        assert config.redact_phones is False
        assert config.redact_names is True
        assert config.custom_patterns == (r"ABC-\d+", "secret")
        assert config.report_defang is False
        assert config.log_file == "/tmp/triage.log"

    def test_blank_value_keeps_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("REDACT_EMAILS", "  ")
        assert TriageConfig.from_env(str(tmp_path / "missing.env")).redact_emails is True

    def test_dotenv_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "# triage settings\nREDACT_NAMES='no'\nREDACT_CUSTOM_PATTERNS=\"foo;;bar\"\nnot a setting\n",
            encoding="utf-8",
        )
        config = TriageConfig.from_env(str(env_file))
        assert config.redact_names is False
        assert config.custom_patterns == ("foo", "bar")

    def test_environment_wins_over_dotenv(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("REDACT_SSN=false\n", encoding="utf-8")
        monkeypatch.setenv("REDACT_SSN", "true")
        assert TriageConfig.from_env(str(env_file)).redact_ssn is True


class TestRedactionOptions:
    def test_conversion(self):
        config = TriageConfig(redact_phones=False, custom_patterns=("x", "y"))
        options = config.redaction_options()
        assert options.redact_phones is False
        assert options.redact_emails is True
        assert options.custom_patterns == ["x", "y"]
