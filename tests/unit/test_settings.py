import pytest
from pydantic import ValidationError

from trustgate.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_reputation_provider(self) -> None:
        s = Settings()
        assert s.reputation_provider == "virustotal"

    def test_default_poll_schedule(self) -> None:
        s = Settings()
        assert s.reputation_poll_interval_seconds == 3.0
        assert s.reputation_max_poll_attempts == 5

    def test_default_size_limits(self) -> None:
        s = Settings()
        assert s.max_file_size_mb == 15
        assert s.max_batch_size_mb == 20

    def test_default_delivery_delays(self) -> None:
        s = Settings()
        assert s.batch_delivery_delay_seconds == 1.0
        assert s.url_delivery_delay_seconds == 0.8

    def test_default_text_limits(self) -> None:
        s = Settings()
        assert s.text_max_length == 100
        assert s.code_max_length == 5000


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REPUTATION_API_KEY", "secret-key")
        s = Settings()
        assert s.reputation_api_key == "secret-key"

    def test_loads_max_poll_attempts(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REPUTATION_MAX_POLL_ATTEMPTS", "7")
        s = Settings()
        assert s.reputation_max_poll_attempts == 7


class TestSettingsValidation:
    def test_invalid_file_size_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_FILE_SIZE_MB", "huge")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_poll_interval_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REPUTATION_POLL_INTERVAL_SECONDS", "soon")
        with pytest.raises(ValidationError):
            Settings()
