"""
ComfortMap Backend — Settings Tests
=====================================

What we test:
    ✅ Geocoder timeout defaults to 10s and can be switched off from the env
    ✅ Log level is normalised and validated
"""

import pytest
from pydantic import ValidationError

from comfortmap.config import Settings


class TestSettings:

    def test_geocoder_timeout_default(self, monkeypatch):
        monkeypatch.delenv("GEOCODER_TIMEOUT", raising=False)
        assert Settings(_env_file=None).geocoder_timeout == 10.0

    def test_geocoder_timeout_none_from_env(self, monkeypatch):
        monkeypatch.setenv("GEOCODER_TIMEOUT", "None")
        assert Settings(_env_file=None).geocoder_timeout is None

    def test_geocoder_timeout_from_env(self, monkeypatch):
        monkeypatch.setenv("GEOCODER_TIMEOUT", "2.5")
        assert Settings(_env_file=None).geocoder_timeout == 2.5

    def test_log_level_is_uppercased(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
