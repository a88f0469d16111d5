"""Tests for environment-driven settings."""

import pytest

from officeids.config import NUMBERS_PER_PREFIX, Settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("OFFICEIDS_MAX_RETRIES", "OFFICEIDS_MAX_CONCURRENT", "OFFICEIDS_STATS_TTL",
                     "FIRESTORE_PROJECT_ID", "FIRESTORE_API_KEY", "FIRESTORE_COLLECTION"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings.from_env()
        assert settings == Settings()
        assert settings.collection == "offices"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("OFFICEIDS_MAX_RETRIES", "4")
        monkeypatch.setenv("OFFICEIDS_MAX_CONCURRENT", "8")
        monkeypatch.setenv("OFFICEIDS_STATS_TTL", "0")
        monkeypatch.setenv("FIRESTORE_PROJECT_ID", "arch-db")
        monkeypatch.setenv("FIRESTORE_COLLECTION", "firms")
        settings = Settings.from_env()
        assert settings.max_retries == 4
        assert settings.max_concurrent == 8
        assert settings.stats_cache_ttl == 0
        assert settings.firestore_project_id == "arch-db"
        assert settings.collection == "firms"

    @pytest.mark.parametrize("value", ["abc", "0", "-2"])
    def test_invalid_retries(self, monkeypatch, value):
        monkeypatch.setenv("OFFICEIDS_MAX_RETRIES", value)
        with pytest.raises(ValueError, match="OFFICEIDS_MAX_RETRIES"):
            Settings.from_env()

    def test_numbers_per_prefix(self):
        assert NUMBERS_PER_PREFIX == 900
