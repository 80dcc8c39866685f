"""Tests for engine settings -- defaults, environment overrides, and validation."""

import logging

import pytest
from pydantic import ValidationError
from transitwire.config import OrbSettings, Settings, get_settings
from transitwire.log import configure_logging

# ---------- Default values ----------


class TestSettingsDefaults:
    def test_observer_is_greenwich(self):
        """Test the default observer is Greenwich."""
        s = Settings()
        assert s.observer_latitude == 51.4769
        assert s.observer_longitude == 0.0005
        assert s.observer_elevation == 0.0

    def test_windows_and_caps(self):
        """Test default window length and caps."""
        s = Settings()
        assert s.window_days == 30
        assert s.impact_limit == 15
        assert s.aspect_list_limit == 8

    def test_ephemeris(self):
        """Test default ephemeris settings."""
        s = Settings()
        assert s.topocentric is False
        assert s.swisseph_ephe_path == ""
        assert s.log_level == "INFO"

    def test_orbs(self):
        """Test default orbs."""
        assert Settings().orbs.as_table() == {
            "conjunction": 10.0,
            "opposition": 10.0,
            "trine": 8.0,
            "square": 8.0,
            "sextile": 6.0,
        }


# ---------- Environment overrides ----------


class TestEnvironmentOverrides:
    def test_scalar_overrides(self, monkeypatch):
        """Test scalar settings read from the environment."""
        monkeypatch.setenv("TRANSITS_WINDOW_DAYS", "14")
        monkeypatch.setenv("TRANSITS_TOPOCENTRIC", "true")
        monkeypatch.setenv("SWISSEPH_EPHE_PATH", "/opt/ephe")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.window_days == 14
        assert s.topocentric is True
        assert s.swisseph_ephe_path == "/opt/ephe"
        assert s.log_level == "DEBUG"

    def test_nested_orb_override(self, monkeypatch):
        """Test a single orb can be overridden."""
        monkeypatch.setenv("TRANSITS_ORBS__SQUARE", "5.5")
        orbs = Settings().orbs
        assert orbs.square == 5.5
        assert orbs.trine == 8.0  # unchanged default

    def test_get_settings_is_cached(self, monkeypatch):
        """Test get_settings returns a cached instance."""
        first = get_settings()
        monkeypatch.setenv("TRANSITS_IMPACT_LIMIT", "3")
        assert get_settings() is first
        assert get_settings().impact_limit == 15


# ---------- Validation ----------


class TestValidation:
    def test_window_must_be_positive(self, monkeypatch):
        """Test a zero window is rejected."""
        monkeypatch.setenv("TRANSITS_WINDOW_DAYS", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_latitude_bounds(self, monkeypatch):
        """Test latitude is bounded."""
        monkeypatch.setenv("TRANSITS_OBSERVER_LATITUDE", "91")
        with pytest.raises(ValidationError):
            Settings()

    def test_negative_orb_rejected(self):
        """Test negative orbs are rejected."""
        with pytest.raises(ValidationError):
            OrbSettings(trine=-1.0)


def test_configure_logging_accepts_names(monkeypatch):
    """Test log levels are read by name with an INFO fallback."""
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    configure_logging("debug")
    configure_logging("nonsense")
    assert calls[0]["level"] == logging.DEBUG
    assert calls[1]["level"] == logging.INFO
