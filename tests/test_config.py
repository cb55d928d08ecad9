# ABOUTME: Tests for application configuration
# ABOUTME: Validates unit, storage and ingestion defaults and environment overrides

from importlib import reload

from wxcore.config import Config
from wxcore.units.quantities import DistanceUnit, PressureUnit, SpeedUnit, TemperatureUnit


def test_default_units_parse():
    """Default unit preferences are Fahrenheit, millibar, mile, knots and Kelvin"""
    assert TemperatureUnit.parse(Config.UNIT_TEMPERATURE) is TemperatureUnit.FAHRENHEIT
    assert PressureUnit.parse(Config.UNIT_PRESSURE) is PressureUnit.MBAR
    assert DistanceUnit.parse(Config.UNIT_DISTANCE) is DistanceUnit.MILE
    assert SpeedUnit.parse(Config.UNIT_SPEED) is SpeedUnit.KNOTS
    assert TemperatureUnit.parse(Config.UNIT_THETA_E) is TemperatureUnit.KELVIN


def test_storage_defaults():
    """Exports go to data/ and entries are kept for two days"""
    assert Config.DATA_DIR == "data"
    assert Config.TRIM_AGE_DAYS == 2


def test_ingestion_defaults():
    assert Config.ASOS_BASE_URL == "http://mesonet.agron.iastate.edu/json/current.py"
    assert Config.HTTP_TIMEOUT_SECONDS == 10


class TestEnvironmentOverrides:
    """Tests for reading configuration from the environment"""

    def test_values_come_from_environment(self, monkeypatch):
        """Settings are read from environment variables"""
        import wxcore.config

        monkeypatch.setenv("UNIT_TEMPERATURE", "C")
        monkeypatch.setenv("TRIM_AGE_DAYS", "7")
        monkeypatch.setenv("DATA_DIR", "/tmp/wx")
        try:
            reload(wxcore.config)
            from wxcore.config import Config as Reloaded

            assert Reloaded.UNIT_TEMPERATURE == "C"
            assert Reloaded.TRIM_AGE_DAYS == 7
            assert Reloaded.DATA_DIR == "/tmp/wx"
        finally:
            monkeypatch.undo()
            reload(wxcore.config)
