# ABOUTME: Tests for the sparse (layer, attribute) observation store
# ABOUTME: Validates typed writes, freezing, soft reads and wind assembly

from datetime import datetime, timezone

import pytest

from wxcore.units.quantities import (
    Direction,
    Distance,
    DistanceUnit,
    Fraction,
    FractionalUnit,
    Pressure,
    PressureUnit,
    Speed,
    SpeedUnit,
    Temperature,
    TemperatureUnit,
)
from wxcore.weather.components import Coordinates, Layer, Param, SkyCoverage, Station, Wind
from wxcore.weather.models import WxEntryStruct
from wxcore.weather.sparse import HashMapWx

STATION = Station("KLEB", Distance(181, DistanceUnit.METER), Coordinates(43.63, -72.30))
WHEN = datetime(2024, 3, 2, 18, 53, tzinfo=timezone.utc)


class TestHashMapWx:
    """Tests for building and reading the sparse store"""

    def setup_method(self):
        """Fresh store for each test"""
        self.wx = HashMapWx(WHEN, STATION)

    def test_put_and_get(self):
        temperature = Temperature(28, TemperatureUnit.FAHRENHEIT)
        self.wx.put(Layer.NEAR_SURFACE, Param.TEMPERATURE, temperature)
        assert self.wx.get(Layer.NEAR_SURFACE, Param.TEMPERATURE) is temperature
        assert self.wx.surface().temperature() is temperature

    def test_put_rejects_wrong_type(self):
        """A pressure cannot be stored under the temperature tag"""
        with pytest.raises(TypeError):
            self.wx.put(Layer.NEAR_SURFACE, Param.TEMPERATURE, Pressure(1000, PressureUnit.MBAR))

    def test_put_rejects_bare_numbers(self):
        with pytest.raises(TypeError):
            self.wx.put(Layer.NEAR_SURFACE, Param.WIND_SPEED, 12.0)

    def test_missing_value_reads_as_none(self):
        assert self.wx.get(Layer.NEAR_SURFACE, Param.DEWPOINT) is None
        assert self.wx.surface().dewpoint() is None
        assert self.wx.altimeter() is None

    def test_put_opt_skips_none(self):
        self.wx.put_opt(Layer.ALL, Param.RAW_METAR, None)
        assert len(self.wx) == 0
        self.wx.put_opt(Layer.ALL, Param.RAW_METAR, "KLEB 021853Z AUTO 00000KT")
        assert self.wx.raw_metar() == "KLEB 021853Z AUTO 00000KT"

    def test_frozen_store_rejects_writes(self):
        frozen = self.wx.freeze()
        assert frozen is self.wx
        assert frozen.frozen
        with pytest.raises(RuntimeError):
            frozen.put(Layer.ALL, Param.RAW_METAR, "late")

    def test_layers_in_insertion_order_without_duplicates(self):
        self.wx.put(Layer.NEAR_SURFACE, Param.TEMPERATURE, Temperature(0, TemperatureUnit.CELSIUS))
        self.wx.put(Layer.ALL, Param.SKY_COVER, SkyCoverage.clear())
        self.wx.put(Layer.NEAR_SURFACE, Param.DEWPOINT, Temperature(-3, TemperatureUnit.CELSIUS))
        assert self.wx.layers() == [Layer.NEAR_SURFACE, Layer.ALL]

    def test_observation_wide_values_live_under_all(self):
        self.wx.put(Layer.ALL, Param.ALTIMETER, Pressure(30.02, PressureUnit.INHG))
        self.wx.put(Layer.ALL, Param.SKY_COVER, SkyCoverage.clear())
        assert self.wx.altimeter() == Pressure(30.02, PressureUnit.INHG)
        assert self.wx.skycover().is_clear

    def test_wx_codes_accept_lists(self):
        self.wx.put(Layer.ALL, Param.WX_CODES, ["-SN", "BR"])
        assert self.wx.wx_codes() == ["-SN", "BR"]
        assert self.wx.wx().fog

    def test_malformed_wx_code_rejected_on_put(self):
        """A bad present-weather code fails when it is stored, not when it is read"""
        with pytest.raises(ValueError):
            self.wx.put(Layer.ALL, Param.WX_CODES, ["-SN", "ra!"])
        assert self.wx.wx_codes() is None

    def test_wind_assembled_from_speed_and_direction(self):
        self.wx.put(Layer.NEAR_SURFACE, Param.WIND_SPEED, Speed(8, SpeedUnit.KNOTS))
        self.wx.put(Layer.NEAR_SURFACE, Param.WIND_DIRECTION, Direction(200))
        wind = self.wx.surface().wind()
        assert wind.speed == Speed(8, SpeedUnit.KNOTS)
        assert wind.direction.degrees == 200

    def test_wind_param_supplies_components(self):
        self.wx.put(Layer.NEAR_SURFACE, Param.WIND, Wind(Speed(5, SpeedUnit.MPS), Direction(90)))
        layer = self.wx.surface()
        assert layer.wind_speed() == Speed(5, SpeedUnit.MPS)
        assert layer.wind_direction().cardinal == "E"

    def test_direction_without_speed_is_no_wind(self):
        self.wx.put(Layer.NEAR_SURFACE, Param.WIND_DIRECTION, Direction(200))
        assert self.wx.surface().wind() is None
        assert self.wx.surface().wind_direction().degrees == 200

    def test_native_humidity_derives_dewpoint(self):
        self.wx.put(Layer.NEAR_SURFACE, Param.TEMPERATURE, Temperature(20, TemperatureUnit.CELSIUS))
        self.wx.put(Layer.NEAR_SURFACE, Param.RELATIVE_HUMIDITY, Fraction(50, FractionalUnit.PERCENT))
        layer = self.wx.surface()
        assert layer.dewpoint().value == pytest.approx(9.26, abs=0.05)
        assert layer.relative_humidity() == Fraction(50, FractionalUnit.PERCENT)

    def test_zero_humidity_has_no_dewpoint(self):
        self.wx.put(Layer.NEAR_SURFACE, Param.TEMPERATURE, Temperature(20, TemperatureUnit.CELSIUS))
        self.wx.put(Layer.NEAR_SURFACE, Param.RELATIVE_HUMIDITY, Fraction(0, FractionalUnit.PERCENT))
        assert self.wx.surface().dewpoint() is None

    def test_to_struct(self):
        self.wx.put(Layer.NEAR_SURFACE, Param.TEMPERATURE, Temperature(28, TemperatureUnit.FAHRENHEIT))
        self.wx.put(Layer.NEAR_SURFACE, Param.DEWPOINT, Temperature(20, TemperatureUnit.FAHRENHEIT))
        self.wx.put(Layer.ALL, Param.WX_CODES, ("-SN",))
        struct = self.wx.freeze().to_struct()

        assert isinstance(struct, WxEntryStruct)
        assert struct.layers() == [Layer.NEAR_SURFACE, Layer.ALL]
        assert struct.surface().temperature() == Temperature(28, TemperatureUnit.FAHRENHEIT)
        assert struct.surface().dewpoint() == Temperature(20, TemperatureUnit.FAHRENHEIT)
        assert struct.wx_codes() == ["-SN"]
