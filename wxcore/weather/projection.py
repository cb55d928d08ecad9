# ABOUTME: Read-only, fully materialized observation converted to preferred units
# ABOUTME: Used for presentation and export; serializes with absent fields omitted

import json
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from wxcore.config import Config
from wxcore.units.quantities import (
    Altitude,
    Distance,
    DistanceUnit,
    Fraction,
    FractionalUnit,
    Pressure,
    PressureUnit,
    SpecificEnergy,
    SpeedUnit,
    Temperature,
    TemperatureUnit,
)
from wxcore.weather.components import Layer, Precip, SkyCoverage, Station, Wind
from wxcore.weather.entry import WxEntry, WxEntryLayer
from wxcore.weather.present_weather import Wx


@dataclass(frozen=True)
class UnitPreferences:
    """Units the projection converts into"""
    temperature: TemperatureUnit = TemperatureUnit.FAHRENHEIT
    pressure: PressureUnit = PressureUnit.MBAR
    distance: DistanceUnit = DistanceUnit.MILE
    speed: SpeedUnit = SpeedUnit.KNOTS
    theta_e: TemperatureUnit = TemperatureUnit.KELVIN

    @classmethod
    def from_config(cls) -> "UnitPreferences":
        return cls(
            temperature=TemperatureUnit.parse(Config.UNIT_TEMPERATURE),
            pressure=PressureUnit.parse(Config.UNIT_PRESSURE),
            distance=DistanceUnit.parse(Config.UNIT_DISTANCE),
            speed=SpeedUnit.parse(Config.UNIT_SPEED),
            theta_e=TemperatureUnit.parse(Config.UNIT_THETA_E),
        )

    def to_dict(self) -> dict:
        return {
            "temperature": self.temperature.symbol,
            "pressure": self.pressure.symbol,
            "distance": self.distance.symbol,
            "speed": self.speed.symbol,
            "theta_e": self.theta_e.symbol,
        }


def _convert(quantity, unit):
    return quantity.convert(unit) if quantity is not None else None


def _finite(quantity):
    if quantity is None or math.isnan(quantity.value):
        return None
    return quantity


def _put(data: dict, key: str, value) -> None:
    """Add value to data unless absent; quantities become {value, unit}"""
    if value is None:
        return
    if hasattr(value, "to_dict"):
        value = value.to_dict()
    data[key] = value


@dataclass(eq=False)
class WxAllLayer(WxEntryLayer):
    """One layer of a projection; every field was computed when it was built"""
    layer_tag: Layer
    station_ref: Station
    temperature_value: Optional[Temperature] = None
    pressure_value: Optional[Pressure] = None
    visibility_value: Optional[Distance] = None
    wind_value: Optional[Wind] = None
    dewpoint_value: Optional[Temperature] = None
    relative_humidity_value: Optional[Fraction] = None
    height_msl_value: Optional[Altitude] = None
    projected_slp: Optional[Pressure] = None
    wind_chill_valid_value: Optional[bool] = None
    wind_chill_value: Optional[Temperature] = None
    heat_index_valid_value: Optional[bool] = None
    heat_index_value: Optional[Temperature] = None
    apparent_temp: Optional[Temperature] = None
    theta_e_value: Optional[Temperature] = None

    @classmethod
    def from_layer(
        cls,
        layer: WxEntryLayer,
        units: UnitPreferences,
        altimeter: Optional[Pressure] = None,
    ) -> "WxAllLayer":
        wind = layer.wind()
        if wind is not None:
            wind = Wind(speed=wind.speed.convert(units.speed), direction=wind.direction)
        return cls(
            layer_tag=layer.layer(),
            station_ref=layer.station(),
            temperature_value=_convert(layer.temperature(), units.temperature),
            pressure_value=_convert(layer.pressure(), units.pressure),
            visibility_value=_convert(layer.visibility(), units.distance),
            wind_value=wind,
            dewpoint_value=_convert(layer.dewpoint(), units.temperature),
            relative_humidity_value=_convert(layer.relative_humidity(), FractionalUnit.PERCENT),
            height_msl_value=_convert(_finite(layer.height_msl()), units.distance),
            projected_slp=_convert(layer.sea_level_pressure(), units.pressure),
            wind_chill_valid_value=layer.wind_chill_valid(),
            wind_chill_value=_convert(layer.wind_chill(), units.temperature),
            heat_index_valid_value=layer.heat_index_valid(),
            heat_index_value=_convert(layer.heat_index(), units.temperature),
            apparent_temp=_convert(layer.apparent_temperature(), units.temperature),
            theta_e_value=_convert(layer.theta_e(altimeter), units.theta_e),
        )

    def layer(self) -> Layer:
        return self.layer_tag

    def station(self) -> Station:
        return self.station_ref

    def temperature(self) -> Optional[Temperature]:
        return self.temperature_value

    def pressure(self) -> Optional[Pressure]:
        return self.pressure_value

    def visibility(self) -> Optional[Distance]:
        return self.visibility_value

    def wind(self) -> Optional[Wind]:
        return self.wind_value

    def native_dewpoint(self) -> Optional[Temperature]:
        return self.dewpoint_value

    def native_relative_humidity(self) -> Optional[Fraction]:
        return self.relative_humidity_value

    def dewpoint(self) -> Optional[Temperature]:
        return self.dewpoint_value

    def relative_humidity(self) -> Optional[Fraction]:
        return self.relative_humidity_value

    def height_msl(self) -> Optional[Altitude]:
        return self.height_msl_value

    def sea_level_pressure(self) -> Optional[Pressure]:
        return self.projected_slp

    def wind_chill_valid(self) -> Optional[bool]:
        return self.wind_chill_valid_value

    def wind_chill(self) -> Optional[Temperature]:
        return self.wind_chill_value

    def heat_index_valid(self) -> Optional[bool]:
        return self.heat_index_valid_value

    def heat_index(self) -> Optional[Temperature]:
        return self.heat_index_value

    def apparent_temperature(self) -> Optional[Temperature]:
        return self.apparent_temp

    def theta_e(self, altimeter: Optional[Pressure] = None) -> Optional[Temperature]:
        return self.theta_e_value

    def to_dict(self) -> dict:
        data = {"layer": self.layer_tag.key()}
        _put(data, "temperature", self.temperature_value)
        _put(data, "pressure", self.pressure_value)
        _put(data, "visibility", self.visibility_value)
        _put(data, "wind", self.wind_value)
        _put(data, "dewpoint", self.dewpoint_value)
        _put(data, "relative_humidity", self.relative_humidity_value)
        _put(data, "height_msl", self.height_msl_value)
        _put(data, "projected_slp", self.projected_slp)
        _put(data, "wind_chill_valid", self.wind_chill_valid_value)
        _put(data, "wind_chill", self.wind_chill_value)
        _put(data, "heat_index_valid", self.heat_index_valid_value)
        _put(data, "heat_index", self.heat_index_value)
        _put(data, "apparent_temp", self.apparent_temp)
        _put(data, "theta_e", self.theta_e_value)
        return data


@dataclass(eq=False)
class WxAll(WxEntry[WxAllLayer]):
    """
    Every field and derived quantity of an observation, computed once and
    converted into a UnitPreferences set. It derives nothing further itself.
    """
    date_time_value: datetime
    date_time_local_value: datetime
    station_ref: Station
    units: UnitPreferences
    layer_map: Dict[Layer, WxAllLayer] = field(default_factory=dict)
    skycover_value: Optional[SkyCoverage] = None
    wx_codes_value: Optional[List[str]] = None
    wx_value: Optional[Wx] = None
    raw_metar_value: Optional[str] = None
    precip_today_value: Optional[Precip] = None
    precip_value: Optional[Precip] = None
    precip_probability_value: Optional[Fraction] = None
    altimeter_value: Optional[Pressure] = None
    cape_value: Optional[SpecificEnergy] = None
    best_slp_value: Optional[Pressure] = None

    @classmethod
    def from_observation(cls, observation: WxEntry, units: Optional[UnitPreferences] = None) -> "WxAll":
        """
        Materialize an observation of any backing.

        Args:
            observation: Source observation
            units: Target units, defaults to UnitPreferences()
        """
        units = units or UnitPreferences()
        struct = observation.to_struct()
        altimeter = struct.altimeter()

        layer_map = {
            tag: WxAllLayer.from_layer(layer, units, altimeter)
            for tag, layer in struct.layer_map.items()
        }

        return cls(
            date_time_value=struct.date_time(),
            date_time_local_value=struct.date_time_local(),
            station_ref=struct.station(),
            units=units,
            layer_map=layer_map,
            skycover_value=struct.skycover(),
            wx_codes_value=struct.wx_codes(),
            wx_value=struct.wx(),
            raw_metar_value=struct.raw_metar(),
            precip_today_value=struct.precip_today(),
            precip_value=struct.precip(),
            precip_probability_value=struct.precip_probability(),
            altimeter_value=_convert(altimeter, units.pressure),
            cape_value=struct.cape(),
            best_slp_value=_convert(struct.best_slp(), units.pressure),
        )

    def date_time(self) -> datetime:
        return self.date_time_value

    def date_time_local(self) -> datetime:
        return self.date_time_local_value

    def station(self) -> Station:
        return self.station_ref

    def layer(self, layer: Layer) -> Optional[WxAllLayer]:
        return self.layer_map.get(layer)

    def layers(self) -> List[Layer]:
        return list(self.layer_map)

    def skycover(self) -> Optional[SkyCoverage]:
        return self.skycover_value

    def wx_codes(self) -> Optional[List[str]]:
        return list(self.wx_codes_value) if self.wx_codes_value is not None else None

    def wx(self) -> Optional[Wx]:
        return self.wx_value

    def raw_metar(self) -> Optional[str]:
        return self.raw_metar_value

    def precip_today(self) -> Optional[Precip]:
        return self.precip_today_value

    def precip(self) -> Optional[Precip]:
        return self.precip_value

    def precip_probability(self) -> Optional[Fraction]:
        return self.precip_probability_value

    def altimeter(self) -> Optional[Pressure]:
        return self.altimeter_value

    def cape(self) -> Optional[SpecificEnergy]:
        return self.cape_value

    def best_slp(self) -> Optional[Pressure]:
        return self.best_slp_value

    def to_dict(self) -> dict:
        data = {
            "date_time": self.date_time_value.isoformat(),
            "date_time_local": self.date_time_local_value.isoformat(),
            "station": self.station_ref.to_dict(),
            "layers": {tag.key(): layer.to_dict() for tag, layer in self.layer_map.items()},
        }
        if self.skycover_value is not None:
            data["skycover"] = self.skycover_value.to_json_value()
        _put(data, "wx_codes", self.wx_codes())
        _put(data, "wx", self.wx_value)
        _put(data, "raw_metar", self.raw_metar_value)
        _put(data, "precip_today", self.precip_today_value)
        _put(data, "precip", self.precip_value)
        _put(data, "precip_probability", self.precip_probability_value)
        _put(data, "altimeter", self.altimeter_value)
        _put(data, "cape", self.cape_value)
        _put(data, "best_slp", self.best_slp_value)
        return data

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, **kwargs)
