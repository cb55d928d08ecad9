# ABOUTME: Observation backing built from the serialized JSON form
# ABOUTME: Validates structure up front and rejects malformed records instead of defaulting

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from wxcore.units.quantities import (
    Direction,
    Distance,
    Fraction,
    PrecipAmount,
    Pressure,
    SpecificEnergy,
    Speed,
    Temperature,
)
from wxcore.weather.components import (
    CloudLayer,
    CloudLayerCoverage,
    CLEAR_MARKER,
    Coordinates,
    Layer,
    Precip,
    SkyCoverage,
    Station,
    Wind,
)
from wxcore.weather.entry import WxEntry, WxEntryLayer
from wxcore.weather.present_weather import Wx


class WireFormatError(ValueError):
    """A serialized observation is structurally invalid"""


def _require(data: dict, key: str, where: str):
    if not isinstance(data, dict):
        raise WireFormatError(f"{where} must be an object, got {type(data).__name__}")
    if key not in data:
        raise WireFormatError(f"{where} is missing '{key}'")
    return data[key]


def _parse(where: str, parser: Callable, raw):
    try:
        return parser(raw)
    except WireFormatError:
        raise
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise WireFormatError(f"Invalid {where}: {e}") from e


def _optional(data: dict, key: str, where: str, parser: Callable):
    raw = data.get(key)
    if raw is None:
        return None
    return _parse(f"{where}.{key}", parser, raw)


def _parse_datetime(raw: str) -> datetime:
    if not isinstance(raw, str):
        raise TypeError("timestamp must be a string")
    value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if value.tzinfo is None:
        raise ValueError(f"timestamp '{raw}' has no UTC offset")
    return value


def _parse_station(raw: dict) -> Station:
    try:
        time_zone = ZoneInfo(raw.get("time_zone", "UTC"))
    except ZoneInfoNotFoundError as e:
        raise ValueError(f"unknown time zone {raw.get('time_zone')!r}") from e
    coords = raw["coords"]
    return Station(
        name=str(raw["name"]),
        altitude=Distance.from_dict(raw["altitude"]),
        coords=Coordinates(float(coords["latitude"]), float(coords["longitude"])),
        time_zone=time_zone,
    )


def _parse_wind(raw: dict) -> Wind:
    direction = raw.get("direction")
    return Wind(
        speed=Speed.from_dict(raw["speed"]),
        direction=Direction.from_dict(direction) if direction is not None else None,
    )


def _parse_precip(raw: dict) -> Precip:
    return Precip(
        unknown=PrecipAmount.from_dict(raw["unknown"]),
        rain=PrecipAmount.from_dict(raw["rain"]),
        snow=PrecipAmount.from_dict(raw["snow"]),
    )


def _parse_skycover(raw) -> SkyCoverage:
    if raw == CLEAR_MARKER:
        return SkyCoverage.clear()
    if not isinstance(raw, list):
        raise TypeError(f"sky cover must be '{CLEAR_MARKER}' or a list, got {raw!r}")
    return SkyCoverage(tuple(
        CloudLayer(CloudLayerCoverage(item["coverage"]), int(item["height"])) for item in raw
    ))


def _parse_codes(raw) -> List[str]:
    if not isinstance(raw, list) or not all(isinstance(code, str) for code in raw):
        raise TypeError("wx_codes must be a list of strings")
    for code in raw:
        Wx.parse_code(code)
    return list(raw)


def _parse_text(raw) -> str:
    if not isinstance(raw, str):
        raise TypeError("expected a string")
    return raw


@dataclass
class WireWxLayer(WxEntryLayer):
    """One deserialized layer; shares the station of its observation"""
    layer_tag: Layer
    station_ref: Station
    temperature_value: Optional[Temperature] = None
    pressure_value: Optional[Pressure] = None
    visibility_value: Optional[Distance] = None
    wind_value: Optional[Wind] = None
    dewpoint_value: Optional[Temperature] = None
    relative_humidity_value: Optional[Fraction] = None

    @classmethod
    def from_dict(cls, key: str, data: dict, station: Station) -> "WireWxLayer":
        where = f"layers.{key}"
        if not isinstance(data, dict):
            raise WireFormatError(f"{where} must be an object")
        tag = _parse(f"{where} key", Layer.parse, key)
        declared = data.get("layer")
        if declared is not None and declared != key:
            raise WireFormatError(f"{where} declares layer '{declared}'")
        return cls(
            layer_tag=tag,
            station_ref=station,
            temperature_value=_optional(data, "temperature", where, Temperature.from_dict),
            pressure_value=_optional(data, "pressure", where, Pressure.from_dict),
            visibility_value=_optional(data, "visibility", where, Distance.from_dict),
            wind_value=_optional(data, "wind", where, _parse_wind),
            dewpoint_value=_optional(data, "dewpoint", where, Temperature.from_dict),
            relative_humidity_value=_optional(data, "relative_humidity", where, Fraction.from_dict),
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


@dataclass
class WireWx(WxEntry[WireWxLayer]):
    """
    Observation read back from its serialized form (for example an exported
    projection). Derived fields present in the input are ignored and
    recomputed on demand.
    """
    date_time_value: datetime
    station_ref: Station
    layer_map: Dict[Layer, WireWxLayer] = field(default_factory=dict)
    skycover_value: Optional[SkyCoverage] = None
    wx_codes_value: Optional[List[str]] = None
    raw_metar_value: Optional[str] = None
    precip_today_value: Optional[Precip] = None
    precip_value: Optional[Precip] = None
    precip_probability_value: Optional[Fraction] = None
    altimeter_value: Optional[Pressure] = None
    cape_value: Optional[SpecificEnergy] = None

    @classmethod
    def from_dict(cls, data: dict) -> "WireWx":
        """
        Build an observation from a decoded JSON object.

        Raises:
            WireFormatError: on a missing required field, a wrongly typed
                field, an unknown unit or an unparseable layer key
        """
        date_time = _parse("date_time", _parse_datetime, _require(data, "date_time", "observation"))
        station = _parse("station", _parse_station, _require(data, "station", "observation"))

        layers = _require(data, "layers", "observation")
        if not isinstance(layers, dict):
            raise WireFormatError("observation.layers must be an object")
        layer_map = {}
        for key, raw in layers.items():
            layer = WireWxLayer.from_dict(key, raw, station)
            layer_map[layer.layer()] = layer

        return cls(
            date_time_value=date_time,
            station_ref=station,
            layer_map=layer_map,
            skycover_value=_optional(data, "skycover", "observation", _parse_skycover),
            wx_codes_value=_optional(data, "wx_codes", "observation", _parse_codes),
            raw_metar_value=_optional(data, "raw_metar", "observation", _parse_text),
            precip_today_value=_optional(data, "precip_today", "observation", _parse_precip),
            precip_value=_optional(data, "precip", "observation", _parse_precip),
            precip_probability_value=_optional(data, "precip_probability", "observation", Fraction.from_dict),
            altimeter_value=_optional(data, "altimeter", "observation", Pressure.from_dict),
            cape_value=_optional(data, "cape", "observation", SpecificEnergy.from_dict),
        )

    @classmethod
    def from_json(cls, text: str) -> "WireWx":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise WireFormatError(f"Observation is not valid JSON: {e}") from e
        return cls.from_dict(data)

    def date_time(self) -> datetime:
        return self.date_time_value

    def station(self) -> Station:
        return self.station_ref

    def layer(self, layer: Layer) -> Optional[WireWxLayer]:
        return self.layer_map.get(layer)

    def layers(self) -> List[Layer]:
        return list(self.layer_map)

    def skycover(self) -> Optional[SkyCoverage]:
        return self.skycover_value

    def wx_codes(self) -> Optional[List[str]]:
        return list(self.wx_codes_value) if self.wx_codes_value is not None else None

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
