# ABOUTME: Dense observation record with an explicit optional slot per field
# ABOUTME: Also the target that every other backing materializes into

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from wxcore.units.quantities import (
    Altitude,
    Distance,
    Fraction,
    Pressure,
    SpecificEnergy,
    Temperature,
)
from wxcore.weather import derived
from wxcore.weather.components import Layer, Precip, SkyCoverage, Station, Wind
from wxcore.weather.entry import LayerContractError, WxEntry, WxEntryLayer
from wxcore.weather.present_weather import Wx


@dataclass
class WxEntryLayerStruct(WxEntryLayer):
    """Per-layer readings stored as plain optional fields"""
    layer_tag: Layer
    station_ref: Station
    temperature_value: Optional[Temperature] = None
    pressure_value: Optional[Pressure] = None
    visibility_value: Optional[Distance] = None
    wind_value: Optional[Wind] = None
    dewpoint_value: Optional[Temperature] = None
    height_msl_value: Optional[Altitude] = None

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

    def height_msl(self) -> Optional[Altitude]:
        if self.height_msl_value is not None:
            return self.height_msl_value
        return derived.height_msl(self)


@dataclass
class WxEntryStruct(WxEntry[WxEntryLayerStruct]):
    """Observation stored as plain optional fields; converting it to a struct is a copy"""
    date_time_value: datetime
    station_ref: Station
    layer_map: Dict[Layer, WxEntryLayerStruct] = field(default_factory=dict)

    skycover_value: Optional[SkyCoverage] = None
    wx_codes_value: Optional[List[str]] = None
    raw_metar_value: Optional[str] = None
    precip_today_value: Optional[Precip] = None
    precip_value: Optional[Precip] = None
    precip_probability_value: Optional[Fraction] = None
    altimeter_value: Optional[Pressure] = None
    cape_value: Optional[SpecificEnergy] = None

    def __post_init__(self):
        for code in self.wx_codes_value or ():
            Wx.parse_code(code)

    def date_time(self) -> datetime:
        return self.date_time_value

    def station(self) -> Station:
        return self.station_ref

    def layer(self, layer: Layer) -> Optional[WxEntryLayerStruct]:
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

    def add_layer(self, layer: WxEntryLayerStruct) -> None:
        self.layer_map[layer.layer()] = layer

    def to_struct(self) -> "WxEntryStruct":
        return WxEntryStruct(
            date_time_value=self.date_time_value,
            station_ref=self.station_ref,
            layer_map=dict(self.layer_map),
            skycover_value=self.skycover_value,
            wx_codes_value=self.wx_codes(),
            raw_metar_value=self.raw_metar_value,
            precip_today_value=self.precip_today_value,
            precip_value=self.precip_value,
            precip_probability_value=self.precip_probability_value,
            altimeter_value=self.altimeter_value,
            cape_value=self.cape_value,
        )


def materialize_layer(layer: WxEntryLayer) -> WxEntryLayerStruct:
    return WxEntryLayerStruct(
        layer_tag=layer.layer(),
        station_ref=layer.station(),
        temperature_value=layer.temperature(),
        pressure_value=layer.pressure(),
        visibility_value=layer.visibility(),
        wind_value=layer.wind(),
        dewpoint_value=layer.dewpoint(),
        height_msl_value=layer.height_msl(),
    )


def materialize(observation: WxEntry) -> WxEntryStruct:
    """
    Pull every accessor of an observation into a WxEntryStruct.

    Raises:
        LayerContractError: if a layer listed by layers() is missing
    """
    layer_map = {}
    for tag in observation.layers():
        layer = observation.layer(tag)
        if layer is None:
            raise LayerContractError(f"Layer {tag.key()} in layers() was not contained in layer()")
        layer_map[layer.layer()] = materialize_layer(layer)

    return WxEntryStruct(
        date_time_value=observation.date_time(),
        station_ref=observation.station(),
        layer_map=layer_map,
        skycover_value=observation.skycover(),
        wx_codes_value=observation.wx_codes(),
        raw_metar_value=observation.raw_metar(),
        precip_today_value=observation.precip_today(),
        precip_value=observation.precip(),
        precip_probability_value=observation.precip_probability(),
        altimeter_value=observation.altimeter(),
        cape_value=observation.cape(),
    )
