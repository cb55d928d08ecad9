# ABOUTME: Sparse observation store keyed by (layer, attribute) for adapters
# ABOUTME: Each attribute tag fixes its value type, so reads never see a mismatched value

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from wxcore.units.quantities import Direction, Distance, Fraction, Pressure, SpecificEnergy, Speed, Temperature
from wxcore.weather.components import Layer, Param, Precip, SkyCoverage, Station, Wind
from wxcore.weather.entry import WxEntry, WxEntryLayer
from wxcore.weather.present_weather import Wx


class HashMapWx(WxEntry["LayerHash"]):
    """
    Observation that only holds the fields an adapter actually saw.

    Built incrementally with put() / put_opt(), then frozen before anyone
    reads it. Observation-wide attributes live under Layer.ALL.
    """

    def __init__(self, date_time: datetime, station: Station):
        self._date_time = date_time
        self._station = station
        self._data: Dict[Tuple[Layer, Param], Any] = {}
        self._frozen = False

    def put(self, layer: Layer, param: Param, value: Any) -> None:
        """
        Store a value for (layer, param).

        Raises:
            TypeError: if the value is not of the type bound to param
            ValueError: if a present-weather code is malformed
            RuntimeError: if the store has been frozen
        """
        if self._frozen:
            raise RuntimeError("HashMapWx is frozen; it can no longer be written")
        if param is Param.WX_CODES and isinstance(value, list):
            value = tuple(value)
        if not isinstance(value, param.value_type):
            raise TypeError(
                f"{param.name} expects {param.value_type.__name__}, got {type(value).__name__}"
            )
        if param is Param.WX_CODES:
            for code in value:
                Wx.parse_code(code)
        self._data[(layer, param)] = value

    def put_opt(self, layer: Layer, param: Param, value: Optional[Any]) -> None:
        """Same as put, but a None value stores nothing"""
        if value is not None:
            self.put(layer, param, value)

    def get(self, layer: Layer, param: Param) -> Optional[Any]:
        value = self._data.get((layer, param))
        if value is None or not isinstance(value, param.value_type):
            return None
        return value

    def freeze(self) -> "HashMapWx":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"HashMapWx({self._date_time.isoformat()}, {self._station.name}, {len(self._data)} values)"

    # WxEntry

    def date_time(self) -> datetime:
        return self._date_time

    def station(self) -> Station:
        return self._station

    def layer(self, layer: Layer) -> "LayerHash":
        return LayerHash(layer, self)

    def layers(self) -> List[Layer]:
        seen = []
        for layer, _ in self._data:
            if layer not in seen:
                seen.append(layer)
        return seen

    def skycover(self) -> Optional[SkyCoverage]:
        return self.get(Layer.ALL, Param.SKY_COVER)

    def wx_codes(self) -> Optional[List[str]]:
        codes = self.get(Layer.ALL, Param.WX_CODES)
        return list(codes) if codes is not None else None

    def raw_metar(self) -> Optional[str]:
        return self.get(Layer.ALL, Param.RAW_METAR)

    def precip_today(self) -> Optional[Precip]:
        return self.get(Layer.ALL, Param.PRECIP_TODAY)

    def precip(self) -> Optional[Precip]:
        return self.get(Layer.ALL, Param.PRECIP)

    def precip_probability(self) -> Optional[Fraction]:
        return self.get(Layer.ALL, Param.PRECIP_PROBABILITY)

    def altimeter(self) -> Optional[Pressure]:
        return self.get(Layer.ALL, Param.ALTIMETER)

    def cape(self) -> Optional[SpecificEnergy]:
        return self.get(Layer.ALL, Param.CAPE)


class LayerHash(WxEntryLayer):
    """View of one layer of a HashMapWx"""

    def __init__(self, layer: Layer, data: HashMapWx):
        self._layer = layer
        self._data = data

    def _get(self, param: Param) -> Optional[Any]:
        return self._data.get(self._layer, param)

    def layer(self) -> Layer:
        return self._layer

    def station(self) -> Station:
        return self._data.station()

    def temperature(self) -> Optional[Temperature]:
        return self._get(Param.TEMPERATURE)

    def pressure(self) -> Optional[Pressure]:
        return self._get(Param.PRESSURE)

    def visibility(self) -> Optional[Distance]:
        return self._get(Param.VISIBILITY)

    def native_dewpoint(self) -> Optional[Temperature]:
        return self._get(Param.DEWPOINT)

    def native_relative_humidity(self) -> Optional[Fraction]:
        return self._get(Param.RELATIVE_HUMIDITY)

    def wind_speed(self) -> Optional[Speed]:
        speed = self._get(Param.WIND_SPEED)
        if speed is not None:
            return speed
        wind = self._get(Param.WIND)
        return wind.speed if wind is not None else None

    def wind_direction(self) -> Optional[Direction]:
        direction = self._get(Param.WIND_DIRECTION)
        if direction is not None:
            return direction
        wind = self._get(Param.WIND)
        return wind.direction if wind is not None else None

    def wind(self) -> Optional[Wind]:
        wind = self._get(Param.WIND)
        if wind is not None:
            return wind
        speed = self._get(Param.WIND_SPEED)
        if speed is None:
            return None
        return Wind(speed=speed, direction=self._get(Param.WIND_DIRECTION))
