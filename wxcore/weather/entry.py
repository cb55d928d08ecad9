# ABOUTME: Capability interfaces implemented by every observation backing
# ABOUTME: Backings supply raw accessors; derived quantities delegate to wxcore.weather.derived

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from wxcore.units.quantities import (
    Altitude,
    Direction,
    Distance,
    Fraction,
    Pressure,
    SpecificEnergy,
    Speed,
    Temperature,
)
from wxcore.weather import derived
from wxcore.weather.components import Layer, Precip, SkyCoverage, Station, Wind
from wxcore.weather.present_weather import Wx


class LayerContractError(RuntimeError):
    """An observation declared a layer it cannot return"""


class WxEntryLayer(ABC):
    """
    Readings at one vertical level.

    Only layer() and station() are required. Dewpoint and relative humidity
    are quasi-calculated: a backing supplies whichever it measured through
    native_dewpoint() / native_relative_humidity() and the other is derived.
    """

    @abstractmethod
    def layer(self) -> Layer:
        ...

    @abstractmethod
    def station(self) -> Station:
        ...

    # Optional fields

    def temperature(self) -> Optional[Temperature]:
        return None

    def pressure(self) -> Optional[Pressure]:
        return None

    def visibility(self) -> Optional[Distance]:
        return None

    def wind(self) -> Optional[Wind]:
        return None

    def native_dewpoint(self) -> Optional[Temperature]:
        return None

    def native_relative_humidity(self) -> Optional[Fraction]:
        return None

    # Quasi-calculated fields

    def dewpoint(self) -> Optional[Temperature]:
        return derived.dewpoint(self)

    def relative_humidity(self) -> Optional[Fraction]:
        return derived.relative_humidity(self)

    # Calculated fields

    def wind_speed(self) -> Optional[Speed]:
        return derived.wind_speed(self)

    def wind_direction(self) -> Optional[Direction]:
        return derived.wind_direction(self)

    def height_agl(self) -> Optional[Altitude]:
        return derived.height_agl(self)

    def height_msl(self) -> Optional[Altitude]:
        return derived.height_msl(self)

    def sea_level_pressure(self) -> Optional[Pressure]:
        return derived.sea_level_pressure(self)

    def wind_chill_valid(self) -> Optional[bool]:
        return derived.wind_chill_valid(self)

    def wind_chill(self) -> Optional[Temperature]:
        return derived.wind_chill(self)

    def heat_index_valid(self) -> Optional[bool]:
        return derived.heat_index_valid(self)

    def heat_index(self) -> Optional[Temperature]:
        return derived.heat_index(self)

    def apparent_temperature(self) -> Optional[Temperature]:
        return derived.apparent_temperature(self)

    def theta_e(self, altimeter: Optional[Pressure] = None) -> Optional[Temperature]:
        return derived.theta_e(self, altimeter)


L = TypeVar("L", bound=WxEntryLayer)


class WxEntry(ABC, Generic[L]):
    """
    One timestamped observation from one station.

    Required: date_time(), station(), layer() and layers(). Every
    observation-wide attribute is optional and defaults to None.
    """

    @abstractmethod
    def date_time(self) -> datetime:
        ...

    @abstractmethod
    def station(self) -> Station:
        ...

    @abstractmethod
    def layer(self, layer: Layer) -> Optional[L]:
        ...

    @abstractmethod
    def layers(self) -> List[Layer]:
        ...

    # Optional fields

    def skycover(self) -> Optional[SkyCoverage]:
        return None

    def wx_codes(self) -> Optional[List[str]]:
        return None

    def raw_metar(self) -> Optional[str]:
        return None

    def precip_today(self) -> Optional[Precip]:
        return None

    def precip(self) -> Optional[Precip]:
        return None

    def precip_probability(self) -> Optional[Fraction]:
        return None

    def altimeter(self) -> Optional[Pressure]:
        return None

    def cape(self) -> Optional[SpecificEnergy]:
        return None

    # Calculated fields

    def wx(self) -> Optional[Wx]:
        return derived.present_weather(self)

    def best_slp(self) -> Optional[Pressure]:
        return derived.best_sea_level_pressure(self)

    def station_pressure_from_altimeter(self) -> Optional[Pressure]:
        return derived.station_pressure_from_altimeter(self)

    def mslp_from_altimeter(self) -> Optional[Pressure]:
        return derived.mslp_from_altimeter(self)

    def date_time_local(self) -> datetime:
        return derived.date_time_local(self)

    def latitude(self) -> float:
        return self.station().coords.latitude

    # Accessors

    def sealevel(self) -> Optional[L]:
        return self.layer(Layer.SEA_LEVEL)

    def surface(self) -> Optional[L]:
        return self.layer(Layer.NEAR_SURFACE)

    def indoor(self) -> Optional[L]:
        return self.layer(Layer.INDOOR)

    def to_struct(self):
        """
        Materialize into a dense WxEntryStruct.

        Raises:
            LayerContractError: if a layer listed by layers() is missing
        """
        from wxcore.weather.models import materialize

        return materialize(self)
