# ABOUTME: Building blocks shared by every observation backing
# ABOUTME: Station identity, vertical layers, wind, sky cover, precipitation and sparse-store tags

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from zoneinfo import ZoneInfo

from wxcore.units.quantities import (
    Altitude,
    Direction,
    Distance,
    DistanceUnit,
    Fraction,
    PrecipAmount,
    PrecipUnit,
    Pressure,
    SpecificEnergy,
    Speed,
    Temperature,
)


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True, eq=False)
class Station:
    """
    Where observations come from. Built once by an adapter and shared by
    reference with every observation and layer it produces; never mutated.
    """
    name: str
    altitude: Altitude
    coords: Coordinates
    time_zone: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "altitude": self.altitude.to_dict(),
            "coords": self.coords.to_dict(),
            "time_zone": self.time_zone.key,
        }


class LayerKind(Enum):
    ALL = "All"
    INDOOR = "Indoor"
    NEAR_SURFACE = "NearSurface"
    SEA_LEVEL = "SeaLevel"
    AGL = "AGL"
    MSL = "MSL"
    MBAR = "MBAR"


_PARAMETERIZED = {LayerKind.AGL, LayerKind.MSL, LayerKind.MBAR}
_LAYER_KEY = re.compile(r"^(AGL|MSL|MBAR)\((-?\d+)\)$")


@dataclass(frozen=True)
class Layer:
    """
    Vertical reference level of a measurement.

    AGL and MSL levels are metres, MBAR levels are millibars.
    """
    kind: LayerKind
    level: Optional[int] = None

    def __post_init__(self):
        if (self.kind in _PARAMETERIZED) != (self.level is not None):
            raise ValueError(f"Layer {self.kind.value} got level {self.level!r}")
        if self.level is not None and (isinstance(self.level, bool) or not isinstance(self.level, int)):
            raise ValueError(f"Layer level must be a whole number, got {self.level!r}")

    @classmethod
    def agl(cls, metres: int) -> "Layer":
        return cls(LayerKind.AGL, metres)

    @classmethod
    def msl(cls, metres: int) -> "Layer":
        return cls(LayerKind.MSL, metres)

    @classmethod
    def mbar(cls, millibars: int) -> "Layer":
        return cls(LayerKind.MBAR, millibars)

    def height_agl(self, station_altitude: Altitude) -> Optional[Altitude]:
        """Height above ground in metres; None for barometric levels"""
        kind = self.kind
        if kind is LayerKind.ALL:
            return Distance(math.nan, DistanceUnit.METER)
        if kind is LayerKind.INDOOR:
            return Distance(1.0, DistanceUnit.METER)
        if kind is LayerKind.NEAR_SURFACE:
            return Distance(2.0, DistanceUnit.METER)
        if kind is LayerKind.SEA_LEVEL:
            return -station_altitude.convert(DistanceUnit.METER)
        if kind is LayerKind.AGL:
            return Distance(self.level, DistanceUnit.METER)
        if kind is LayerKind.MSL:
            return Distance(self.level, DistanceUnit.METER) - station_altitude
        return None

    def key(self) -> str:
        """Stable string form used as a JSON object key"""
        if self.level is None:
            return self.kind.value
        return f"{self.kind.value}({self.level})"

    @classmethod
    def parse(cls, key: str) -> "Layer":
        for kind in LayerKind:
            if kind not in _PARAMETERIZED and key == kind.value:
                return cls(kind)
        match = _LAYER_KEY.match(key)
        if match is None:
            raise ValueError(f"Unknown layer '{key}'")
        return cls(LayerKind(match.group(1)), int(match.group(2)))

    def __str__(self) -> str:
        if self.kind is LayerKind.ALL:
            return ""
        if self.kind is LayerKind.NEAR_SURFACE:
            return "Near Surface"
        if self.kind is LayerKind.SEA_LEVEL:
            return "Sea Level"
        if self.kind is LayerKind.AGL:
            return f"{self.level} m AGL"
        if self.kind is LayerKind.MSL:
            return f"{self.level} m MSL"
        if self.kind is LayerKind.MBAR:
            return f"{self.level} mb"
        return self.kind.value


Layer.ALL = Layer(LayerKind.ALL)
Layer.INDOOR = Layer(LayerKind.INDOOR)
Layer.NEAR_SURFACE = Layer(LayerKind.NEAR_SURFACE)
Layer.SEA_LEVEL = Layer(LayerKind.SEA_LEVEL)


@dataclass(frozen=True, eq=False)
class Wind:
    speed: Speed
    direction: Optional[Direction] = None

    def __str__(self) -> str:
        if self.direction is not None:
            return f"{self.direction.degrees}°@{self.speed}"
        return str(self.speed)

    def to_dict(self) -> dict:
        data = {"speed": self.speed.to_dict()}
        if self.direction is not None:
            data["direction"] = self.direction.to_dict()
        return data


class CloudLayerCoverage(Enum):
    FEW = "FEW"
    SCATTERED = "SCT"
    BROKEN = "BKN"
    OVERCAST = "OVC"

    @property
    def oktas(self) -> int:
        return _OKTAS[self]


_OKTAS = {
    CloudLayerCoverage.FEW: 1,
    CloudLayerCoverage.SCATTERED: 3,
    CloudLayerCoverage.BROKEN: 6,
    CloudLayerCoverage.OVERCAST: 8,
}

CLEAR_CODES = ("SKC", "CLR")


@dataclass(frozen=True)
class CloudLayer:
    coverage: CloudLayerCoverage
    height: int  # feet

    @classmethod
    def from_code(cls, code: str, height: int) -> Optional["CloudLayer"]:
        """
        Parse a METAR coverage code.

        Returns:
            CloudLayer, or None for the clear-sky codes SKC and CLR

        Raises:
            ValueError: on any other unknown code
        """
        if code in CLEAR_CODES:
            return None
        try:
            coverage = CloudLayerCoverage(code)
        except ValueError:
            raise ValueError(f"Unknown cloud cover string '{code}'") from None
        return cls(coverage, int(height))

    def __str__(self) -> str:
        return f"{self.coverage.value}@{self.height} ft"

    def to_dict(self) -> dict:
        return {"coverage": self.coverage.value, "height": self.height}


CLEAR_MARKER = "CLR"


@dataclass(frozen=True)
class SkyCoverage:
    """Clear sky (no layers) or a list of cloud layers"""
    layers: tuple = ()

    @classmethod
    def clear(cls) -> "SkyCoverage":
        return cls()

    @property
    def is_clear(self) -> bool:
        return not self.layers

    def oktas(self) -> int:
        if self.is_clear:
            return 0
        return max(layer.coverage.oktas for layer in self.layers)

    def __str__(self) -> str:
        if self.is_clear:
            return CLEAR_MARKER
        return ", ".join(str(layer) for layer in self.layers)

    def to_json_value(self):
        if self.is_clear:
            return CLEAR_MARKER
        return [layer.to_dict() for layer in self.layers]


@dataclass(frozen=True, eq=False)
class Precip:
    unknown: PrecipAmount
    rain: PrecipAmount
    snow: PrecipAmount

    @classmethod
    def unclassified(cls, amount: PrecipAmount) -> "Precip":
        zero = PrecipAmount(0.0, amount.unit)
        return cls(unknown=amount, rain=zero, snow=zero)

    def convert(self, unit: PrecipUnit) -> "Precip":
        return Precip(self.unknown.convert(unit), self.rain.convert(unit), self.snow.convert(unit))

    def __str__(self) -> str:
        return f"Rain: {self.rain}, Snow: {self.snow}, Unknown: {self.unknown}"

    def to_dict(self) -> dict:
        return {
            "unknown": self.unknown.to_dict(),
            "rain": self.rain.to_dict(),
            "snow": self.snow.to_dict(),
        }


class Param(Enum):
    """
    Attribute kinds of the sparse store, each bound to the one value type it
    may hold. Together with a Layer this forms the store key.
    """
    TEMPERATURE = ("temperature", Temperature)
    PRESSURE = ("pressure", Pressure)
    VISIBILITY = ("visibility", Distance)
    DEWPOINT = ("dewpoint", Temperature)
    RELATIVE_HUMIDITY = ("relative_humidity", Fraction)
    WIND_SPEED = ("wind_speed", Speed)
    WIND_DIRECTION = ("wind_direction", Direction)
    WIND = ("wind", Wind)
    SKY_COVER = ("skycover", SkyCoverage)
    WX_CODES = ("wx_codes", tuple)
    RAW_METAR = ("raw_metar", str)
    PRECIP_TODAY = ("precip_today", Precip)
    PRECIP = ("precip", Precip)
    PRECIP_PROBABILITY = ("precip_probability", Fraction)
    ALTIMETER = ("altimeter", Pressure)
    CAPE = ("cape", SpecificEnergy)

    @property
    def value_type(self) -> type:
        return self.value[1]
