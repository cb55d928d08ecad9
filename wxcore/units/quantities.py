# ABOUTME: Dimensioned quantity types with one class per physical family
# ABOUTME: Proportional units convert by coefficient, temperature converts through Kelvin

import math
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar


class UnitEnum(Enum):
    """Base for unit tags: each member carries a display symbol and parse aliases"""

    @property
    def symbol(self) -> str:
        return self.value[0]

    @property
    def aliases(self) -> tuple:
        return self.value[-1]

    @classmethod
    def parse(cls, text: str):
        """
        Look up a unit by its symbol or one of its aliases.

        Raises:
            ValueError: if the text names no unit of this family
        """
        for unit in cls:
            if text == unit.symbol or text in unit.aliases:
                return unit
        raise ValueError(f"Unknown {cls.__name__} '{text}'")

    def __str__(self) -> str:
        return self.symbol


class ProportionalUnit(UnitEnum):
    """Unit whose conversion to the family reference unit is a fixed coefficient"""

    @property
    def coefficient(self) -> float:
        return self.value[1]


class SpeedUnit(ProportionalUnit):
    MPH = ("mph", 1.609344, ())
    KPH = ("kph", 1.0, ("k/h",))
    KNOTS = ("kts", 1.852, ("kt", "knots", "kn"))
    MPS = ("m/s", 3.6, ("mps",))


class PressureUnit(ProportionalUnit):
    HPA = ("hPa", 1.0, ())
    MBAR = ("mb", 1.0, ("mbar",))
    INHG = ("inHg", 33.86389, ("inhg",))
    PSI = ("psi", 68.94757, ())
    ATM = ("atm", 1013.25, ())


class DistanceUnit(ProportionalUnit):
    METER = ("m", 1.0, ())
    KILOMETER = ("km", 1000.0, ())
    FEET = ("ft", 0.3048, ())
    MILE = ("mi", 1609.344, ())
    NAUTICAL_MILE = ("nmi", 1852.0, ())


class PrecipUnit(ProportionalUnit):
    MM = ("mm", 1.0, ())
    INCH = ("in", 25.4, ())
    CM = ("cm", 10.0, ())


class FractionalUnit(ProportionalUnit):
    PERCENT = ("%", 0.01, ())
    DECIMAL = ("", 1.0, ())
    MILLI = ("1/1000", 0.001, ())


class SpecEnergyUnit(ProportionalUnit):
    JKG = ("J/kg", 1.0, ())
    M2S2 = ("m^2/s^2", 1.0, ())


class TemperatureUnit(UnitEnum):
    KELVIN = ("°K", ("K",))
    FAHRENHEIT = ("°F", ("F",))
    CELSIUS = ("°C", ("C",))


U = TypeVar("U", bound=ProportionalUnit)


HASH_DIGITS = 6


def _check_family(quantity, other) -> None:
    if type(other) is not type(quantity):
        raise TypeError(
            f"Cannot combine {type(quantity).__name__} with {type(other).__name__}"
        )


@dataclass(frozen=True, eq=False)
class ProportionalQuantity(Generic[U]):
    """
    A value tagged with a unit from one proportional family.

    Subclasses pin the family through UNIT_TYPE; a quantity can only be
    converted to, compared with, or combined with quantities of its own class.
    """

    value: float
    unit: U

    UNIT_TYPE = ProportionalUnit

    def __post_init__(self):
        if not isinstance(self.unit, self.UNIT_TYPE):
            raise TypeError(
                f"{type(self).__name__} needs a {self.UNIT_TYPE.__name__}, got {self.unit!r}"
            )
        object.__setattr__(self, "value", float(self.value))

    def convert(self, unit: U) -> "ProportionalQuantity[U]":
        if unit is self.unit:
            return self
        if not isinstance(unit, self.UNIT_TYPE):
            raise TypeError(f"Cannot convert {type(self).__name__} to {unit!r}")
        value = self.value * self.unit.coefficient / unit.coefficient
        return type(self)(value, unit)

    def value_in(self, unit: U) -> float:
        return self.convert(unit).value

    def string_with_unit(self) -> str:
        return f"{self.value:.1f} {self.unit.symbol}"

    def __str__(self) -> str:
        return self.string_with_unit()

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return math.isclose(self.value, other.value_in(self.unit), rel_tol=1e-9, abs_tol=1e-12)

    def __hash__(self) -> int:
        # rounded so values equal across units hash alike
        return hash((type(self), round(self.value * self.unit.coefficient, HASH_DIGITS)))

    def __add__(self, other):
        _check_family(self, other)
        return type(self)(self.value + other.value_in(self.unit), self.unit)

    def __sub__(self, other):
        _check_family(self, other)
        return type(self)(self.value - other.value_in(self.unit), self.unit)

    def __mul__(self, factor: float):
        if isinstance(factor, ProportionalQuantity):
            raise TypeError("Quantities can only be scaled by plain numbers")
        return type(self)(self.value * factor, self.unit)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float):
        if isinstance(divisor, ProportionalQuantity):
            raise TypeError("Quantities can only be scaled by plain numbers")
        return type(self)(self.value / divisor, self.unit)

    def __neg__(self):
        return type(self)(-self.value, self.unit)

    def to_dict(self) -> dict:
        return {"value": self.value, "unit": self.unit.symbol}

    @classmethod
    def from_dict(cls, data: dict):
        """Build a quantity from its serialized {value, unit} form"""
        return cls(float(data["value"]), cls.UNIT_TYPE.parse(data["unit"]))


@dataclass(frozen=True, eq=False)
class Speed(ProportionalQuantity[SpeedUnit]):
    UNIT_TYPE = SpeedUnit


@dataclass(frozen=True, eq=False)
class Pressure(ProportionalQuantity[PressureUnit]):
    UNIT_TYPE = PressureUnit


@dataclass(frozen=True, eq=False)
class Distance(ProportionalQuantity[DistanceUnit]):
    UNIT_TYPE = DistanceUnit


Altitude = Distance


@dataclass(frozen=True, eq=False)
class PrecipAmount(ProportionalQuantity[PrecipUnit]):
    UNIT_TYPE = PrecipUnit


@dataclass(frozen=True, eq=False)
class Fraction(ProportionalQuantity[FractionalUnit]):
    UNIT_TYPE = FractionalUnit


@dataclass(frozen=True, eq=False)
class SpecificEnergy(ProportionalQuantity[SpecEnergyUnit]):
    UNIT_TYPE = SpecEnergyUnit


KELVIN_OFFSET = 273.15
RANKINE_OFFSET = 459.67


def _to_kelvin(value: float, unit: TemperatureUnit) -> float:
    if unit is TemperatureUnit.KELVIN:
        return value
    if unit is TemperatureUnit.CELSIUS:
        return value + KELVIN_OFFSET
    return (value + RANKINE_OFFSET) * 5.0 / 9.0


def _from_kelvin(kelvin: float, unit: TemperatureUnit) -> float:
    if unit is TemperatureUnit.KELVIN:
        return kelvin
    if unit is TemperatureUnit.CELSIUS:
        return kelvin - KELVIN_OFFSET
    return kelvin * 9.0 / 5.0 - RANKINE_OFFSET


@dataclass(frozen=True, eq=False)
class Temperature:
    """Temperature: not proportional, every conversion pivots through Kelvin"""

    value: float
    unit: TemperatureUnit

    def __post_init__(self):
        if not isinstance(self.unit, TemperatureUnit):
            raise TypeError(f"Temperature needs a TemperatureUnit, got {self.unit!r}")
        object.__setattr__(self, "value", float(self.value))

    def convert(self, unit: TemperatureUnit) -> "Temperature":
        if unit is self.unit:
            return self
        if not isinstance(unit, TemperatureUnit):
            raise TypeError(f"Cannot convert Temperature to {unit!r}")
        return Temperature(_from_kelvin(_to_kelvin(self.value, self.unit), unit), unit)

    def value_in(self, unit: TemperatureUnit) -> float:
        return self.convert(unit).value

    def string_with_unit(self) -> str:
        return f"{self.value:.1f} {self.unit.symbol}"

    def __str__(self) -> str:
        return self.string_with_unit()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Temperature):
            return NotImplemented
        return math.isclose(self.value, other.value_in(self.unit), rel_tol=1e-9, abs_tol=1e-9)

    def __hash__(self) -> int:
        return hash((Temperature, round(_to_kelvin(self.value, self.unit), HASH_DIGITS)))

    def to_dict(self) -> dict:
        return {"value": self.value, "unit": self.unit.symbol}

    @classmethod
    def from_dict(cls, data: dict) -> "Temperature":
        return cls(float(data["value"]), TemperatureUnit.parse(data["unit"]))


# Quantized degrees -> 16-point compass label
_CARDINALS = {
    0: "N", 10: "N", 350: "N",
    20: "NNE", 30: "NNE",
    40: "NE", 50: "NE",
    60: "ENE", 70: "ENE",
    80: "E", 90: "E", 100: "E",
    110: "ESE", 120: "ESE",
    130: "SE", 140: "SE",
    150: "SSE", 160: "SSE",
    170: "S", 180: "S", 190: "S",
    200: "SSW", 210: "SSW",
    220: "SW", 230: "SW",
    240: "WSW", 250: "WSW",
    260: "W", 270: "W", 280: "W",
    290: "WNW", 300: "WNW",
    310: "NW", 320: "NW",
    330: "NNW", 340: "NNW",
}


@dataclass(frozen=True)
class Direction:
    """
    Wind direction in whole degrees, quantized to 10° steps.

    Values are rounded to the nearest multiple of 10 (ties round up) and then
    reduced modulo 360, so 355 becomes 0 and 360 becomes 0.

    Raises:
        ValueError: if degrees are negative or greater than 360
    """

    degrees: int

    def __post_init__(self):
        raw = self.degrees
        if raw > 360 or raw < 0:
            raise ValueError(f"Degrees provided ({raw}) were not within 0-360.")
        rounded = int(math.floor(raw / 10.0 + 0.5)) * 10
        object.__setattr__(self, "degrees", rounded % 360)

    @classmethod
    def from_degrees(cls, degrees: float) -> "Direction":
        return cls(degrees)

    @property
    def cardinal(self) -> str:
        return _CARDINALS[self.degrees]

    def __str__(self) -> str:
        return f"{self.degrees}°"

    def to_dict(self) -> dict:
        return {"degrees": self.degrees, "cardinal": self.cardinal}

    @classmethod
    def from_dict(cls, data: dict) -> "Direction":
        return cls(int(data["degrees"]))
