# ABOUTME: Derived quantities computed once for every observation backing
# ABOUTME: Free functions over the layer and observation accessors; any missing input yields None

from datetime import datetime
from typing import Optional

from wxcore.units.quantities import (
    Altitude,
    Direction,
    Fraction,
    FractionalUnit,
    Pressure,
    Speed,
    SpeedUnit,
    Temperature,
    TemperatureUnit,
)
from wxcore.weather import formulae
from wxcore.weather.components import Layer
from wxcore.weather.present_weather import Wx, combine_codes

WIND_CHILL_MAX_F = 50.0
WIND_CHILL_MIN_MPH = 3.0
HEAT_INDEX_MIN_F = 80.0
HEAT_INDEX_MIN_RH = 40.0


# LAYER --------------------------------------------------------------------

def dewpoint(layer) -> Optional[Temperature]:
    """Native dewpoint, else derived from relative humidity and temperature"""
    native = layer.native_dewpoint()
    if native is not None:
        return native
    temperature = layer.temperature()
    rh = layer.native_relative_humidity()
    if temperature is None or rh is None or rh.value <= 0:
        return None
    return formulae.dewpoint_from_rh(temperature, rh)


def relative_humidity(layer) -> Optional[Fraction]:
    """Native relative humidity, else derived from dewpoint and temperature"""
    native = layer.native_relative_humidity()
    if native is not None:
        return native
    temperature = layer.temperature()
    td = layer.native_dewpoint()
    if temperature is None or td is None:
        return None
    return formulae.rh_from_dewpoint(temperature, td)


def wind_speed(layer) -> Optional[Speed]:
    wind = layer.wind()
    return wind.speed if wind is not None else None


def wind_direction(layer) -> Optional[Direction]:
    wind = layer.wind()
    return wind.direction if wind is not None else None


def height_agl(layer) -> Optional[Altitude]:
    return layer.layer().height_agl(layer.station().altitude)


def height_msl(layer) -> Optional[Altitude]:
    agl = height_agl(layer)
    if agl is None:
        return None
    return agl + layer.station().altitude


def sea_level_pressure(layer) -> Optional[Pressure]:
    """Layer pressure reduced to sea level; needs pressure, temperature and a height"""
    pressure = layer.pressure()
    temperature = layer.temperature()
    height = layer.height_msl()
    if pressure is None or temperature is None or height is None:
        return None
    return formulae.reduce_to_sea_level(
        pressure, temperature, height, layer.station().coords.latitude
    )


def wind_chill_valid(layer) -> Optional[bool]:
    """
    Whether wind chill applies.

    Returns:
        True inside the valid range, False outside it, None when the
        temperature (or, below 50°F, the wind speed) is unknown
    """
    temperature = layer.temperature()
    if temperature is None:
        return None
    if temperature.value_in(TemperatureUnit.FAHRENHEIT) < WIND_CHILL_MAX_F:
        speed = layer.wind_speed()
        if speed is None:
            return None
        return speed.value_in(SpeedUnit.MPH) > WIND_CHILL_MIN_MPH
    return False


def wind_chill(layer) -> Optional[Temperature]:
    if wind_chill_valid(layer) is not True:
        return None
    return formulae.wind_chill(layer.temperature(), layer.wind_speed())


def heat_index_valid(layer) -> Optional[bool]:
    """Same tri-state as wind_chill_valid, over temperature and relative humidity"""
    temperature = layer.temperature()
    if temperature is None:
        return None
    if temperature.value_in(TemperatureUnit.FAHRENHEIT) > HEAT_INDEX_MIN_F:
        rh = layer.relative_humidity()
        if rh is None:
            return None
        return rh.value_in(FractionalUnit.PERCENT) > HEAT_INDEX_MIN_RH
    return False


def heat_index(layer) -> Optional[Temperature]:
    if heat_index_valid(layer) is not True:
        return None
    return formulae.heat_index(layer.temperature(), layer.relative_humidity())


def apparent_temperature(layer) -> Optional[Temperature]:
    """
    Heat index if valid, else wind chill if valid, else the plain
    temperature when both are known to be out of range. If either validity
    is undetermined and neither applies, the answer is unknown.
    """
    temperature = layer.temperature()
    if temperature is None:
        return None

    heat_valid = heat_index_valid(layer)
    chill_valid = wind_chill_valid(layer)

    if heat_valid is True:
        return heat_index(layer)
    if chill_valid is True:
        return wind_chill(layer)
    if heat_valid is False and chill_valid is False:
        return temperature
    return None


def theta_e(layer, altimeter: Optional[Pressure] = None) -> Optional[Temperature]:
    """Theta-e using the layer pressure, or station pressure from the altimeter setting"""
    pressure = layer.pressure()
    if pressure is None:
        height = layer.height_msl()
        if altimeter is None or height is None:
            return None
        pressure = formulae.altimeter_to_station(altimeter, height)

    temperature = layer.temperature()
    td = layer.dewpoint()
    if temperature is None or td is None:
        return None
    return formulae.theta_e(temperature, td, pressure)


# OBSERVATION --------------------------------------------------------------

def present_weather(observation) -> Optional[Wx]:
    codes = observation.wx_codes()
    if codes is None:
        return None
    return combine_codes(codes)


def station_pressure_from_altimeter(observation) -> Optional[Pressure]:
    altimeter = observation.altimeter()
    if altimeter is None:
        return None
    return formulae.altimeter_to_station(altimeter, observation.station().altitude)


def mslp_from_altimeter(observation) -> Optional[Pressure]:
    altimeter = observation.altimeter()
    surface = observation.layer(Layer.NEAR_SURFACE)
    if altimeter is None or surface is None:
        return None
    temperature = surface.temperature()
    if temperature is None:
        return None
    return formulae.altimeter_to_slp(altimeter, observation.station().altitude, temperature)


def best_sea_level_pressure(observation) -> Optional[Pressure]:
    """
    Most accurate sea-level pressure available, tried in this order:
    measured sea-level reading, near-surface reduction, indoor reduction,
    altimeter setting.
    """
    sea_level = observation.layer(Layer.SEA_LEVEL)
    if sea_level is not None and sea_level.pressure() is not None:
        return sea_level.pressure()

    for candidate in (Layer.NEAR_SURFACE, Layer.INDOOR):
        layer = observation.layer(candidate)
        if layer is not None:
            slp = layer.sea_level_pressure()
            if slp is not None:
                return slp

    return mslp_from_altimeter(observation)


def date_time_local(observation) -> datetime:
    return observation.date_time().astimezone(observation.station().time_zone)
