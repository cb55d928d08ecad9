# ABOUTME: Meteorological formulas over unit-typed quantities
# ABOUTME: Humidity, vapor pressure, theta-e, pressure reductions, wind chill, heat index, distance

import math

from wxcore.units.quantities import (
    Altitude,
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
from wxcore.weather.components import Coordinates

C = TemperatureUnit.CELSIUS
F = TemperatureUnit.FAHRENHEIT
K = TemperatureUnit.KELVIN
MB = PressureUnit.MBAR

R = 8.314462618  # molar gas constant, J/mol/K
G = 9.80665  # m/s^2
MD = 28.96546e-3  # molar mass of dry air, kg/mol
RD = R / MD  # specific gas constant of dry air, J/kg/K

# Magnus coefficients
MAGNUS_BETA = 17.62
MAGNUS_LAMBDA = 243.12  # °C

# Standard atmosphere used by the altimeter setting
STD_LAPSE_RATE = 6.5e-3  # K/m
STD_TEMPERATURE = 288.0  # K
STD_PRESSURE = 1013.25  # mb
ALTIMETER_EXPONENT = STD_LAPSE_RATE * RD / G
# Empirical offset matching published station-pressure tables
STATION_PRESSURE_BIAS = 0.3  # mb

EARTH_RADIUS_KM = 6371.0

# Sea-level reduction (wind101 "advanced" method)
SLP_COLUMN_PRESSURE = 1013.25  # mb, mean pressure of the column
SLP_BAROMETRIC_CONSTANT = 18400.0  # m
SLP_THERMAL_EXPANSION = 0.0037  # 1/°C
SLP_OBLIQUITY = 0.0026
SLP_EARTH_RADIUS = 6367324.0  # m
SLP_LAPSE_RATE = 0.005  # °C/m

HEAT_INDEX_COEFFICIENTS = (
    -42.379,
    2.04901523,
    10.14333127,
    -0.22475541,
    -0.00683783,
    -0.05481717,
    0.00122874,
    0.00085282,
    -0.00000199,
)


def _magnus_gamma(t_c: float) -> float:
    return MAGNUS_BETA * t_c / (MAGNUS_LAMBDA + t_c)


def dewpoint_from_rh(temperature: Temperature, rh: Fraction) -> Temperature:
    """
    Dewpoint from temperature and relative humidity (Magnus form).

    Returns:
        Dewpoint in the unit of the given temperature
    """
    t_c = temperature.value_in(C)
    combined = math.log(rh.value_in(FractionalUnit.DECIMAL)) + _magnus_gamma(t_c)
    td_c = MAGNUS_LAMBDA * combined / (MAGNUS_BETA - combined)
    return Temperature(td_c, C).convert(temperature.unit)


def rh_from_dewpoint(temperature: Temperature, dewpoint: Temperature) -> Fraction:
    """Relative humidity (percent) from temperature and dewpoint, inverse of dewpoint_from_rh"""
    t_c = temperature.value_in(C)
    td_c = dewpoint.value_in(C)
    rh = math.exp(_magnus_gamma(td_c) - _magnus_gamma(t_c))
    return Fraction(rh * 100.0, FractionalUnit.PERCENT)


def vapor_pressure(temperature: Temperature) -> Pressure:
    """Saturation vapor pressure over water (Bolton 1980); pass the dewpoint for the actual vapor pressure"""
    t_c = temperature.value_in(C)
    return Pressure(6.112 * math.exp(17.67 * t_c / (t_c + 243.5)), MB)


def mixing_ratio(temperature: Temperature, pressure: Pressure) -> Fraction:
    """Saturation mixing ratio in g/kg, returned as a per-mille Fraction"""
    e = vapor_pressure(temperature).value_in(MB)
    p = pressure.value_in(MB)
    return Fraction(621.97 * e / (p - e), FractionalUnit.MILLI)


def lcl_temperature(temperature: Temperature, dewpoint: Temperature) -> Temperature:
    """Temperature at the lifted condensation level (Bolton 1980, eq. 15)"""
    t_k = temperature.value_in(K)
    td_k = dewpoint.value_in(K)
    t_l = 1.0 / (1.0 / (td_k - 56.0) + math.log(t_k / td_k) / 800.0) + 56.0
    return Temperature(t_l, K)


def theta_e(temperature: Temperature, dewpoint: Temperature, pressure: Pressure) -> Temperature:
    """
    Equivalent potential temperature (Bolton 1980, eq. 39).

    Args:
        temperature: Air temperature
        dewpoint: Dewpoint temperature
        pressure: Pressure at the level of the air parcel

    Returns:
        Theta-e in Kelvin
    """
    t_k = temperature.value_in(K)
    p = pressure.value_in(MB)
    e = vapor_pressure(dewpoint).value_in(MB)
    r = mixing_ratio(dewpoint, pressure)
    r_gkg = r.value_in(FractionalUnit.MILLI)
    r_kgkg = r.value_in(FractionalUnit.DECIMAL)
    t_l = lcl_temperature(temperature, dewpoint).value_in(K)

    theta_l = t_k * (1000.0 / (p - e)) ** 0.2854 * (t_k / t_l) ** (0.28e-3 * r_gkg)
    value = theta_l * math.exp((3036.0 / t_l - 1.78) * r_kgkg * (1.0 + 0.448 * r_kgkg))
    return Temperature(value, K)


def altimeter_to_station(altimeter: Pressure, height: Altitude) -> Pressure:
    """
    Station pressure from an altimeter setting, inverting the standard
    atmosphere formula in closed form.
    """
    a = altimeter.value_in(MB)
    h = height.value_in(DistanceUnit.METER)
    first_term = STD_PRESSURE ** ALTIMETER_EXPONENT * STD_LAPSE_RATE * h / STD_TEMPERATURE
    station = (a ** ALTIMETER_EXPONENT - first_term) ** (1.0 / ALTIMETER_EXPONENT)
    return Pressure(station + STATION_PRESSURE_BIAS, MB)


def altimeter_to_slp(altimeter: Pressure, height: Altitude, temperature: Temperature) -> Pressure:
    """Mean sea-level pressure: station pressure scaled by the isothermal scale height"""
    scale_height = temperature.value_in(K) * RD / G
    h = height.value_in(DistanceUnit.METER)
    station = altimeter_to_station(altimeter, height).value_in(MB)
    return Pressure(station * math.exp(h / scale_height), MB)


def reduce_to_sea_level(
    pressure: Pressure,
    temperature: Temperature,
    height: Altitude,
    latitude: float,
) -> Pressure:
    """
    Reduce a pressure reading to sea level.

    Corrects log-pressure for mean column temperature, humidity, the
    obliquity of the earth at the given latitude and gravity change with
    height.

    Args:
        pressure: Pressure measured at the layer
        temperature: Temperature measured at the layer
        height: Layer height above mean sea level
        latitude: Station latitude in degrees
    """
    p = pressure.value_in(MB)
    t = temperature.value_in(C)
    h = height.value_in(DistanceUnit.METER)
    phi = math.radians(latitude)

    column_temp = t + (SLP_LAPSE_RATE * h) / 2.0
    e = 10.0 ** (7.5 * column_temp / (237.3 + column_temp)) * 6.1078

    column_term = 1.0 + SLP_THERMAL_EXPANSION * column_temp
    humidity_term = 1.0 / (1.0 - 0.378 * (e / SLP_COLUMN_PRESSURE))
    obliquity_term = 1.0 / (1.0 - SLP_OBLIQUITY * math.cos(2.0 * phi))
    gravity_term = 1.0 + h / SLP_EARTH_RADIUS

    correction = h / (
        SLP_BAROMETRIC_CONSTANT * column_term * humidity_term * obliquity_term * gravity_term
    )
    return Pressure(10.0 ** (math.log10(p) + correction), MB)


def wind_chill(temperature: Temperature, speed: Speed) -> Temperature:
    """NWS wind chill; only meaningful below 50°F with wind above 3 mph"""
    t = temperature.value_in(F)
    v_016 = speed.value_in(SpeedUnit.MPH) ** 0.16
    return Temperature(35.74 + 0.6215 * t - 35.75 * v_016 + 0.4275 * t * v_016, F)


def heat_index(temperature: Temperature, rh: Fraction) -> Temperature:
    """Rothfusz regression; only meaningful above 80°F and 40% relative humidity"""
    t = temperature.value_in(F)
    h = rh.value_in(FractionalUnit.PERCENT)
    c = HEAT_INDEX_COEFFICIENTS
    value = (
        c[0]
        + c[1] * t
        + c[2] * h
        + c[3] * t * h
        + c[4] * t * t
        + c[5] * h * h
        + c[6] * t * t * h
        + c[7] * t * h * h
        + c[8] * t * t * h * h
    )
    return Temperature(value, F)


def distance_between_coords(a: Coordinates, b: Coordinates) -> Distance:
    """Great-circle distance on a spherical earth (Haversine)"""
    phi_1 = math.radians(a.latitude)
    phi_2 = math.radians(b.latitude)
    delta_phi = math.radians(b.latitude - a.latitude)
    delta_lambda = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(delta_phi / 2.0) ** 2
        + math.cos(phi_1) * math.cos(phi_2) * math.sin(delta_lambda / 2.0) ** 2
    )
    c = 2.0 * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))
    return Distance(EARTH_RADIUS_KM * c, DistanceUnit.KILOMETER)
