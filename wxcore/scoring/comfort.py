# ABOUTME: Comfort index scoring from an observation's surface conditions
# ABOUTME: Each signal maps through a lookup table; the worst signal sets the rating

import logging
import math
from typing import Optional, Sequence, Tuple

from wxcore.scoring.models import ComfortRating, Factor
from wxcore.units.quantities import FractionalUnit, TemperatureUnit
from wxcore.weather.entry import WxEntry
from wxcore.weather.present_weather import Intensity, Wx

log = logging.getLogger(__name__)

F = TemperatureUnit.FAHRENHEIT
LOWEST = -math.inf

# (threshold, score): the first row whose threshold the value reaches wins
TEMPERATURE_FACTORS = (
    (105.0, 0),
    (95.0, 2),
    (90.0, 4),
    (85.0, 5),
    (77.0, 8),
    (65.0, 10),
    (55.0, 9),
    (45.0, 7),
    (38.0, 4),
    (35.0, 3),
    (27.0, 4),
    (20.0, 2),
    (10.0, 1),
    (LOWEST, 0),
)

# Oktas of the most covered layer
CLOUD_COVER_FACTORS = ((7.0, 8), (5.0, 9), (LOWEST, 10))

HEAT_INDEX_FACTORS = (
    (105.0, 0),
    (100.0, 1),
    (95.0, 3),
    (85.0, 5),
    (80.0, 8),
    (LOWEST, 10),
)

WIND_CHILL_FACTORS = (
    (65.0, 10),
    (45.0, 8),
    (35.0, 5),
    (27.0, 4),
    (22.0, 3),
    (15.0, 2),
    (5.0, 1),
    (LOWEST, 0),
)

RELATIVE_HUMIDITY_FACTORS = ((20.0, 10), (10.0, 5), (0.0, 2))

DEWPOINT_FACTORS = (
    (75.0, 2),
    (70.0, 5),
    (65.0, 8),
    (20.0, 10),
    (0.0, 8),
    (LOWEST, 3),
)

RAIN_FACTORS = {
    Intensity.NONE: 10,
    Intensity.NEARBY: 10,
    Intensity.VERY_LIGHT: 7,
    Intensity.LIGHT: 6,
    Intensity.MEDIUM: 4,
    Intensity.HEAVY: 5,
}
FREEZING_RAIN_SCORE = 0
FOG_SCORE = 9

THUNDERSTORM_PENALTY = 5
FUNNEL_CLOUD_PENALTY = 10
SEVERE_SNOW_PENALTY = 10
SNOW_PENALTIES = {
    Intensity.VERY_LIGHT: 1,
    Intensity.LIGHT: 2,
    Intensity.MEDIUM: 3,
    Intensity.HEAVY: 5,
}

MAX_SCORE = 10


def get_from_table(value: float, table: Sequence[Tuple[float, int]]) -> int:
    """
    Look up a score in a descending threshold table.

    Args:
        value: Reading in the table's unit
        table: (threshold, score) rows, thresholds descending

    Returns:
        Score of the first row whose threshold is <= value, else the last row's score
    """
    for threshold, score in table:
        if value >= threshold:
            return score
    return table[-1][1]


def _is_light_or_absent(intensity: Intensity) -> bool:
    return intensity in (Intensity.NONE, Intensity.NEARBY)


def rain_score(wx: Wx) -> int:
    if wx.freezing and not _is_light_or_absent(wx.rain):
        return FREEZING_RAIN_SCORE
    if wx.fog:
        return FOG_SCORE
    return RAIN_FACTORS[wx.rain]


def snow_penalty(wx: Wx) -> int:
    if _is_light_or_absent(wx.snow):
        return 0
    if wx.thunderstorm or wx.squalls:
        return SEVERE_SNOW_PENALTY
    return SNOW_PENALTIES[wx.snow]


def weather_penalty(wx: Optional[Wx]) -> int:
    """Thunderstorm, snow and funnel-cloud modifiers added to the base score"""
    if wx is None:
        return 0
    penalty = snow_penalty(wx)
    if wx.thunderstorm:
        penalty += THUNDERSTORM_PENALTY
    if not wx.funnel_cloud.is_none():
        penalty += FUNNEL_CLOUD_PENALTY
    return penalty


def _surface_signal(observation: WxEntry, accessor: str, unit, table) -> Optional[int]:
    surface = observation.surface()
    if surface is None:
        return None
    quantity = getattr(surface, accessor)()
    if quantity is None:
        return None
    return get_from_table(quantity.value_in(unit), table)


def comfort_index(observation: WxEntry) -> Optional[ComfortRating]:
    """
    Rate how comfortable conditions are, 0 (miserable) to 10 (ideal).

    Temperature, heat index, wind chill, relative humidity and dewpoint come
    from the near-surface layer; cloud cover and rain from the observation.
    Missing signals are left out. The lowest sub-score wins, ties going to
    the earlier factor in Factor order. Weather modifiers are then added and
    the result is capped at 10.

    Args:
        observation: Observation of any backing

    Returns:
        ComfortRating, or None when no signal is available
    """
    wx = observation.wx()
    skycover = observation.skycover()

    signals = (
        (_surface_signal(observation, "temperature", F, TEMPERATURE_FACTORS), Factor.TEMPERATURE),
        (get_from_table(float(skycover.oktas()), CLOUD_COVER_FACTORS) if skycover is not None else None,
         Factor.CLOUD_COVER),
        (_surface_signal(observation, "heat_index", F, HEAT_INDEX_FACTORS), Factor.HEAT_INDEX),
        (_surface_signal(observation, "wind_chill", F, WIND_CHILL_FACTORS), Factor.WIND_CHILL),
        (rain_score(wx) if wx is not None else None, Factor.RAIN),
        (_surface_signal(observation, "relative_humidity", FractionalUnit.PERCENT, RELATIVE_HUMIDITY_FACTORS),
         Factor.DRY_AIR),
        (_surface_signal(observation, "dewpoint", F, DEWPOINT_FACTORS), Factor.HUMIDITY),
    )

    present = [(score, factor) for score, factor in signals if score is not None]
    if not present:
        log.debug(f"No comfort signals for {observation.station().name} at {observation.date_time()}")
        return None

    # min() keeps the first of equal scores
    score, factor = min(present, key=lambda pair: pair[0])
    score = min(MAX_SCORE, score + weather_penalty(wx))
    return ComfortRating(score=score, factor=factor)
