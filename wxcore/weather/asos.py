# ABOUTME: Iowa Environmental Mesonet client for current ASOS/AWOS observations
# ABOUTME: Maps the latest report of one station into a frozen sparse observation

import logging
import requests
from datetime import datetime, timezone
from typing import List, Optional

from wxcore.config import Config
from wxcore.units.quantities import (
    Direction,
    Distance,
    DistanceUnit,
    PrecipAmount,
    PrecipUnit,
    Pressure,
    PressureUnit,
    Speed,
    SpeedUnit,
    Temperature,
    TemperatureUnit,
)
from wxcore.weather.components import CloudLayer, Layer, Param, Precip, SkyCoverage, Station
from wxcore.weather.sparse import HashMapWx

log = logging.getLogger(__name__)


def _float(value) -> Optional[float]:
    return float(value) if value is not None else None


def skycover_from_lists(cover: List[Optional[str]], level: List[Optional[int]]) -> SkyCoverage:
    """
    Build sky cover from the parallel code / height lists of an IEM report.

    Raises:
        ValueError: if a code has no height (or the reverse), or a code is unknown
    """
    if all(height is None for height in level):
        return SkyCoverage.clear()

    layers = []
    for code, height in zip(cover, level):
        if code is None and height is None:
            continue
        if code is None or height is None:
            raise ValueError(f"Mismatched skycover and skylevel values: {code!r}, {height!r}")
        layer = CloudLayer.from_code(code, int(height))
        if layer is not None:
            layers.append(layer)
    return SkyCoverage(tuple(layers))


class AsosClient:
    """
    Client for the IEM current-conditions JSON service.

    One request returns the latest report of one station; there is no retry.
    """

    def __init__(self, station_id: str, network: str, station: Station, base_url: str = None):
        self.station_id = station_id
        self.network = network
        self.station = station
        self.base_url = base_url or Config.ASOS_BASE_URL

    def fetch(self) -> Optional[HashMapWx]:
        """
        Fetch the latest observation.

        Returns:
            Frozen HashMapWx on success, None on any error.
        """
        params = {"station": self.station_id, "network": self.network}

        try:
            response = requests.get(self.base_url, params=params, timeout=Config.HTTP_TIMEOUT_SECONDS)

            if response.status_code != 200:
                log.error(f"{self.station_id} ASOS HTTP error: {response.status_code} - {response.text}")
                return None

            return self._parse_response(response.json())

        except Exception as e:
            log.error(f"{self.station_id} ASOS request failed: {e}")
            return None

    def _parse_response(self, data: dict) -> Optional[HashMapWx]:
        """Parse an IEM current.py response into a sparse observation."""
        try:
            ob = data["last_ob"]

            valid = datetime.fromisoformat(ob["utc_valid"].replace("Z", "+00:00"))
            if valid.tzinfo is None:
                valid = valid.replace(tzinfo=timezone.utc)
            valid = valid.astimezone(timezone.utc).replace(second=0, microsecond=0)

            wx = HashMapWx(valid, self.station)
            surface = Layer.NEAR_SURFACE

            temperature = _float(ob.get("airtemp[F]"))
            if temperature is not None:
                wx.put(surface, Param.TEMPERATURE, Temperature(temperature, TemperatureUnit.FAHRENHEIT))

            dewpoint = _float(ob.get("dewpointtemp[F]"))
            if dewpoint is not None:
                wx.put(surface, Param.DEWPOINT, Temperature(dewpoint, TemperatureUnit.FAHRENHEIT))

            speed = _float(ob.get("windspeed[kt]"))
            if speed is not None:
                wx.put(surface, Param.WIND_SPEED, Speed(speed, SpeedUnit.KNOTS))

            direction = _float(ob.get("winddirection[deg]"))
            if direction is not None:
                try:
                    wx.put(surface, Param.WIND_DIRECTION, Direction.from_degrees(direction))
                except ValueError:
                    log.warning(f"{self.station_id} ASOS: failed to convert {direction} into degrees")

            visibility = _float(ob.get("visibility[mile]"))
            if visibility is not None:
                wx.put(surface, Param.VISIBILITY, Distance(visibility, DistanceUnit.MILE))

            mslp = _float(ob.get("mslp[mb]"))
            if mslp is not None:
                wx.put(Layer.SEA_LEVEL, Param.PRESSURE, Pressure(mslp, PressureUnit.MBAR))

            altimeter = _float(ob.get("altimeter[in]"))
            if altimeter is not None:
                wx.put(Layer.ALL, Param.ALTIMETER, Pressure(altimeter, PressureUnit.INHG))

            wx.put(
                Layer.ALL,
                Param.SKY_COVER,
                skycover_from_lists(ob.get("skycover[code]") or [], ob.get("skylevel[ft]") or []),
            )

            wx.put_opt(Layer.ALL, Param.RAW_METAR, ob.get("raw"))

            present_wx = ob.get("presentwx")
            if isinstance(present_wx, str):
                present_wx = present_wx.split()
            if present_wx is not None:
                wx.put(Layer.ALL, Param.WX_CODES, list(present_wx))

            precip_today = _float(ob.get("precip_today[in]"))
            if precip_today is not None:
                wx.put(
                    Layer.ALL,
                    Param.PRECIP_TODAY,
                    Precip.unclassified(PrecipAmount(precip_today, PrecipUnit.INCH)),
                )

            return wx.freeze()

        except (KeyError, IndexError, TypeError, ValueError) as e:
            log.error(f"{self.station_id} ASOS response parsing failed: {e} - Response: {data}")
            return None
