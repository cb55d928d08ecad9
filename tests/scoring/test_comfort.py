# ABOUTME: Tests for the comfort index
# ABOUTME: Validates lookup tables, worst-factor selection, weather penalties and the 10 cap

from datetime import datetime, timezone

import pytest

from wxcore.scoring.comfort import (
    RELATIVE_HUMIDITY_FACTORS,
    TEMPERATURE_FACTORS,
    comfort_index,
    get_from_table,
    rain_score,
    snow_penalty,
    weather_penalty,
)
from wxcore.scoring.models import ComfortRating, Factor
from wxcore.units.quantities import Distance, DistanceUnit, Speed, SpeedUnit, Temperature, TemperatureUnit
from wxcore.weather.components import CloudLayer, CloudLayerCoverage, Coordinates, Layer, Param, SkyCoverage, Station, Wind
from wxcore.weather.models import WxEntryLayerStruct, WxEntryStruct
from wxcore.weather.present_weather import Wx
from wxcore.weather.sparse import HashMapWx

F = TemperatureUnit.FAHRENHEIT
STATION = Station("KPWM", Distance(23, DistanceUnit.METER), Coordinates(43.65, -70.31))
OVERCAST = SkyCoverage((CloudLayer(CloudLayerCoverage.OVERCAST, 1200),))


def conditions(temperature=None, dewpoint=None, wind_mph=None, skycover=None, codes=None) -> WxEntryStruct:
    wx = WxEntryStruct(
        date_time_value=datetime(2024, 6, 1, 17, 0, tzinfo=timezone.utc),
        station_ref=STATION,
        skycover_value=skycover,
        wx_codes_value=codes,
    )
    if temperature is not None or dewpoint is not None or wind_mph is not None:
        wx.add_layer(WxEntryLayerStruct(
            layer_tag=Layer.NEAR_SURFACE,
            station_ref=STATION,
            temperature_value=Temperature(temperature, F) if temperature is not None else None,
            dewpoint_value=Temperature(dewpoint, F) if dewpoint is not None else None,
            wind_value=Wind(Speed(wind_mph, SpeedUnit.MPH)) if wind_mph is not None else None,
        ))
    return wx


class TestComfortIndex:
    """Tests for comfort_index"""

    def test_ideal_day_scores_ten(self):
        """Clear, calm, 70°F and dry: perfect, limited by temperature"""
        rating = comfort_index(conditions(70, dewpoint=50, skycover=SkyCoverage.clear(), codes=[]))
        assert rating == ComfortRating(10, Factor.TEMPERATURE)

    def test_no_signals(self):
        assert comfort_index(conditions()) is None

    def test_absent_signals_are_excluded(self):
        """Only cloud cover is known, so it alone decides"""
        rating = comfort_index(conditions(skycover=OVERCAST))
        assert rating == ComfortRating(8, Factor.CLOUD_COVER)

    def test_worst_factor_wins(self):
        rating = comfort_index(conditions(97, dewpoint=75))
        assert rating.factor is Factor.HEAT_INDEX
        assert rating.score == 0

    def test_wind_chill(self):
        """20°F in a 15 mph wind feels like about 6°F"""
        rating = comfort_index(conditions(20, wind_mph=15))
        assert rating == ComfortRating(1, Factor.WIND_CHILL)

    def test_dry_air(self):
        rating = comfort_index(conditions(70, dewpoint=20))
        assert rating == ComfortRating(5, Factor.DRY_AIR)

    def test_ties_go_to_earlier_factor(self):
        """80°F and overcast both score 8; temperature is declared first"""
        rating = comfort_index(conditions(80, skycover=OVERCAST))
        assert rating == ComfortRating(8, Factor.TEMPERATURE)

    def test_freezing_rain_is_worst(self):
        rating = comfort_index(conditions(33, codes=["FZRA"]))
        assert rating == ComfortRating(0, Factor.RAIN)

    def test_fog(self):
        rating = comfort_index(conditions(70, codes=["FG"]))
        assert rating == ComfortRating(9, Factor.RAIN)

    def test_thunderstorm_penalty_is_added(self):
        """Moderate rain scores 4; a thunderstorm adds 5"""
        rating = comfort_index(conditions(70, codes=["TSRA"]))
        assert rating == ComfortRating(9, Factor.RAIN)

    def test_light_snow_penalty(self):
        rating = comfort_index(conditions(30, codes=["-SN"]))
        assert rating == ComfortRating(6, Factor.TEMPERATURE)

    def test_score_is_capped_at_ten(self):
        """Thundersnow stacks penalties but never exceeds 10"""
        rating = comfort_index(conditions(30, codes=["TSSN"]))
        assert rating == ComfortRating(10, Factor.TEMPERATURE)

    def test_funnel_cloud_hits_the_cap(self):
        rating = comfort_index(conditions(70, skycover=SkyCoverage.clear(), codes=["FC"]))
        assert rating.score == 10

    def test_unpacks_as_pair(self):
        score, factor = comfort_index(conditions(50))
        assert score == 7
        assert factor is Factor.TEMPERATURE

    def test_works_with_sparse_backing(self):
        wx = HashMapWx(datetime(2024, 6, 1, 17, 0, tzinfo=timezone.utc), STATION)
        wx.put(Layer.NEAR_SURFACE, Param.TEMPERATURE, Temperature(22, TemperatureUnit.CELSIUS))
        wx.put(Layer.ALL, Param.SKY_COVER, SkyCoverage.clear())
        assert comfort_index(wx.freeze()) == ComfortRating(10, Factor.TEMPERATURE)


class TestWeatherScores:
    """Tests for the rain score and penalty helpers"""

    @pytest.mark.parametrize("code,expected", [
        ("VCSH", 10),
        ("-DZ", 7),
        ("-RA", 6),
        ("RA", 4),
        ("+RA", 5),
        ("VCFZRA", 10),
        ("BR", 9),
    ])
    def test_rain_score(self, code, expected):
        assert rain_score(Wx.parse_code(code)) == expected

    @pytest.mark.parametrize("code,expected", [
        ("VCSN", 0),
        ("-SN", 2),
        ("SN", 3),
        ("+SN", 5),
        ("-SNSQ", 10),
        ("TSSN", 10),
    ])
    def test_snow_penalty(self, code, expected):
        assert snow_penalty(Wx.parse_code(code)) == expected

    def test_penalties_add_up(self):
        assert weather_penalty(Wx.parse_code("+TSSN")) == 15
        assert weather_penalty(Wx.parse_code("+FC")) == 10
        assert weather_penalty(None) == 0


class TestLookupTables:
    """Tests for threshold table lookup"""

    @pytest.mark.parametrize("value,expected", [
        (110, 0),
        (95, 2),
        (70, 10),
        (65, 10),
        (64.9, 9),
        (36, 3),
        (30, 4),
        (-40, 0),
    ])
    def test_temperature_table(self, value, expected):
        assert get_from_table(value, TEMPERATURE_FACTORS) == expected

    def test_falls_back_to_last_row(self):
        assert get_from_table(-5, RELATIVE_HUMIDITY_FACTORS) == 2


class TestComfortRating:
    """Tests for the rating model"""

    def test_rejects_out_of_range_score(self):
        with pytest.raises(ValueError):
            ComfortRating(11, Factor.RAIN)
        with pytest.raises(ValueError):
            ComfortRating(-1, Factor.RAIN)

    def test_factor_display_names(self):
        assert str(Factor.CLOUD_COVER) == "Cloud Cover"
        assert ComfortRating(3, Factor.DRY_AIR).to_dict() == {"score": 3, "factor": "Dry Air"}
