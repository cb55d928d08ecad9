# ABOUTME: Tests for METAR present-weather parsing and combination
# ABOUTME: Validates intensity precedence, category mapping and merge laws

import itertools

import pytest

from wxcore.weather.present_weather import Intensity, Wx, combine_codes


class TestParseCode:
    """Tests for decoding single weather groups"""

    def test_light_rain_showers(self):
        wx = Wx.parse_code("-SHRA")
        assert wx.showers
        assert wx.rain is Intensity.LIGHT
        assert wx.snow is Intensity.NONE

    def test_heavy_thunderstorm_with_hail(self):
        """Hail is falling ice, not sand"""
        wx = Wx.parse_code("+TSRAGR")
        assert wx.thunderstorm
        assert wx.rain is Intensity.HEAVY
        assert wx.falling_ice is Intensity.HEAVY
        assert wx.sand is Intensity.NONE

    def test_plain_code_is_medium(self):
        assert Wx.parse_code("SN").snow is Intensity.MEDIUM

    def test_vicinity_takes_precedence(self):
        wx = Wx.parse_code("VCFG")
        assert wx.fog
        assert wx.visibility_inhibitor
        assert wx.rain is Intensity.NONE

    def test_vicinity_showers(self):
        assert Wx.parse_code("VCSHRA").rain is Intensity.NEARBY

    def test_drizzle_is_very_light_rain(self):
        assert Wx.parse_code("DZ").rain is Intensity.VERY_LIGHT
        assert Wx.parse_code("+DZ").rain is Intensity.VERY_LIGHT

    def test_rain_wins_over_drizzle(self):
        assert Wx.parse_code("-DZRA").rain is Intensity.LIGHT

    def test_freezing_rain(self):
        wx = Wx.parse_code("FZRA")
        assert wx.freezing
        assert wx.rain is Intensity.MEDIUM

    def test_sandstorm_is_heavy_blowing_sand(self):
        wx = Wx.parse_code("SS")
        assert wx.blowing
        assert wx.sand is Intensity.HEAVY

    def test_duststorm_is_heavy_dust(self):
        assert Wx.parse_code("DS").dust is Intensity.HEAVY

    def test_haze_and_smoke(self):
        wx = Wx.parse_code("HZ")
        assert wx.smoke
        assert wx.visibility_inhibitor
        assert not wx.fog

    def test_squalls(self):
        assert Wx.parse_code("SQ").squalls

    def test_funnel_cloud_and_tornado(self):
        assert Wx.parse_code("FC").funnel_cloud is Intensity.MEDIUM
        assert Wx.parse_code("+FC").funnel_cloud is Intensity.HEAVY

    def test_unknown_precip(self):
        assert Wx.parse_code("-UP").unknown is Intensity.LIGHT

    @pytest.mark.parametrize("code", ["SG", "IC", "GS"])
    def test_snow_family(self, code):
        assert Wx.parse_code(code).snow is Intensity.MEDIUM

    def test_recognized_tokens_without_meaning(self):
        assert Wx.parse_code("NSW") == Wx.none()

    def test_empty_code(self):
        assert Wx.parse_code("") == Wx.none()

    @pytest.mark.parametrize("code", ["ra", "RA1", "-TS;RA"])
    def test_malformed_code_raises(self, code):
        with pytest.raises(ValueError):
            Wx.parse_code(code)


class TestCombine:
    """Tests for merging several weather states"""

    SAMPLES = [
        Wx.parse_code("-RA"),
        Wx.parse_code("+TSRA"),
        Wx.parse_code("VCFG"),
        Wx.parse_code("SN"),
        Wx.none(),
    ]

    def test_keeps_most_intense_and_ors_flags(self):
        wx = combine_codes(["-RA", "+SN", "BR"])
        assert wx.rain is Intensity.LIGHT
        assert wx.snow is Intensity.HEAVY
        assert wx.fog

    def test_empty_list_is_no_weather(self):
        assert combine_codes([]) == Wx.none()

    def test_commutative(self):
        for a, b in itertools.product(self.SAMPLES, repeat=2):
            assert a.combine(b) == b.combine(a)

    def test_associative(self):
        for a, b, c in itertools.product(self.SAMPLES, repeat=3):
            assert a.combine(b).combine(c) == a.combine(b.combine(c))

    def test_idempotent(self):
        for a in self.SAMPLES:
            assert a.combine(a) == a

    def test_none_is_identity(self):
        for a in self.SAMPLES:
            assert a.combine(Wx.none()) == a


class TestIntensity:
    """Tests for intensity ordering and labels"""

    def test_ordering(self):
        ordered = [
            Intensity.NONE,
            Intensity.NEARBY,
            Intensity.VERY_LIGHT,
            Intensity.LIGHT,
            Intensity.MEDIUM,
            Intensity.HEAVY,
        ]
        assert sorted(ordered, reverse=True) == ordered[::-1]
        assert Intensity.LIGHT.most_intense(Intensity.HEAVY) is Intensity.HEAVY

    def test_serialized_by_name(self):
        data = Wx.parse_code("-DZ").to_dict()
        assert data["rain"] == "VeryLight"
        assert data["snow"] == "None"
        assert data["freezing"] is False
