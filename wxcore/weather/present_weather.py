# ABOUTME: Present-weather state decoded from METAR weather groups
# ABOUTME: Parses codes like "-TSRA" and merges several states into the most intense one

import re
from dataclasses import dataclass, fields
from enum import IntEnum


class Intensity(IntEnum):
    """Ordered so that max() picks the most intense value"""
    NONE = 0
    NEARBY = 1
    VERY_LIGHT = 2
    LIGHT = 3
    MEDIUM = 4
    HEAVY = 5

    @property
    def label(self) -> str:
        return _LABELS[self]

    def most_intense(self, other: "Intensity") -> "Intensity":
        return max(self, other)

    def is_none(self) -> bool:
        return self is Intensity.NONE


_LABELS = {
    Intensity.NONE: "None",
    Intensity.NEARBY: "Nearby",
    Intensity.VERY_LIGHT: "VeryLight",
    Intensity.LIGHT: "Light",
    Intensity.MEDIUM: "Medium",
    Intensity.HEAVY: "Heavy",
}

TOKEN_PATTERN = re.compile(
    r"(-|\+|BC|BL|BR|DR|DS|DU|DZ|FC|FG|FU|FZ|GR|GS|HZ|IC|MI|NSW|PL|PO|PR|PY"
    r"|RA|SA|SG|SH|SN|SQ|SS|TS|UP|VA|VC|/+)"
)
VALID_CODE = re.compile(r"^[A-Z+\-/ ]*$")


@dataclass(frozen=True)
class Wx:
    blowing: bool = False
    freezing: bool = False
    showers: bool = False
    squalls: bool = False
    thunderstorm: bool = False
    fog: bool = False
    smoke: bool = False
    visibility_inhibitor: bool = False

    rain: Intensity = Intensity.NONE
    snow: Intensity = Intensity.NONE
    falling_ice: Intensity = Intensity.NONE
    dust: Intensity = Intensity.NONE
    sand: Intensity = Intensity.NONE
    funnel_cloud: Intensity = Intensity.NONE  # FC light, tornado heavy
    unknown: Intensity = Intensity.NONE

    @classmethod
    def none(cls) -> "Wx":
        return cls()

    def combine(self, other: "Wx") -> "Wx":
        """OR the qualifiers, keep the most intense value of each category"""
        merged = {}
        for f in fields(self):
            mine = getattr(self, f.name)
            theirs = getattr(other, f.name)
            if isinstance(mine, Intensity):
                merged[f.name] = mine.most_intense(theirs)
            else:
                merged[f.name] = mine or theirs
        return Wx(**merged)

    @classmethod
    def parse_code(cls, code: str) -> "Wx":
        """
        Decode one METAR present-weather group.

        Token order does not matter and repeated tokens are harmless. BC, DR,
        MI, PR, PY and NSW are recognized but carry no meaning here.

        Args:
            code: Weather group such as "-SHRA", "+TSRAGR" or "VCFG"

        Returns:
            Wx for that group

        Raises:
            ValueError: if the code contains characters no METAR group uses
        """
        if not VALID_CODE.match(code):
            raise ValueError(f"Malformed present weather code '{code}'")

        tokens = set(TOKEN_PATTERN.findall(code))

        if "VC" in tokens:
            general = Intensity.NEARBY
        elif "-" in tokens:
            general = Intensity.LIGHT
        elif "+" in tokens:
            general = Intensity.HEAVY
        else:
            general = Intensity.MEDIUM

        values = {
            "freezing": "FZ" in tokens,
            "showers": "SH" in tokens,
            "blowing": bool(tokens & {"BL", "SS", "PO", "DS"}),
            "squalls": "SQ" in tokens,
            "thunderstorm": "TS" in tokens,
            "fog": bool(tokens & {"BR", "FG"}),
            "smoke": bool(tokens & {"FU", "HZ"}),
            "visibility_inhibitor": bool(tokens & {"BR", "FG", "FU", "HZ", "VA", "DU", "SA"}),
        }

        if "RA" in tokens:
            values["rain"] = general
        elif "DZ" in tokens:
            values["rain"] = Intensity.VERY_LIGHT

        if "DU" in tokens:
            values["dust"] = general
        elif "DS" in tokens:
            values["dust"] = Intensity.HEAVY

        if tokens & {"SA", "PO"}:
            values["sand"] = general
        elif "SS" in tokens:
            values["sand"] = Intensity.HEAVY

        if tokens & {"PL", "GR"}:
            values["falling_ice"] = general

        if "UP" in tokens:
            values["unknown"] = general

        if tokens & {"SN", "GS", "IC", "SG"}:
            values["snow"] = general

        if "FC" in tokens:
            values["funnel_cloud"] = general

        return cls(**values)

    def to_dict(self) -> dict:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = value.label if isinstance(value, Intensity) else value
        return data


def combine_codes(codes) -> Wx:
    """Fold a sequence of weather groups into one state"""
    wx = Wx.none()
    for code in codes:
        wx = wx.combine(Wx.parse_code(code))
    return wx
