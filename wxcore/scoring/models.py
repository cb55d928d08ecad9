# ABOUTME: Data models for comfort ratings
# ABOUTME: A 0-10 score paired with the factor that limited it

from dataclasses import dataclass
from enum import Enum


class Factor(Enum):
    """Condition that limited a comfort rating, in tie-break order"""
    TEMPERATURE = "Temperature"
    CLOUD_COVER = "Cloud Cover"
    HEAT_INDEX = "Heat Index"
    WIND_CHILL = "Wind Chill"
    RAIN = "Rain"
    DRY_AIR = "Dry Air"
    HUMIDITY = "Humidity"

    def __str__(self) -> str:
        return self.value


@dataclass
class ComfortRating:
    """Comfort for one observation"""
    score: int  # 0-10, 10 is ideal
    factor: Factor  # Worst condition faced

    def __post_init__(self):
        if not 0 <= self.score <= 10:
            raise ValueError(f"Score must be 0-10, got {self.score}")

    def __iter__(self):
        # Unpacks as (score, factor)
        yield self.score
        yield self.factor

    def to_dict(self) -> dict:
        return {"score": self.score, "factor": self.factor.value}
