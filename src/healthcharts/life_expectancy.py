"""
Life expectancy domain model.

Defines the LifeExpectancyRecord dataclass for one year of an OECD series.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class LifeExpectancyRecord:
    """
    Attributes:
        year: Calendar year of the observation.
        value: Life expectancy in years.
    """

    year: int
    value: float

    def __post_init__(self):
        if isinstance(self.year, bool) or not isinstance(self.year, int):
            raise ValueError(f"year must be an integer, got {self.year!r}")
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise ValueError(f"value must be a number, got {type(self.value).__name__}")
        if not math.isfinite(self.value):
            raise ValueError(f"value must be finite, got {self.value!r}")

    @property
    def key(self) -> int:
        return self.year
