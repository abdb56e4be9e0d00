"""
Condition domain model.

Defines the ConditionRecord dataclass: one age group x condition group observation
from the ABS long-term conditions table.
"""

import math
from dataclasses import dataclass

# Age groups kept in the tidy output, in column order
AGE_GROUPS = ("0–14", "25–34", "45–54", "65 years and over")


@dataclass(frozen=True)
class ConditionRecord:
    """
    Represents the proportion of an age group reporting a condition group.

    Attributes:
        age_group: One of AGE_GROUPS.
        condition_group: Disease category with the "Total " prefix removed.
        proportion: Finite, non-negative proportion (per cent).
    """

    age_group: str
    condition_group: str
    proportion: float

    def __post_init__(self):
        if self.age_group not in AGE_GROUPS:
            raise ValueError(f"Unknown age group: {self.age_group!r}")

        if not isinstance(self.condition_group, str) or not self.condition_group.strip():
            raise ValueError(f"Empty condition group: {self.condition_group!r}")

        if isinstance(self.proportion, bool) or not isinstance(self.proportion, (int, float)):
            raise ValueError(f"proportion must be a number, got {type(self.proportion).__name__}")
        if not math.isfinite(self.proportion) or self.proportion < 0:
            raise ValueError(f"proportion must be finite and non-negative, got {self.proportion!r}")

    @property
    def key(self) -> str:
        return f"{self.condition_group}||{self.age_group}"
