"""Derived, read-only views computed from the journal (never persisted)."""

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class FoodStatus(str, enum.Enum):
    SAFE = "safe"
    CAUTION = "caution"
    TRIGGER = "trigger"


class FoodStat(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    good_days: int
    bad_days: int
    total: int
    status: FoodStatus

    @property
    def good_ratio(self) -> float:
        return self.good_days / self.total if self.total else 0.0

    @property
    def symptom_free_percent(self) -> int:
        # Half-up rounding, as shown to the user ("75% Symptom-Free")
        if not self.total:
            return 0
        return int(self.good_days * 100 / self.total + 0.5)


class FoodAnalysis(BaseModel):
    """
    Result of the food trigger analysis.

    When ``has_enough_data`` is False the three buckets are empty and
    ``entries_needed`` says how many more food-bearing entries are required.
    """

    model_config = ConfigDict(frozen=True)

    has_enough_data: bool
    entries_with_food: int
    entries_needed: int = 0
    unique_food_count: int = 0
    safe: tuple[FoodStat, ...] = ()
    caution: tuple[FoodStat, ...] = ()
    trigger: tuple[FoodStat, ...] = ()

    @property
    def top_safe_food(self) -> Optional[FoodStat]:
        return self.safe[0] if self.safe else None

    @property
    def top_trigger_food(self) -> Optional[FoodStat]:
        return self.trigger[0] if self.trigger else None

    def bucket(self, status: FoodStatus) -> tuple[FoodStat, ...]:
        return getattr(self, status.value)


class TimeWindow(str, enum.Enum):
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"

    @property
    def days(self) -> int:
        return 7 if self is TimeWindow.LAST_7_DAYS else 30


class RiskLevel(str, enum.Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class TrendDirection(int, enum.Enum):
    NEGATIVE = -1
    STABLE = 0
    POSITIVE = 1


class DigestiveHealthStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_photos: int
    red_flag_count: int
    reported_blood_count: int
    high_cramps_days: int


class DashboardSnapshot(BaseModel):
    """
    Windowed dashboard metrics.

    An empty window yields ``has_data=False`` and every metric set to None,
    never a 0/0 average.
    """

    model_config = ConfigDict(frozen=True)

    window: TimeWindow
    entry_count: int
    avg_wellness: Optional[float] = None
    avg_risk: Optional[float] = None
    risk_level: Optional[RiskLevel] = None
    wellness_trend: Optional[TrendDirection] = None
    digestive: Optional[DigestiveHealthStats] = None

    @property
    def has_data(self) -> bool:
        return self.entry_count > 0


class SortOrder(str, enum.Enum):
    NEWEST_FIRST = "newest"
    OLDEST_FIRST = "oldest"


class JournalFilter(BaseModel):
    """Active journal view criteria. The default instance is the reset state."""

    model_config = ConfigDict(frozen=True)

    symptom: Optional[str] = None
    mood: Optional[str] = None
    order: SortOrder = SortOrder.NEWEST_FIRST

    @property
    def is_filtered(self) -> bool:
        return self.symptom is not None or self.mood is not None

    def reset(self) -> "JournalFilter":
        """Drop both filters but keep the chosen sort order."""
        return JournalFilter(order=self.order)
