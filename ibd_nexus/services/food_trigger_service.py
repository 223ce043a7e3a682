"""Food trigger analysis: which foods tend to show up on bad days."""

import re
from typing import Iterable

from ibd_nexus.config import settings
from ibd_nexus.models import (
    FoodAnalysis,
    FoodStat,
    FoodStatus,
    JournalEntry,
    JournalSummary,
    StoolType,
)


BAD_DAY_SYMPTOM_PATTERN = re.compile(r"pain|cramp|bloat|nausea|diarrhea", re.IGNORECASE)


class FoodTriggerService:
    """Classifies foods as safe, caution or trigger from good/bad day counts."""

    # Minimum data thresholds (loaded from central config)
    MIN_FOOD_ENTRIES = settings.food_min_entries
    MIN_OCCURRENCES = settings.food_min_occurrences

    # goodRatio bands: >= SAFE_RATIO safe, >= CAUTION_RATIO caution, else trigger
    SAFE_RATIO = settings.food_safe_ratio
    CAUTION_RATIO = settings.food_caution_ratio

    # Bad day signals
    HIGH_RISK_THRESHOLD = 50
    CRAMPS_THRESHOLD = 5

    @classmethod
    def is_bad_day(cls, summary: JournalSummary) -> bool:
        """True if any flare signal is present in the summary."""
        return (
            summary.flare_up_risk > cls.HIGH_RISK_THRESHOLD
            or summary.blood_in_stool
            or summary.cramps_severity >= cls.CRAMPS_THRESHOLD
            or summary.stool_type == StoolType.DIARRHEA
            or any(BAD_DAY_SYMPTOM_PATTERN.search(s) for s in summary.physical_symptoms)
        )

    @classmethod
    def classify(cls, good_ratio: float) -> FoodStatus:
        if good_ratio >= cls.SAFE_RATIO:
            return FoodStatus.SAFE
        if good_ratio >= cls.CAUTION_RATIO:
            return FoodStatus.CAUTION
        return FoodStatus.TRIGGER

    @staticmethod
    def normalize_food(name: str) -> str:
        return name.strip().lower()

    def analyze(self, entries: Iterable[JournalEntry]) -> FoodAnalysis:
        """
        Build the per-food good/bad day report.

        Foods seen fewer than MIN_OCCURRENCES times are left out. Each bucket
        is ordered by total descending; ties keep first-encounter order.

        Returns:
            FoodAnalysis; ``has_enough_data`` is False when fewer than
            MIN_FOOD_ENTRIES entries mention any food.
        """
        entries_with_food = [e for e in entries if e.summary.food_eaten]

        if len(entries_with_food) < self.MIN_FOOD_ENTRIES:
            return FoodAnalysis(
                has_enough_data=False,
                entries_with_food=len(entries_with_food),
                entries_needed=self.MIN_FOOD_ENTRIES - len(entries_with_food),
            )

        # name -> [good_days, bad_days, total]; dict keeps first-encounter order
        counts: dict[str, list[int]] = {}
        for entry in entries_with_food:
            bad_day = self.is_bad_day(entry.summary)
            for food_item in entry.summary.food_eaten:
                name = self.normalize_food(food_item)
                if not name:
                    continue
                stats = counts.setdefault(name, [0, 0, 0])
                if bad_day:
                    stats[1] += 1
                else:
                    stats[0] += 1
                stats[2] += 1

        buckets: dict[FoodStatus, list[FoodStat]] = {status: [] for status in FoodStatus}
        for name, (good_days, bad_days, total) in counts.items():
            if total < self.MIN_OCCURRENCES:
                continue
            status = self.classify(good_days / total)
            buckets[status].append(
                FoodStat(
                    name=name,
                    good_days=good_days,
                    bad_days=bad_days,
                    total=total,
                    status=status,
                )
            )

        ordered = {
            status: tuple(sorted(stats, key=lambda s: s.total, reverse=True))
            for status, stats in buckets.items()
        }

        return FoodAnalysis(
            has_enough_data=True,
            entries_with_food=len(entries_with_food),
            unique_food_count=len(counts),
            safe=ordered[FoodStatus.SAFE],
            caution=ordered[FoodStatus.CAUTION],
            trigger=ordered[FoodStatus.TRIGGER],
        )


# Singleton instance
food_trigger_service = FoodTriggerService()
