"""Logging streak: consecutive local calendar days with at least one entry."""

from datetime import datetime
from typing import Iterable, Optional

from ibd_nexus.models import JournalEntry


def _local_day_number(moment: datetime) -> int:
    # Days since epoch of the local calendar day (proleptic ordinal)
    return moment.astimezone().date().toordinal()


class StreakService:
    """Computes the streak ending today or yesterday."""

    @staticmethod
    def current_streak(
        entries: Iterable[JournalEntry], now: Optional[datetime] = None
    ) -> int:
        """
        Count consecutive logged days, walking back from the most recent one.

        The streak is broken (0) when the latest logged day is older than
        yesterday. Several entries on one day count once.
        """
        days = sorted({_local_day_number(entry.date) for entry in entries}, reverse=True)
        if not days:
            return 0

        today = _local_day_number(now or datetime.now().astimezone())
        if days[0] < today - 1:
            return 0

        streak = 0
        expected = days[0]
        for day in days:
            if day != expected:
                break
            streak += 1
            expected -= 1
        return streak


# Singleton instance
streak_service = StreakService()
