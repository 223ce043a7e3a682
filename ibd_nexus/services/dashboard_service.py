"""Dashboard aggregates over a 7 or 30 day window."""

from datetime import datetime, timedelta, timezone
from statistics import fmean
from typing import Iterable, Optional, Sequence

from ibd_nexus.models import (
    DashboardSnapshot,
    DigestiveHealthStats,
    JournalEntry,
    RiskLevel,
    TimeWindow,
    TrendDirection,
)


class DashboardService:
    """Service for the time-windowed dashboard snapshot."""

    # Risk buckets use strict greater-than: 66 is Moderate, 33 is Low
    HIGH_RISK_ABOVE = 66
    MODERATE_RISK_ABOVE = 33

    HIGH_CRAMPS_THRESHOLD = 7

    @staticmethod
    def window_entries(
        entries: Iterable[JournalEntry],
        window: TimeWindow,
        now: Optional[datetime] = None,
    ) -> list[JournalEntry]:
        """Entries dated on or after ``now - window.days``."""
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.astimezone()
        cutoff = now - timedelta(days=window.days)
        return [entry for entry in entries if entry.date >= cutoff]

    @classmethod
    def risk_level(cls, avg_risk: float) -> RiskLevel:
        if avg_risk > cls.HIGH_RISK_ABOVE:
            return RiskLevel.HIGH
        if avg_risk > cls.MODERATE_RISK_ABOVE:
            return RiskLevel.MODERATE
        return RiskLevel.LOW

    @staticmethod
    def wellness_trend(entries: Sequence[JournalEntry]) -> TrendDirection:
        """
        Compare mean wellness of the later half against the earlier half.

        Entries are ordered by date; the first half gets floor(n/2) entries.
        """
        if len(entries) < 2:
            return TrendDirection.STABLE

        ordered = sorted(entries, key=lambda e: e.date)
        middle = len(ordered) // 2
        avg_first = fmean(e.summary.mental_wellness_score for e in ordered[:middle])
        avg_second = fmean(e.summary.mental_wellness_score for e in ordered[middle:])

        if avg_second > avg_first:
            return TrendDirection.POSITIVE
        if avg_second < avg_first:
            return TrendDirection.NEGATIVE
        return TrendDirection.STABLE

    @classmethod
    def digestive_stats(cls, entries: Sequence[JournalEntry]) -> DigestiveHealthStats:
        with_photos = [e for e in entries if e.has_analyzed_photo]
        return DigestiveHealthStats(
            total_photos=len(with_photos),
            red_flag_count=sum(1 for e in with_photos if e.image_analysis.has_red_flags),
            reported_blood_count=sum(1 for e in entries if e.summary.blood_in_stool),
            high_cramps_days=sum(
                1 for e in entries if e.summary.cramps_severity >= cls.HIGH_CRAMPS_THRESHOLD
            ),
        )

    def snapshot(
        self,
        entries: Iterable[JournalEntry],
        window: TimeWindow = TimeWindow.LAST_7_DAYS,
        now: Optional[datetime] = None,
    ) -> DashboardSnapshot:
        """
        Compute the dashboard for one window.

        Args:
            entries: Journal snapshot (not modified)
            window: 7 or 30 day window
            now: Reference time (defaults to current UTC time)

        Returns:
            DashboardSnapshot; all metrics None when the window is empty
        """
        windowed = self.window_entries(entries, window, now)
        if not windowed:
            return DashboardSnapshot(window=window, entry_count=0)

        avg_risk = fmean(e.summary.flare_up_risk for e in windowed)
        return DashboardSnapshot(
            window=window,
            entry_count=len(windowed),
            avg_wellness=fmean(e.summary.mental_wellness_score for e in windowed),
            avg_risk=avg_risk,
            risk_level=self.risk_level(avg_risk),
            wellness_trend=self.wellness_trend(windowed),
            digestive=self.digestive_stats(windowed),
        )


# Singleton instance
dashboard_service = DashboardService()
