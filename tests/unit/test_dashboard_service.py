"""
Unit tests for DashboardService.

Tests windowing, averages, risk levels, the wellness trend and the digestive
health counts.
"""

from datetime import timedelta

import pytest

from ibd_nexus.models import RiskLevel, TimeWindow, TrendDirection
from ibd_nexus.services.dashboard_service import DashboardService, dashboard_service
from tests.factories import (
    NOW,
    TEST_IMAGE_URL,
    create_entry,
    create_image_analysis,
)


# =============================================================================
# Windowing
# =============================================================================


class TestWindowEntries:
    def test_seven_day_window_excludes_older(self):
        entries = [create_entry(days_ago=1), create_entry(days_ago=8)]

        result = DashboardService.window_entries(entries, TimeWindow.LAST_7_DAYS, NOW)

        assert result == [entries[0]]

    def test_thirty_day_window_includes_older(self):
        entries = [create_entry(days_ago=1), create_entry(days_ago=8)]

        result = DashboardService.window_entries(entries, TimeWindow.LAST_30_DAYS, NOW)

        assert result == entries

    def test_cutoff_is_inclusive(self):
        entries = [create_entry(days_ago=7), create_entry(date=NOW - timedelta(days=7, seconds=1))]

        result = DashboardService.window_entries(entries, TimeWindow.LAST_7_DAYS, NOW)

        assert result == [entries[0]]


# =============================================================================
# Risk Level
# =============================================================================


class TestRiskLevel:
    @pytest.mark.parametrize(
        "avg,expected",
        [
            (0, RiskLevel.LOW),
            (33, RiskLevel.LOW),
            (33.5, RiskLevel.MODERATE),
            (66, RiskLevel.MODERATE),
            (66.1, RiskLevel.HIGH),
            (100, RiskLevel.HIGH),
        ],
    )
    def test_buckets(self, avg, expected):
        assert DashboardService.risk_level(avg) == expected


# =============================================================================
# Wellness Trend
# =============================================================================


class TestWellnessTrend:
    def test_single_entry_is_stable(self):
        assert DashboardService.wellness_trend([create_entry()]) == TrendDirection.STABLE

    def test_improving(self):
        entries = [
            create_entry(days_ago=0, mental_wellness_score=8),
            create_entry(days_ago=3, mental_wellness_score=3),
        ]
        assert DashboardService.wellness_trend(entries) == TrendDirection.POSITIVE

    def test_declining(self):
        entries = [
            create_entry(days_ago=3, mental_wellness_score=8),
            create_entry(days_ago=0, mental_wellness_score=3),
        ]
        assert DashboardService.wellness_trend(entries) == TrendDirection.NEGATIVE

    def test_equal_halves_are_stable(self):
        entries = [
            create_entry(days_ago=2, mental_wellness_score=5),
            create_entry(days_ago=1, mental_wellness_score=5),
        ]
        assert DashboardService.wellness_trend(entries) == TrendDirection.STABLE

    def test_odd_count_puts_middle_in_later_half(self):
        # first half [4], second half [4, 7] -> 5.5 > 4
        entries = [
            create_entry(days_ago=3, mental_wellness_score=4),
            create_entry(days_ago=2, mental_wellness_score=4),
            create_entry(days_ago=1, mental_wellness_score=7),
        ]
        assert DashboardService.wellness_trend(entries) == TrendDirection.POSITIVE


# =============================================================================
# Snapshot
# =============================================================================


class TestSnapshot:
    """Tests for DashboardService.snapshot."""

    def test_empty_window_has_no_metrics(self):
        snapshot = dashboard_service.snapshot([create_entry(days_ago=20)], TimeWindow.LAST_7_DAYS, NOW)

        assert snapshot.has_data is False
        assert snapshot.entry_count == 0
        assert snapshot.avg_wellness is None
        assert snapshot.avg_risk is None
        assert snapshot.risk_level is None
        assert snapshot.digestive is None

    def test_moderate_average(self):
        entries = [
            create_entry(days_ago=1, flare_up_risk=40),
            create_entry(days_ago=2, flare_up_risk=90),
        ]

        snapshot = dashboard_service.snapshot(entries, TimeWindow.LAST_7_DAYS, NOW)

        assert snapshot.avg_risk == 65
        assert snapshot.risk_level == RiskLevel.MODERATE

    def test_high_average(self):
        entries = [
            create_entry(days_ago=1, flare_up_risk=70),
            create_entry(days_ago=2, flare_up_risk=70),
        ]

        snapshot = dashboard_service.snapshot(entries, TimeWindow.LAST_7_DAYS, NOW)

        assert snapshot.risk_level == RiskLevel.HIGH

    def test_average_wellness(self):
        entries = [
            create_entry(days_ago=1, mental_wellness_score=4),
            create_entry(days_ago=2, mental_wellness_score=7),
        ]

        snapshot = dashboard_service.snapshot(entries, TimeWindow.LAST_7_DAYS, NOW)

        assert snapshot.avg_wellness == 5.5
        assert snapshot.entry_count == 2

    def test_digestive_stats(self):
        entries = [
            create_entry(
                days_ago=1,
                image_url=TEST_IMAGE_URL,
                image_analysis=create_image_analysis(red=2),
                blood_in_stool=True,
                cramps_severity=8,
            ),
            create_entry(days_ago=2, image_url=TEST_IMAGE_URL, image_analysis=create_image_analysis()),
            # Photo without analysis is not counted
            create_entry(days_ago=3, image_url=TEST_IMAGE_URL, cramps_severity=7),
            create_entry(days_ago=4, cramps_severity=6),
        ]

        digestive = dashboard_service.snapshot(entries, TimeWindow.LAST_7_DAYS, NOW).digestive

        assert digestive.total_photos == 2
        assert digestive.red_flag_count == 1
        assert digestive.reported_blood_count == 1
        assert digestive.high_cramps_days == 2

    def test_idempotent(self):
        entries = [create_entry(days_ago=1, flare_up_risk=40), create_entry(days_ago=2)]

        assert dashboard_service.snapshot(entries, now=NOW) == dashboard_service.snapshot(entries, now=NOW)
