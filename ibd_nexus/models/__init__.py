"""
Domain models for IBD Nexus.

The ORM table backing the key-value store lives in
``ibd_nexus.models.storage_record`` and is imported by ``init_db``.
"""

from ibd_nexus.models.journal_entry import (
    NOT_MENTIONED,
    BoundingBox,
    ImageAnalysisResult,
    JournalEntry,
    JournalSummary,
    StoolType,
)
from ibd_nexus.models.dietary_profile import DietaryProfile
from ibd_nexus.models.analytics import (
    DashboardSnapshot,
    DigestiveHealthStats,
    FoodAnalysis,
    FoodStat,
    FoodStatus,
    JournalFilter,
    RiskLevel,
    SortOrder,
    TimeWindow,
    TrendDirection,
)

__all__ = [
    "NOT_MENTIONED",
    "BoundingBox",
    "ImageAnalysisResult",
    "JournalEntry",
    "JournalSummary",
    "StoolType",
    "DietaryProfile",
    "DashboardSnapshot",
    "DigestiveHealthStats",
    "FoodAnalysis",
    "FoodStat",
    "FoodStatus",
    "JournalFilter",
    "RiskLevel",
    "SortOrder",
    "TimeWindow",
    "TrendDirection",
]
