"""AI-assisted trend report over the whole journal."""

import enum
import logging
from typing import Iterable, Optional

from pydantic import BaseModel

from ibd_nexus.config import settings
from ibd_nexus.models import JournalEntry
from ibd_nexus.services.ai_schemas import TrendAnalysisSchema, TrendMetricSchema
from ibd_nexus.services.ai_service import JournalAIService


logger = logging.getLogger(__name__)


class ChangeAssessment(str, enum.Enum):
    IMPROVEMENT = "improvement"
    DECLINE = "decline"
    STABLE = "stable"


class TrendReport(BaseModel):
    has_enough_data: bool
    entry_count: int
    entries_needed: int = 0
    message: Optional[str] = None
    analysis: Optional[TrendAnalysisSchema] = None


class TrendService:
    """Builds the trend report; the AI does the statistics."""

    MIN_ENTRIES = settings.trend_min_entries

    NOT_ENOUGH_ENTRIES_MESSAGE = (
        "Not enough journal entries to perform an analysis. "
        "Please add at least two entries."
    )

    def __init__(self, ai: JournalAIService):
        self.ai = ai

    @staticmethod
    def assess_change(metric: TrendMetricSchema, higher_is_better: bool) -> ChangeAssessment:
        """
        Classify a percent change for display.

        For flare-up risk an increase is a decline; for wellness it is an
        improvement.
        """
        if metric.change_percent == 0:
            return ChangeAssessment.STABLE
        went_up = metric.change_percent > 0
        if went_up == higher_is_better:
            return ChangeAssessment.IMPROVEMENT
        return ChangeAssessment.DECLINE

    async def build_report(self, entries: Iterable[JournalEntry]) -> TrendReport:
        """
        Send all summaries, oldest first, for trend analysis.

        Returns:
            TrendReport; has_enough_data is False (and no AI call is made)
            when fewer than MIN_ENTRIES entries exist

        Raises:
            ServiceUnavailableError: AI service unavailable
            RateLimitError: Too many requests
        """
        ordered = sorted(entries, key=lambda e: e.date)
        if len(ordered) < self.MIN_ENTRIES:
            return TrendReport(
                has_enough_data=False,
                entry_count=len(ordered),
                entries_needed=self.MIN_ENTRIES - len(ordered),
                message=self.NOT_ENOUGH_ENTRIES_MESSAGE,
            )

        logger.info("Requesting trend analysis over %d entries", len(ordered))
        analysis = await self.ai.generate_trend_analysis([e.summary for e in ordered])
        return TrendReport(
            has_enough_data=True, entry_count=len(ordered), analysis=analysis
        )
