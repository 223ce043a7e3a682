"""Business logic for browsing the journal: filter choices, filtering and ordering."""

from typing import Iterable, List

from ibd_nexus.models import JournalEntry, JournalFilter, SortOrder


class JournalFilterService:
    """Service for the journal view's symptom/mood filters and date sort."""

    @staticmethod
    def available_symptoms(entries: Iterable[JournalEntry]) -> List[str]:
        """Distinct symptom tags across all entries, sorted."""
        return sorted({s for e in entries for s in e.summary.physical_symptoms})

    @staticmethod
    def available_moods(entries: Iterable[JournalEntry]) -> List[str]:
        """Distinct mood tags across all entries, sorted."""
        return sorted({m for e in entries for m in e.summary.moods})

    @staticmethod
    def apply(
        entries: Iterable[JournalEntry], criteria: JournalFilter = JournalFilter()
    ) -> List[JournalEntry]:
        """
        Filter and order entries for display.

        Symptom and mood filters match tags exactly and combine with AND.
        Ordering is by date; entries with equal dates keep their stored order.

        Args:
            entries: Journal snapshot (not modified)
            criteria: Active filters and sort order

        Returns:
            New list of matching entries
        """
        matching = [
            entry
            for entry in entries
            if (criteria.symptom is None or criteria.symptom in entry.summary.physical_symptoms)
            and (criteria.mood is None or criteria.mood in entry.summary.moods)
        ]
        if criteria.order is SortOrder.OLDEST_FIRST:
            return sorted(matching, key=lambda e: e.date)
        return sorted(matching, key=lambda e: e.date, reverse=True)


# Singleton instance
journal_filter_service = JournalFilterService()
