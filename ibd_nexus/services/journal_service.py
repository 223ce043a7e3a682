"""Business logic for creating journal entries and attaching photos."""

import logging
from typing import Optional

from ibd_nexus.models import JournalEntry, JournalSummary
from ibd_nexus.services.ai_service import JournalAIService
from ibd_nexus.services.entry_store import EntryStore


logger = logging.getLogger(__name__)


class JournalService:
    """
    Journal workflow: draft a summary, save the entry, attach a photo later.

    The AI collaborator is injected so callers (and tests) choose the client.
    """

    def __init__(self, ai: JournalAIService):
        self.ai = ai

    async def draft_summary(self, transcription: str) -> JournalSummary:
        """
        Summarize a transcription for review before saving.

        Calling again regenerates the summary.

        Raises:
            ValueError: If the transcription is blank
        """
        if not transcription or not transcription.strip():
            raise ValueError("Transcription is empty")
        return await self.ai.summarize_entry(transcription.strip())

    async def save_entry(
        self,
        store: EntryStore,
        transcription: str,
        summary: JournalSummary,
        image_url: Optional[str] = None,
    ) -> JournalEntry:
        """
        Create and persist a new entry.

        When an image is given it is analyzed before the entry is built.

        Args:
            store: Loaded entry store
            transcription: Entry text
            summary: Reviewed summary
            image_url: Optional base64 image data URL

        Returns:
            The created JournalEntry
        """
        image_analysis = None
        if image_url:
            image_analysis = await self.ai.analyze_stool_image(image_url)

        entry = JournalEntry(
            transcription=transcription.strip(),
            summary=summary,
            image_url=image_url,
            image_analysis=image_analysis,
        )
        store.add(entry)
        logger.info("Saved journal entry %s", entry.id)
        return entry

    async def attach_image(
        self, store: EntryStore, entry_id: str, image_url: str
    ) -> Optional[JournalEntry]:
        """
        Analyze a photo and attach it to an existing entry.

        Returns:
            The updated entry, or None when no entry has that id
        """
        if store.get(entry_id) is None:
            logger.warning("Cannot attach image: no journal entry with id %s", entry_id)
            return None

        analysis = await self.ai.analyze_stool_image(image_url)
        return store.update(
            entry_id,
            lambda entry: entry.model_copy(
                update={"image_url": image_url, "image_analysis": analysis}
            ),
        )
