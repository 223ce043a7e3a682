"""
Entry store: the single owner of the journal collection.

The collection is held as an immutable tuple snapshot. Every mutation builds a
new tuple through ``append_entry`` / ``update_entry_by_id``, swaps the
snapshot and flushes the whole collection to the key-value table.
"""

import json
import logging
import time
from typing import Callable, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError

from ibd_nexus.config import settings
from ibd_nexus.database import SessionLocal
from ibd_nexus.models import JournalEntry
from ibd_nexus.models.storage_record import StorageRecord
from ibd_nexus.services.sample_data import sample_journal_entries


logger = logging.getLogger(__name__)

EntryMutator = Callable[[JournalEntry], JournalEntry]


def append_entry(
    entries: Iterable[JournalEntry], entry: JournalEntry
) -> tuple[JournalEntry, ...]:
    """Return a new collection with ``entry`` at the end."""
    return (*entries, entry)


def update_entry_by_id(
    entries: Iterable[JournalEntry], entry_id: str, mutator: EntryMutator
) -> tuple[JournalEntry, ...]:
    """Return a new collection where the entry with ``entry_id`` is replaced by ``mutator(entry)``."""
    return tuple(mutator(entry) if entry.id == entry_id else entry for entry in entries)


class EntryStore:
    """Loads, holds and persists the journal for one session."""

    def __init__(
        self,
        session_factory=None,
        storage_key: Optional[str] = None,
        seed_factory: Callable[[], list[JournalEntry]] = sample_journal_entries,
    ):
        self.session_factory = session_factory or SessionLocal
        self.storage_key = storage_key or settings.journal_storage_key
        self._seed_factory = seed_factory
        self._entries: tuple[JournalEntry, ...] = ()

    @property
    def entries(self) -> tuple[JournalEntry, ...]:
        """Current snapshot. Analytics read this; nothing writes through it."""
        return self._entries

    # =========================================================================
    # LOAD / SAVE
    # =========================================================================

    def load(self) -> list[JournalEntry]:
        """
        Read the persisted journal.

        Falls back to the sample seed when nothing is stored yet or the stored
        value cannot be parsed. A corrupt value is copied to a backup key
        before being replaced so it can be inspected later.

        Returns:
            The loaded entries (also kept as the store's snapshot)
        """
        try:
            raw = self._read(self.storage_key)
        except SQLAlchemyError:
            logger.exception("Could not read journal from storage, using sample data")
            return self._use_seed()

        if raw is None:
            logger.info("No saved journal under %s, using sample data", self.storage_key)
            return self._use_seed()

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError(f"expected a JSON array, got {type(data).__name__}")
            entries = [JournalEntry.model_validate(item) for item in data]
        except (ValueError, TypeError, RecursionError) as e:
            logger.warning("Stored journal is unreadable (%s), using sample data", e)
            self._backup_corrupt(raw)
            return self._use_seed()

        self._entries = tuple(entries)
        logger.debug("Loaded %d journal entries", len(entries))
        return list(entries)

    def save(self, entries: Optional[Iterable[JournalEntry]] = None) -> None:
        """
        Persist the full collection (the current snapshot by default).

        Write failures are logged; the in-memory snapshot stays authoritative.
        """
        to_save = self._entries if entries is None else tuple(entries)
        payload = json.dumps([entry.to_storage() for entry in to_save])
        try:
            self._write(self.storage_key, payload)
        except SQLAlchemyError:
            logger.exception("Failed to save %d journal entries", len(to_save))

    # =========================================================================
    # MUTATIONS (replace snapshot, then flush)
    # =========================================================================

    def add(self, entry: JournalEntry) -> tuple[JournalEntry, ...]:
        self._entries = append_entry(self._entries, entry)
        self.save()
        return self._entries

    def update(self, entry_id: str, mutator: EntryMutator) -> Optional[JournalEntry]:
        """
        Replace one entry via ``mutator``.

        Returns:
            The updated entry, or None if no entry has that id (nothing is saved)
        """
        if not any(entry.id == entry_id for entry in self._entries):
            logger.warning("No journal entry with id %s", entry_id)
            return None

        self._entries = update_entry_by_id(self._entries, entry_id, mutator)
        self.save()
        return next(entry for entry in self._entries if entry.id == entry_id)

    def get(self, entry_id: str) -> Optional[JournalEntry]:
        return next((entry for entry in self._entries if entry.id == entry_id), None)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _use_seed(self) -> list[JournalEntry]:
        seed = self._seed_factory()
        self._entries = tuple(seed)
        return list(seed)

    def _read(self, key: str) -> Optional[str]:
        with self.session_factory() as db:
            record = db.get(StorageRecord, key)
            return record.value if record else None

    def _write(self, key: str, value: str) -> None:
        with self.session_factory() as db:
            record = db.get(StorageRecord, key)
            if record is None:
                db.add(StorageRecord(key=key, value=value))
            else:
                record.value = value
            db.commit()

    def _backup_corrupt(self, raw: str) -> None:
        backup_key = f"{self.storage_key}.corrupt-{int(time.time())}"
        try:
            self._write(backup_key, raw)
        except SQLAlchemyError:
            logger.exception("Could not back up corrupt journal to %s", backup_key)
        else:
            logger.warning("Corrupt journal copied to %s", backup_key)
