"""
Local tier: a flat list of journal entries kept as one JSON blob under one key.

The blob is fully loaded on every read and fully rewritten on every mutation.
Missing or malformed content reads as an empty collection; the decode step
reports which of the two happened so callers and tests can tell them apart.
"""

import enum
import json
import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from healthjournal.core.config import settings
from healthjournal.schemas.journal_entry import JournalEntry
from healthjournal.storage.blob_storage import BlobStorage
from healthjournal.storage.queries import (
    in_date_range,
    recent_cutoff,
    sort_newest_first,
)

logger = logging.getLogger(__name__)


class BlobStatus(str, enum.Enum):
    MISSING = "missing"
    OK = "ok"
    CORRUPT = "corrupt"


@dataclass(frozen=True)
class SkippedItem:
    """A list item that failed validation; `date` is its raw date when it had one."""

    index: int
    date: Optional[str] = None


@dataclass
class DecodedBlob:
    status: BlobStatus
    entries: List[JournalEntry] = field(default_factory=list)
    skipped_items: List[SkippedItem] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.skipped_items)


def decode_entries(
    raw: Optional[str], diagnostics: Optional[logging.Logger] = None
) -> DecodedBlob:
    """Parse a stored blob. Never raises; bad content becomes an empty result."""
    diagnostics = diagnostics or logger
    if raw is None:
        return DecodedBlob(BlobStatus.MISSING)

    try:
        payload = json.loads(raw)
    except ValueError as exc:
        diagnostics.warning(f"Local journal blob is not valid JSON, ignoring it: {exc}")
        return DecodedBlob(BlobStatus.CORRUPT)

    if not isinstance(payload, list):
        diagnostics.warning(
            f"Local journal blob holds {type(payload).__name__}, expected a list; ignoring it"
        )
        return DecodedBlob(BlobStatus.CORRUPT)

    entries: List[JournalEntry] = []
    skipped: List[SkippedItem] = []
    for position, item in enumerate(payload):
        try:
            entries.append(JournalEntry.model_validate(item))
        except PydanticValidationError as exc:
            raw_date = item.get("date") if isinstance(item, dict) else None
            skipped.append(
                SkippedItem(position, raw_date if isinstance(raw_date, str) else None)
            )
            diagnostics.warning(
                f"Skipping malformed local journal entry at index {position}: "
                f"{exc.error_count()} validation error(s)"
            )
    return DecodedBlob(BlobStatus.OK, entries, skipped)


def encode_entries(entries: List[JournalEntry]) -> str:
    return json.dumps([e.model_dump(mode="json", by_alias=True) for e in entries])


# One mutation lock per storage key, shared by every store in the process
_key_locks: Dict[str, threading.Lock] = {}
_key_locks_guard = threading.Lock()


def _lock_for(key: str) -> threading.Lock:
    with _key_locks_guard:
        return _key_locks.setdefault(key, threading.Lock())


class LocalCacheStore:
    """Unauthenticated, on-device copy of the journal (attachments inline)."""

    def __init__(
        self,
        storage: BlobStorage,
        key: Optional[str] = None,
        diagnostics: Optional[logging.Logger] = None,
        today: Callable[[], date] = date.today,
    ):
        self.storage = storage
        self.key = key or settings.LOCAL_CACHE_KEY
        self.diagnostics = diagnostics or logger
        self.today = today

    # =====================================================================
    # RAW BLOB
    # =====================================================================

    def read_raw(self) -> Optional[str]:
        try:
            return self.storage.get(self.key)
        except (OSError, UnicodeDecodeError) as exc:
            self.diagnostics.warning(f"Could not read local journal blob {self.key!r}: {exc}")
            # unreadable content decodes as corrupt, not missing
            return ""

    def decode(self) -> DecodedBlob:
        return decode_entries(self.read_raw(), self.diagnostics)

    def clear(self) -> None:
        with _lock_for(self.key):
            self.storage.remove(self.key)

    def _write(self, entries: List[JournalEntry]) -> None:
        self.storage.set(self.key, encode_entries(entries))

    # =====================================================================
    # READ OPERATIONS
    # =====================================================================

    def list_entries(self) -> List[JournalEntry]:
        """All cached entries, newest date first."""
        return sort_newest_first(self.decode().entries)

    def get_entry(self, entry_id: str) -> Optional[JournalEntry]:
        return next((e for e in self.list_entries() if e.id == entry_id), None)

    def list_by_date_range(self, start: date, end: date) -> List[JournalEntry]:
        return sort_newest_first(
            e for e in self.list_entries() if in_date_range(e, start, end)
        )

    def list_recent(self, days: int = 30) -> List[JournalEntry]:
        cutoff = recent_cutoff(self.today(), days)
        return sort_newest_first(e for e in self.list_entries() if e.date >= cutoff)

    # =====================================================================
    # WRITE OPERATIONS
    # =====================================================================

    def save_entry(self, entry: JournalEntry) -> None:
        """Replace the entry with the same id in place, or append it."""
        with _lock_for(self.key):
            entries = self.decode().entries
            for index, existing in enumerate(entries):
                if existing.id == entry.id:
                    entries[index] = entry
                    break
            else:
                entries.append(entry)
            self._write(entries)

    def delete_entry(self, entry_id: str) -> None:
        with _lock_for(self.key):
            entries = [e for e in self.decode().entries if e.id != entry_id]
            self._write(entries)
