# healthjournal/api/routers/journal.py
from typing import List, Optional
from datetime import date
from fastapi import APIRouter, Depends, Query, Response, status

from healthjournal.api.deps import get_journal_storage, get_migration_service
from healthjournal.core.config import settings
from healthjournal.core.exceptions import NotFoundError, ValidationError
from healthjournal.schemas.journal_entry import (
    JournalEntry,
    JournalEntryCreate,
    JournalStats,
    MigrationResult,
    MigrationStatus,
    new_journal_entry,
)
from healthjournal.services.journal_storage import JournalStorageService, TierResult
from healthjournal.services.migration import MigrationService


TIER_HEADER = "X-Journal-Tier"

router = APIRouter(prefix="/journal", tags=["Health Journal"])


def _served(response: Response, result: TierResult):
    """Expose which tier answered, then hand back the value."""
    response.headers[TIER_HEADER] = result.tier.value
    return result.value


# ====================================================
# READ ENDPOINTS
# ====================================================


@router.get("/entries", response_model=List[JournalEntry])
def list_entries(
    response: Response,
    start: Optional[date] = Query(None, description="Inclusive start date"),
    end: Optional[date] = Query(None, description="Inclusive end date"),
    days: Optional[int] = Query(None, ge=0, description="Only the last N days"),
    storage: JournalStorageService = Depends(get_journal_storage),
):
    """
    List journal entries, newest first.

    - with **start** and **end**: entries dated within the range (inclusive)
    - with **days**: entries from the last N days
    - otherwise: every entry
    """
    if (start is None) != (end is None):
        raise ValidationError("start and end must be given together")
    if start is not None and days is not None:
        raise ValidationError("Use either a date range or days, not both")
    if start is not None and start > end:
        raise ValidationError("start must not be after end")

    if start is not None:
        result = storage.list_by_date_range(start, end)
    elif days is not None:
        result = storage.list_recent(days)
    else:
        result = storage.list_entries()
    return _served(response, result)


@router.get("/entries/recent", response_model=List[JournalEntry])
def list_recent_entries(
    response: Response,
    days: int = Query(settings.RECENT_DAYS_DEFAULT, ge=0),
    storage: JournalStorageService = Depends(get_journal_storage),
):
    """Entries from the last N days (default 30)."""
    return _served(response, storage.list_recent(days))


@router.get("/entries/{entry_id}", response_model=JournalEntry)
def get_entry(
    entry_id: str,
    response: Response,
    storage: JournalStorageService = Depends(get_journal_storage),
):
    entry = _served(response, storage.get_entry(entry_id))
    if entry is None:
        raise NotFoundError(f"Journal entry {entry_id} not found")
    return entry


@router.get("/stats", response_model=JournalStats)
def journal_stats(
    response: Response,
    storage: JournalStorageService = Depends(get_journal_storage),
):
    """Attachment storage used by the journal."""
    result = storage.attachment_usage()
    usage = _served(response, result)
    return JournalStats(
        storage_size_mb=round(usage.storage_size_mb, 4),
        attachment_count=usage.attachment_count,
        tier=result.tier.value,
    )


# ====================================================
# WRITE ENDPOINTS
# ====================================================


@router.post("/entries", response_model=JournalEntry, status_code=status.HTTP_201_CREATED)
def create_entry(
    fields: JournalEntryCreate,
    response: Response,
    storage: JournalStorageService = Depends(get_journal_storage),
):
    """Create an entry with a fresh id and creation time."""
    entry = new_journal_entry(fields)
    _served(response, storage.save_entry(entry))
    return entry


@router.put("/entries/{entry_id}", response_model=JournalEntry)
def replace_entry(
    entry_id: str,
    entry: JournalEntry,
    response: Response,
    storage: JournalStorageService = Depends(get_journal_storage),
):
    """Replace the whole entry (attachments included); creates it if missing."""
    if entry.id != entry_id:
        raise ValidationError("Entry id in body does not match the URL")
    _served(response, storage.save_entry(entry))
    return entry


@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(
    entry_id: str,
    storage: JournalStorageService = Depends(get_journal_storage),
):
    result = storage.delete_entry(entry_id)
    return Response(
        status_code=status.HTTP_204_NO_CONTENT,
        headers={TIER_HEADER: result.tier.value},
    )


# ====================================================
# MIGRATION
# ====================================================


@router.get("/migration", response_model=MigrationStatus)
def migration_status(
    migration: MigrationService = Depends(get_migration_service),
):
    """Whether the local cache still holds entries to migrate."""
    return migration.status()


@router.post("/migrate", response_model=MigrationResult)
def migrate_local_entries(
    migration: MigrationService = Depends(get_migration_service),
):
    """
    Move locally cached entries into the signed-in user's journal.

    Call right after login. Requires a bearer token.
    """
    return migration.migrate()
