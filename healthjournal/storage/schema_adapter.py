"""
Conversion between the canonical journal entry and the relational records.

The local tier stores `JournalEntry` values as they are (attachments inline,
camelCase JSON, epoch-millisecond timestamps). The remote tier stores one
`journal_entries` row per entry plus ordered `journal_attachments` rows. This
module is the only place that knows both shapes.

`to_remote` is total and lossless. `from_remote` drops the server-side
columns (`user_id`, `updated_at`, `journal_entry_id`, `position`).
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from healthjournal.schemas.journal_entry import (
    Attachment,
    AttachmentType,
    JournalEntry,
    MoodLevel,
)
from healthjournal.schemas.remote_records import (
    RemoteAttachmentRecord,
    RemoteJournalEntryRecord,
)

# Naive UTC epoch: timestamp columns are stored without a time zone
_EPOCH = datetime(1970, 1, 1)
_ONE_MS = timedelta(milliseconds=1)


def millis_to_datetime(millis: int) -> datetime:
    return _EPOCH + timedelta(milliseconds=millis)


def datetime_to_millis(value: datetime) -> int:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return (value - _EPOCH) // _ONE_MS


# =====================================================================
# CANONICAL -> REMOTE
# =====================================================================


def attachment_to_remote(
    attachment: Attachment,
    journal_entry_id: str,
    position: int,
    user_id: Optional[UUID] = None,
) -> RemoteAttachmentRecord:
    return RemoteAttachmentRecord(
        id=attachment.id,
        user_id=user_id,
        journal_entry_id=journal_entry_id,
        position=position,
        type=attachment.type.value,
        file_name=attachment.file_name,
        file_size=attachment.file_size,
        data_url=attachment.data_url,
        caption=attachment.caption,
        uploaded_at=millis_to_datetime(attachment.uploaded_at),
    )


def to_remote(
    entry: JournalEntry, user_id: Optional[UUID] = None
) -> RemoteJournalEntryRecord:
    """Map an entry to its row plus attachment rows, keeping attachment order."""
    return RemoteJournalEntryRecord(
        id=entry.id,
        user_id=user_id,
        date=entry.date,
        mood=int(entry.mood),
        mood_note=entry.mood_note,
        symptoms=list(entry.symptoms),
        diet=list(entry.diet),
        sleep_hours=entry.sleep_hours,
        sleep_quality=entry.sleep_quality,
        activities=list(entry.activities),
        stress_level=entry.stress_level,
        notes=entry.notes,
        created_at=millis_to_datetime(entry.created_at),
        journal_attachments=[
            attachment_to_remote(attachment, entry.id, position, user_id)
            for position, attachment in enumerate(entry.attachments)
        ],
    )


# =====================================================================
# REMOTE -> CANONICAL
# =====================================================================


def attachment_from_remote(record: RemoteAttachmentRecord) -> Attachment:
    return Attachment(
        id=record.id,
        type=AttachmentType(record.type),
        file_name=record.file_name,
        file_size=record.file_size,
        caption=record.caption,
        data_url=record.data_url,
        uploaded_at=datetime_to_millis(record.uploaded_at),
    )


def from_remote(record: RemoteJournalEntryRecord) -> JournalEntry:
    attachments = sorted(record.journal_attachments, key=lambda a: a.position)
    return JournalEntry(
        id=record.id,
        date=record.date,
        mood=MoodLevel(record.mood),
        mood_note=record.mood_note,
        symptoms=list(record.symptoms or []),
        diet=list(record.diet or []),
        sleep_hours=record.sleep_hours,
        sleep_quality=record.sleep_quality,
        activities=list(record.activities or []),
        stress_level=record.stress_level,
        notes=record.notes,
        attachments=[attachment_from_remote(a) for a in attachments],
        created_at=datetime_to_millis(record.created_at),
    )


def from_row(row) -> JournalEntry:
    """Convert a loaded `JournalEntryRow` (with attachments) to an entry."""
    return from_remote(RemoteJournalEntryRecord.model_validate(row))
