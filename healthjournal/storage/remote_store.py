"""
Remote tier: user-scoped journal entries in the relational database.

Every operation resolves the current user first and raises `Unauthenticated`
when there is none, before any SQL is issued. Backend failures are rolled
back and re-raised as `RemoteUnavailable` with the backend's message.
"""

import logging
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Callable, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from healthjournal.core.exceptions import RemoteUnavailable, Unauthenticated
from healthjournal.models.journal_entry import JournalAttachmentRow, JournalEntryRow
from healthjournal.schemas.journal_entry import JournalEntry
from healthjournal.storage.queries import recent_cutoff
from healthjournal.storage.schema_adapter import from_row, to_remote

logger = logging.getLogger(__name__)

IdentityResolver = Callable[[], Optional[UUID]]

# Columns a full-record replacement may change; created_at is set on insert only
_REPLACEABLE_COLUMNS = (
    "date",
    "mood",
    "mood_note",
    "symptoms",
    "diet",
    "sleep_hours",
    "sleep_quality",
    "activities",
    "stress_level",
    "notes",
)


class RemoteJournalStore:
    """CRUD and range queries over `journal_entries` / `journal_attachments`."""

    def __init__(
        self,
        db: Session,
        current_user: IdentityResolver,
        today: Callable[[], date] = date.today,
    ):
        self.db = db
        self.current_user = current_user
        self.today = today

    # =====================================================================
    # HELPER METHODS
    # =====================================================================

    def require_user(self) -> UUID:
        user_id = self.current_user()
        if user_id is None:
            raise Unauthenticated()
        return user_id

    @contextmanager
    def _backend(self, action: str):
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.debug(f"Remote {action} failed: {exc}")
            raise RemoteUnavailable(str(exc)) from exc

    def _entries_query(self, user_id: UUID):
        return (
            self.db.query(JournalEntryRow)
            .options(selectinload(JournalEntryRow.journal_attachments))
            .filter(JournalEntryRow.user_id == user_id)
        )

    @staticmethod
    def _newest_first(query):
        return query.order_by(
            JournalEntryRow.date.desc(), JournalEntryRow.created_at.desc()
        )

    # =====================================================================
    # READ OPERATIONS
    # =====================================================================

    def list_entries(self) -> List[JournalEntry]:
        """All entries of the current user, newest date first."""
        user_id = self.require_user()
        with self._backend("list"):
            rows = self._newest_first(self._entries_query(user_id)).all()
            return [from_row(row) for row in rows]

    def get_entry(self, entry_id: str) -> Optional[JournalEntry]:
        """The entry with this id, or None when the user has no such entry."""
        user_id = self.require_user()
        with self._backend("get"):
            row = (
                self._entries_query(user_id)
                .filter(JournalEntryRow.id == entry_id)
                .first()
            )
            return from_row(row) if row else None

    def list_by_date_range(self, start: date, end: date) -> List[JournalEntry]:
        """Entries dated within [start, end], inclusive on both ends."""
        user_id = self.require_user()
        with self._backend("list_by_date_range"):
            rows = self._newest_first(
                self._entries_query(user_id)
                .filter(JournalEntryRow.date >= start)
                .filter(JournalEntryRow.date <= end)
            ).all()
            return [from_row(row) for row in rows]

    def list_recent(self, days: int = 30) -> List[JournalEntry]:
        """Entries dated on or after today minus `days`."""
        user_id = self.require_user()
        cutoff = recent_cutoff(self.today(), days)
        with self._backend("list_recent"):
            rows = self._newest_first(
                self._entries_query(user_id).filter(JournalEntryRow.date >= cutoff)
            ).all()
            return [from_row(row) for row in rows]

    # =====================================================================
    # WRITE OPERATIONS
    # =====================================================================

    def save_entry(self, entry: JournalEntry) -> None:
        """
        Upsert the entry row by id, then replace its attachment rows wholesale.

        Both steps share one transaction: a failure in either leaves the
        previously stored entry and attachments untouched.
        """
        user_id = self.require_user()
        record = to_remote(entry, user_id=user_id)
        columns = record.entry_columns()

        with self._backend("save"):
            row = (
                self.db.query(JournalEntryRow)
                .filter(JournalEntryRow.id == entry.id)
                .filter(JournalEntryRow.user_id == user_id)
                .first()
            )
            if row:
                for column in _REPLACEABLE_COLUMNS:
                    setattr(row, column, columns[column])
                row.updated_at = datetime.now(timezone.utc)
            else:
                columns.pop("updated_at", None)
                row = JournalEntryRow(**columns)
                self.db.add(row)
            self.db.flush()

            # Full replace, never a diff
            (
                self.db.query(JournalAttachmentRow)
                .filter(JournalAttachmentRow.user_id == user_id)
                .filter(JournalAttachmentRow.journal_entry_id == entry.id)
                .delete(synchronize_session="fetch")
            )
            for attachment in record.journal_attachments:
                self.db.add(JournalAttachmentRow(**attachment.model_dump()))

            self.db.commit()

    def delete_entry(self, entry_id: str) -> None:
        """Delete the entry row; attachment rows follow via ON DELETE CASCADE."""
        user_id = self.require_user()
        with self._backend("delete"):
            (
                self.db.query(JournalEntryRow)
                .filter(JournalEntryRow.id == entry_id)
                .filter(JournalEntryRow.user_id == user_id)
                .delete(synchronize_session="fetch")
            )
            self.db.commit()
