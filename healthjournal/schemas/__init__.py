# healthjournal/schemas/__init__.py

from .journal_entry import (
    MoodLevel,
    AttachmentType,
    Attachment,
    JournalEntryFields,
    JournalEntryCreate,
    JournalEntry,
    JournalStats,
    MigrationStatus,
    MigrationResult,
    new_journal_entry,
)
from .remote_records import RemoteAttachmentRecord, RemoteJournalEntryRecord
from .user_auth import (
    Status,
    RegisterRequest,
    UserAuthOut,
    LoginRequest,
    TokenResponse,
    RefreshTokenRequest,
)


__all__ = [
    # Journal
    "MoodLevel", "AttachmentType", "Attachment",
    "JournalEntryFields", "JournalEntryCreate", "JournalEntry",
    "JournalStats", "MigrationStatus", "MigrationResult", "new_journal_entry",

    # Remote records
    "RemoteAttachmentRecord", "RemoteJournalEntryRecord",

    # Auth
    "Status", "RegisterRequest", "UserAuthOut",
    "LoginRequest", "TokenResponse", "RefreshTokenRequest",
]
