# healthjournal/models/__init__.py

from healthjournal.core.config import Base

# Import all models here so metadata.create_all sees every table
from .user_auth import UserAuth, Status
from .journal_entry import JournalEntryRow, JournalAttachmentRow

__all__ = [
    "Base",
    "UserAuth",
    "Status",
    "JournalEntryRow",
    "JournalAttachmentRow",
]
