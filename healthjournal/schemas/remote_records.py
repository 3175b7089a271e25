# schemas/remote_records.py
#
# Row-shaped views of the relational tables. Values are read straight off the
# ORM rows (from_attributes) and written back as plain column dicts.

from typing import List, Optional
from uuid import UUID
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class RemoteAttachmentRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: Optional[UUID] = None
    journal_entry_id: str
    position: int = 0
    type: str
    file_name: str
    file_size: int
    data_url: str
    caption: Optional[str] = None
    uploaded_at: datetime


class RemoteJournalEntryRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: Optional[UUID] = None
    date: date
    mood: int
    mood_note: Optional[str] = None
    symptoms: List[str] = Field(default_factory=list)
    diet: List[str] = Field(default_factory=list)
    sleep_hours: float
    sleep_quality: int
    activities: List[str] = Field(default_factory=list)
    stress_level: int
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    journal_attachments: List[RemoteAttachmentRecord] = Field(default_factory=list)

    def entry_columns(self) -> dict:
        """Column values for the journal_entries row (no child rows)."""
        return self.model_dump(exclude={"journal_attachments"})
