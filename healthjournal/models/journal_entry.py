# models/journal_entry.py

from datetime import datetime, timezone
from sqlalchemy import (
    Column, Date, DateTime, Float, ForeignKey, ForeignKeyConstraint, Integer,
    JSON, String, Text, Uuid,
)
from sqlalchemy.orm import relationship
from healthjournal.core.config import Base


class JournalEntryRow(Base):
    __tablename__ = "journal_entries"

    # id is assigned by the client and only unique within one user's journal
    user_id = Column(Uuid(as_uuid=True), ForeignKey("user_auth.id", ondelete="CASCADE"), primary_key=True, index=True)
    id = Column(String(64), primary_key=True)
    date = Column(Date, nullable=False, index=True)

    mood = Column(Integer, nullable=False)
    mood_note = Column(Text, nullable=True)
    symptoms = Column(JSON, nullable=False, default=list)
    diet = Column(JSON, nullable=False, default=list)
    sleep_hours = Column(Float, nullable=False, default=0.0)
    sleep_quality = Column(Integer, nullable=False)
    activities = Column(JSON, nullable=False, default=list)
    stress_level = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Rows are removed by the database cascade, never by the ORM
    journal_attachments = relationship(
        "JournalAttachmentRow",
        back_populates="journal_entry",
        order_by="JournalAttachmentRow.position",
        passive_deletes=True,
    )
    user = relationship("UserAuth", back_populates="journal_entries")


class JournalAttachmentRow(Base):
    __tablename__ = "journal_attachments"
    __table_args__ = (
        ForeignKeyConstraint(
            ["user_id", "journal_entry_id"],
            ["journal_entries.user_id", "journal_entries.id"],
            ondelete="CASCADE",
        ),
    )

    row_id = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    journal_entry_id = Column(String(64), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    type = Column(String(32), nullable=False)
    file_name = Column(String(255), nullable=False)
    file_size = Column(Integer, nullable=False, default=0)
    data_url = Column(Text, nullable=False)
    caption = Column(Text, nullable=True)
    uploaded_at = Column(DateTime, nullable=False)

    journal_entry = relationship("JournalEntryRow", back_populates="journal_attachments")
