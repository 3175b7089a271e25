# models/user_auth.py

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean, DateTime, Uuid, Enum as SqlEnum
import enum
from sqlalchemy.orm import relationship
from healthjournal.core.config import Base


class Status(str, enum.Enum):
    active = "active"
    suspended = "suspended"
    deactivated = "deactivated"


class UserAuth(Base):
    __tablename__ = "user_auth"

    # ---- Base fields ----
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, unique=True, index=True)
    username = Column(String(50), nullable=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # ---- Account status ----
    status = Column(SqlEnum(Status), default=Status.active)
    is_verified = Column(Boolean, default=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    last_login_at = Column(DateTime, nullable=True)

    # ---- Relationships ----
    journal_entries = relationship("JournalEntryRow", back_populates="user", passive_deletes=True)
