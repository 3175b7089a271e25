from typing import List, Optional
from datetime import date, datetime, timezone
import enum
import uuid

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ----------------------
# Enums
# ----------------------
class MoodLevel(int, enum.Enum):
    very_bad = 1
    bad = 2
    neutral = 3
    good = 4
    very_good = 5


class AttachmentType(str, enum.Enum):
    image = "image"
    document = "document"
    audio = "audio"
    video = "video"
    other = "other"


# Entries travel as camelCase JSON (local blob and API), snake_case in Python
class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )


def now_millis() -> int:
    """Current UTC time as epoch milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


# ----------------------
# Attachment
# ----------------------
class Attachment(CamelModel):
    id: str = Field(..., min_length=1)
    type: AttachmentType
    file_name: str
    file_size: int = Field(..., ge=0, description="Size in bytes")
    caption: Optional[str] = None
    data_url: str = Field(..., description="Inline data URL or file reference")
    uploaded_at: int = Field(..., description="Epoch milliseconds")


# ----------------------
# Journal entry
# ----------------------
class JournalEntryFields(CamelModel):
    """Everything the user edits; shared by create requests and entries."""

    date: date
    mood: MoodLevel
    mood_note: Optional[str] = None
    symptoms: List[str] = Field(default_factory=list)
    diet: List[str] = Field(default_factory=list)
    sleep_hours: float = Field(0.0, ge=0)
    sleep_quality: int = Field(..., ge=1, le=5)
    activities: List[str] = Field(default_factory=list)
    stress_level: int = Field(..., ge=1, le=5)
    notes: Optional[str] = None
    attachments: List[Attachment] = Field(default_factory=list)


class JournalEntry(JournalEntryFields):
    id: str = Field(..., min_length=1, max_length=64)
    created_at: int = Field(..., description="Epoch milliseconds, set once")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "5f0c8f3e-5b7a-4c1e-9d55-3b1e0f7f2a10",
                "date": "2024-03-14",
                "mood": 4,
                "moodNote": "Calm morning",
                "symptoms": ["headache"],
                "diet": ["oatmeal", "salad"],
                "sleepHours": 7.5,
                "sleepQuality": 4,
                "activities": ["walk"],
                "stressLevel": 2,
                "notes": "Drank more water",
                "attachments": [],
                "createdAt": 1710403200000,
            }
        }
    )


JournalEntryCreate = JournalEntryFields


def new_journal_entry(fields: JournalEntryFields) -> JournalEntry:
    """Give freshly written fields an id and a creation timestamp."""
    return JournalEntry(
        id=str(uuid.uuid4()),
        created_at=now_millis(),
        **fields.model_dump(),
    )


# ----------------------
# Aggregates / responses
# ----------------------
class JournalStats(CamelModel):
    storage_size_mb: float
    attachment_count: int
    tier: str


class MigrationStatus(CamelModel):
    has_local_data: bool
    local_entry_count: int


class MigrationResult(CamelModel):
    success: bool
    migrated_count: int = 0
    errors: List[str] = Field(default_factory=list)
