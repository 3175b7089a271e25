import os
import tempfile

# Settings are read at import time; keep tests off the real database and cache
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOCAL_CACHE_DIR"] = tempfile.mkdtemp(prefix="journal-cache-")

from datetime import date

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from healthjournal import models
from healthjournal.core.config import Base, build_engine
from healthjournal.schemas.journal_entry import Attachment, JournalEntry
from healthjournal.storage.blob_storage import MemoryBlobStorage
from healthjournal.storage.local_cache import LocalCacheStore
from healthjournal.storage.remote_store import RemoteJournalStore

TODAY = date(2024, 3, 20)
CACHE_KEY = "test_health_journal"


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


# ==================== Database ====================
@pytest.fixture()
def engine():
    """Fresh in-memory database per test, foreign keys enforced."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def _add_user(db, email):
    user = models.UserAuth(email=email, password_hash="not-a-real-hash")
    db.add(user)
    db.commit()
    return user.id


@pytest.fixture()
def user_id(db):
    return _add_user(db, "journal-tester@example.com")


@pytest.fixture()
def other_user_id(db):
    return _add_user(db, "someone-else@example.com")


# ==================== Tiers ====================
@pytest.fixture()
def blob_storage():
    return MemoryBlobStorage()


@pytest.fixture()
def local_cache(blob_storage):
    return LocalCacheStore(blob_storage, key=CACHE_KEY, today=lambda: TODAY)


@pytest.fixture()
def remote_store(db, user_id):
    return RemoteJournalStore(db, current_user=lambda: user_id, today=lambda: TODAY)


@pytest.fixture()
def anonymous_remote_store(db):
    return RemoteJournalStore(db, current_user=lambda: None, today=lambda: TODAY)


# ==================== Entries ====================
@pytest.fixture()
def make_attachment():
    def _make(attachment_id="att-1", **overrides):
        values = dict(
            id=attachment_id,
            type="image",
            file_name=f"{attachment_id}.png",
            file_size=2048,
            caption=None,
            data_url=f"data:image/png;base64,{attachment_id}",
            uploaded_at=1710403200123,
        )
        values.update(overrides)
        return Attachment(**values)

    return _make


@pytest.fixture()
def make_entry():
    def _make(entry_id="entry-1", entry_date=TODAY, **overrides):
        values = dict(
            id=entry_id,
            date=entry_date,
            mood=4,
            mood_note="Rested",
            symptoms=["headache", "fatigue"],
            diet=["oatmeal"],
            sleep_hours=7.5,
            sleep_quality=4,
            activities=["walk"],
            stress_level=2,
            notes="Felt fine after lunch",
            attachments=[],
            created_at=1710403200456,
        )
        values.update(overrides)
        return JournalEntry(**values)

    return _make
