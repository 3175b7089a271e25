# healthjournal/api/deps.py
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from healthjournal.core.config import get_db, settings
from healthjournal.core.security import get_current_user_optional
from healthjournal.models.user_auth import UserAuth
from healthjournal.services.journal_storage import JournalStorageService
from healthjournal.services.migration import MigrationService
from healthjournal.storage.blob_storage import BlobStorage, FileBlobStorage
from healthjournal.storage.local_cache import LocalCacheStore
from healthjournal.storage.remote_store import RemoteJournalStore

DEVICE_HEADER = "X-Device-Id"
DEVICE_ID_PATTERN = r"^[A-Za-z0-9_-]{8,64}$"


def local_cache_key(device_id: str) -> str:
    """Blob key of one device's local journal."""
    return f"{settings.LOCAL_CACHE_KEY}.{device_id}"


def get_blob_storage() -> BlobStorage:
    """Files under settings.LOCAL_CACHE_DIR."""
    return FileBlobStorage(settings.LOCAL_CACHE_DIR)


def get_local_cache(
    device_id: str = Header(
        ...,
        alias=DEVICE_HEADER,
        pattern=DEVICE_ID_PATTERN,
        description="Stable id of the calling device; selects its local journal",
    ),
    storage: BlobStorage = Depends(get_blob_storage),
) -> LocalCacheStore:
    """
    Local tier of the calling device.

    Each device gets its own blob, so fallback reads and writes never cross
    devices and a migration only moves the caller's own offline entries.
    """
    return LocalCacheStore(storage, key=local_cache_key(device_id))


def get_remote_store(
    db: Session = Depends(get_db),
    current_user: Optional[UserAuth] = Depends(get_current_user_optional),
) -> RemoteJournalStore:
    """Remote tier scoped to the caller; resolves to no user without a token."""
    user_id = current_user.id if current_user else None
    return RemoteJournalStore(db, current_user=lambda: user_id)


def get_journal_storage(
    remote: RemoteJournalStore = Depends(get_remote_store),
    local: LocalCacheStore = Depends(get_local_cache),
) -> JournalStorageService:
    return JournalStorageService(remote=remote, local=local)


def get_migration_service(
    remote: RemoteJournalStore = Depends(get_remote_store),
    local: LocalCacheStore = Depends(get_local_cache),
) -> MigrationService:
    return MigrationService(remote=remote, local=local)
