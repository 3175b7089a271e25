# healthjournal/storage/__init__.py

from .blob_storage import BlobStorage, FileBlobStorage, MemoryBlobStorage
from .local_cache import BlobStatus, DecodedBlob, LocalCacheStore
from .remote_store import RemoteJournalStore

__all__ = [
    "BlobStorage",
    "FileBlobStorage",
    "MemoryBlobStorage",
    "BlobStatus",
    "DecodedBlob",
    "LocalCacheStore",
    "RemoteJournalStore",
]
