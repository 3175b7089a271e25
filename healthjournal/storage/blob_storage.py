# storage/blob_storage.py
#
# Key -> string blob backends for the local tier.

import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol


class BlobStorage(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryBlobStorage:
    """Process-local dict backend."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._blobs: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def set(self, key: str, value: str) -> None:
        self._blobs[key] = value

    def remove(self, key: str) -> None:
        self._blobs.pop(key, None)


class FileBlobStorage:
    """One UTF-8 file per key under `directory`; writes replace the file atomically."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        safe_key = "".join(c if c.isalnum() or c in "-_." else "_" for c in key)
        return self.directory / f"{safe_key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, self._path(key))
        except OSError:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
