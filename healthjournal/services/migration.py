import logging
from typing import List, Optional

from healthjournal.core.exceptions import JournalStoreError
from healthjournal.schemas.journal_entry import MigrationResult, MigrationStatus
from healthjournal.storage.local_cache import (
    BlobStatus,
    DecodedBlob,
    LocalCacheStore,
    SkippedItem,
)
from healthjournal.storage.remote_store import RemoteJournalStore

logger = logging.getLogger(__name__)


def _skipped_item_error(item: SkippedItem) -> str:
    if item.date:
        return f"Failed to migrate entry for {item.date}: invalid entry data"
    return f"Failed to migrate entry at index {item.index}: invalid entry data"


class MigrationService:
    """
    Moves entries written to the local cache into the remote tier.

    Talks to both tiers directly: a failed remote write must be reported,
    never redirected back into the local cache.
    """

    def __init__(
        self,
        remote: RemoteJournalStore,
        local: LocalCacheStore,
        diagnostics: Optional[logging.Logger] = None,
    ):
        self.remote = remote
        self.local = local
        self.diagnostics = diagnostics or logger

    @staticmethod
    def _pending(decoded: DecodedBlob) -> int:
        # items that failed validation are still waiting in the blob
        return len(decoded.entries) + decoded.skipped

    def has_local_data(self) -> bool:
        return self._pending(self.local.decode()) > 0

    def local_entry_count(self) -> int:
        return self._pending(self.local.decode())

    def status(self) -> MigrationStatus:
        pending = self._pending(self.local.decode())
        return MigrationStatus(has_local_data=pending > 0, local_entry_count=pending)

    def migrate(self) -> MigrationResult:
        """
        Save every locally cached entry to the remote tier.

        The local blob is cleared only when every item was saved. Items that
        fail validation count as failures, so the blob is kept for them too.
        After a partial failure the whole blob stays, including entries that
        did reach the remote tier; a rerun saves them again as upserts.

        Raises:
            Unauthenticated: no user is signed in; nothing is read or written.
        """
        self.remote.require_user()

        decoded = self.local.decode()
        if decoded.status is BlobStatus.MISSING:
            return MigrationResult(success=True, migrated_count=0)
        if decoded.status is BlobStatus.CORRUPT:
            self.diagnostics.warning("Local journal blob is corrupt; migration skipped")
            return MigrationResult(
                success=False,
                migrated_count=0,
                errors=["Migration failed: local journal data is corrupt"],
            )
        if not self._pending(decoded):
            return MigrationResult(success=True, migrated_count=0)

        migrated = 0
        errors: List[str] = [_skipped_item_error(item) for item in decoded.skipped_items]
        for entry in decoded.entries:
            try:
                self.remote.save_entry(entry)
                migrated += 1
            except JournalStoreError as exc:
                self.diagnostics.warning(f"Failed to migrate entry {entry.id}: {exc}")
                errors.append(f"Failed to migrate entry for {entry.date.isoformat()}: {exc}")

        if not errors:
            self.local.clear()

        self.diagnostics.info(
            f"Journal migration finished: {migrated} migrated, {len(errors)} failed"
        )
        return MigrationResult(success=not errors, migrated_count=migrated, errors=errors)
