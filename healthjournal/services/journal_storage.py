import enum
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Generic, List, Optional, TypeVar

from healthjournal.core.exceptions import JournalStoreError
from healthjournal.schemas.journal_entry import JournalEntry
from healthjournal.storage.local_cache import LocalCacheStore
from healthjournal.storage.remote_store import RemoteJournalStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

BYTES_PER_MB = 1024 * 1024


class Tier(str, enum.Enum):
    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True)
class TierResult(Generic[T]):
    """The value of one storage call and the tier that produced it."""

    tier: Tier
    value: T
    fallback_reason: Optional[str] = None

    @property
    def from_fallback(self) -> bool:
        return self.tier is Tier.LOCAL


@dataclass(frozen=True)
class AttachmentUsage:
    storage_size_mb: float
    attachment_count: int


def _total_bytes(entries: List[JournalEntry]) -> int:
    return sum(a.file_size for entry in entries for a in entry.attachments)


def _attachment_count(entries: List[JournalEntry]) -> int:
    return sum(len(entry.attachments) for entry in entries)


class JournalStorageService:
    """
    Public persistence facade for journal entries.

    Every call goes to the remote tier first. When it fails (no user, backend
    down) the same call is served by the local tier instead. Exactly one tier
    answers each call; the tiers are never merged here.
    """

    def __init__(
        self,
        remote: Optional[RemoteJournalStore],
        local: LocalCacheStore,
        diagnostics: Optional[logging.Logger] = None,
    ):
        self.remote = remote
        self.local = local
        self.diagnostics = diagnostics or logger

    # ====================================================
    # DISPATCH
    # ====================================================

    def _dispatch(
        self,
        operation: str,
        remote_call: Callable[[RemoteJournalStore], T],
        local_call: Callable[[LocalCacheStore], T],
    ) -> TierResult[T]:
        if self.remote is None:
            reason = "remote tier not configured"
        else:
            try:
                return TierResult(Tier.REMOTE, remote_call(self.remote))
            except JournalStoreError as exc:
                reason = str(exc)
            except Exception as exc:
                self.diagnostics.error(
                    f"Unexpected remote journal {operation} failure", exc_info=exc
                )
                reason = f"{type(exc).__name__}: {exc}"

        self.diagnostics.warning(
            f"Journal {operation} falling back to local cache: {reason}"
        )
        return TierResult(Tier.LOCAL, local_call(self.local), fallback_reason=reason)

    # ====================================================
    # ENTRY OPERATIONS
    # ====================================================

    def list_entries(self) -> TierResult[List[JournalEntry]]:
        return self._dispatch(
            "list",
            lambda remote: remote.list_entries(),
            lambda local: local.list_entries(),
        )

    def get_entry(self, entry_id: str) -> TierResult[Optional[JournalEntry]]:
        return self._dispatch(
            "get",
            lambda remote: remote.get_entry(entry_id),
            lambda local: local.get_entry(entry_id),
        )

    def list_by_date_range(
        self, start: date, end: date
    ) -> TierResult[List[JournalEntry]]:
        return self._dispatch(
            "list_by_date_range",
            lambda remote: remote.list_by_date_range(start, end),
            lambda local: local.list_by_date_range(start, end),
        )

    def list_recent(self, days: int = 30) -> TierResult[List[JournalEntry]]:
        return self._dispatch(
            "list_recent",
            lambda remote: remote.list_recent(days),
            lambda local: local.list_recent(days),
        )

    def save_entry(self, entry: JournalEntry) -> TierResult[None]:
        return self._dispatch(
            "save",
            lambda remote: remote.save_entry(entry),
            lambda local: local.save_entry(entry),
        )

    def delete_entry(self, entry_id: str) -> TierResult[None]:
        return self._dispatch(
            "delete",
            lambda remote: remote.delete_entry(entry_id),
            lambda local: local.delete_entry(entry_id),
        )

    # ====================================================
    # AGGREGATES (computed over list_entries)
    # ====================================================

    def attachment_usage(self) -> TierResult[AttachmentUsage]:
        """Size and count of all attachments, both taken from one listing."""
        listed = self.list_entries()
        usage = AttachmentUsage(
            storage_size_mb=_total_bytes(listed.value) / BYTES_PER_MB,
            attachment_count=_attachment_count(listed.value),
        )
        return TierResult(listed.tier, usage, listed.fallback_reason)

    def storage_size_mb(self) -> TierResult[float]:
        """Total attachment size of the journal, in MiB."""
        listed = self.list_entries()
        return TierResult(
            listed.tier, _total_bytes(listed.value) / BYTES_PER_MB, listed.fallback_reason
        )

    def attachment_count(self) -> TierResult[int]:
        listed = self.list_entries()
        return TierResult(
            listed.tier, _attachment_count(listed.value), listed.fallback_reason
        )
