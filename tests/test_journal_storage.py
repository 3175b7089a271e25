"""Tests for the remote-first, local-fallback journal facade."""

import logging
from unittest.mock import MagicMock

import pytest

from healthjournal.core.exceptions import RemoteUnavailable
from healthjournal.services.journal_storage import (
    BYTES_PER_MB,
    JournalStorageService,
    Tier,
)
from healthjournal.storage.remote_store import RemoteJournalStore

from conftest import TODAY

pytestmark = pytest.mark.integration


@pytest.fixture()
def broken_remote():
    """A remote tier whose backend is down for every call."""
    remote = MagicMock(spec=RemoteJournalStore)
    outage = RemoteUnavailable("could not connect to server")
    for name in (
        "list_entries",
        "get_entry",
        "list_by_date_range",
        "list_recent",
        "save_entry",
        "delete_entry",
    ):
        getattr(remote, name).side_effect = outage
    return remote


class TestRemoteAvailable:
    def test_reads_and_writes_go_to_remote(self, remote_store, local_cache, make_entry):
        storage = JournalStorageService(remote_store, local_cache)

        saved = storage.save_entry(make_entry())
        listed = storage.list_entries()

        assert saved.tier is Tier.REMOTE
        assert listed.tier is Tier.REMOTE
        assert [e.id for e in listed.value] == ["entry-1"]
        assert local_cache.list_entries() == []

    def test_missing_entry_is_a_remote_none_not_a_fallback(self, remote_store, local_cache, make_entry):
        local_cache.save_entry(make_entry("only-local"))
        storage = JournalStorageService(remote_store, local_cache)

        result = storage.get_entry("only-local")

        assert result.tier is Tier.REMOTE
        assert result.value is None
        assert not result.from_fallback


class TestFallback:
    def test_list_returns_exactly_local_contents(self, broken_remote, local_cache, make_entry):
        local_cache.save_entry(make_entry("a"))
        local_cache.save_entry(make_entry("b"))
        storage = JournalStorageService(broken_remote, local_cache)

        result = storage.list_entries()

        assert result.tier is Tier.LOCAL
        assert result.value == local_cache.list_entries()
        assert result.fallback_reason == "could not connect to server"

    def test_every_operation_falls_back(self, broken_remote, local_cache, make_entry):
        storage = JournalStorageService(broken_remote, local_cache)

        assert storage.save_entry(make_entry("a")).tier is Tier.LOCAL
        assert storage.get_entry("a").value.id == "a"
        assert [e.id for e in storage.list_by_date_range(TODAY, TODAY).value] == ["a"]
        assert [e.id for e in storage.list_recent(1).value] == ["a"]
        assert storage.delete_entry("a").tier is Tier.LOCAL
        assert local_cache.list_entries() == []

    def test_unauthenticated_caller_uses_local_tier(self, anonymous_remote_store, local_cache, make_entry):
        storage = JournalStorageService(anonymous_remote_store, local_cache)

        result = storage.save_entry(make_entry())

        assert result.tier is Tier.LOCAL
        assert [e.id for e in local_cache.list_entries()] == ["entry-1"]

    def test_tiers_are_not_merged(self, db, user_id, local_cache, make_entry):
        remote = RemoteJournalStore(db, current_user=lambda: user_id)
        remote.save_entry(make_entry("remote-only"))
        local_cache.save_entry(make_entry("local-only"))

        result = JournalStorageService(remote, local_cache).list_entries()

        assert [e.id for e in result.value] == ["remote-only"]

    def test_fallback_is_logged_through_injected_sink(self, broken_remote, local_cache, caplog):
        sink = logging.getLogger("tests.journal.fallback")
        storage = JournalStorageService(broken_remote, local_cache, diagnostics=sink)

        with caplog.at_level(logging.WARNING, logger="tests.journal.fallback"):
            storage.list_entries()

        assert any("falling back to local cache" in r.message for r in caplog.records)

    def test_unexpected_remote_error_still_falls_back(self, local_cache):
        remote = MagicMock(spec=RemoteJournalStore)
        remote.list_entries.side_effect = KeyError("mood")

        result = JournalStorageService(remote, local_cache).list_entries()

        assert result.tier is Tier.LOCAL
        assert "KeyError" in result.fallback_reason

    def test_without_remote_tier_everything_is_local(self, local_cache, make_entry):
        storage = JournalStorageService(None, local_cache)

        storage.save_entry(make_entry())

        assert storage.list_entries().tier is Tier.LOCAL
        assert local_cache.get_entry("entry-1") is not None


class TestAggregates:
    def test_size_and_count_over_remote(self, remote_store, local_cache, make_entry, make_attachment):
        storage = JournalStorageService(remote_store, local_cache)
        storage.save_entry(make_entry("a", attachments=[
            make_attachment("x", file_size=BYTES_PER_MB),
            make_attachment("y", file_size=BYTES_PER_MB // 2),
        ]))
        storage.save_entry(make_entry("b", attachments=[make_attachment("z", file_size=0)]))

        size = storage.storage_size_mb()
        count = storage.attachment_count()

        assert size.tier is Tier.REMOTE
        assert size.value == pytest.approx(1.5)
        assert count.value == 3

    def test_aggregates_inherit_fallback(self, broken_remote, local_cache, make_entry, make_attachment):
        local_cache.save_entry(make_entry(attachments=[make_attachment(file_size=BYTES_PER_MB)]))
        storage = JournalStorageService(broken_remote, local_cache)

        assert storage.storage_size_mb().tier is Tier.LOCAL
        assert storage.storage_size_mb().value == pytest.approx(1.0)
        assert storage.attachment_count().value == 1

    def test_empty_journal(self, remote_store, local_cache):
        storage = JournalStorageService(remote_store, local_cache)

        assert storage.storage_size_mb().value == 0
        assert storage.attachment_count().value == 0

    def test_usage_reads_the_journal_once(self, local_cache, make_entry, make_attachment):
        remote = MagicMock(spec=RemoteJournalStore)
        remote.list_entries.side_effect = [
            [make_entry(attachments=[make_attachment(file_size=BYTES_PER_MB)])],
            RemoteUnavailable("connection reset"),
        ]

        result = JournalStorageService(remote, local_cache).attachment_usage()

        assert remote.list_entries.call_count == 1
        assert result.tier is Tier.REMOTE
        assert result.value.storage_size_mb == pytest.approx(1.0)
        assert result.value.attachment_count == 1
