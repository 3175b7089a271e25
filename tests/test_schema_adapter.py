"""Tests for conversion between journal entries and relational records."""

from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest

from healthjournal.schemas.journal_entry import AttachmentType, MoodLevel
from healthjournal.schemas.remote_records import RemoteJournalEntryRecord
from healthjournal.storage.schema_adapter import (
    datetime_to_millis,
    from_remote,
    millis_to_datetime,
    to_remote,
)

pytestmark = pytest.mark.unit


class TestRoundTrip:
    def test_entry_with_attachments_round_trips(self, make_entry, make_attachment):
        entry = make_entry(
            attachments=[
                make_attachment("att-b", caption="rash photo"),
                make_attachment("att-a", type="document", file_size=0),
            ]
        )

        assert from_remote(to_remote(entry, user_id=uuid4())) == entry

    def test_optional_fields_round_trip_as_none(self, make_entry):
        entry = make_entry(mood_note=None, notes=None, symptoms=[], diet=[], activities=[])

        assert from_remote(to_remote(entry)) == entry

    def test_millisecond_timestamps_are_exact(self):
        for millis in (0, 1, 1710403200999, 4102444800001):
            assert datetime_to_millis(millis_to_datetime(millis)) == millis


class TestToRemote:
    def test_maps_field_names_and_ownership(self, make_entry, make_attachment):
        user_id = uuid4()
        entry = make_entry(sleep_hours=6.25, stress_level=5, attachments=[make_attachment()])
        record = to_remote(entry, user_id=user_id)

        assert record.user_id == user_id
        assert [a.user_id for a in record.journal_attachments] == [user_id]
        assert record.sleep_hours == 6.25
        assert record.stress_level == 5
        assert record.mood == 4
        assert record.updated_at is None

    def test_attachment_rows_reference_entry_in_order(self, make_entry, make_attachment):
        entry = make_entry(
            "entry-9",
            attachments=[make_attachment("z"), make_attachment("y"), make_attachment("x")],
        )

        rows = to_remote(entry).journal_attachments

        assert [r.id for r in rows] == ["z", "y", "x"]
        assert [r.position for r in rows] == [0, 1, 2]
        assert {r.journal_entry_id for r in rows} == {"entry-9"}

    def test_entry_columns_exclude_child_rows(self, make_entry, make_attachment):
        columns = to_remote(make_entry(attachments=[make_attachment()])).entry_columns()

        assert "journal_attachments" not in columns
        assert columns["id"] == "entry-1"


class TestFromRemote:
    def _record(self, **overrides):
        values = dict(
            id="entry-1",
            user_id=uuid4(),
            date=date(2024, 3, 1),
            mood=2,
            sleep_hours=5.0,
            sleep_quality=2,
            stress_level=4,
            created_at=datetime(2024, 3, 1, 8, 30),
            updated_at=datetime(2024, 3, 2, 9, 0),
            journal_attachments=[],
        )
        values.update(overrides)
        return RemoteJournalEntryRecord(**values)

    def test_drops_server_only_columns(self):
        entry = from_remote(self._record())

        dumped = entry.model_dump()
        assert "updated_at" not in dumped
        assert "user_id" not in dumped
        assert entry.mood is MoodLevel.bad

    def test_orders_attachments_by_position(self):
        uploaded = datetime(2024, 3, 1, 9, 0)
        record = self._record(
            journal_attachments=[
                dict(id="second", journal_entry_id="entry-1", position=1, type="video",
                     file_name="b.mp4", file_size=10, data_url="ref:b", uploaded_at=uploaded),
                dict(id="first", journal_entry_id="entry-1", position=0, type="image",
                     file_name="a.png", file_size=5, data_url="ref:a", uploaded_at=uploaded),
            ]
        )

        entry = from_remote(record)

        assert [a.id for a in entry.attachments] == ["first", "second"]
        assert entry.attachments[1].type is AttachmentType.video

    def test_timezone_aware_timestamps_are_read_as_utc(self):
        aware = datetime(2024, 3, 1, 10, 30, tzinfo=timezone(timedelta(hours=2)))
        naive_utc = datetime(2024, 3, 1, 8, 30)

        from_aware = from_remote(self._record(created_at=aware))
        from_naive = from_remote(self._record(created_at=naive_utc))

        assert from_aware.created_at == from_naive.created_at
