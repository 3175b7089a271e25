# storage/queries.py
#
# Ordering and window rules shared by both tiers.

from datetime import date, timedelta
from typing import Iterable, List

from healthjournal.schemas.journal_entry import JournalEntry


def recent_cutoff(today: date, days: int) -> date:
    """First date included in a "last N days" window."""
    return today - timedelta(days=days)


def sort_newest_first(entries: Iterable[JournalEntry]) -> List[JournalEntry]:
    return sorted(entries, key=lambda e: (e.date, e.created_at), reverse=True)


def in_date_range(entry: JournalEntry, start: date, end: date) -> bool:
    return start <= entry.date <= end
