"""Flattening, filtering and ranking of deadline events - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable, Sequence

from .catalogue import DeadlineItem, EventData


@dataclass(frozen=True)
class FlatEvent:
    """One (item, event) pair annotated with the time to its next deadline."""

    item: DeadlineItem
    event: EventData
    time_remaining: timedelta

    @property
    def ended(self) -> bool:
        return self.time_remaining < timedelta(0)


@dataclass(frozen=True)
class FilterSelection:
    """Active filters. Multi-valued dimensions match if any value matches."""

    category: str | None = None
    tags: frozenset[str] = field(default_factory=frozenset)
    locations: frozenset[str] = field(default_factory=frozenset)
    search_query: str = ""
    favorites_only: bool = False


def time_remaining(event: EventData, now: datetime) -> timedelta:
    """
    Signed time until the event's next deadline.

    Positive: time until the earliest future deadline.
    Zero or negative: time since the last timeline entry's deadline.
    """
    upcoming = [d for d in (t.due for t in event.timeline) if d > now]
    if upcoming:
        return min(upcoming) - now
    return event.timeline[-1].due - now


def flatten(items: Iterable[DeadlineItem], now: datetime | None = None) -> list[FlatEvent]:
    """
    Expand every item into one record per event.

    Pure function - no I/O.
    """
    now = now or datetime.now(timezone.utc)
    return [
        FlatEvent(item=item, event=event, time_remaining=time_remaining(event, now))
        for item in items
        for event in item.events
    ]


def matches(
    record: FlatEvent,
    selection: FilterSelection,
    favorites: Iterable[str] = (),
) -> bool:
    """Check a record against the favorites, category, tag and location filters."""
    if selection.favorites_only and record.event.id not in favorites:
        return False
    if selection.category and record.item.category != selection.category:
        return False
    if selection.tags and selection.tags.isdisjoint(record.item.tags):
        return False
    if selection.locations and record.event.place not in selection.locations:
        return False
    return True


def apply_filters(
    records: Sequence[FlatEvent],
    selection: FilterSelection,
    favorites: Iterable[str] = (),
) -> list[FlatEvent]:
    """Filter records; the search query is handled by the caller's index."""
    favorites = frozenset(favorites)
    return [r for r in records if matches(r, selection, favorites)]


def rank(records: Iterable[FlatEvent]) -> list[FlatEvent]:
    """
    Order records for display.

    Upcoming records first, soonest deadline first. Ended records after,
    most recently ended first. Ties keep their input order.
    Pure function - no I/O.
    """

    def sort_key(r: FlatEvent) -> tuple[bool, timedelta]:
        # Negate ended durations so the one closest to zero comes first
        if r.ended:
            return (True, -r.time_remaining)
        return (False, r.time_remaining)

    return sorted(records, key=sort_key)


def build_view(
    records: Sequence[FlatEvent],
    selection: FilterSelection,
    favorites: Iterable[str] = (),
    index=None,
) -> list[FlatEvent]:
    """
    Produce the final ordered list for a selection.

    A non-blank query replaces the candidates with the index's matches
    before the other filters run. The index must have been built over
    `records` (or a flattening of the same catalogue).
    """
    query = selection.search_query.strip()
    if query and index is not None:
        candidates = [records[i] for i in index.search(query)]
    else:
        candidates = list(records)
    return rank(apply_filters(candidates, selection, favorites))


def next_boundary(records: Iterable[FlatEvent], now: datetime) -> datetime | None:
    """When the soonest upcoming deadline passes, or None if nothing is upcoming."""
    remaining = [r.time_remaining for r in records if r.time_remaining > timedelta(0)]
    if not remaining:
        return None
    return now + min(remaining)


def available_tags(items: Iterable[DeadlineItem]) -> list[str]:
    """Distinct tags across the catalogue, in first-seen order."""
    return list(dict.fromkeys(tag for item in items for tag in item.tags))


def available_locations(items: Iterable[DeadlineItem]) -> list[str]:
    """Distinct event places across the catalogue, sorted."""
    return sorted({event.place for item in items for event in item.events})
