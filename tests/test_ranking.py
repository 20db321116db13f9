"""Tests for flattening, filtering and ranking."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from oseddl.core.catalogue import DeadlineItem, EventData, TimelineEvent, is_ended
from oseddl.core.ranking import (
    FilterSelection,
    FlatEvent,
    apply_filters,
    available_locations,
    available_tags,
    build_view,
    flatten,
    matches,
    next_boundary,
    rank,
    time_remaining,
)
from oseddl.core.search import FuzzyIndex


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_event(event_id: str, *deadlines: datetime | str, place: str = "Shanghai") -> EventData:
    return EventData(
        id=event_id,
        year=2025,
        link=f"https://example.org/{event_id}",
        timeline=tuple(
            TimelineEvent(deadline=d if isinstance(d, str) else d.isoformat(), comment=f"step {i}")
            for i, d in enumerate(deadlines)
        ),
        timezone="UTC+8",
        date="2025-06-01",
        place=place,
    )


def make_item(title: str, *events: EventData, category: str = "conference", tags=()) -> DeadlineItem:
    return DeadlineItem(
        title=title,
        description=f"{title} description",
        category=category,
        tags=tuple(tags),
        events=tuple(events),
    )


@pytest.fixture
def catalogue(now):
    """Three series, five events, a mix of upcoming and ended."""
    return [
        make_item(
            "KubeCon",
            make_event("kubecon-2024", now - timedelta(days=200), place="Hong Kong"),
            make_event("kubecon-2025", now + timedelta(days=20), place="Hong Kong"),
            tags=["kubernetes", "cloud"],
        ),
        make_item(
            "OSPP",
            make_event("ospp-2025", now + timedelta(days=3), now + timedelta(days=60), place="Online"),
            category="competition",
            tags=["students"],
        ),
        make_item(
            "Hackathon",
            make_event("hack-2024", now - timedelta(hours=5), place="Beijing"),
            make_event("hack-2025", now + timedelta(days=1), place="Shanghai"),
            category="activity",
            tags=["cloud", "ai"],
        ),
    ]


class TestTimeRemaining:
    def test_past_only_is_negative(self, now):
        event = make_event("old", "2020-01-01")
        assert time_remaining(event, now) < timedelta(0)

    def test_earliest_future_deadline(self, now):
        t1 = now + timedelta(days=2)
        t2 = now + timedelta(days=7)
        event = make_event("e", t2, t1)
        assert time_remaining(event, now) == t1 - now

    def test_skips_past_entries(self, now):
        event = make_event("e", now - timedelta(days=1), now + timedelta(hours=3))
        assert time_remaining(event, now) == timedelta(hours=3)

    def test_ended_measures_from_last_entry(self, now):
        event = make_event("e", now - timedelta(days=1), now - timedelta(days=10))
        assert time_remaining(event, now) == timedelta(days=-10)

    def test_deadline_exactly_now_is_zero(self, now):
        assert time_remaining(make_event("e", now), now) == timedelta(0)


class TestFlatten:
    def test_count_preserved(self, catalogue, now):
        records = flatten(catalogue, now)
        assert len(records) == sum(len(item.events) for item in catalogue)

    def test_order_follows_catalogue(self, catalogue, now):
        ids = [r.event.id for r in flatten(catalogue, now)]
        assert ids == ["kubecon-2024", "kubecon-2025", "ospp-2025", "hack-2024", "hack-2025"]

    def test_consistent_with_is_ended(self, catalogue, now):
        for record in flatten(catalogue, now):
            assert record.ended == is_ended(record.event, now)

    def test_empty_catalogue(self, now):
        assert flatten([], now) == []

    def test_scenario_past_event_sorts_last(self, now):
        items = [
            make_item("Old", make_event("old", "2020-01-01")),
            make_item("New", make_event("new", now + timedelta(days=1))),
        ]
        records = rank(flatten(items, now))
        assert records[-1].event.id == "old"
        assert records[-1].ended
        assert is_ended(records[-1].event, now)


class TestRank:
    def record(self, event_id: str, remaining: timedelta) -> FlatEvent:
        item = make_item(event_id, make_event(event_id, "2025-01-01"))
        return FlatEvent(item=item, event=item.events[0], time_remaining=remaining)

    def test_soonest_upcoming_first(self):
        five = self.record("five", timedelta(days=5))
        one = self.record("one", timedelta(days=1))
        assert [r.event.id for r in rank([five, one])] == ["one", "five"]

    def test_most_recently_ended_first(self):
        old = self.record("old", -timedelta(days=10))
        fresh = self.record("fresh", -timedelta(hours=1))
        assert [r.event.id for r in rank([old, fresh])] == ["fresh", "old"]

    def test_upcoming_always_before_ended(self):
        far = self.record("far", timedelta(days=365))
        just_ended = self.record("just", -timedelta(seconds=1))
        assert [r.event.id for r in rank([just_ended, far])] == ["far", "just"]

    def test_zero_counts_as_upcoming(self):
        zero = self.record("zero", timedelta(0))
        ended = self.record("ended", -timedelta(seconds=1))
        assert [r.event.id for r in rank([ended, zero])] == ["zero", "ended"]

    def test_ties_keep_input_order(self):
        a = self.record("a", timedelta(days=1))
        b = self.record("b", timedelta(days=1))
        assert [r.event.id for r in rank([b, a])] == ["b", "a"]

    def test_no_upcoming_after_ended(self, catalogue, now):
        records = rank(flatten(catalogue, now))
        flags = [r.ended for r in records]
        assert flags == sorted(flags)

    def test_deterministic(self, catalogue, now):
        records = flatten(catalogue, now)
        assert rank(records) == rank(records)


class TestFilters:
    def ids(self, records):
        return {r.event.id for r in records}

    def test_no_selection_keeps_all(self, catalogue, now):
        records = flatten(catalogue, now)
        assert apply_filters(records, FilterSelection()) == records

    def test_category(self, catalogue, now):
        result = apply_filters(flatten(catalogue, now), FilterSelection(category="activity"))
        assert self.ids(result) == {"hack-2024", "hack-2025"}

    def test_tags_any(self, catalogue, now):
        selection = FilterSelection(tags=frozenset({"students", "ai"}))
        result = apply_filters(flatten(catalogue, now), selection)
        assert self.ids(result) == {"ospp-2025", "hack-2024", "hack-2025"}

    def test_locations_any(self, catalogue, now):
        selection = FilterSelection(locations=frozenset({"Online", "Beijing"}))
        result = apply_filters(flatten(catalogue, now), selection)
        assert self.ids(result) == {"ospp-2025", "hack-2024"}

    def test_favorites_only_uses_event_ids(self, catalogue, now):
        selection = FilterSelection(favorites_only=True)
        result = apply_filters(flatten(catalogue, now), selection, {"kubecon-2025", "KubeCon"})
        assert self.ids(result) == {"kubecon-2025"}

    def test_favorites_ignored_when_not_only(self, catalogue, now):
        result = apply_filters(flatten(catalogue, now), FilterSelection(), set())
        assert len(result) == 5

    def test_dimensions_combine_with_and(self, catalogue, now):
        selection = FilterSelection(tags=frozenset({"cloud"}), locations=frozenset({"Shanghai"}))
        result = apply_filters(flatten(catalogue, now), selection)
        assert self.ids(result) == {"hack-2025"}

    def test_order_independent(self, catalogue, now):
        records = flatten(catalogue, now)
        favorites = {"kubecon-2025", "hack-2025", "ospp-2025"}
        stages = [
            FilterSelection(favorites_only=True),
            FilterSelection(category="activity"),
            FilterSelection(tags=frozenset({"cloud"})),
            FilterSelection(locations=frozenset({"Shanghai", "Hong Kong"})),
        ]
        expected = None
        for order in itertools.permutations(stages):
            result = records
            for stage in order:
                result = apply_filters(result, stage, favorites)
            if expected is None:
                expected = self.ids(result)
            assert self.ids(result) == expected
        assert expected == {"hack-2025"}

    def test_matches_single_record(self, catalogue, now):
        record = flatten(catalogue, now)[0]
        assert matches(record, FilterSelection(category="conference"))
        assert not matches(record, FilterSelection(category="competition"))


class TestBuildView:
    def test_ranks_filtered_records(self, catalogue, now):
        view = build_view(flatten(catalogue, now), FilterSelection())
        assert [r.event.id for r in view] == [
            "hack-2025",
            "ospp-2025",
            "kubecon-2025",
            "hack-2024",
            "kubecon-2024",
        ]

    def test_query_replaces_candidates(self, catalogue, now):
        records = flatten(catalogue, now)
        index = FuzzyIndex(records)
        view = build_view(records, FilterSelection(search_query="kubecon"), index=index)
        assert {r.event.id for r in view} == {"kubecon-2024", "kubecon-2025"}
        assert view[0].event.id == "kubecon-2025"

    def test_blank_query_bypasses_index(self, catalogue, now):
        records = flatten(catalogue, now)
        index = FuzzyIndex(records)
        view = build_view(records, FilterSelection(search_query="   "), index=index)
        assert len(view) == 5

    def test_query_and_filters_combine(self, catalogue, now):
        records = flatten(catalogue, now)
        selection = FilterSelection(search_query="cloud", category="activity")
        view = build_view(records, selection, index=FuzzyIndex(records))
        assert {r.event.id for r in view} == {"hack-2024", "hack-2025"}


class TestNextBoundary:
    def test_soonest_upcoming(self, catalogue, now):
        assert next_boundary(flatten(catalogue, now), now) == now + timedelta(days=1)

    def test_none_when_all_ended(self, now):
        records = flatten([make_item("Old", make_event("old", "2020-01-01"))], now)
        assert next_boundary(records, now) is None


class TestFilterOptions:
    def test_tags_first_seen_order(self, catalogue):
        assert available_tags(catalogue) == ["kubernetes", "cloud", "students", "ai"]

    def test_locations_sorted_unique(self, catalogue):
        assert available_locations(catalogue) == ["Beijing", "Hong Kong", "Online", "Shanghai"]
