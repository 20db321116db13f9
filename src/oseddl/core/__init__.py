"""Functional core - pure business logic with no I/O."""

from .catalogue import (
    CATEGORIES,
    CatalogueError,
    CatalogueParseError,
    DeadlineItem,
    EventData,
    TimelineEvent,
    is_ended,
    next_deadline,
    parse_catalogue,
)
from .ranking import FilterSelection, FlatEvent, apply_filters, build_view, flatten, rank
from .search import FuzzyIndex
from .countdown import TimeLeft, time_left

__all__ = [
    # Catalogue
    "CATEGORIES",
    "CatalogueError",
    "CatalogueParseError",
    "DeadlineItem",
    "EventData",
    "TimelineEvent",
    "is_ended",
    "next_deadline",
    "parse_catalogue",
    # Ranking
    "FilterSelection",
    "FlatEvent",
    "apply_filters",
    "build_view",
    "flatten",
    "rank",
    # Search
    "FuzzyIndex",
    # Countdown
    "TimeLeft",
    "time_left",
]
