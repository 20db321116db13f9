"""Pure catalogue domain logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import datetime, timezone

CATEGORIES = ("conference", "competition", "activity")


class CatalogueError(Exception):
    """Base class for catalogue loading failures."""

    pass


class CatalogueParseError(CatalogueError):
    """Raised when catalogue data does not match the expected shape."""

    pass


def parse_deadline(text: str) -> datetime:
    """
    Parse a deadline string into an aware datetime.

    A bare date is midnight UTC, a date-time without offset is local time,
    anything with an offset keeps it.
    """
    try:
        dt = datetime.fromisoformat(text.strip().replace("Z", "+00:00"))
    except (AttributeError, ValueError) as e:
        raise CatalogueParseError(f"Invalid deadline: {text!r}") from e

    if dt.tzinfo is not None:
        return dt
    if "T" not in text and " " not in text.strip():
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone()


def _require(data: dict, key: str, kind: type | tuple[type, ...]):
    if not isinstance(data, dict):
        raise CatalogueParseError(f"Expected an object, got {type(data).__name__}")
    if key not in data:
        raise CatalogueParseError(f"Missing field '{key}'")
    value = data[key]
    # bool is an int subclass
    if not isinstance(value, kind) or (isinstance(value, bool) and kind is int):
        raise CatalogueParseError(f"Field '{key}' has wrong type {type(value).__name__}")
    return value


@dataclass(frozen=True)
class TimelineEvent:
    """One milestone of an event, e.g. 'abstract due'."""

    deadline: str
    comment: str

    @property
    def due(self) -> datetime:
        return parse_deadline(self.deadline)

    @classmethod
    def from_api(cls, data: dict) -> "TimelineEvent":
        deadline = _require(data, "deadline", str)
        parse_deadline(deadline)
        return cls(deadline=deadline, comment=_require(data, "comment", str))


@dataclass(frozen=True)
class EventData:
    """One concrete occurrence of a deadline item, e.g. 'Conf 2025'."""

    id: str
    year: int
    link: str
    timeline: tuple[TimelineEvent, ...]
    timezone: str
    date: str
    place: str

    @classmethod
    def from_api(cls, data: dict) -> "EventData":
        """Create EventData from the remote JSON shape."""
        raw_timeline = _require(data, "timeline", list)
        if not raw_timeline:
            raise CatalogueParseError(f"Event '{data.get('id')}' has an empty timeline")
        return cls(
            id=str(_require(data, "id", (str, int))),
            year=_require(data, "year", int),
            link=_require(data, "link", str),
            timeline=tuple(TimelineEvent.from_api(t) for t in raw_timeline),
            timezone=_require(data, "timezone", str),
            date=_require(data, "date", str),
            place=_require(data, "place", str),
        )


@dataclass(frozen=True)
class DeadlineItem:
    """A recurring series (e.g. a conference) grouping its yearly occurrences."""

    title: str
    description: str
    category: str
    tags: tuple[str, ...]
    events: tuple[EventData, ...]

    @classmethod
    def from_api(cls, data: dict) -> "DeadlineItem":
        """Create DeadlineItem from the remote JSON shape."""
        category = _require(data, "category", str)
        if category not in CATEGORIES:
            raise CatalogueParseError(f"Unknown category '{category}'")
        tags = _require(data, "tags", list)
        if not all(isinstance(t, str) for t in tags):
            raise CatalogueParseError("Field 'tags' must contain strings")
        raw_events = _require(data, "events", list)
        if not raw_events:
            raise CatalogueParseError(f"Item '{data.get('title')}' has no events")
        return cls(
            title=_require(data, "title", str),
            description=_require(data, "description", str),
            category=category,
            tags=tuple(tags),
            events=tuple(EventData.from_api(e) for e in raw_events),
        )


def parse_catalogue(data) -> list[DeadlineItem]:
    """
    Build the catalogue from a decoded JSON payload.

    Raises CatalogueParseError on the first malformed entry; nothing is
    returned for a partially valid payload.
    """
    if not isinstance(data, list):
        raise CatalogueParseError(f"Expected a JSON array, got {type(data).__name__}")
    return [DeadlineItem.from_api(entry) for entry in data]


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


def is_ended(event: EventData, now: datetime | None = None) -> bool:
    """True if the last timeline entry's deadline is strictly in the past."""
    if not event.timeline:
        raise ValueError(f"Event '{event.id}' has an empty timeline")
    return event.timeline[-1].due < _now(now)


def upcoming_deadlines(event: EventData, now: datetime | None = None) -> list[TimelineEvent]:
    """Timeline entries strictly after now, soonest first (stable for equal deadlines)."""
    now = _now(now)
    return sorted((t for t in event.timeline if t.due > now), key=lambda t: t.due)


def next_deadline(event: EventData, now: datetime | None = None) -> TimelineEvent | None:
    """The earliest timeline entry still in the future, or None once all have passed."""
    upcoming = upcoming_deadlines(event, now)
    return upcoming[0] if upcoming else None


def timeline_status(event: EventData, index: int, now: datetime | None = None) -> str:
    """
    Status of one timeline entry.

    'active' for the next deadline, 'upcoming' for later future entries,
    'past' otherwise.
    """
    upcoming = upcoming_deadlines(event, now)
    entry = event.timeline[index]
    if upcoming and upcoming[0] is entry:
        return "active"
    if any(t is entry for t in upcoming):
        return "upcoming"
    return "past"


def format_deadline(dt: datetime, tz=None) -> str:
    """Format a deadline as 'YYYY-MM-DD HH:MM:SS (UTC+8)' in the display zone."""
    local = dt.astimezone(tz)
    offset_minutes = int(local.utcoffset().total_seconds() // 60)
    sign = "+" if offset_minutes >= 0 else "-"
    return f"{local.strftime('%Y-%m-%d %H:%M:%S')} (UTC{sign}{abs(offset_minutes) // 60})"


def format_timeline_date(dt: datetime, tz=None) -> str:
    """Short 'MM-DD' label for a timeline entry."""
    return dt.astimezone(tz).strftime("%m-%d")
