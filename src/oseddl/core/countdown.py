"""Countdown breakdown - no I/O dependencies."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

EXPIRED_LABEL = "expired"


@dataclass(frozen=True)
class TimeLeft:
    """Whole days, hours, minutes and seconds until a deadline."""

    days: int
    hours: int
    minutes: int
    seconds: int

    def format(self) -> str:
        """'03d 04h 05m 06s', dropping the days block when it is zero."""
        parts = []
        if self.days > 0:
            parts.append(f"{self.days:02d}d")
        parts.append(f"{self.hours:02d}h")
        parts.append(f"{self.minutes:02d}m")
        parts.append(f"{self.seconds:02d}s")
        return " ".join(parts)


def time_left(deadline: datetime, now: datetime | None = None) -> TimeLeft | None:
    """Break the time until deadline into units. None once it has passed."""
    now = now or datetime.now(timezone.utc)
    difference = (deadline - now).total_seconds()
    if difference <= 0:
        return None
    days, rest = divmod(int(difference), 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return TimeLeft(days=days, hours=hours, minutes=minutes, seconds=seconds)


def format_time_left(remaining: TimeLeft | None) -> str:
    return remaining.format() if remaining else EXPIRED_LABEL


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
