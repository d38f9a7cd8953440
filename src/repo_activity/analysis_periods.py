from __future__ import annotations

import dataclasses
import datetime as dt

from .errors import DateParseError


@dataclasses.dataclass(frozen=True)
class DateWindow:
    start: dt.datetime | None = None  # inclusive
    end: dt.datetime | None = None  # inclusive

    def contains(self, when: dt.datetime) -> bool:
        if self.start is not None and when < self.start:
            return False
        if self.end is not None and when > self.end:
            return False
        return True

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None


def parse_date(spec: str) -> dt.datetime:
    s = (spec or "").strip()
    try:
        d = dt.datetime.strptime(s, "%Y-%m-%d")
    except ValueError as e:
        raise DateParseError(f"Invalid date: {spec!r} (expected YYYY-MM-DD)") from e
    return d.replace(tzinfo=dt.timezone.utc)


def parse_date_window(start: str | None = None, end: str | None = None) -> DateWindow:
    return DateWindow(
        start=parse_date(start) if start is not None else None,
        end=parse_date(end) if end is not None else None,
    )


def timestamp_to_utc(seconds: int | str, *, now: dt.datetime | None = None) -> dt.datetime:
    """Unix seconds -> aware UTC datetime; out-of-range values fall back to the current time."""
    try:
        return dt.datetime.fromtimestamp(int(seconds), tz=dt.timezone.utc)
    except (OverflowError, OSError, ValueError, TypeError):
        return now if now is not None else dt.datetime.now(dt.timezone.utc).replace(microsecond=0)


def format_utc(when: dt.datetime | None) -> str | None:
    if when is None:
        return None
    return when.astimezone(dt.timezone.utc).isoformat()
