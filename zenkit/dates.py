"""Timestamp type shared by every entity that carries a date."""

from __future__ import annotations

import datetime as dt

DATE_ONLY_FORMAT = "%Y-%m-%d"
DATE_ONLY_LENGTH = len("2020-01-01")


def _fraction(microsecond: int) -> str:
    if microsecond == 0:
        return ""
    if microsecond % 1000 == 0:
        return f".{microsecond // 1000:03d}"
    return f".{microsecond:06d}"


class DateTime(dt.datetime):
    """
    UTC timestamp read from either ``YYYY-MM-DD`` or a full ISO-8601 string.

    A bare date means midnight UTC of that day. Serialization always yields a
    full timestamp, e.g. ``2020-01-01T00:00:00Z``.
    """

    @classmethod
    def parse(cls, text: str) -> "DateTime":
        if not isinstance(text, str):
            raise ValueError(f"Expected a date string, got {type(text).__name__}")
        text = text.strip()
        if len(text) == DATE_ONLY_LENGTH:
            day = dt.datetime.strptime(text, DATE_ONLY_FORMAT)
            return cls.from_datetime(day.replace(tzinfo=dt.timezone.utc))
        return cls.from_datetime(dt.datetime.fromisoformat(text))

    @classmethod
    def from_datetime(cls, value: dt.datetime) -> "DateTime":
        """Wrap ``value``; naive values are taken as UTC, aware ones are converted."""
        if value.tzinfo is None:
            utc = value.replace(tzinfo=dt.timezone.utc)
        else:
            utc = value.astimezone(dt.timezone.utc)
        return cls(
            utc.year, utc.month, utc.day,
            utc.hour, utc.minute, utc.second, utc.microsecond,
            tzinfo=dt.timezone.utc,
        )

    def to_wire(self) -> str:
        return self.strftime("%Y-%m-%dT%H:%M:%S") + _fraction(self.microsecond) + "Z"

    def __str__(self) -> str:
        return self.strftime("%Y-%m-%d %H:%M:%S") + _fraction(self.microsecond) + " UTC"


def parse_optional(value: str | None) -> DateTime | None:
    if value is None or value == "":
        return None
    return DateTime.parse(value)
