"""Datetime helpers."""

from __future__ import annotations

import os
from datetime import date, datetime

import pendulum

DEFAULT_TZ = "Asia/Kolkata"


def timezone_name() -> str:
    return os.environ.get("TIMEZONE", DEFAULT_TZ)


def now_in_tz() -> pendulum.DateTime:
    tz = pendulum.timezone(timezone_name())
    return pendulum.now(tz)


def parse_iso_date(value: str) -> date:
    parsed = pendulum.parse(value)
    if not isinstance(parsed, pendulum.DateTime):
        raise ValueError(f"Not a date: {value!r}")
    return parsed.date()


def parse_instant(value: str) -> pendulum.DateTime:
    """Parse an ISO date or datetime; values without an offset are local time."""
    parsed = pendulum.parse(value, tz=pendulum.timezone(timezone_name()))
    if not isinstance(parsed, pendulum.DateTime):
        raise ValueError(f"Not a date or datetime: {value!r}")
    return parsed


def localize(value: datetime) -> pendulum.DateTime:
    """Attach the configured timezone to naive datetimes; keep aware ones as they are."""
    if isinstance(value, pendulum.DateTime) and value.tzinfo is not None:
        return value
    if value.tzinfo is not None:
        return pendulum.instance(value)
    return pendulum.instance(value, tz=pendulum.timezone(timezone_name()))


def start_of_day(value: date) -> pendulum.DateTime:
    tz = pendulum.timezone(timezone_name())
    return pendulum.datetime(value.year, value.month, value.day, tz=tz)


def end_of_day(value: date) -> pendulum.DateTime:
    return start_of_day(value).end_of("day")
