"""Time slot arithmetic for weekly availability."""

from collections.abc import Iterable, Iterator
from datetime import date

SLOT_MINUTES = 30


def parse_time(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_time(minutes: int) -> str:
    """Convert minutes since midnight to zero-padded "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def day_of_week(value: date) -> int:
    """Weekday index with 0 = Sunday through 6 = Saturday."""
    return value.isoweekday() % 7


def iter_slots(start_time: str, end_time: str, step: int = SLOT_MINUTES) -> Iterator[str]:
    """Yield slot start times from start (inclusive) to end (exclusive)."""
    current = parse_time(start_time)
    end = parse_time(end_time)
    while current < end:
        yield format_time(current)
        current += step


def open_slots(windows: Iterable[tuple[str, str]], booked: Iterable[str]) -> list[str]:
    """
    Merge availability windows into sorted, de-duplicated free slots.

    Args:
        windows: (start_time, end_time) pairs for the day
        booked: Slots already held by live appointments

    Returns:
        Free "HH:MM" slots in chronological order
    """
    taken = set(booked)
    slots = {slot for start, end in windows for slot in iter_slots(start, end)}
    return sorted(slots - taken)
