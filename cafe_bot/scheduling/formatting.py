"""
German display formatting for pickup times.

Used only for outbound text; comparisons always use datetimes.
"""

from datetime import datetime, time
from typing import Iterable

WEEKDAY_NAMES = (
    "Montag",
    "Dienstag",
    "Mittwoch",
    "Donnerstag",
    "Freitag",
    "Samstag",
    "Sonntag",
)

WEEKDAY_ABBREVIATIONS = ("Mo", "Di", "Mi", "Do", "Fr", "Sa", "So")


def format_pickup(instant: datetime) -> str:
    """Render e.g. ``Montag, 19.10.2026, 10:30 Uhr``."""
    weekday = WEEKDAY_NAMES[instant.weekday()]
    return f"{weekday}, {instant:%d.%m.%Y}, {instant:%H:%M} Uhr"


def format_clock(value: time) -> str:
    return f"{value:%H:%M}"


def format_weekdays(days: Iterable[int]) -> str:
    """
    Render open weekdays compactly.

    Consecutive runs of three or more days collapse into a range
    ("Mo–Fr"); anything else is listed ("Mo, Mi, Fr").
    """
    ordered = sorted(set(days))
    runs: list[list[int]] = []
    for day in ordered:
        if runs and day == runs[-1][-1] + 1:
            runs[-1].append(day)
        else:
            runs.append([day])

    parts = []
    for run in runs:
        if len(run) >= 3:
            parts.append(f"{WEEKDAY_ABBREVIATIONS[run[0]]}–{WEEKDAY_ABBREVIATIONS[run[-1]]}")
        else:
            parts.extend(WEEKDAY_ABBREVIATIONS[day] for day in run)
    return ", ".join(parts)
