"""Utility helpers used across the project.

Make commonly used helpers available at the package level for convenience.

Exports:
- time helpers: `now_utc`, `day_key`, `puzzle_key`, `parse_day_key`, `ClockAndCalendarProvider`, ...
- validation helpers: `normalize_letter`, `letters_only`, `answer_pattern_for`, `sanitize_json`
"""

from .time import (
    now_utc,
    to_iso,
    utc_day,
    day_key,
    puzzle_key,
    parse_day_key,
    add_days,
    puzzle_number,
    format_elapsed,
    ClockAndCalendarProvider,
)
from .validation import normalize_letter, letters_only, answer_pattern_for, sanitize_json

__all__ = [
    "now_utc",
    "to_iso",
    "utc_day",
    "day_key",
    "puzzle_key",
    "parse_day_key",
    "add_days",
    "puzzle_number",
    "format_elapsed",
    "ClockAndCalendarProvider",
    "normalize_letter",
    "letters_only",
    "answer_pattern_for",
    "sanitize_json",
]
