"""
Net working time helpers.

Pure arithmetic over ``"HH:MM"`` time-of-day strings. A segment whose end is
at or before its start crosses midnight. Malformed components count as zero;
none of these functions raise.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..entities.reference import ShiftRule

MINUTES_PER_DAY = 24 * 60


def _component(raw: str) -> int:
    try:
        value = float(raw)
    except ValueError:
        return 0
    if math.isnan(value) or math.isinf(value):
        return 0
    return int(value)


def time_to_minutes(t: str) -> int:
    """Parse ``"HH:MM"`` into minutes since midnight."""
    parts = (t or "").split(":")
    hours = _component(parts[0]) if len(parts) > 0 else 0
    minutes = _component(parts[1]) if len(parts) > 1 else 0
    return hours * 60 + minutes


def segment_gross_minutes(start: str, end: str) -> int:
    start_mins = time_to_minutes(start)
    end_mins = time_to_minutes(end)
    if end_mins <= start_mins:
        return MINUTES_PER_DAY - start_mins + end_mins
    return end_mins - start_mins


def segment_gross_hours(start: str, end: str) -> float:
    return segment_gross_minutes(start, end) / 60


def add_hours_to_time(time: str, hours: float) -> str:
    """
    Shift a time of day by a (fractional, possibly negative) number of hours.

    The result wraps around midnight and is rounded to the nearest minute.
    """
    # half-minutes round up
    total = time_to_minutes(time) + math.floor(hours * 60 + 0.5)
    total %= MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def shift_gross_minutes(shift_start: str, shift_end: str) -> int:
    return segment_gross_minutes(shift_start, shift_end)


def compute_net_factor(rule: ShiftRule | None) -> float:
    """
    Fraction of gross clock time that is net working time.

    Unpaid break minutes are deducted and paid break minutes added back; the
    result is clamped to [0, 1]. Returns 1 without a rule or a usable shift.
    """
    if rule is None:
        return 1.0
    gross = shift_gross_minutes(rule.shift_start, rule.shift_end)
    if gross <= 0:
        return 1.0
    net = gross - (rule.break_minutes or 0) + (rule.paid_break_minutes or 0)
    return min(1.0, max(0.0, net / gross))


def segment_net_hours(start: str, end: str, net_factor: float) -> float:
    return segment_gross_minutes(start, end) * net_factor / 60


def _split_at_midnight(start: str, end: str) -> list[tuple[int, int]]:
    s = time_to_minutes(start)
    e = time_to_minutes(end)
    if e <= s:
        return [(s, MINUTES_PER_DAY), (0, e)]
    return [(s, e)]


def time_ranges_overlap(s1: str, e1: str, s2: str, e2: str) -> bool:
    """Overnight-aware strict overlap test for two time ranges."""
    for a, b in _split_at_midnight(s1, e1):
        for c, d in _split_at_midnight(s2, e2):
            if a < d and c < b:
                return True
    return False


def net_shift_hours(rule: ShiftRule | None, fallback: float) -> float:
    """
    Net hours of one shift occurrence after breaks.

    Falls back when there is no rule, the rule has no boundaries, or the
    computed value is not positive.
    """
    if rule is None or not rule.shift_start or not rule.shift_end:
        return fallback

    gross = shift_gross_minutes(rule.shift_start, rule.shift_end)
    if gross <= 0:
        return fallback

    net_minutes = gross - (rule.break_minutes or 0) + (rule.paid_break_minutes or 0)
    hours = max(0, net_minutes) / 60
    return hours if hours > 0 else fallback
