"""Duration helpers: splitting, snapping to standard increments, labels.

``parse_duration_label`` is only meant for the boundary where generator output
is ingested; the scheduler itself reads the numeric ``estimated_duration``.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

STANDARD_MINUTES: tuple[int, ...] = (15, 30, 45, 60, 75, 90)
DEFAULT_DURATION_SECONDS = 3600.0

_NUMBER_PATTERN = re.compile(r"([0-9]+\.?[0-9]*)")
_HOUR_MARKERS = ("小时", "hour")
_MINUTE_MARKERS = ("分钟", "minute", "min")


def seconds_to_minutes(seconds: float) -> int:
    return int(round(seconds / 60))


def split_minutes(total_minutes: int, days: int) -> list[int]:
    """Split ``total_minutes`` over ``days`` without losing a minute.

    The first ``total_minutes % days`` entries get one extra minute.
    """
    if days < 1:
        raise ValueError(f"days must be >= 1, got {days}")
    base, remainder = divmod(total_minutes, days)
    return [base + 1 if index < remainder else base for index in range(days)]


def standardize_minutes(minutes: float) -> int:
    """Snap to the nearest standard increment; ties go to the smaller one."""
    best = STANDARD_MINUTES[0]
    best_distance = abs(minutes - best)
    for candidate in STANDARD_MINUTES[1:]:
        distance = abs(minutes - candidate)
        if distance < best_distance:
            best, best_distance = candidate, distance
    return best


def format_duration_label(minutes: int) -> str:
    if minutes >= 60 and minutes % 30 == 0:
        hours = minutes / 60
        if hours.is_integer():
            return f"{int(hours)}小时"
        return f"{hours:.1f}小时"
    return f"{minutes}分钟"


def parse_duration_label(label: str | None) -> float:
    """Parse labels like "30分钟", "2小时", "1.5 hours" into seconds.

    A bare number is read as hours. Anything unparseable falls back to one hour.
    """
    text = (label or "").strip()
    match = _NUMBER_PATTERN.search(text)
    if match is None:
        logger.debug(f"Unparseable duration label {label!r}, using default")
        return DEFAULT_DURATION_SECONDS

    try:
        number = float(match.group(1))
    except ValueError:
        return DEFAULT_DURATION_SECONDS

    lowered = text.lower()
    if any(marker in lowered for marker in _HOUR_MARKERS):
        seconds = number * 3600
    elif any(marker in lowered for marker in _MINUTE_MARKERS):
        seconds = number * 60
    else:
        seconds = number * 3600

    if seconds <= 0:
        logger.debug(f"Non-positive duration label {label!r}, using default")
        return DEFAULT_DURATION_SECONDS
    return seconds
