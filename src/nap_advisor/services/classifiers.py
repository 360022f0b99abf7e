"""Time-of-day and sleep-sufficiency classification.

All functions here are pure; the current instant is always passed in.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

from nap_advisor.schemas.advisory import SleepCategory, TimeWindow

# Window boundaries (local hour, start inclusive)
SLEEP_START_HOUR = 22
WAKE_HOUR = 7
NAP_START_HOUR = 14
NAP_END_HOUR = 17

# Sleep sufficiency thresholds (hours)
SEVERELY_DEPRIVED_BELOW = 4
STRUGGLING_BELOW = 6
OVERSLEEP_ABOVE = 9

# Quality label thresholds (score, inclusive lower bound)
QUALITY_LABELS = [
    (85, "Excellent"),
    (70, "Good"),
    (55, "Fair"),
]


def classify_time_window(local_hour: int) -> TimeWindow:
    """Map a local wall-clock hour to its time window.

    Windows are half-open on the right: 14 is nap, 17 is post-nap.

    Raises:
        ValueError: If the hour is outside 0..23
    """
    if not 0 <= local_hour <= 23:
        raise ValueError(f"Hour must be in 0..23, got {local_hour}")

    if local_hour >= SLEEP_START_HOUR or local_hour < WAKE_HOUR:
        return TimeWindow.OVERNIGHT_SLEEP
    if local_hour < NAP_START_HOUR:
        return TimeWindow.PRE_NAP
    if local_hour < NAP_END_HOUR:
        return TimeWindow.NAP
    return TimeWindow.POST_NAP


def classify_sleep(total_seconds: float | None) -> SleepCategory:
    """Map last night's total sleep to a sufficiency category.

    Zero means the ring has not synced yet and is treated like missing data.
    """
    if not total_seconds or total_seconds <= 0:
        return SleepCategory.NO_DATA

    hours = total_seconds / 3600
    if hours < SEVERELY_DEPRIVED_BELOW:
        return SleepCategory.SEVERELY_DEPRIVED
    if hours < STRUGGLING_BELOW:
        return SleepCategory.STRUGGLING
    if hours <= OVERSLEEP_ABOVE:
        return SleepCategory.SUFFICIENT
    return SleepCategory.OVERSLEEP


def quality_label(score: int | None) -> str:
    """Get sleep quality label for a 0-100 score."""
    if not score:
        return "Unknown"
    for threshold, label in QUALITY_LABELS:
        if score >= threshold:
            return label
    return "Poor"


def local_now(now: datetime, tz: ZoneInfo) -> datetime:
    """Convert an instant to the subject's local time.

    Naive datetimes are taken to be UTC.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=ZoneInfo("UTC"))
    return now.astimezone(tz)


def format_clock(local: datetime) -> str:
    """Format a local time as a short 12-hour clock, e.g. '3:05 PM'."""
    hour12 = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour12}:{local.minute:02d} {suffix}"
