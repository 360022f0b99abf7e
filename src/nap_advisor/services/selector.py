"""Sleep record selection and nap detection.

Oura assigns a sleep session to the day it ENDS, so last night's sleep is
dated today once the subject is awake. Sessions arrive for a trailing window
of a few days; these helpers pick out the one that matters.
"""

from collections.abc import Iterable
from datetime import date, datetime
from zoneinfo import ZoneInfo

from nap_advisor.schemas.sleep import SessionType, SleepSession

# Local start hours that make an untagged session a daytime nap
NAP_DETECTION_START_HOUR = 11
NAP_DETECTION_END_HOUR = 19


def _valid(sessions: Iterable[SleepSession] | None) -> list[SleepSession]:
    if not sessions:
        return []
    return [s for s in sessions if isinstance(s, SleepSession)]


def _recency_key(session: SleepSession) -> tuple[date, float]:
    end = session.end_timestamp
    return session.day, end.timestamp() if end is not None else float("-inf")


def select_main_sleep(
    sessions: Iterable[SleepSession] | None,
    today: date,
) -> SleepSession | None:
    """Pick the main sleep session relevant to last night.

    Preference order:
    1. Today's main sleep
    2. The most recent main sleep in the list
    3. The first session that is not a daytime nap
    4. The first session

    Args:
        sessions: Sessions for a trailing multi-day window (may be None)
        today: Subject's local date

    Returns:
        Selected session, or None if there are no usable sessions
    """
    candidates = _valid(sessions)
    if not candidates:
        return None

    main_sleeps = [s for s in candidates if s.type == SessionType.MAIN_SLEEP]
    for session in main_sleeps:
        if session.day == today:
            return session

    if main_sleeps:
        # max() keeps the first of equally recent sessions
        return max(main_sleeps, key=_recency_key)

    for session in candidates:
        if session.type != SessionType.DAYTIME_NAP:
            return session

    return candidates[0]


def is_daytime_start(start: datetime | None, tz: ZoneInfo) -> bool:
    """Check whether a session started in the daytime nap-detection hours."""
    if start is None:
        return False
    if start.tzinfo is None:
        start = start.replace(tzinfo=ZoneInfo("UTC"))
    hour = start.astimezone(tz).hour
    return NAP_DETECTION_START_HOUR <= hour < NAP_DETECTION_END_HOUR


def detect_nap_today(
    sessions: Iterable[SleepSession] | None,
    today: date,
    tz: ZoneInfo,
) -> bool:
    """Check whether the subject already napped today.

    A session counts if it is dated today and is either tagged as a nap or
    started between 11:00 and 19:00 local time without being the main sleep.
    The second rule catches naps the provider tags as ordinary sleep.
    """
    for session in _valid(sessions):
        if session.day != today:
            continue
        if session.type == SessionType.DAYTIME_NAP:
            return True
        if session.type != SessionType.MAIN_SLEEP and is_daytime_start(
            session.start_timestamp, tz
        ):
            return True
    return False
