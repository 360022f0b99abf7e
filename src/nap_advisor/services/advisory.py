"""Nap advisory decision engine.

Combines the selected sleep session, the current time window and nap history
into a single Advisory. Everything here is pure: sessions and the current
instant are passed in, nothing is read from the clock or the network.

Precedence (first match wins):
    1. Overnight sleep window -> "should be asleep", never a nap
    2. Already napped today   -> "already napped", never a nap
    3. (window, category) table lookup; need and priority from category
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from nap_advisor.schemas.advisory import (
    Advisory,
    NapDecision,
    NapPriority,
    SleepCategory,
    SleepMetrics,
    TimeInfo,
    TimeWindow,
)
from nap_advisor.schemas.sleep import SleepSession
from nap_advisor.services.classifiers import (
    NAP_END_HOUR,
    NAP_START_HOUR,
    classify_sleep,
    classify_time_window,
    format_clock,
    local_now,
    quality_label,
)
from nap_advisor.services.messages import ALREADY_NAPPED, SHOULD_BE_ASLEEP, lookup
from nap_advisor.services.selector import detect_nap_today, select_main_sleep

if TYPE_CHECKING:
    from nap_advisor.services.cache import AdvisoryCache


def nap_need(category: SleepCategory, window: TimeWindow) -> tuple[bool, NapPriority]:
    """Get nap need and priority for a category outside the overnight window."""
    if category in (SleepCategory.SEVERELY_DEPRIVED, SleepCategory.OVERSLEEP):
        return True, NapPriority.YES
    if category == SleepCategory.STRUGGLING:
        if window == TimeWindow.NAP:
            return True, NapPriority.MAYBE
        return False, NapPriority.NONE
    if category == SleepCategory.SUFFICIENT:
        return False, NapPriority.NONE
    if category == SleepCategory.NO_DATA:
        return False, NapPriority.UNKNOWN
    raise ValueError(f"Unhandled sleep category: {category!r}")


def resolve(category: SleepCategory, window: TimeWindow, has_napped: bool) -> NapDecision:
    """Resolve a sleep category, time window and nap flag to a decision.

    Total over every combination of its inputs.
    """
    if window == TimeWindow.OVERNIGHT_SLEEP:
        priority = NapPriority.UNKNOWN if category == SleepCategory.NO_DATA else NapPriority.NONE
        return NapDecision(
            needs_nap=False,
            nap_priority=priority,
            message=SHOULD_BE_ASLEEP.message,
            recommendation=SHOULD_BE_ASLEEP.recommendation,
        )

    if has_napped:
        return NapDecision(
            needs_nap=False,
            nap_priority=NapPriority.NONE,
            message=ALREADY_NAPPED.message,
            recommendation=ALREADY_NAPPED.recommendation,
        )

    needs_nap, priority = nap_need(category, window)
    pair = lookup(window, category)
    return NapDecision(
        needs_nap=needs_nap,
        nap_priority=priority,
        message=pair.message,
        recommendation=pair.recommendation,
    )


def _minutes(seconds: int | None) -> int:
    # Half-up rounding to whole minutes
    return ((seconds or 0) + 30) // 60


def build_metrics(session: SleepSession | None) -> SleepMetrics:
    """Get the duration breakdown for a session (zeros when absent)."""
    if session is None or session.total_sleep_seconds == 0:
        return SleepMetrics()
    return SleepMetrics(
        total_sleep_duration_seconds=session.total_sleep_seconds,
        efficiency=session.efficiency_percent,
        deep_sleep_minutes=_minutes(session.deep_sleep_seconds),
        rem_sleep_minutes=_minutes(session.rem_sleep_seconds),
        light_sleep_minutes=_minutes(session.light_sleep_seconds),
    )


def compute_advisory(
    sessions: Iterable[SleepSession] | None,
    now: datetime,
    tz: ZoneInfo,
) -> Advisory:
    """Compute the nap advisory for one instant.

    Args:
        sessions: Sleep sessions covering the last few days (None or empty
            yields the no-data advisory)
        now: Current instant (timezone-aware; naive values are taken as UTC)
        tz: Subject's local timezone

    Returns:
        Advisory for ``now``
    """
    session_list = list(sessions or [])
    local = local_now(now, tz)
    today = local.date()

    main_sleep = select_main_sleep(session_list, today)
    has_napped = detect_nap_today(session_list, today, tz)
    total_seconds = main_sleep.total_sleep_seconds if main_sleep else 0

    category = classify_sleep(total_seconds)
    window = classify_time_window(local.hour)
    decision = resolve(category, window, has_napped)

    sleep_score = None
    if main_sleep is not None and category != SleepCategory.NO_DATA:
        sleep_score = main_sleep.quality_score

    return Advisory(
        needs_nap=decision.needs_nap,
        nap_priority=decision.nap_priority,
        message=decision.message,
        recommendation=decision.recommendation,
        sleep_hours=round(total_seconds / 3600, 1),
        sleep_category=category,
        time_window=window,
        has_napped_today=has_napped,
        sleep_score=sleep_score,
        quality_label=quality_label(sleep_score),
        metrics=build_metrics(main_sleep),
        is_nap_time=window == TimeWindow.NAP,
        is_sleep_time=window == TimeWindow.OVERNIGHT_SLEEP,
        current_time=format_clock(local),
        generated_at=now,
    )


def get_cached_or_compute(
    cache: AdvisoryCache,
    key: str,
    sessions: Iterable[SleepSession] | None,
    now: datetime,
    tz: ZoneInfo,
    ttl_seconds: int | None = None,
) -> Advisory:
    """Get the cached advisory for ``key`` or compute and cache a fresh one."""
    return cache.get_or_compute(
        key,
        lambda: compute_advisory(sessions, now, tz),
        ttl_seconds=ttl_seconds,
    )


def build_time_info(now: datetime, tz: ZoneInfo) -> TimeInfo:
    """Get local time details for ``now``."""
    local = local_now(now, tz)
    return TimeInfo(
        hour=local.hour,
        minute=local.minute,
        formatted=format_clock(local),
        full_formatted=f"{local:%m/%d/%Y}, {format_clock(local)}",
        timezone=str(tz),
        is_nap_time=classify_time_window(local.hour) == TimeWindow.NAP,
    )


def build_recommendations(advisory: Advisory, time_info: TimeInfo) -> list[str]:
    """Get concrete tips for an advisory."""
    recommendations: list[str] = []
    category = advisory.sleep_category

    if advisory.needs_nap:
        recommendations.append("Take a 20-30 minute nap now")
        recommendations.append("Find a quiet, dark place to rest")
        recommendations.append("Set an alarm to avoid oversleeping")
    elif advisory.is_sleep_time:
        recommendations.append("Put the phone down and go to sleep")
    elif advisory.has_napped_today:
        recommendations.append("One nap is enough for today")
        recommendations.append("Aim for an earlier bedtime tonight")
    elif category == SleepCategory.STRUGGLING:
        hours_until_nap = NAP_START_HOUR - time_info.hour
        if 0 < hours_until_nap < 12:
            recommendations.append(
                f"Wait {hours_until_nap} hours until nap time ({_hour_label(NAP_START_HOUR)})"
            )
        else:
            recommendations.append(
                f"Nap time is {_hour_label(NAP_START_HOUR)}-{_hour_label(NAP_END_HOUR)} "
                f"({time_info.timezone})"
            )
        recommendations.append("Consider going to bed earlier tonight")
    elif category == SleepCategory.SUFFICIENT:
        recommendations.append("You got good sleep last night")
        recommendations.append("Stay active and maintain your energy")
    else:
        recommendations.append("Check that the ring has synced with the Oura app")

    return recommendations


def _hour_label(hour: int) -> str:
    return f"{hour % 12 or 12} {'AM' if hour < 12 else 'PM'}"
