"""Pydantic schemas for sleep data and API responses."""

from nap_advisor.schemas.advisory import (
    Advisory,
    DetailedRecommendations,
    NapDecision,
    NapPriority,
    SleepCategory,
    SleepMetrics,
    TimeInfo,
    TimeWindow,
)
from nap_advisor.schemas.sleep import (
    SessionType,
    SleepHistory,
    SleepHistoryEntry,
    SleepHistorySummary,
    SleepSession,
)

__all__ = [
    "Advisory",
    "DetailedRecommendations",
    "NapDecision",
    "NapPriority",
    "SessionType",
    "SleepCategory",
    "SleepHistory",
    "SleepHistoryEntry",
    "SleepHistorySummary",
    "SleepMetrics",
    "SleepSession",
    "TimeInfo",
    "TimeWindow",
]
