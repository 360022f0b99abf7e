"""Pydantic schemas for the nap advisory API response."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TimeWindow(str, Enum):
    """Named time-of-day window in the subject's local time."""

    OVERNIGHT_SLEEP = "overnight-sleep"  # 22:00 - 07:00
    PRE_NAP = "pre-nap"  # 07:00 - 14:00
    NAP = "nap"  # 14:00 - 17:00
    POST_NAP = "post-nap"  # 17:00 - 22:00


class SleepCategory(str, Enum):
    """Coarse bucket of last night's total sleep."""

    NO_DATA = "no-data"
    SEVERELY_DEPRIVED = "severely-deprived"  # < 4h
    STRUGGLING = "struggling"  # 4-6h
    SUFFICIENT = "sufficient"  # 6-9h
    OVERSLEEP = "oversleep"  # > 9h


class NapPriority(str, Enum):
    """How strongly a nap is advised."""

    NONE = "none"
    MAYBE = "maybe"
    YES = "yes"
    UNKNOWN = "unknown"  # No sleep data to judge from


class NapDecision(BaseModel):
    """Outcome of resolving a (category, window, napped) triple."""

    model_config = ConfigDict(frozen=True)

    needs_nap: bool
    nap_priority: NapPriority
    message: str = Field(description="Short display headline")
    recommendation: str = Field(description="Longer display text")


class SleepMetrics(BaseModel):
    """Duration breakdown of the selected session, passed through unchanged."""

    model_config = ConfigDict(frozen=True)

    total_sleep_duration_seconds: int = 0
    efficiency: int | None = None
    deep_sleep_minutes: int = 0
    rem_sleep_minutes: int = 0
    light_sleep_minutes: int = 0


class Advisory(BaseModel):
    """Complete nap advisory for one instant.

    This is the primary response from the /nap-status endpoint.
    ``needs_nap`` depends only on ``sleep_category``, ``time_window`` and
    ``has_napped_today``.
    """

    # Decision
    needs_nap: bool = Field(description="Whether a nap is advised right now")
    nap_priority: NapPriority = Field(description="Nap urgency")
    message: str = Field(description="Short display headline")
    recommendation: str = Field(description="Longer display text")

    # Inputs to the decision
    sleep_hours: float = Field(description="Last night's sleep in hours, 1 decimal")
    sleep_category: SleepCategory = Field(description="Sleep sufficiency category")
    time_window: TimeWindow = Field(description="Current local time window")
    has_napped_today: bool = Field(description="Whether a nap was already recorded today")

    # Quality
    sleep_score: int | None = Field(default=None, description="Readiness score (0-100)")
    quality_label: str = Field(description="Excellent, Good, Fair, Poor or Unknown")
    metrics: SleepMetrics = Field(default_factory=SleepMetrics)

    # Time
    is_nap_time: bool = Field(description="Whether the current window is the nap window")
    is_sleep_time: bool = Field(description="Whether the current window is overnight sleep")
    current_time: str = Field(description="Local wall-clock time, e.g. '3:05 PM'")
    generated_at: datetime = Field(description="Instant the advisory was computed for")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "needs_nap": True,
                "nap_priority": "maybe",
                "message": "Maybe Nap Time",
                "recommendation": "Emily is probably struggling a little.",
                "sleep_hours": 5.2,
                "sleep_category": "struggling",
                "time_window": "nap",
                "has_napped_today": False,
                "sleep_score": 68,
                "quality_label": "Fair",
                "metrics": {
                    "total_sleep_duration_seconds": 18720,
                    "efficiency": 84,
                    "deep_sleep_minutes": 62,
                    "rem_sleep_minutes": 71,
                    "light_sleep_minutes": 179,
                },
                "is_nap_time": True,
                "is_sleep_time": False,
                "current_time": "3:05 PM",
                "generated_at": "2026-01-13T22:05:00Z",
            }
        },
    )


class TimeInfo(BaseModel):
    """Current local time details."""

    hour: int
    minute: int
    formatted: str = Field(description="Short local time, e.g. '3:05 PM'")
    full_formatted: str = Field(description="Local date and time")
    timezone: str
    is_nap_time: bool


class DetailedRecommendations(BaseModel):
    """Advisory plus concrete tips."""

    advisory: Advisory
    recommendations: list[str] = Field(default_factory=list)
    time_info: TimeInfo
