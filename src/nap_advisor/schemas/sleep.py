"""Pydantic schemas for sleep sessions reported by the ring."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SessionType(str, Enum):
    """Kind of sleep session, normalized from the provider's type tag."""

    MAIN_SLEEP = "main-sleep"  # Oura "long_sleep"
    DAYTIME_NAP = "daytime-nap"  # Oura "late_nap"
    OTHER = "other"


class SleepSession(BaseModel):
    """One reported sleep interval.

    Oura dates a session by the day it ends, so last night's sleep carries
    today's ``day``. ``total_sleep_seconds`` is 0 until the ring has synced.
    """

    model_config = ConfigDict(frozen=True)

    day: date = Field(description="Local civil date the session is assigned to")
    type: SessionType = Field(default=SessionType.OTHER, description="Session type")
    start_timestamp: datetime | None = Field(default=None, description="Bedtime start")
    end_timestamp: datetime | None = Field(default=None, description="Bedtime end")
    total_sleep_seconds: int = Field(default=0, ge=0, description="Total time asleep")
    efficiency_percent: int | None = Field(
        default=None, ge=0, le=100, description="Sleep efficiency"
    )
    deep_sleep_seconds: int | None = Field(default=None, ge=0)
    rem_sleep_seconds: int | None = Field(default=None, ge=0)
    light_sleep_seconds: int | None = Field(default=None, ge=0)
    quality_score: int | None = Field(
        default=None, ge=0, le=100, description="Readiness score used as a quality proxy"
    )

    @property
    def sleep_hours(self) -> float:
        """Total sleep in hours."""
        return self.total_sleep_seconds / 3600


class SleepHistoryEntry(BaseModel):
    """One session in the sleep history listing."""

    date: date
    type: SessionType
    sleep_hours: float = Field(description="Total sleep, 1 decimal")
    score: int | None = Field(default=None, description="Quality score")
    quality: str = Field(description="Quality label derived from score")
    efficiency: int | None = Field(default=None, description="Sleep efficiency percent")


class SleepHistorySummary(BaseModel):
    """Averages over the history window."""

    average_sleep: float = Field(description="Mean sleep hours, 1 decimal")
    average_score: int = Field(description="Mean quality score (missing scores count as 0)")
    total_days: int = Field(description="Number of sessions in the window")


class SleepHistory(BaseModel):
    """Sleep history response."""

    start_date: date
    end_date: date
    history: list[SleepHistoryEntry] = Field(default_factory=list)
    summary: SleepHistorySummary
