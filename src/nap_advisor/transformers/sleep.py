"""Sleep data transformer.

Converts Oura API v2 ``usercollection/sleep`` records to SleepSession models.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError

from nap_advisor.schemas.sleep import SessionType, SleepSession

logger = structlog.get_logger()

# Oura sleep "type" tag -> normalized session type
OURA_SESSION_TYPES = {
    "long_sleep": SessionType.MAIN_SLEEP,
    "late_nap": SessionType.DAYTIME_NAP,
}


class SleepTransformer:
    """Transform Oura sleep record -> SleepSession."""

    @staticmethod
    def transform(record: dict[str, Any]) -> SleepSession:
        """Convert one Oura sleep record to a SleepSession.

        Raises:
            ValidationError: If the record is missing ``day`` or has invalid values
        """
        raw_type = record.get("type")
        session_type = (
            OURA_SESSION_TYPES.get(raw_type, SessionType.OTHER)
            if isinstance(raw_type, str)
            else SessionType.OTHER
        )

        readiness = record.get("readiness") or {}
        quality_score = readiness.get("score") if isinstance(readiness, dict) else None
        if quality_score is None:
            quality_score = record.get("score")

        return SleepSession.model_validate(
            {
                "day": record.get("day"),
                "type": session_type,
                "start_timestamp": record.get("bedtime_start"),
                "end_timestamp": record.get("bedtime_end"),
                "total_sleep_seconds": record.get("total_sleep_duration") or 0,
                "efficiency_percent": record.get("efficiency"),
                "deep_sleep_seconds": record.get("deep_sleep_duration"),
                "rem_sleep_seconds": record.get("rem_sleep_duration"),
                "light_sleep_seconds": record.get("light_sleep_duration"),
                "quality_score": quality_score,
            }
        )

    @classmethod
    def transform_many(cls, payload: dict[str, Any] | list[Any] | None) -> list[SleepSession]:
        """Convert an Oura response body (or its ``data`` list) to sessions.

        Malformed records are skipped so a single bad record never hides the
        rest of the night.
        """
        if payload is None:
            return []
        records = payload.get("data") if isinstance(payload, dict) else payload
        if not isinstance(records, list):
            return []

        sessions: list[SleepSession] = []
        for record in records:
            if not isinstance(record, dict):
                logger.warning("Skipping non-object sleep record", record_type=type(record).__name__)
                continue
            try:
                sessions.append(cls.transform(record))
            except ValidationError as e:
                logger.warning(
                    "Skipping malformed sleep record",
                    record_id=record.get("id"),
                    errors=e.error_count(),
                )
        return sessions
