"""Tests for Oura sleep record transformation."""

from datetime import date

import pytest
from pydantic import ValidationError

from nap_advisor.schemas.sleep import SessionType
from nap_advisor.transformers import SleepTransformer
from tests.fixtures.sleep_data import oura_record


class TestSleepTransformer:
    """Tests for SleepTransformer.transform."""

    def test_full_record(self) -> None:
        """Test every field of a complete record is mapped."""
        session = SleepTransformer.transform(oura_record())

        assert session.day == date(2026, 1, 15)
        assert session.type == SessionType.MAIN_SLEEP
        assert session.total_sleep_seconds == 25200
        assert session.sleep_hours == 7.0
        assert session.efficiency_percent == 88
        assert session.deep_sleep_seconds == 5400
        assert session.rem_sleep_seconds == 6300
        assert session.light_sleep_seconds == 13500
        assert session.quality_score == 81
        assert session.start_timestamp is not None
        assert session.start_timestamp.hour == 23
        assert session.start_timestamp.utcoffset() is not None

    @pytest.mark.parametrize(
        ("record_type", "expected"),
        [
            ("long_sleep", SessionType.MAIN_SLEEP),
            ("late_nap", SessionType.DAYTIME_NAP),
            ("sleep", SessionType.OTHER),
            ("rest", SessionType.OTHER),
        ],
    )
    def test_type_mapping(self, record_type: str, expected: SessionType) -> None:
        """Test Oura type tags are normalized."""
        assert SleepTransformer.transform(oura_record(record_type=record_type)).type == expected

    def test_missing_type_is_other(self) -> None:
        """Test an untagged record is an ordinary session."""
        assert SleepTransformer.transform(oura_record(type=None)).type == SessionType.OTHER

    def test_null_duration_is_zero(self) -> None:
        """Test a record that has not synced yet reports zero sleep."""
        session = SleepTransformer.transform(oura_record(total_sleep_duration=None))

        assert session.total_sleep_seconds == 0

    def test_score_fallback(self) -> None:
        """Test the record's own score is used when readiness is absent."""
        session = SleepTransformer.transform(oura_record(readiness=None, score=64))

        assert session.quality_score == 64

    def test_no_score(self) -> None:
        """Test a record without any score has no quality score."""
        session = SleepTransformer.transform(oura_record(readiness=None))

        assert session.quality_score is None

    @pytest.mark.parametrize("record_type", [["long_sleep"], {"kind": "late_nap"}, 7])
    def test_non_string_type_is_other(self, record_type: object) -> None:
        """Test an unexpected type tag degrades to an ordinary session."""
        session = SleepTransformer.transform(oura_record(type=record_type))

        assert session.type == SessionType.OTHER

    def test_missing_day_raises(self) -> None:
        """Test a record without a day is rejected."""
        with pytest.raises(ValidationError):
            SleepTransformer.transform(oura_record(day=None))

    def test_negative_duration_raises(self) -> None:
        """Test nonsensical durations are rejected."""
        with pytest.raises(ValidationError):
            SleepTransformer.transform(oura_record(total_sleep_duration=-1))


class TestTransformMany:
    """Tests for SleepTransformer.transform_many."""

    def test_response_body(self) -> None:
        """Test a full response body with a data list."""
        body = {
            "data": [oura_record(), oura_record(record_type="late_nap")],
            "next_token": None,
        }

        sessions = SleepTransformer.transform_many(body)

        assert [s.type for s in sessions] == [SessionType.MAIN_SLEEP, SessionType.DAYTIME_NAP]

    def test_plain_list(self) -> None:
        """Test a bare list of records."""
        assert len(SleepTransformer.transform_many([oura_record()])) == 1

    @pytest.mark.parametrize("payload", [None, {}, {"data": None}, {"data": "nope"}, []])
    def test_empty_payloads(self, payload: object) -> None:
        """Test missing or malformed containers yield no sessions."""
        assert SleepTransformer.transform_many(payload) == []  # type: ignore[arg-type]

    def test_skips_bad_records(self) -> None:
        """Test a malformed record does not hide the good ones."""
        records = ["junk", oura_record(day="not-a-date"), oura_record()]

        sessions = SleepTransformer.transform_many(records)

        assert len(sessions) == 1
        assert sessions[0].day == date(2026, 1, 15)

    def test_bad_type_tag_does_not_abort_batch(self) -> None:
        """Test a record with an unhashable type tag is kept without losing the rest."""
        body = {"data": [oura_record(type=["long_sleep"]), oura_record(day="2026-01-14")]}

        sessions = SleepTransformer.transform_many(body)

        assert [s.type for s in sessions] == [SessionType.OTHER, SessionType.MAIN_SLEEP]
        assert sessions[1].day == date(2026, 1, 14)
