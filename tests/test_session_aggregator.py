"""Tests for session aggregation."""

from datetime import date, datetime, timedelta
from uuid import uuid4

import pytest

from study_tracker.domain.errors import StoreUnavailable
from study_tracker.domain.sessions import (
    DayRecord,
    Period,
    StudySession,
    sessions_map_payload,
)
from study_tracker.services.sessions import SessionAggregator
from tests.conftest import TAIPEI, InMemorySessionRepository

DAY = date(2024, 1, 1)


def _session(hour: int, minutes: int) -> StudySession:
    start = datetime(2024, 1, 1, hour, 0, tzinfo=TAIPEI)
    return StudySession.between(start, start + timedelta(minutes=minutes))


def test_record_session_appends_once_and_derives_totals() -> None:
    repository = InMemorySessionRepository()
    aggregator = SessionAggregator(repository, uuid4())

    aggregator.record_session(DAY, Period.MORNING, _session(9, 10))
    aggregator.record_session(DAY, Period.MORNING, _session(10, 5))
    totals = aggregator.record_session(DAY, Period.AFTERNOON, _session(14, 30))

    assert len(repository.appends) == 3
    assert totals.morning == 900
    assert totals.afternoon == 1800
    assert totals.day == 2700
    record = aggregator.get_day(DAY)
    assert [session.duration for session in record.morning] == [600, 300]


def test_totals_are_order_independent() -> None:
    sessions = [_session(9, 7), _session(10, 13), _session(11, 1)]
    forward = DayRecord()
    backward = DayRecord()
    for session in sessions:
        forward = forward.with_session(Period.MORNING, session)
    for session in reversed(sessions):
        backward = backward.with_session(Period.AFTERNOON, session)

    assert forward.totals().morning == backward.totals().afternoon == 21 * 60


def test_get_day_reads_through_once() -> None:
    repository = InMemorySessionRepository()
    aggregator = SessionAggregator(repository, uuid4())

    first = aggregator.get_day(DAY)
    aggregator.get_day(DAY)

    assert first == DayRecord()
    assert first.morning == ()
    assert repository.reads == 1

    aggregator.get_day(DAY, refresh=True)
    assert repository.reads == 2


def test_failed_append_leaves_cache_unchanged() -> None:
    repository = InMemorySessionRepository()
    aggregator = SessionAggregator(repository, uuid4())
    aggregator.record_session(DAY, Period.MORNING, _session(9, 10))
    repository.fail_writes = True

    with pytest.raises(StoreUnavailable):
        aggregator.record_session(DAY, Period.MORNING, _session(10, 10))

    assert aggregator.totals(DAY).morning == 600


def test_clear_day_removes_both_periods() -> None:
    repository = InMemorySessionRepository()
    user_id = uuid4()
    aggregator = SessionAggregator(repository, user_id)
    aggregator.record_session(DAY, Period.MORNING, _session(9, 10))
    aggregator.record_session(DAY, Period.AFTERNOON, _session(14, 10))
    before = aggregator.get_day(DAY)

    aggregator.clear_day(DAY)

    assert aggregator.get_day(DAY).is_empty()
    assert aggregator.totals(DAY).day == 0
    assert repository.list_day(user_id, DAY).is_empty()
    assert before.totals().day == 1200


def test_history_serializes_sorted_with_empty_periods() -> None:
    repository = InMemorySessionRepository()
    aggregator = SessionAggregator(repository, uuid4())
    aggregator.record_session(date(2024, 1, 3), Period.MORNING, _session(9, 1))
    aggregator.record_session(date(2024, 1, 2), Period.AFTERNOON, _session(14, 2))

    payload = sessions_map_payload(aggregator.history())

    assert list(payload) == ["2024-01-02", "2024-01-03"]
    assert payload["2024-01-02"]["morning"] == []
    assert payload["2024-01-03"]["morning"][0]["duration"] == 60


def test_cache_evicts_least_recently_used_day() -> None:
    repository = InMemorySessionRepository()
    aggregator = SessionAggregator(repository, uuid4(), max_cached_days=2)
    first, second, third = DAY, DAY + timedelta(days=1), DAY + timedelta(days=2)

    aggregator.get_day(first)
    aggregator.get_day(second)
    aggregator.get_day(first)
    aggregator.get_day(third)
    reads = repository.reads

    aggregator.get_day(first)
    aggregator.get_day(third)
    assert repository.reads == reads

    aggregator.get_day(second)
    assert repository.reads == reads + 1
