# mypy: ignore-errors
"""Tests for deferred job staging and execution."""

import asyncio
import logging

import pytest

from campus_hub.core.settings import settings
from campus_hub.models import User
from campus_hub.services.scheduler import (
    JobScheduler,
    action,
    get_scheduler,
    mutation,
    run_after,
)

calls: list = []


@mutation
def record(db, value):
    calls.append(value)


@mutation
def explode(db, value):
    raise RuntimeError(f"boom {value}")


@action
def record_action(session_factory, value):
    with session_factory() as db:
        calls.append((value, db))


@mutation
def reschedule_forever(db):
    run_after(db, 0, reschedule_forever)


@pytest.fixture(autouse=True)
def reset_calls():
    calls.clear()
    yield
    calls.clear()


@pytest.fixture
def mock_factory(mocker):
    factory = mocker.MagicMock()
    factory.return_value.__exit__.return_value = None
    return factory


def test_staged_job_waits_for_commit(db_session, scheduler) -> None:
    run_after(db_session, 0, record, value="a")
    assert scheduler.pending() == 0

    db_session.commit()
    assert scheduler.pending() == 1

    assert scheduler.drain() == 1
    assert calls == ["a"]


def test_rolled_back_jobs_never_run(db_session, scheduler) -> None:
    db_session.add(User(external_id="rollback", email="", name="Rolled Back"))
    db_session.flush()
    run_after(db_session, 0, record, value="lost")
    db_session.rollback()
    db_session.commit()

    assert scheduler.pending() == 0
    assert scheduler.drain() == 0
    assert calls == []


def test_savepoint_commit_holds_jobs_until_outer_commit(db_session, scheduler) -> None:
    run_after(db_session, 0, record, value="outer")
    with db_session.begin_nested():
        db_session.add(User(external_id="nested", email="", name="Nested"))
    assert scheduler.pending() == 0

    db_session.commit()
    assert scheduler.pending() == 1


def test_savepoint_rollback_keeps_enclosing_jobs(db_session, scheduler) -> None:
    run_after(db_session, 0, record, value="kept")
    with pytest.raises(RuntimeError):
        with db_session.begin_nested():
            db_session.add(User(external_id="nested", email="", name="Nested"))
            db_session.flush()
            raise RuntimeError("abort savepoint")

    db_session.commit()
    assert scheduler.drain() == 1
    assert calls == ["kept"]
    assert db_session.query(User).filter_by(external_id="nested").count() == 0


def test_failing_job_is_rolled_back_and_logged(mock_factory, caplog) -> None:
    session = mock_factory.return_value.__enter__.return_value
    worker = JobScheduler(session_factory=mock_factory)
    worker.enqueue(explode, value=1)
    worker.enqueue(record, value=2)

    with caplog.at_level(logging.ERROR, logger="campus_hub.services.scheduler"):
        assert worker.drain() == 2

    assert calls == [2]
    session.rollback.assert_called_once()
    session.commit.assert_called_once()
    assert any("explode" in record.getMessage() for record in caplog.records)


def test_action_receives_session_factory(mock_factory) -> None:
    session = mock_factory.return_value.__enter__.return_value
    worker = JobScheduler(session_factory=mock_factory)
    worker.enqueue(record_action, value="x")

    worker.drain()

    assert calls == [("x", session)]
    session.commit.assert_not_called()


def test_run_due_skips_delayed_jobs(mock_factory) -> None:
    worker = JobScheduler(session_factory=mock_factory)
    worker.enqueue(record, delay_ms=60_000, value="later")
    worker.enqueue(record, value="now")

    assert worker.run_due() == 1
    assert calls == ["now"]
    assert worker.pending() == 1


def test_drain_detects_jobs_that_never_quiesce(scheduler) -> None:
    scheduler.enqueue(reschedule_forever)

    with pytest.raises(RuntimeError):
        scheduler.drain(max_jobs=5)


def test_get_scheduler_returns_singleton() -> None:
    assert get_scheduler() is get_scheduler()


@pytest.mark.asyncio
async def test_background_loop_runs_due_jobs(mocker, mock_factory) -> None:
    mocker.patch.object(settings, "scheduler_poll_interval_seconds", 0.01)
    worker = JobScheduler(session_factory=mock_factory)
    worker.enqueue(record, value="bg")

    await worker.start()
    for _ in range(200):
        if calls:
            break
        await asyncio.sleep(0.01)
    await worker.stop()

    assert calls == ["bg"]
    assert worker.pending() == 0
