"""Deferred job execution for counter bookkeeping, notifications and fan-out.

Request handlers never update denormalized state inline. They stage a job on
their session with :func:`run_after`; the job is handed to the scheduler only
once that session commits, and it is discarded if the session rolls back.

Two kinds of jobs exist:

- *mutations* receive a fresh session, run in a single transaction, and are
  committed by the scheduler;
- *actions* receive a session factory and manage their own transactions,
  which lets long-running work (feed fan-out, account cleanup) commit in
  several steps.

Jobs are independent: there is no ordering between them, they cannot be
cancelled once queued, and a failing job is rolled back, logged and dropped
without retry.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
import threading
import time
from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import event
from sqlalchemy.orm import Session, SessionTransaction

from campus_hub.core.settings import settings
from campus_hub.db.session import session_scope

# Configure logger for this module
logger = logging.getLogger(__name__)

MUTATION = "mutation"
ACTION = "action"

# Key under which jobs are staged in ``Session.info`` until commit.
_STAGED_KEY = "campus_hub.staged_jobs"

SessionFactory = Callable[[], AbstractContextManager[Session]]


@dataclass(frozen=True)
class DeferredJob:
    """A named function the scheduler knows how to run."""

    name: str
    func: Callable[..., Any]
    kind: str

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.func(*args, **kwargs)


@dataclass(order=True)
class ScheduledJob:
    """Queue entry ordered by due time, then by enqueue order."""

    due_at: float
    seq: int
    job: DeferredJob = field(compare=False)
    kwargs: dict[str, Any] = field(compare=False, default_factory=dict)


def mutation(func: Callable[..., Any]) -> DeferredJob:
    """Register ``func(db, **kwargs)`` as a single-transaction job."""
    return DeferredJob(name=f"{func.__module__}.{func.__name__}", func=func, kind=MUTATION)


def action(func: Callable[..., Any]) -> DeferredJob:
    """Register ``func(session_factory, **kwargs)`` as a self-managed job."""
    return DeferredJob(name=f"{func.__module__}.{func.__name__}", func=func, kind=ACTION)


class JobScheduler:
    """In-process queue of deferred jobs with an optional background loop."""

    def __init__(self, session_factory: SessionFactory = session_scope) -> None:
        self.session_factory = session_factory
        self._queue: list[ScheduledJob] = []
        self._lock = threading.Lock()
        self._seq = itertools.count()
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    def enqueue(self, job: DeferredJob, delay_ms: int = 0, **kwargs: Any) -> None:
        """Queue ``job`` to run ``delay_ms`` milliseconds from now."""
        due_at = time.monotonic() + max(0, delay_ms) / 1000.0
        with self._lock:
            heapq.heappush(self._queue, ScheduledJob(due_at, next(self._seq), job, kwargs))

    def pending(self) -> int:
        """Return the number of queued jobs."""
        with self._lock:
            return len(self._queue)

    def clear(self) -> None:
        """Drop every queued job."""
        with self._lock:
            self._queue.clear()

    def _pop(self, now: float | None) -> ScheduledJob | None:
        with self._lock:
            if not self._queue:
                return None
            if now is not None and self._queue[0].due_at > now:
                return None
            return heapq.heappop(self._queue)

    def run_due(self) -> int:
        """Run every job whose due time has passed and return how many ran."""
        now = time.monotonic()
        ran = 0
        while (scheduled := self._pop(now)) is not None:
            self._execute(scheduled)
            ran += 1
        return ran

    def drain(self, max_jobs: int = 10_000) -> int:
        """Run jobs, including the ones they schedule, until the queue is empty.

        Due times are ignored. Returns the number of jobs executed.

        Raises:
            RuntimeError: If more than ``max_jobs`` jobs run, which means
                jobs keep rescheduling each other.
        """
        ran = 0
        while (scheduled := self._pop(None)) is not None:
            if ran >= max_jobs:
                raise RuntimeError(f"Scheduler did not quiesce after {max_jobs} jobs")
            self._execute(scheduled)
            ran += 1
        return ran

    def _execute(self, scheduled: ScheduledJob) -> bool:
        job = scheduled.job
        try:
            if job.kind == MUTATION:
                with self.session_factory() as db:
                    try:
                        job.func(db, **scheduled.kwargs)
                        db.commit()
                    except Exception:
                        db.rollback()
                        raise
            else:
                job.func(self.session_factory, **scheduled.kwargs)
        except Exception:
            logger.error(
                "Scheduled job %s failed with args %s; dropping it",
                job.name,
                scheduled.kwargs,
                exc_info=True,
            )
            return False
        logger.debug("Scheduled job %s completed", job.name)
        return True

    async def start(self) -> None:
        """Start the background polling loop."""
        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background polling loop."""
        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None
        remaining = self.pending()
        if remaining:
            logger.warning("Scheduler stopped with %d queued jobs", remaining)

    async def _run(self) -> None:
        interval = max(0.01, float(settings.scheduler_poll_interval_seconds))

        while not self._stopping.is_set():
            ran = await asyncio.to_thread(self.run_due)
            if not ran:
                await asyncio.sleep(interval)


class _SchedulerSingleton:
    """Singleton wrapper for JobScheduler."""

    _instance: JobScheduler | None = None

    @classmethod
    def get_instance(cls) -> JobScheduler:
        """Get or create the singleton JobScheduler instance."""
        if cls._instance is None:
            cls._instance = JobScheduler()
        return cls._instance


def get_scheduler() -> JobScheduler:
    """Return the process-wide scheduler."""
    return _SchedulerSingleton.get_instance()


def run_after(db: Session, delay_ms: int, job: DeferredJob, **kwargs: Any) -> None:
    """Stage ``job`` to run ``delay_ms`` after ``db`` commits.

    Nothing is queued if the transaction rolls back.
    """
    db.info.setdefault(_STAGED_KEY, []).append((job, delay_ms, kwargs))


@event.listens_for(Session, "after_commit")
def _release_staged_jobs(session: Session) -> None:
    # Savepoint commits hold jobs until the enclosing transaction commits
    if session.in_nested_transaction():
        return
    staged = session.info.pop(_STAGED_KEY, None)
    if not staged:
        return
    scheduler = get_scheduler()
    for job, delay_ms, kwargs in staged:
        scheduler.enqueue(job, delay_ms, **kwargs)


@event.listens_for(Session, "after_soft_rollback")
def _discard_staged_jobs(session: Session, previous_transaction: SessionTransaction) -> None:
    # A rolled back savepoint leaves the enclosing transaction's jobs staged
    if previous_transaction.parent is not None:
        return
    staged = session.info.pop(_STAGED_KEY, None)
    if staged:
        logger.debug("Discarded %d staged jobs after rollback", len(staged))
