"""Latest-wins scenario recomputation over one analysis session."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional
from uuid import uuid4

from pyauction.errors import ComputationCanceled, PricingValidationError
from pyauction.models import PoolValuation
from pyauction.scenario import ScenarioOverrides

from .service import AnalysisSession


logger = logging.getLogger("uvicorn.error")

RUNNING = "running"
CANCEL_REQUESTED = "cancel_requested"
CANCELED = "canceled"
COMPLETED = "completed"
FAILED = "failed"

FINISHED_STATES = frozenset({CANCELED, COMPLETED, FAILED})


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ScenarioJob:
    job_id: str
    overrides: ScenarioOverrides
    state: str = RUNNING
    message: Optional[str] = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    cancel_requested_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    result: Optional[PoolValuation] = None
    _cancel: threading.Event = field(default_factory=threading.Event, repr=False)
    _done: threading.Event = field(default_factory=threading.Event, repr=False)

    @property
    def finished(self) -> bool:
        return self.state in FINISHED_STATES

    def is_cancel_requested(self) -> bool:
        return self._cancel.is_set()


class ScenarioRunner:
    """Runs one scenario at a time; submitting a new one supersedes the last.

    Superseded jobs are asked to stop between players and their results are
    discarded.
    """

    def __init__(self, session: AnalysisSession, *, workers: Optional[int] = 1, strict: Optional[bool] = None):
        self.session = session
        self.workers = workers
        self.strict = strict
        self._lock = threading.Lock()
        self._jobs: Dict[str, ScenarioJob] = {}
        self._latest_id: Optional[str] = None

    def submit(self, overrides: Optional[ScenarioOverrides] = None) -> ScenarioJob:
        job = ScenarioJob(job_id=uuid4().hex, overrides=overrides or ScenarioOverrides())
        with self._lock:
            previous = self._jobs.get(self._latest_id) if self._latest_id else None
            self._jobs[job.job_id] = job
            self._latest_id = job.job_id
        if previous is not None and not previous.finished:
            self._request_cancel(previous, "Superseded by a newer scenario")
        thread = threading.Thread(target=self._run, args=(job,), name=f"scenario-{job.job_id[:8]}", daemon=True)
        thread.start()
        logger.info("Scenario %s submitted for session %s", job.job_id, self.session.session_id)
        return job

    def _run(self, job: ScenarioJob) -> None:
        try:
            result = self.session.value(
                job.overrides,
                strict=self.strict,
                workers=self.workers,
                cancel_check=job.is_cancel_requested,
            )
        except ComputationCanceled as exc:
            self._finish(job, CANCELED, str(exc))
            return
        except PricingValidationError as exc:
            self._finish(job, FAILED, exc.message, exc.valuation)
            return
        except Exception as exc:
            logger.exception("Scenario %s failed", job.job_id)
            self._finish(job, FAILED, str(exc))
            return

        if job.is_cancel_requested():
            self._finish(job, CANCELED, job.message or "Superseded by a newer scenario")
        else:
            self._finish(job, COMPLETED, None, result)

    def _finish(self, job: ScenarioJob, state: str, message: Optional[str], result: Optional[PoolValuation] = None) -> None:
        with self._lock:
            job.state = state
            job.message = message
            job.result = result if state != CANCELED else None
            job.updated_at = _now()
            job.completed_at = job.updated_at
        job._done.set()
        logger.info("Scenario %s %s", job.job_id, state)

    def _request_cancel(self, job: ScenarioJob, message: str) -> None:
        with self._lock:
            if job.finished:
                return
            job.state = CANCEL_REQUESTED
            job.message = message
            job.cancel_requested_at = job.updated_at = _now()
        job._cancel.set()

    def cancel(self, job_id: str) -> ScenarioJob:
        job = self.get(job_id)
        self._request_cancel(job, job.message or "Cancellation requested")
        return job

    def get(self, job_id: str) -> ScenarioJob:
        with self._lock:
            job = self._jobs.get(job_id)
        if job is None:
            raise KeyError(f"No scenario job {job_id!r}")
        return job

    def latest(self) -> Optional[ScenarioJob]:
        with self._lock:
            return self._jobs.get(self._latest_id) if self._latest_id else None

    def wait(self, job_id: str, timeout: Optional[float] = None) -> ScenarioJob:
        job = self.get(job_id)
        job._done.wait(timeout)
        return job


__all__ = [
    "CANCELED",
    "CANCEL_REQUESTED",
    "COMPLETED",
    "FAILED",
    "RUNNING",
    "ScenarioJob",
    "ScenarioRunner",
]
