"""Scheduler interfaces and base classes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from hrrn_sim.model import JobRecord, PreconditionViolation


def response_ratio(job: JobRecord, now: int) -> float:
    """Return ``(waiting + runtime) / runtime`` for ``job`` at ``now``.

    ``waiting`` is clamped at zero; a job in the ready set never has
    ``arrival > now``, so the clamp only matters for broken callers.
    """
    if job.runtime <= 0:
        raise PreconditionViolation(f"job {job.id} runtime must be > 0, got {job.runtime}")
    waiting = max(0, now - job.arrival)
    return (float(waiting) + job.runtime) / float(job.runtime)


class IScheduler(ABC):
    """Non-preemptive selection interface used by the dispatch loop."""

    def __init__(self, params: dict | None = None) -> None:
        self._params = dict(params or {})

    @property
    def params(self) -> dict:
        """Copy of the `scheduler.params` mapping, for policies that read tuning knobs."""
        return dict(self._params)

    @property
    @abstractmethod
    def policy_name(self) -> str:
        """Registry name of this policy."""

    @abstractmethod
    def select(self, now: int, ready: Sequence[JobRecord]) -> JobRecord:
        """Pick exactly one job from a non-empty ready set."""


class PriorityScheduler(IScheduler, ABC):
    """Linear scan for the job with the smallest priority key."""

    @abstractmethod
    def priority_key(self, job: JobRecord, now: int) -> tuple:
        """Return a sortable key. Lower tuple = dispatched first."""

    def select(self, now: int, ready: Sequence[JobRecord]) -> JobRecord:
        if not ready:
            raise PreconditionViolation("cannot select from an empty ready set")
        return min(ready, key=lambda job: self.priority_key(job, now))
