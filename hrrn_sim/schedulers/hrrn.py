"""Highest response ratio next scheduler."""

from __future__ import annotations

from hrrn_sim.model import JobRecord

from .base import PriorityScheduler, response_ratio


class HRRNScheduler(PriorityScheduler):
    """Largest ``(waiting + runtime) / runtime`` first; ties go to earlier arrival, then lower id."""

    @property
    def policy_name(self) -> str:
        return "hrrn"

    def priority_key(self, job: JobRecord, now: int) -> tuple:
        return (-response_ratio(job, now), job.arrival, job.id)
