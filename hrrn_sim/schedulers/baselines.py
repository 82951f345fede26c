"""Non-preemptive baselines for comparing against HRRN."""

from __future__ import annotations

from hrrn_sim.model import JobRecord

from .base import PriorityScheduler


class FCFSScheduler(PriorityScheduler):
    """First come, first served."""

    @property
    def policy_name(self) -> str:
        return "fcfs"

    def priority_key(self, job: JobRecord, now: int) -> tuple:  # noqa: ARG002
        return (job.arrival, job.id)


class SJFScheduler(PriorityScheduler):
    """Shortest runtime first, no preemption."""

    @property
    def policy_name(self) -> str:
        return "sjf"

    def priority_key(self, job: JobRecord, now: int) -> tuple:  # noqa: ARG002
        return (job.runtime, job.arrival, job.id)
