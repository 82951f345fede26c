"""Runtime types shared across the dispatch engine and plugins."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class PreconditionViolation(RuntimeError):
    """Dispatch contract broken by the caller; the run must abort."""


@dataclass(slots=True)
class JobRecord:
    """One job of a simulation run.

    ``id``/``arrival``/``runtime``/``deadline`` are fixed at construction.
    ``start`` and ``finish`` stay ``None`` until the engine writes them, once each.
    """

    id: int
    arrival: int
    runtime: int
    deadline: int
    start: Optional[int] = None
    finish: Optional[int] = None

    def validate(self) -> None:
        if self.runtime <= 0:
            raise PreconditionViolation(f"job {self.id} runtime must be > 0, got {self.runtime}")

    @property
    def dispatched(self) -> bool:
        return self.start is not None

    @property
    def finished(self) -> bool:
        return self.finish is not None

    def mark_started(self, now: int) -> None:
        if self.start is not None:
            raise PreconditionViolation(f"job {self.id} already started at {self.start}")
        if now < self.arrival:
            raise PreconditionViolation(
                f"job {self.id} cannot start at {now} before its arrival {self.arrival}"
            )
        self.start = now

    def mark_finished(self, now: int) -> None:
        if self.start is None:
            raise PreconditionViolation(f"job {self.id} finished without a start")
        if self.finish is not None:
            raise PreconditionViolation(f"job {self.id} already finished at {self.finish}")
        if now != self.start + self.runtime:
            raise PreconditionViolation(
                f"job {self.id} finish {now} != start {self.start} + runtime {self.runtime}"
            )
        self.finish = now

    def copy_input(self) -> "JobRecord":
        """Return a fresh record with the same identity fields and no results."""
        return JobRecord(id=self.id, arrival=self.arrival, runtime=self.runtime, deadline=self.deadline)
