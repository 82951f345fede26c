"""Pending sequence and ready set owned by one dispatch run."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from hrrn_sim.model import JobRecord, PreconditionViolation


class ReadySet:
    """Jobs that have arrived but not yet been dispatched, in admission order."""

    def __init__(self) -> None:
        self._jobs: list[JobRecord] = []

    def add(self, job: JobRecord) -> None:
        self._jobs.append(job)

    def remove(self, job: JobRecord) -> None:
        for idx, candidate in enumerate(self._jobs):
            if candidate is job:
                del self._jobs[idx]
                return
        raise PreconditionViolation(f"job {job.id} is not in the ready set")

    def snapshot(self) -> list[JobRecord]:
        return list(self._jobs)

    def __len__(self) -> int:
        return len(self._jobs)

    def __iter__(self) -> Iterator[JobRecord]:
        return iter(list(self._jobs))


class PendingSequence:
    """Jobs ordered by (arrival, id), consumed from the front by admission.

    The input iterable is copied into a new list; the caller's ordering is untouched.
    """

    def __init__(self, jobs: Iterable[JobRecord]) -> None:
        self._jobs = sorted(jobs, key=lambda job: (job.arrival, job.id))
        self._cursor = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def remaining(self) -> int:
        return len(self._jobs) - self._cursor

    @property
    def exhausted(self) -> bool:
        return self._cursor >= len(self._jobs)

    @property
    def next_arrival(self) -> int | None:
        if self.exhausted:
            return None
        return self._jobs[self._cursor].arrival

    def admit(self, now: int, ready: ReadySet) -> list[JobRecord]:
        """Move every job with ``arrival <= now`` into ``ready`` and return them."""
        admitted: list[JobRecord] = []
        while self._cursor < len(self._jobs) and self._jobs[self._cursor].arrival <= now:
            job = self._jobs[self._cursor]
            ready.add(job)
            admitted.append(job)
            self._cursor += 1
        return admitted

    def __len__(self) -> int:
        return len(self._jobs)
