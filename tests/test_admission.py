from __future__ import annotations

import pytest

from hrrn_sim.core import PendingSequence, ReadySet
from hrrn_sim.model import JobRecord, PreconditionViolation


def _jobs() -> list[JobRecord]:
    return [
        JobRecord(id=3, arrival=5, runtime=1, deadline=10),
        JobRecord(id=2, arrival=0, runtime=1, deadline=10),
        JobRecord(id=1, arrival=5, runtime=1, deadline=10),
        JobRecord(id=4, arrival=9, runtime=1, deadline=10),
    ]


def test_pending_sequence_orders_by_arrival_then_id_without_touching_input() -> None:
    jobs = _jobs()
    pending = PendingSequence(jobs)
    ready = ReadySet()
    pending.admit(100, ready)
    assert [job.id for job in ready] == [2, 1, 3, 4]
    assert [job.id for job in jobs] == [3, 2, 1, 4]


def test_admit_moves_only_arrived_jobs() -> None:
    pending = PendingSequence(_jobs())
    ready = ReadySet()

    admitted = pending.admit(5, ready)
    assert [job.id for job in admitted] == [2, 1, 3]
    assert pending.cursor == 3
    assert pending.next_arrival == 9
    assert pending.remaining == 1
    assert not pending.exhausted


def test_admit_is_idempotent_for_same_clock() -> None:
    pending = PendingSequence(_jobs())
    ready = ReadySet()
    pending.admit(5, ready)

    assert pending.admit(5, ready) == []
    assert len(ready) == 3
    assert pending.cursor == 3


def test_admit_before_first_arrival_is_noop() -> None:
    pending = PendingSequence([JobRecord(id=1, arrival=4, runtime=1, deadline=5)])
    ready = ReadySet()
    assert pending.admit(3, ready) == []
    assert pending.next_arrival == 4


def test_exhausted_sequence_has_no_next_arrival() -> None:
    pending = PendingSequence(_jobs())
    pending.admit(9, ReadySet())
    assert pending.exhausted
    assert pending.next_arrival is None
    assert len(pending) == 4


def test_ready_set_removes_exact_record() -> None:
    a = JobRecord(id=1, arrival=0, runtime=1, deadline=1)
    b = JobRecord(id=2, arrival=0, runtime=1, deadline=1)
    ready = ReadySet()
    ready.add(a)
    ready.add(b)
    ready.remove(a)
    assert ready.snapshot() == [b]
    with pytest.raises(PreconditionViolation):
        ready.remove(a)
