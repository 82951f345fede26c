from __future__ import annotations

import pytest

from hrrn_sim.model import JobRecord, PreconditionViolation
from hrrn_sim.schedulers import (
    FCFSScheduler,
    HRRNScheduler,
    SJFScheduler,
    available_schedulers,
    create_scheduler,
    register_scheduler,
    response_ratio,
)


def _job(job_id: int, arrival: int, runtime: int, deadline: int = 100) -> JobRecord:
    return JobRecord(id=job_id, arrival=arrival, runtime=runtime, deadline=deadline)


def test_response_ratio_formula() -> None:
    assert response_ratio(_job(1, 0, 20), 10) == 1.5
    assert response_ratio(_job(2, 9, 2), 10) == 1.5
    assert response_ratio(_job(3, 4, 4), 4) == 1.0


def test_response_ratio_clamps_negative_waiting() -> None:
    # Only reachable by a broken caller; the engine never admits a job early.
    assert response_ratio(_job(1, 10, 5), 3) == 1.0


def test_response_ratio_rejects_non_positive_runtime() -> None:
    with pytest.raises(PreconditionViolation):
        response_ratio(_job(1, 0, 0), 5)


def test_hrrn_prefers_highest_ratio() -> None:
    ready = [_job(1, 0, 40), _job(2, 5, 2), _job(3, 8, 1)]
    # ratios at t=10: 1.25, 3.5, 3.0
    assert HRRNScheduler().select(10, ready).id == 2


def test_hrrn_tie_prefers_earlier_arrival_then_lower_id() -> None:
    scheduler = HRRNScheduler()
    assert scheduler.select(10, [_job(2, 9, 2), _job(1, 0, 20)]).id == 1
    assert scheduler.select(0, [_job(7, 0, 5), _job(3, 0, 5), _job(5, 0, 9)]).id == 3


def test_hrrn_order_is_independent_of_ready_order() -> None:
    ready = [_job(4, 0, 6), _job(1, 3, 3), _job(9, 0, 6), _job(2, 1, 4)]
    scheduler = HRRNScheduler()
    expected = scheduler.select(12, ready).id
    assert scheduler.select(12, list(reversed(ready))).id == expected


def test_select_from_empty_ready_set_raises() -> None:
    with pytest.raises(PreconditionViolation, match="empty ready set"):
        HRRNScheduler().select(0, [])


def test_baseline_policies() -> None:
    ready = [_job(1, 0, 9), _job(2, 1, 3), _job(3, 1, 3)]
    assert FCFSScheduler().select(5, ready).id == 1
    assert SJFScheduler().select(5, ready).id == 2


def test_registry_aliases() -> None:
    assert isinstance(create_scheduler("HRRN"), HRRNScheduler)
    assert isinstance(create_scheduler("highest_response_ratio_next"), HRRNScheduler)
    assert isinstance(create_scheduler("first_come_first_served"), FCFSScheduler)
    assert isinstance(create_scheduler("shortest_job_first", {}), SJFScheduler)
    assert create_scheduler("hrrn").policy_name == "hrrn"


def test_registry_rejects_unknown_name() -> None:
    with pytest.raises(ValueError, match="unknown scheduler"):
        create_scheduler("round_robin")


def test_register_custom_scheduler() -> None:
    class LongestFirst(SJFScheduler):
        @property
        def policy_name(self) -> str:
            return "ljf"

        def priority_key(self, job: JobRecord, now: int) -> tuple:  # noqa: ARG002
            return (-job.runtime, job.id)

    register_scheduler("ljf", lambda params=None: LongestFirst(params=params))
    assert "ljf" in available_schedulers()
    assert create_scheduler("ljf").select(0, [_job(1, 0, 2), _job(2, 0, 8)]).id == 2


def test_scheduler_params_reach_custom_policy() -> None:
    class WeightedRatio(HRRNScheduler):
        def priority_key(self, job: JobRecord, now: int) -> tuple:
            weight = self.params.get("weights", {}).get(job.id, 1.0)
            return (-response_ratio(job, now) * weight, job.arrival, job.id)

    register_scheduler("weighted_hrrn", lambda params=None: WeightedRatio(params=params))
    scheduler = create_scheduler("weighted_hrrn", {"weights": {2: 3.0}})
    ready = [_job(1, 0, 2), _job(2, 0, 2)]
    assert scheduler.select(4, ready).id == 2
    assert create_scheduler("weighted_hrrn").select(4, ready).id == 1

    scheduler.params["weights"] = {}
    assert scheduler.params == {"weights": {2: 3.0}}
