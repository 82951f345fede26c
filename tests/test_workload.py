from __future__ import annotations

from random import Random

import pytest

from hrrn_sim.core import SimEngine
from hrrn_sim.io import ConfigLoader
from hrrn_sim.model import JobSpec
from hrrn_sim.workload import (
    AssignmentWorkloadGenerator,
    IWorkloadGenerator,
    UniformWorkloadGenerator,
    create_workload_generator,
    register_workload_generator,
)


def test_assignment_workload_shape() -> None:
    jobs = AssignmentWorkloadGenerator().generate(params={"count": 12}, rng=Random(0))
    assert len(jobs) == 12
    by_id = {job.id: job for job in jobs}
    assert by_id[0] == JobSpec(id=0, arrival=0, runtime=5, deadline=10)
    assert by_id[9] == JobSpec(id=9, arrival=0, runtime=50, deadline=100)
    assert by_id[10] == JobSpec(id=10, arrival=5, runtime=5, deadline=15)
    assert by_id[11] == JobSpec(id=11, arrival=10, runtime=10, deadline=30)


def test_assignment_default_count() -> None:
    jobs = create_workload_generator("default").generate(params={}, rng=Random(0))
    assert len(jobs) == 100
    assert jobs[-1] == JobSpec(id=99, arrival=450, runtime=50, deadline=550)


def test_uniform_is_reproducible_for_a_seed() -> None:
    params = {"count": 25, "max_interarrival": 4, "min_runtime": 2, "max_runtime": 6, "min_slack": 1, "max_slack": 3}
    first = UniformWorkloadGenerator().generate(params=params, rng=Random(5))
    second = UniformWorkloadGenerator().generate(params=params, rng=Random(5))
    assert first == second

    previous_arrival = 0
    for job in first:
        assert job.arrival >= previous_arrival
        assert job.arrival - previous_arrival <= 4
        assert 2 <= job.runtime <= 6
        assert 1 <= job.deadline - job.arrival - job.runtime <= 3
        previous_arrival = job.arrival
    assert first[0].arrival == 0


@pytest.mark.parametrize(
    "params",
    [
        {"count": -1},
        {"count": "ten"},
        {"count": True},
        {"min_runtime": 0},
        {"min_runtime": 5, "max_runtime": 4},
        {"min_slack": 9, "max_slack": 2},
    ],
)
def test_uniform_rejects_bad_params(params: dict) -> None:
    with pytest.raises(ValueError, match="workload generator uniform"):
        UniformWorkloadGenerator().generate(params=params, rng=Random(0))


def test_unknown_generator() -> None:
    with pytest.raises(ValueError, match="unknown workload generator"):
        create_workload_generator("poisson")


def test_register_custom_generator() -> None:
    class PairGenerator(IWorkloadGenerator):
        def generate(self, *, params, rng):  # noqa: ANN001, ARG002
            return [JobSpec(id=1, arrival=0, runtime=1, deadline=1), JobSpec(id=2, arrival=0, runtime=1, deadline=5)]

    register_workload_generator("pair", PairGenerator)
    payload = {"version": "0.2", "workload": {"generator": {"name": "pair"}}}
    engine = SimEngine()
    engine.build(ConfigLoader().load_data(payload))
    engine.run()
    assert [job.id for job in engine.finished] == [1, 2]


def test_engine_seeds_generator_from_sim_seed() -> None:
    def run(seed: int) -> list[tuple[int, int | None]]:
        payload = {
            "version": "0.2",
            "workload": {"generator": {"name": "uniform", "params": {"count": 30}}},
            "sim": {"seed": seed},
        }
        engine = SimEngine()
        engine.build(ConfigLoader().load_data(payload))
        engine.run()
        return [(job.id, job.start) for job in engine.finished]

    assert run(3) == run(3)
    assert run(3) != run(4)
