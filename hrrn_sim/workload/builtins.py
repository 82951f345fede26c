"""Built-in workload generators."""

from __future__ import annotations

from random import Random
from typing import Any

from hrrn_sim.model import JobSpec

from .base import IWorkloadGenerator, int_param


class AssignmentWorkloadGenerator(IWorkloadGenerator):
    """Fixed reference workload.

    The first ten jobs arrive at 0, later ones every 5 time units (id 10 -> 5,
    id 19 -> 50). Runtime cycles 5..50 and the relative deadline 10..100 by ``id % 10``.
    """

    def generate(self, *, params: dict[str, Any], rng: Random) -> list[JobSpec]:  # noqa: ARG002
        count = int_param(params, "count", 100, minimum=0, generator="assignment")
        jobs: list[JobSpec] = []
        for job_id in range(count):
            arrival = 0 if job_id < 10 else 5 * (job_id - 9)
            step = (job_id % 10) + 1
            jobs.append(
                JobSpec(
                    id=job_id,
                    arrival=arrival,
                    runtime=step * 5,
                    deadline=arrival + step * 10,
                )
            )
        return jobs


class UniformWorkloadGenerator(IWorkloadGenerator):
    """Seeded random workload with integer inter-arrival, runtime and slack ranges."""

    def generate(self, *, params: dict[str, Any], rng: Random) -> list[JobSpec]:
        count = int_param(params, "count", 50, minimum=0, generator="uniform")
        max_gap = int_param(params, "max_interarrival", 10, minimum=0, generator="uniform")
        min_runtime = int_param(params, "min_runtime", 1, minimum=1, generator="uniform")
        max_runtime = int_param(params, "max_runtime", 20, minimum=1, generator="uniform")
        min_slack = int_param(params, "min_slack", 0, minimum=0, generator="uniform")
        max_slack = int_param(params, "max_slack", 50, minimum=0, generator="uniform")
        if max_runtime < min_runtime:
            raise ValueError("workload generator uniform requires max_runtime >= min_runtime")
        if max_slack < min_slack:
            raise ValueError("workload generator uniform requires max_slack >= min_slack")

        jobs: list[JobSpec] = []
        arrival = 0
        for job_id in range(count):
            if job_id > 0:
                arrival += rng.randint(0, max_gap)
            runtime = rng.randint(min_runtime, max_runtime)
            slack = rng.randint(min_slack, max_slack)
            jobs.append(JobSpec(id=job_id, arrival=arrival, runtime=runtime, deadline=arrival + runtime + slack))
        return jobs
