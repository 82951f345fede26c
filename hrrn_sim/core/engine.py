"""Single-CPU non-preemptive dispatch engine."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging
import random
from typing import Any, Callable, Union

import simpy

from hrrn_sim.events import EventBus, EventType, SimEvent
from hrrn_sim.metrics import CoreMetrics, IMetric
from hrrn_sim.model import JobRecord, JobSpec, ModelSpec, PreconditionViolation
from hrrn_sim.schedulers import IScheduler, create_scheduler, response_ratio
from hrrn_sim.workload import create_workload_generator

from .admission import PendingSequence, ReadySet
from .interfaces import ISimEngine

logger = logging.getLogger(__name__)

JobInput = Union[JobRecord, JobSpec, Sequence[int]]


def _to_record(job: JobInput) -> JobRecord:
    if isinstance(job, JobRecord):
        return job.copy_input()
    if isinstance(job, JobSpec):
        return JobRecord(id=job.id, arrival=job.arrival, runtime=job.runtime, deadline=job.deadline)
    job_id, arrival, runtime, deadline = job
    return JobRecord(id=int(job_id), arrival=int(arrival), runtime=int(runtime), deadline=int(deadline))


class SimEngine(ISimEngine):
    """Dispatch loop over a SimPy clock.

    Each ``step`` admits arrived jobs, then either jumps the idle CPU to the
    next arrival or runs the selected job to completion.
    """

    DEFAULT_EVENT_ID_MODE = "deterministic"

    def __init__(
        self,
        scheduler: IScheduler | None = None,
        metrics: list[IMetric] | None = None,
    ) -> None:
        self._external_scheduler = scheduler
        self._metrics = metrics or [CoreMetrics()]
        self._subscribers: list[Callable[[SimEvent], None]] = []
        self._event_id_mode = self.DEFAULT_EVENT_ID_MODE
        self._event_id_seed: int | None = None

        self._env = simpy.Environment()
        self._event_bus = self._create_event_bus()
        self._events: list[SimEvent] = []
        self._setup_event_pipeline()

        self._scheduler: IScheduler | None = None
        self._pending: PendingSequence | None = None
        self._ready = ReadySet()
        self._finished: list[JobRecord] = []
        self._total = 0
        self._job_ids: list[int] = []

    def subscribe(self, handler: Callable[[SimEvent], None]) -> None:
        if handler in self._subscribers:
            return
        self._subscribers.append(handler)
        self._event_bus.subscribe(handler)

    def build(self, spec: ModelSpec) -> None:
        params = spec.scheduler.params
        event_id_mode = str(params.get("event_id_mode", self.DEFAULT_EVENT_ID_MODE))
        scheduler = self._external_scheduler or create_scheduler(spec.scheduler.name, params)
        self.load_jobs(
            self._resolve_jobs(spec),
            scheduler=scheduler,
            event_id_mode=event_id_mode,
            seed=spec.sim.seed,
        )

    def load_jobs(
        self,
        jobs: Iterable[JobInput],
        *,
        scheduler: IScheduler | str | None = None,
        event_id_mode: str | None = None,
        seed: int | None = None,
    ) -> None:
        """Prepare a run over copies of ``jobs``; the inputs are never mutated."""
        self._event_id_mode = event_id_mode or self.DEFAULT_EVENT_ID_MODE
        self._event_id_seed = seed
        self.reset()

        records = [_to_record(job) for job in jobs]
        seen: set[int] = set()
        for record in records:
            record.validate()
            if record.id in seen:
                raise PreconditionViolation(f"duplicate job id {record.id}")
            seen.add(record.id)

        if isinstance(scheduler, str):
            scheduler = create_scheduler(scheduler)
        self._scheduler = scheduler or self._external_scheduler or create_scheduler("hrrn")
        self._pending = PendingSequence(records)
        self._total = len(records)
        self._job_ids = [record.id for record in records]
        logger.debug(
            "engine built with %d jobs, policy=%s", self._total, self._scheduler.policy_name
        )

    def run(self) -> None:
        if self._pending is None:
            raise RuntimeError("build() must be called before run()")
        while self.step():
            pass
        logger.info(
            "simulation finished: jobs=%d, now=%d, policy=%s",
            len(self._finished),
            self.now,
            self.policy_name,
        )

    def step(self) -> bool:
        if self._pending is None or self._scheduler is None:
            raise RuntimeError("build() must be called before step()")
        if self.done:
            return False

        now = self.now
        for job in self._pending.admit(now, self._ready):
            self._event_bus.publish(
                event_type=EventType.JOB_ARRIVED,
                time=now,
                correlation_id=f"job-{job.id}",
                job_id=job.id,
                payload={"arrival": job.arrival, "runtime": job.runtime, "deadline": job.deadline},
            )

        if len(self._ready) == 0:
            next_arrival = self._pending.next_arrival
            if next_arrival is None:
                return False
            self._idle_until(now, next_arrival)
            return True

        self._dispatch(now)
        return True

    def reset(self) -> None:
        self._env = simpy.Environment()
        for metric in self._metrics:
            metric.reset()
        self._event_bus = self._create_event_bus()
        self._events = []
        self._setup_event_pipeline()

        self._scheduler = None
        self._pending = None
        self._ready = ReadySet()
        self._finished = []
        self._total = 0
        self._job_ids = []

    def _create_event_bus(self) -> EventBus:
        return EventBus(event_id_mode=self._event_id_mode, event_id_seed=self._event_id_seed)

    def _setup_event_pipeline(self) -> None:
        self._event_bus.subscribe(self._events.append)
        for metric in self._metrics:
            self._event_bus.subscribe(metric.consume)
        for handler in self._subscribers:
            self._event_bus.subscribe(handler)

    @staticmethod
    def _resolve_jobs(spec: ModelSpec) -> list[JobInput]:
        workload = spec.workload
        if workload.generator is not None:
            generator = create_workload_generator(workload.generator.name)
            return list(
                generator.generate(params=dict(workload.generator.params), rng=random.Random(spec.sim.seed))
            )
        if workload.csv_path is not None:
            raise ValueError("workload.csv_path must be resolved by ConfigLoader before build()")
        return list(workload.jobs or [])

    def _advance(self, delta: int) -> None:
        if delta <= 0:
            return
        timeout = self._env.timeout(delta)
        self._env.run(until=timeout)

    def _idle_until(self, now: int, next_arrival: int) -> None:
        target = max(now, next_arrival)
        logger.debug("cpu idle from %d to %d", now, target)
        self._event_bus.publish(
            event_type=EventType.CPU_IDLE,
            time=now,
            correlation_id="cpu",
            payload={"from": now, "to": target},
        )
        self._advance(target - now)

    def _dispatch(self, now: int) -> None:
        assert self._scheduler is not None
        ready_count = len(self._ready)
        try:
            chosen = self._scheduler.select(now, self._ready.snapshot())
            ratio = response_ratio(chosen, now)
            self._ready.remove(chosen)
            chosen.mark_started(now)
        except PreconditionViolation as exc:
            self._event_bus.publish(
                event_type=EventType.ERROR,
                time=now,
                correlation_id="engine",
                payload={"reason": "precondition_violation", "message": str(exc)},
            )
            raise

        self._event_bus.publish(
            event_type=EventType.JOB_START,
            time=now,
            correlation_id=f"job-{chosen.id}",
            job_id=chosen.id,
            payload={
                "arrival": chosen.arrival,
                "runtime": chosen.runtime,
                "waiting": now - chosen.arrival,
                "response_ratio": ratio,
                "ready_count": ready_count,
            },
        )

        self._advance(chosen.runtime)
        finish = self.now
        chosen.mark_finished(finish)
        self._finished.append(chosen)

        met_deadline = finish <= chosen.deadline
        self._event_bus.publish(
            event_type=EventType.JOB_COMPLETE,
            time=finish,
            correlation_id=f"job-{chosen.id}",
            job_id=chosen.id,
            payload={
                "arrival": chosen.arrival,
                "runtime": chosen.runtime,
                "deadline": chosen.deadline,
                "start": chosen.start,
                "turnaround": finish - chosen.arrival,
                "met_deadline": met_deadline,
            },
        )
        if not met_deadline:
            self._event_bus.publish(
                event_type=EventType.DEADLINE_MISS,
                time=finish,
                correlation_id=f"job-{chosen.id}",
                job_id=chosen.id,
                payload={"deadline": chosen.deadline, "lateness": finish - chosen.deadline},
            )

    @property
    def events(self) -> list[SimEvent]:
        return list(self._events)

    @property
    def now(self) -> int:
        return int(self._env.now)

    @property
    def done(self) -> bool:
        return self._pending is not None and len(self._finished) >= self._total

    @property
    def finished(self) -> list[JobRecord]:
        """Completed jobs in dispatch order."""
        return list(self._finished)

    @property
    def job_ids(self) -> list[int]:
        """Ids of the loaded input jobs, generated workloads included."""
        return list(self._job_ids)

    @property
    def policy_name(self) -> str | None:
        return self._scheduler.policy_name if self._scheduler else None

    def metric_report(self) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        for metric in self._metrics:
            merged.update(metric.report())
        merged["policy"] = self.policy_name
        return merged


def simulate(jobs: Iterable[JobInput], scheduler: IScheduler | str = "hrrn") -> list[JobRecord]:
    """Run one simulation and return new completed records in dispatch order."""
    engine = SimEngine()
    engine.load_jobs(jobs, scheduler=scheduler)
    engine.run()
    return engine.finished
