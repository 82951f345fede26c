"""Scheduler registry and factory."""

from __future__ import annotations

from collections.abc import Callable

from .base import IScheduler
from .baselines import FCFSScheduler, SJFScheduler
from .hrrn import HRRNScheduler


SchedulerFactory = Callable[..., IScheduler]


_REGISTRY: dict[str, SchedulerFactory] = {
    "hrrn": lambda params=None: HRRNScheduler(params=params),
    "highest_response_ratio_next": lambda params=None: HRRNScheduler(params=params),
    "fcfs": lambda params=None: FCFSScheduler(params=params),
    "first_come_first_served": lambda params=None: FCFSScheduler(params=params),
    "sjf": lambda params=None: SJFScheduler(params=params),
    "shortest_job_first": lambda params=None: SJFScheduler(params=params),
}


def register_scheduler(name: str, factory: SchedulerFactory) -> None:
    _REGISTRY[name.strip().lower()] = factory


def available_schedulers() -> list[str]:
    return sorted(_REGISTRY)


def create_scheduler(name: str, params: dict | None = None) -> IScheduler:
    key = name.strip().lower()
    if key not in _REGISTRY:
        raise ValueError(f"unknown scheduler {name}")
    factory = _REGISTRY[key]
    try:
        return factory(params or {})
    except TypeError:
        return factory()
