"""Workload-generator registry."""

from __future__ import annotations

from collections.abc import Callable

from .base import IWorkloadGenerator
from .builtins import AssignmentWorkloadGenerator, UniformWorkloadGenerator


WorkloadGeneratorFactory = Callable[[], IWorkloadGenerator]


_REGISTRY: dict[str, WorkloadGeneratorFactory] = {
    "assignment": AssignmentWorkloadGenerator,
    "default": AssignmentWorkloadGenerator,
    "uniform": UniformWorkloadGenerator,
}


def register_workload_generator(name: str, factory: WorkloadGeneratorFactory) -> None:
    _REGISTRY[name.strip().lower()] = factory


def create_workload_generator(name: str) -> IWorkloadGenerator:
    key = name.strip().lower()
    if key not in _REGISTRY:
        raise ValueError(f"unknown workload generator {name}")
    return _REGISTRY[key]()
