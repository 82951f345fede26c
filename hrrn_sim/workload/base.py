"""Workload generator abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from random import Random
from typing import Any

from hrrn_sim.model import JobSpec


class IWorkloadGenerator(ABC):
    """Plugin contract for synthetic job sets."""

    @abstractmethod
    def generate(self, *, params: dict[str, Any], rng: Random) -> list[JobSpec]:
        """Return a job list with unique ids."""


def int_param(params: dict[str, Any], name: str, default: int, *, minimum: int, generator: str) -> int:
    raw = params.get(name, default)
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"workload generator {generator} requires integer params.{name}")
    if raw < minimum:
        raise ValueError(f"workload generator {generator} requires params.{name} >= {minimum}")
    return raw
