"""Simulation engine interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from hrrn_sim.events import SimEvent
from hrrn_sim.model import ModelSpec


class ISimEngine(ABC):
    """Simulation engine contract."""

    @abstractmethod
    def build(self, spec: ModelSpec) -> None:
        """Build internal runtime state from model spec."""

    @abstractmethod
    def run(self) -> None:
        """Run until every job has finished."""

    @abstractmethod
    def step(self) -> bool:
        """Run one loop iteration; return False once nothing is left to do."""

    @abstractmethod
    def reset(self) -> None:
        """Reset engine state."""

    @abstractmethod
    def subscribe(self, handler: Callable[[SimEvent], None]) -> None:
        """Subscribe event handler."""
