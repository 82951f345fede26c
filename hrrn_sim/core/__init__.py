"""Simulation core exports."""

from .admission import PendingSequence, ReadySet
from .engine import SimEngine, simulate
from .interfaces import ISimEngine

__all__ = ["ISimEngine", "PendingSequence", "ReadySet", "SimEngine", "simulate"]
