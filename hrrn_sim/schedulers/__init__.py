"""Schedulers package exports."""

from .base import IScheduler, PriorityScheduler, response_ratio
from .baselines import FCFSScheduler, SJFScheduler
from .hrrn import HRRNScheduler
from .registry import available_schedulers, create_scheduler, register_scheduler

__all__ = [
    "FCFSScheduler",
    "HRRNScheduler",
    "IScheduler",
    "PriorityScheduler",
    "SJFScheduler",
    "available_schedulers",
    "create_scheduler",
    "register_scheduler",
    "response_ratio",
]
