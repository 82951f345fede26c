"""Workload generator exports."""

from .base import IWorkloadGenerator
from .builtins import AssignmentWorkloadGenerator, UniformWorkloadGenerator
from .registry import create_workload_generator, register_workload_generator

__all__ = [
    "AssignmentWorkloadGenerator",
    "IWorkloadGenerator",
    "UniformWorkloadGenerator",
    "create_workload_generator",
    "register_workload_generator",
]
