"""Model package exports."""

from .runtime import JobRecord, PreconditionViolation
from .spec import GeneratorSpec, JobSpec, ModelSpec, SchedulerSpec, SimSpec, WorkloadSpec

__all__ = [
    "GeneratorSpec",
    "JobRecord",
    "JobSpec",
    "ModelSpec",
    "PreconditionViolation",
    "SchedulerSpec",
    "SimSpec",
    "WorkloadSpec",
]
