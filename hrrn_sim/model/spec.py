"""Configuration domain models and semantic validation."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class JobSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    arrival: int = Field(ge=0)
    runtime: int = Field(gt=0)
    deadline: int


class GeneratorSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    params: dict = Field(default_factory=dict)


class WorkloadSpec(BaseModel):
    """Exactly one job source. ``jobs`` counts as a source whenever it is given, even empty."""

    model_config = ConfigDict(extra="forbid")

    jobs: Optional[list[JobSpec]] = None
    csv_path: Optional[str] = None
    generator: Optional[GeneratorSpec] = None

    @model_validator(mode="after")
    def validate_source(self) -> "WorkloadSpec":
        sources = [
            name
            for name, value in (("jobs", self.jobs), ("csv_path", self.csv_path), ("generator", self.generator))
            if value is not None
        ]
        if len(sources) != 1:
            if not sources:
                raise ValueError("workload must define one of jobs, csv_path or generator")
            raise ValueError(f"workload defines more than one source: {', '.join(sources)}")

        job_ids = [job.id for job in self.jobs or []]
        if len(job_ids) != len(set(job_ids)):
            raise ValueError("duplicate workload.jobs.id")
        return self


class SchedulerSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = "hrrn"
    params: dict = Field(default_factory=dict)


class SimSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    seed: int = 42


class ModelSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str
    workload: WorkloadSpec
    scheduler: SchedulerSpec = Field(default_factory=SchedulerSpec)
    sim: SimSpec = Field(default_factory=SimSpec)
