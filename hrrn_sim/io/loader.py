"""Configuration loading, compatibility conversion and validation."""

from __future__ import annotations

import csv
from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from pydantic import ValidationError

from hrrn_sim.model import JobSpec, ModelSpec

from .schema import CONFIG_SCHEMA


JOB_CSV_FIELDS = ("id", "arrival", "runtime", "deadline")


@dataclass(slots=True)
class ValidationIssue:
    path: str
    message: str


class ConfigError(Exception):
    """Configuration loading/validation error."""


def load_jobs_csv(path: str | Path) -> list[JobSpec]:
    """Read ``id,arrival,runtime,deadline`` rows.

    Blank lines, ``#`` comments and a header row starting with ``id`` are skipped.
    """
    input_path = Path(path)
    if not input_path.exists():
        raise ConfigError(f"job csv not found: {path}")

    jobs: list[JobSpec] = []
    with input_path.open("r", encoding="utf-8", newline="") as f:
        for line_no, raw in enumerate(f, start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            if line.lower().startswith("id"):
                continue
            fields = next(csv.reader([line]))
            if len(fields) < len(JOB_CSV_FIELDS):
                raise ConfigError(f"{input_path}:{line_no}: bad csv line, expected 4 fields: {line}")
            try:
                values = [int(field.strip()) for field in fields[: len(JOB_CSV_FIELDS)]]
            except ValueError as exc:
                raise ConfigError(f"{input_path}:{line_no}: non-integer field in line: {line}") from exc
            try:
                jobs.append(JobSpec(**dict(zip(JOB_CSV_FIELDS, values, strict=True))))
            except ValidationError as exc:
                raise ConfigError(f"{input_path}:{line_no}: {exc}") from exc
    return jobs


def write_jobs_csv(path: str | Path, jobs: list[JobSpec]) -> None:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(JOB_CSV_FIELDS)
        for job in jobs:
            writer.writerow([job.id, job.arrival, job.runtime, job.deadline])


class ConfigLoader:
    """Load and validate model spec from JSON/YAML files."""

    SUPPORTED_VERSION = "0.2"

    def load(self, path: str) -> ModelSpec:
        raw = self.read_payload(path)
        return self.load_data(raw, base_dir=Path(path).resolve().parent)

    def load_data(self, payload: dict[str, Any], *, base_dir: Path | None = None) -> ModelSpec:
        normalized = self._normalize_version(payload)
        self._validate_schema(normalized)
        try:
            spec = ModelSpec.model_validate(normalized)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc
        if spec.workload.csv_path is not None:
            spec = self._inline_csv(spec, base_dir or Path.cwd())
        return spec

    def save(self, spec: ModelSpec, path: str) -> None:
        output_path = Path(path)
        payload = spec.model_dump(mode="json", exclude_none=True)
        if output_path.suffix.lower() in {".yaml", ".yml"}:
            output_path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
        else:
            output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")

    def validate(self, spec_or_path: ModelSpec | str) -> list[ValidationIssue]:
        if isinstance(spec_or_path, ModelSpec):
            return []
        issues: list[ValidationIssue] = []
        try:
            self.load(spec_or_path)
        except ConfigError as exc:
            issues.append(ValidationIssue(path=spec_or_path, message=str(exc)))
        return issues

    @staticmethod
    def read_payload(path: str) -> dict[str, Any]:
        input_path = Path(path)
        if not input_path.exists():
            raise ConfigError(f"config file not found: {path}")

        text = input_path.read_text(encoding="utf-8")
        try:
            if input_path.suffix.lower() in {".yaml", ".yml"}:
                data = yaml.safe_load(text)
            else:
                data = json.loads(text)
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ConfigError(f"invalid config syntax: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError(f"config root must be object: {path}")
        return data

    def _normalize_version(self, payload: dict[str, Any]) -> dict[str, Any]:
        normalized_payload = dict(payload)
        version = str(normalized_payload.get("version", "0.1"))

        if version == self.SUPPORTED_VERSION:
            return normalized_payload
        if version == "0.1":
            # 0.1 kept the job list at the root and the scheduler as a bare name.
            migrated = dict(normalized_payload)
            migrated["version"] = self.SUPPORTED_VERSION
            if "jobs" in migrated:
                jobs = migrated.pop("jobs")
                if not isinstance(jobs, list):
                    raise ConfigError("invalid config structure: jobs must be list")
                if "workload" in migrated:
                    raise ConfigError("invalid config structure: jobs and workload are exclusive")
                migrated["workload"] = {"jobs": jobs}

            scheduler = migrated.get("scheduler")
            if isinstance(scheduler, str):
                migrated["scheduler"] = {"name": scheduler, "params": {}}
            elif scheduler is not None and not isinstance(scheduler, dict):
                raise ConfigError("invalid config structure: scheduler must be object or name")
            return migrated

        raise ConfigError(f"unsupported config version '{version}'")

    @staticmethod
    def _validate_schema(payload: dict[str, Any]) -> None:
        validator = jsonschema.Draft202012Validator(CONFIG_SCHEMA)
        errors = sorted(validator.iter_errors(payload), key=lambda err: [str(part) for part in err.path])
        if not errors:
            return
        formatted = []
        for error in errors[:8]:
            path = ".".join(str(x) for x in error.path)
            formatted.append(f"{path or '<root>'}: {error.message}")
        raise ConfigError("schema validation failed: " + " | ".join(formatted))

    @staticmethod
    def _inline_csv(spec: ModelSpec, base_dir: Path) -> ModelSpec:
        csv_path = Path(spec.workload.csv_path or "")
        if not csv_path.is_absolute():
            csv_path = base_dir / csv_path
        jobs = load_jobs_csv(csv_path)
        payload = spec.model_dump(mode="json")
        payload["workload"] = {"jobs": [job.model_dump(mode="json") for job in jobs]}
        try:
            return ModelSpec.model_validate(payload)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc
