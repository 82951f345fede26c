"""Batch experiment runner for policy and workload matrices."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from itertools import product
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from hrrn_sim.analysis import build_outcomes, outcomes_to_rows
from hrrn_sim.core import SimEngine

from .artifacts import write_json, write_jsonl, write_rows_csv
from .loader import ConfigError, ConfigLoader

logger = logging.getLogger(__name__)


class BatchSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str = "0.1"
    base_config: str = Field(min_length=1)
    output_dir: Optional[str] = None
    factors: dict[str, list[Any]]

    @field_validator("version")
    @classmethod
    def check_version(cls, value: str) -> str:
        if value != ExperimentRunner.SUPPORTED_VERSION:
            raise ValueError(f"unsupported batch version '{value}'")
        return value

    @field_validator("factors")
    @classmethod
    def check_factors(cls, value: dict[str, list[Any]]) -> dict[str, list[Any]]:
        if not value:
            raise ValueError("batch config requires non-empty 'factors' object")
        for path, values in value.items():
            if not path or any(not part for part in path.split(".")):
                raise ValueError(f"invalid factor path '{path}'")
            if not values:
                raise ValueError(f"factor '{path}' must provide non-empty list")
        return value


@dataclass(slots=True)
class BatchRunSummary:
    summary_csv: Path
    summary_json: Path
    total_runs: int
    succeeded_runs: int
    failed_runs: int


def apply_factor(payload: dict[str, Any], path: str, value: Any) -> None:
    """Set a dotted config path, creating missing objects.

    A ``*`` segment fans out over every item of a list, e.g.
    ``workload.jobs.*.deadline``.
    """
    nodes: list[Any] = [payload]
    parts = path.split(".")
    for depth, part in enumerate(parts):
        last = depth == len(parts) - 1
        if part == "*":
            if last:
                raise ConfigError("wildcard cannot be terminal in factor path")
            expanded: list[Any] = []
            for node in nodes:
                if not isinstance(node, list):
                    raise ConfigError(f"factor path wildcard expects list node, got {type(node).__name__}")
                expanded.extend(node)
            nodes = expanded
            continue

        next_nodes: list[Any] = []
        for node in nodes:
            if not isinstance(node, dict):
                raise ConfigError(f"factor path '{path}' cannot descend into {type(node).__name__}")
            if last:
                node[part] = value
            else:
                next_nodes.append(node.setdefault(part, {}))
        nodes = next_nodes


class ExperimentRunner:
    """Run the Cartesian product of batch factors, one fresh engine per combination."""

    SUPPORTED_VERSION = "0.1"

    def __init__(self, loader: ConfigLoader | None = None) -> None:
        self._loader = loader or ConfigLoader()

    def run_batch(
        self,
        batch_config_path: str,
        *,
        output_dir: str | None = None,
        summary_csv: str | None = None,
        summary_json: str | None = None,
    ) -> BatchRunSummary:
        batch_path = Path(batch_config_path)
        try:
            batch = BatchSpec.model_validate(self._loader.read_payload(str(batch_path)))
        except ValidationError as exc:
            raise ConfigError(f"invalid batch config: {exc}") from exc

        base_config_path = (batch_path.parent / batch.base_config).resolve()
        base_payload = self._loader.read_payload(str(base_config_path))

        out_dir = self._resolve(batch_path.parent, output_dir or batch.output_dir or "artifacts/batch")
        out_dir.mkdir(parents=True, exist_ok=True)

        factor_paths = sorted(batch.factors)
        combinations = list(product(*(batch.factors[path] for path in factor_paths)))
        rows = [
            self._execute_run(
                run_id=f"run_{idx:03d}",
                run_dir=out_dir / f"run_{idx:03d}",
                payload=base_payload,
                assignments=dict(zip(factor_paths, combo, strict=True)),
                base_dir=base_config_path.parent,
            )
            for idx, combo in enumerate(combinations)
        ]

        succeeded = sum(1 for row in rows if row["status"] == "ok")
        failed = len(rows) - succeeded
        csv_path = write_rows_csv(
            self._resolve(batch_path.parent, summary_csv) if summary_csv else out_dir / "summary.csv",
            rows,
        )
        json_path = write_json(
            self._resolve(batch_path.parent, summary_json) if summary_json else out_dir / "summary.json",
            {
                "version": batch.version,
                "base_config": str(base_config_path),
                "factors": batch.factors,
                "total_runs": len(rows),
                "succeeded_runs": succeeded,
                "failed_runs": failed,
                "runs": rows,
            },
        )
        logger.info("batch finished: runs=%d, failed=%d", len(rows), failed)
        return BatchRunSummary(
            summary_csv=csv_path,
            summary_json=json_path,
            total_runs=len(rows),
            succeeded_runs=succeeded,
            failed_runs=failed,
        )

    def _execute_run(
        self,
        *,
        run_id: str,
        run_dir: Path,
        payload: dict[str, Any],
        assignments: dict[str, Any],
        base_dir: Path,
    ) -> dict[str, Any]:
        row: dict[str, Any] = {"run_id": run_id, **assignments}
        run_payload = copy.deepcopy(payload)
        try:
            for path, value in assignments.items():
                apply_factor(run_payload, path, value)
            spec = self._loader.load_data(run_payload, base_dir=base_dir)
            engine = SimEngine()
            engine.build(spec)
            engine.run()
        except Exception as exc:  # noqa: BLE001 - one bad combination must not stop the batch
            logger.warning("batch run %s failed: %s", run_id, exc)
            row.update(status="error", error=str(exc))
            return row

        metrics = engine.metric_report()
        events_path = write_jsonl(run_dir / "events.jsonl", (e.model_dump(mode="json") for e in engine.events))
        metrics_path = write_json(run_dir / "metrics.json", metrics)
        jobs_path = write_rows_csv(run_dir / "jobs.csv", outcomes_to_rows(build_outcomes(engine.finished)))
        row.update(
            status="ok",
            events_path=str(events_path),
            metrics_path=str(metrics_path),
            jobs_path=str(jobs_path),
        )
        row.update(metrics)
        return row

    @staticmethod
    def _resolve(base_dir: Path, raw_path: str) -> Path:
        path = Path(raw_path)
        return path if path.is_absolute() else (base_dir / path).resolve()
