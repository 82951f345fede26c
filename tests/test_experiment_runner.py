from __future__ import annotations

import json
from pathlib import Path

import pytest

from hrrn_sim.io import ConfigError, ExperimentRunner, apply_factor


EXAMPLES = Path(__file__).resolve().parents[1] / "examples"


def test_apply_factor_creates_missing_objects() -> None:
    payload: dict = {"workload": {"generator": {"name": "assignment"}}}
    apply_factor(payload, "workload.generator.params.count", 7)
    assert payload["workload"]["generator"]["params"] == {"count": 7}


def test_apply_factor_wildcard_fans_out_over_jobs() -> None:
    payload = {"workload": {"jobs": [{"id": 1, "deadline": 3}, {"id": 2, "deadline": 4}]}}
    apply_factor(payload, "workload.jobs.*.deadline", 99)
    assert [job["deadline"] for job in payload["workload"]["jobs"]] == [99, 99]


@pytest.mark.parametrize(
    ("payload", "path"),
    [
        ({"workload": {"jobs": []}}, "workload.jobs.*"),
        ({"workload": {"jobs": {}}}, "workload.jobs.*.deadline"),
        ({"workload": {"jobs": [1]}}, "workload.jobs.*.deadline"),
    ],
)
def test_apply_factor_rejects_bad_paths(payload: dict, path: str) -> None:
    with pytest.raises(ConfigError):
        apply_factor(payload, path, 1)


def test_run_batch_over_inline_jobs(tmp_path: Path) -> None:
    (tmp_path / "base.yaml").write_text((EXAMPLES / "ratio_tie.yaml").read_text(encoding="utf-8"), encoding="utf-8")
    batch = tmp_path / "batch.yaml"
    batch.write_text(
        'version: "0.1"\nbase_config: "base.yaml"\n'
        "factors:\n"
        '  scheduler.name: ["hrrn", "sjf"]\n'
        "  workload.jobs.*.deadline: [5, 100]\n",
        encoding="utf-8",
    )

    summary = ExperimentRunner().run_batch(str(batch), output_dir=str(tmp_path / "runs"))
    assert (summary.total_runs, summary.succeeded_runs, summary.failed_runs) == (4, 4, 0)
    assert summary.summary_csv == tmp_path / "runs" / "summary.csv"

    payload = json.loads(summary.summary_json.read_text(encoding="utf-8"))
    misses = {(run["scheduler.name"], run["workload.jobs.*.deadline"]): run["deadline_miss_count"] for run in payload["runs"]}
    assert misses[("hrrn", 100)] == 0
    assert misses[("hrrn", 5)] == 3
    assert misses[("sjf", 5)] == 3

    jobs_csv = Path(payload["runs"][0]["jobs_path"])
    assert jobs_csv.read_text(encoding="utf-8").startswith("id,arrival,runtime,deadline,start,finish")


def test_run_batch_rejects_wrong_version(tmp_path: Path) -> None:
    batch = tmp_path / "batch.yaml"
    batch.write_text('version: "0.9"\nbase_config: "base.yaml"\nfactors: {sim.seed: [1]}\n', encoding="utf-8")
    with pytest.raises(ConfigError, match="unsupported batch version"):
        ExperimentRunner().run_batch(str(batch))
