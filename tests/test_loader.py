from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from hrrn_sim.io import ConfigError, ConfigLoader, load_jobs_csv, write_jobs_csv
from hrrn_sim.model import JobSpec


EXAMPLES = Path(__file__).resolve().parents[1] / "examples"


def _payload(**workload: Any) -> dict[str, Any]:
    return {"version": "0.2", "workload": workload, "scheduler": {"name": "hrrn"}}


def test_load_yaml_example() -> None:
    spec = ConfigLoader().load(str(EXAMPLES / "single_job.yaml"))
    assert spec.version == "0.2"
    assert spec.scheduler.name == "hrrn"
    assert [(job.id, job.arrival, job.runtime, job.deadline) for job in spec.workload.jobs] == [(1, 0, 5, 10)]


def test_legacy_v01_is_migrated() -> None:
    spec = ConfigLoader().load(str(EXAMPLES / "legacy_v01.json"))
    assert spec.version == ConfigLoader.SUPPORTED_VERSION
    assert spec.scheduler.name == "hrrn"
    assert [job.id for job in spec.workload.jobs] == [1, 2]


def test_legacy_v01_rejects_jobs_and_workload_together() -> None:
    payload = {"version": "0.1", "jobs": [], "workload": {"jobs": []}}
    with pytest.raises(ConfigError, match="exclusive"):
        ConfigLoader().load_data(payload)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        ConfigLoader().load(str(tmp_path / "missing.yaml"))


def test_invalid_yaml_syntax(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("version: [0.2\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid config syntax"):
        ConfigLoader().load(str(path))


def test_root_must_be_object(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigError, match="root must be object"):
        ConfigLoader().load(str(path))


def test_unsupported_version() -> None:
    with pytest.raises(ConfigError, match="unsupported config version"):
        ConfigLoader().load_data({"version": "9.9", "workload": {}})


def test_schema_rejects_zero_runtime() -> None:
    payload = _payload(jobs=[{"id": 1, "arrival": 0, "runtime": 0, "deadline": 3}])
    with pytest.raises(ConfigError, match="schema validation failed"):
        ConfigLoader().load_data(payload)


def test_schema_rejects_unknown_fields() -> None:
    payload = _payload(jobs=[{"id": 1, "arrival": 0, "runtime": 2, "deadline": 3, "priority": 1}])
    with pytest.raises(ConfigError, match="schema validation failed"):
        ConfigLoader().load_data(payload)


def test_schema_rejects_unknown_event_id_mode() -> None:
    payload = _payload(jobs=[{"id": 1, "arrival": 0, "runtime": 2, "deadline": 3}])
    payload["scheduler"]["params"] = {"event_id_mode": "sequential"}
    with pytest.raises(ConfigError, match="event_id_mode"):
        ConfigLoader().load_data(payload)


def test_workload_requires_exactly_one_source() -> None:
    loader = ConfigLoader()
    with pytest.raises(ConfigError, match="one of jobs, csv_path or generator"):
        loader.load_data(_payload())
    with pytest.raises(ConfigError, match="more than one source"):
        loader.load_data(
            _payload(
                jobs=[{"id": 1, "arrival": 0, "runtime": 2, "deadline": 3}],
                generator={"name": "assignment"},
            )
        )


def test_duplicate_job_ids_rejected() -> None:
    payload = _payload(
        jobs=[
            {"id": 1, "arrival": 0, "runtime": 2, "deadline": 3},
            {"id": 1, "arrival": 4, "runtime": 2, "deadline": 9},
        ]
    )
    with pytest.raises(ConfigError, match="duplicate"):
        ConfigLoader().load_data(payload)


def test_csv_path_is_inlined_relative_to_config() -> None:
    spec = ConfigLoader().load(str(EXAMPLES / "csv_workload.yaml"))
    assert spec.workload.csv_path is None
    assert [job.id for job in spec.workload.jobs] == [1, 2, 3, 4, 5]
    assert spec.workload.jobs[4] == JobSpec(id=5, arrival=10, runtime=2, deadline=15)


def test_empty_csv_inlines_an_empty_job_list(tmp_path: Path) -> None:
    (tmp_path / "empty.csv").write_text("# nothing here\nid,arrival,runtime,deadline\n", encoding="utf-8")
    spec = ConfigLoader().load_data(_payload(csv_path="empty.csv"), base_dir=tmp_path)
    assert spec.workload.jobs == []
    assert spec.workload.csv_path is None


def test_empty_inline_job_list_is_a_source() -> None:
    spec = ConfigLoader().load_data(_payload(jobs=[]))
    assert spec.workload.jobs == []


def test_csv_skips_comments_header_and_blank_lines(tmp_path: Path) -> None:
    path = tmp_path / "jobs.csv"
    path.write_text("# comment\nID,arrival,runtime,deadline\n\n7, 2, 3, 9\n", encoding="utf-8")
    assert load_jobs_csv(path) == [JobSpec(id=7, arrival=2, runtime=3, deadline=9)]


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("id,arrival,runtime,deadline\n1,0,5\n", ":2: bad csv line"),
        ("1,0,five,9\n", ":1: non-integer field"),
        ("1,0,0,9\n", ":1:"),
        ("1,-3,2,9\n", ":1:"),
    ],
)
def test_csv_reports_offending_line(tmp_path: Path, content: str, message: str) -> None:
    path = tmp_path / "jobs.csv"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError, match=message):
        load_jobs_csv(path)


def test_csv_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="job csv not found"):
        load_jobs_csv(tmp_path / "nope.csv")


def test_written_csv_can_be_read_back(tmp_path: Path) -> None:
    jobs = [JobSpec(id=3, arrival=1, runtime=4, deadline=20), JobSpec(id=1, arrival=0, runtime=2, deadline=5)]
    path = tmp_path / "nested" / "jobs.csv"
    write_jobs_csv(path, jobs)
    assert path.read_text(encoding="utf-8").splitlines()[0] == "id,arrival,runtime,deadline"
    assert load_jobs_csv(path) == jobs


def test_save_yaml_keeps_spec(tmp_path: Path) -> None:
    loader = ConfigLoader()
    spec = loader.load(str(EXAMPLES / "ratio_tie.yaml"))
    out = tmp_path / "saved.yaml"
    loader.save(spec, str(out))
    assert loader.load(str(out)) == spec


def test_validate_collects_issues(tmp_path: Path) -> None:
    loader = ConfigLoader()
    assert loader.validate(str(EXAMPLES / "idle_gap.yaml")) == []
    issues = loader.validate(str(tmp_path / "missing.yaml"))
    assert len(issues) == 1
    assert "not found" in issues[0].message
