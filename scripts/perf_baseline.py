"""Wall-time gate for the dispatch loop on generated workloads."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import time

from hrrn_sim.core import SimEngine
from hrrn_sim.io import ConfigLoader


def _parse_int_list(raw: str) -> list[int]:
    return [int(item.strip()) for item in raw.split(",") if item.strip()]


def _parse_float_list(raw: str | None) -> list[float]:
    if raw is None or not raw.strip():
        return []
    return [float(item.strip()) for item in raw.split(",") if item.strip()]


def _build_payload(job_count: int, seed: int, scheduler: str) -> dict:
    return {
        "version": "0.2",
        "workload": {
            "generator": {
                "name": "uniform",
                "params": {
                    "count": job_count,
                    "max_interarrival": 6,
                    "min_runtime": 1,
                    "max_runtime": 12,
                    "max_slack": 40,
                },
            }
        },
        "scheduler": {"name": scheduler, "params": {"event_id_mode": "deterministic"}},
        "sim": {"seed": seed},
    }


def _run_case(job_count: int, seed: int, scheduler: str) -> dict:
    spec = ConfigLoader().load_data(_build_payload(job_count, seed, scheduler))
    engine = SimEngine()
    started = time.perf_counter()
    engine.build(spec)
    engine.run()
    elapsed_ms = (time.perf_counter() - started) * 1000.0
    metrics = engine.metric_report()
    return {
        "case_name": f"{scheduler}_jobs_{job_count}",
        "job_count": job_count,
        "wall_time_ms": elapsed_ms,
        "jobs_completed": metrics.get("jobs_completed", 0),
        "event_count": metrics.get("event_count", 0),
        "makespan": metrics.get("makespan", 0),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run dispatch-loop perf checks on generated workloads")
    parser.add_argument("--jobs", default="500,2000", help="comma-separated job counts, e.g. 500,2000")
    parser.add_argument(
        "--max-wall-ms",
        default="",
        help="comma-separated wall-time thresholds, aligned with --jobs",
    )
    parser.add_argument("--scheduler", default="hrrn", help="scheduler name")
    parser.add_argument("--seed", type=int, default=7, help="workload seed")
    parser.add_argument(
        "--output",
        default="artifacts/perf/perf-baseline.json",
        help="where to write json report",
    )
    args = parser.parse_args(argv)

    job_counts = _parse_int_list(args.jobs)
    thresholds = _parse_float_list(args.max_wall_ms)
    if thresholds and len(thresholds) != len(job_counts):
        raise ValueError("--max-wall-ms length must match --jobs length")

    cases: list[dict] = []
    failed = False
    for idx, job_count in enumerate(job_counts):
        case = _run_case(job_count, args.seed, args.scheduler)
        max_wall = thresholds[idx] if thresholds else None
        case["max_wall_ms"] = max_wall
        case["pass"] = max_wall is None or case["wall_time_ms"] <= max_wall
        failed = failed or not case["pass"]
        cases.append(case)
        verdict = "PASS" if case["pass"] else "FAIL"
        print(f"[{verdict}] jobs={job_count} wall_ms={case['wall_time_ms']:.2f} events={case['event_count']}")

    report = {"seed": args.seed, "scheduler": args.scheduler, "cases": cases}
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"[INFO] wrote perf report: {output_path}")
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
