"""CLI entrypoint for simulation, validation and experiments."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import random
import sys
from typing import Any

from hrrn_sim.analysis import (
    build_audit_report,
    build_compare_report,
    build_outcomes,
    compare_report_to_rows,
    format_report,
    outcomes_to_rows,
)
from hrrn_sim.core import SimEngine
from hrrn_sim.io import (
    ConfigError,
    ConfigLoader,
    ExperimentRunner,
    write_jobs_csv,
    write_json,
    write_jsonl,
    write_rows_csv,
    write_text,
)
from hrrn_sim.model import ModelSpec, PreconditionViolation
from hrrn_sim.workload import create_workload_generator

USAGE_HINT = (
    "CSV format: id,arrival,runtime,deadline (deadline absolute). "
    "Lines starting with # are ignored."
)


def _read_json(path: str) -> dict[str, Any]:
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"cannot read metrics file {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"metrics file must be object: {path}")
    return payload


def _load_run_spec(args: argparse.Namespace) -> ModelSpec:
    loader = ConfigLoader()
    if args.config:
        spec = loader.load(args.config)
    elif args.csv:
        spec = loader.load_data(
            {"version": ConfigLoader.SUPPORTED_VERSION, "workload": {"csv_path": str(Path(args.csv).resolve())}}
        )
    else:
        spec = loader.load_data(
            {
                "version": ConfigLoader.SUPPORTED_VERSION,
                "workload": {"generator": {"name": "assignment", "params": {"count": args.count}}},
            }
        )
    if args.scheduler:
        spec = spec.model_copy(update={"scheduler": spec.scheduler.model_copy(update={"name": args.scheduler})})
    return spec


def cmd_validate(args: argparse.Namespace) -> int:
    loader = ConfigLoader()
    try:
        spec = loader.load(args.config)
        # Plugin names and job preconditions must resolve during validate too.
        SimEngine().build(spec)
    except (ConfigError, ValueError, PreconditionViolation) as exc:
        print(f"[ERROR] {args.config}: {exc}")
        return 1
    print("[OK] config validation passed")
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    if args.count is not None and args.count < 0:
        print("[ERROR] --count must be >= 0")
        return 1
    try:
        spec = _load_run_spec(args)
        engine = SimEngine()
        engine.build(spec)
        engine.run()
    except (ConfigError, ValueError, PreconditionViolation) as exc:
        print(f"[ERROR] {exc}")
        print(USAGE_HINT)
        return 1

    finished = engine.finished
    report = format_report(finished, engine.policy_name or spec.scheduler.name)
    if args.report_out:
        write_text(args.report_out, report)
    else:
        sys.stdout.write(report)

    events = [event.model_dump(mode="json") for event in engine.events]
    metrics = engine.metric_report()
    if args.jobs_csv_out:
        write_rows_csv(args.jobs_csv_out, outcomes_to_rows(build_outcomes(finished)))
    if args.events_out:
        write_jsonl(args.events_out, events)
    if args.metrics_out:
        write_json(args.metrics_out, metrics)
    if args.audit_out:
        audit_report = build_audit_report(events, expected_job_ids=engine.job_ids)
        write_json(args.audit_out, audit_report)
        if audit_report["status"] != "pass":
            print(f"[ERROR] simulation audit failed, report={args.audit_out}")
            return 2

    print(
        f"[OK] simulation completed, jobs={len(finished)}, now={engine.now}, "
        f"policy={engine.policy_name}"
    )
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    try:
        generator = create_workload_generator(args.generator)
        jobs = generator.generate(params={"count": args.count}, rng=random.Random(args.seed))
    except ValueError as exc:
        print(f"[ERROR] {exc}")
        return 1
    write_jobs_csv(args.out, jobs)
    print(f"[OK] workload generated, jobs={len(jobs)}, csv={args.out}")
    return 0


def cmd_batch_run(args: argparse.Namespace) -> int:
    runner = ExperimentRunner()
    try:
        summary = runner.run_batch(
            args.batch_config,
            output_dir=args.output_dir,
            summary_csv=args.summary_csv,
            summary_json=args.summary_json,
        )
    except ConfigError as exc:
        print(f"[ERROR] {exc}")
        return 1

    print(
        "[OK] batch simulation completed, "
        f"runs={summary.total_runs}, success={summary.succeeded_runs}, failed={summary.failed_runs}, "
        f"csv={summary.summary_csv}, json={summary.summary_json}"
    )
    if args.strict_fail_on_error and summary.failed_runs > 0:
        print("[ERROR] batch simulation contains failed runs in strict mode")
        return 2
    return 0


def cmd_compare(args: argparse.Namespace) -> int:
    try:
        left_metrics = _read_json(args.left_metrics)
        right_metrics = _read_json(args.right_metrics)
    except ConfigError as exc:
        print(f"[ERROR] {exc}")
        return 1

    report = build_compare_report(
        left_metrics,
        right_metrics,
        left_label=args.left_label or "left",
        right_label=args.right_label or "right",
    )
    if args.out_json:
        write_json(args.out_json, report)
    if args.out_csv:
        write_rows_csv(args.out_csv, compare_report_to_rows(report))

    print(
        "[OK] metrics compare completed, "
        f"left={args.left_metrics}, right={args.right_metrics}, "
        f"json={args.out_json or '-'}, csv={args.out_csv or '-'}"
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hrrn-sim", description="HRRN scheduling simulation CLI")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level for engine and batch messages",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="validate config file")
    validate_parser.add_argument("-c", "--config", required=True, help="path to config YAML/JSON")
    validate_parser.set_defaults(func=cmd_validate)

    run_parser = subparsers.add_parser("run", help="run simulation and print the job report")
    source = run_parser.add_mutually_exclusive_group()
    source.add_argument("-c", "--config", default=None, help="path to config YAML/JSON")
    source.add_argument("--csv", default=None, help="path to id,arrival,runtime,deadline job table")
    run_parser.add_argument(
        "--count",
        type=int,
        default=100,
        help="job count for the default generator when no config or csv is given",
    )
    run_parser.add_argument("--scheduler", default=None, help="override scheduler name (hrrn, fcfs, sjf)")
    run_parser.add_argument("--report-out", default=None, help="write the text report here instead of stdout")
    run_parser.add_argument("--jobs-csv-out", default=None, help="path to write per-job CSV rows")
    run_parser.add_argument("--events-out", default=None, help="path to write JSONL events")
    run_parser.add_argument("--metrics-out", default=None, help="path to write metric JSON")
    run_parser.add_argument("--audit-out", default=None, help="path to write audit report JSON")
    run_parser.set_defaults(func=cmd_run)

    generate_parser = subparsers.add_parser("generate", help="write a synthetic workload as CSV")
    generate_parser.add_argument("-o", "--out", required=True, help="output CSV path")
    generate_parser.add_argument("--generator", default="assignment", help="workload generator name")
    generate_parser.add_argument("--count", type=int, default=100, help="number of jobs")
    generate_parser.add_argument("--seed", type=int, default=42, help="seed for random generators")
    generate_parser.set_defaults(func=cmd_generate)

    batch_parser = subparsers.add_parser("batch-run", help="run matrix experiments")
    batch_parser.add_argument("-b", "--batch-config", required=True, help="path to batch config YAML/JSON")
    batch_parser.add_argument("--output-dir", default=None, help="batch output directory")
    batch_parser.add_argument("--summary-csv", default=None, help="summary CSV output path")
    batch_parser.add_argument("--summary-json", default=None, help="summary JSON output path")
    batch_parser.add_argument(
        "--strict-fail-on-error",
        action="store_true",
        help="return non-zero when any batch run fails",
    )
    batch_parser.set_defaults(func=cmd_batch_run)

    compare_parser = subparsers.add_parser("compare", help="compare two metrics json files")
    compare_parser.add_argument("--left-metrics", required=True, help="left metrics JSON path")
    compare_parser.add_argument("--right-metrics", required=True, help="right metrics JSON path")
    compare_parser.add_argument("--left-label", default="left", help="left side label")
    compare_parser.add_argument("--right-label", default="right", help="right side label")
    compare_parser.add_argument("--out-json", default=None, help="compare report JSON path")
    compare_parser.add_argument("--out-csv", default=None, help="compare rows CSV path")
    compare_parser.set_defaults(func=cmd_compare)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
