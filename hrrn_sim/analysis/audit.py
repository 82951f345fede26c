"""Post-simulation audit checks over the dispatch event trace."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
import math
from typing import Any


RATIO_TOLERANCE = 1e-12


def _issue(rule: str, message: str, **extra: Any) -> dict[str, Any]:
    issue: dict[str, Any] = {"rule": rule, "severity": "error", "message": message}
    issue.update(extra)
    return issue


def _check_non_overlap(events: list[dict[str, Any]]) -> list[dict[str, Any]]:
    intervals: list[tuple[int, int, Any]] = []
    for event in events:
        if event.get("type") != "JobComplete":
            continue
        start = event.get("payload", {}).get("start")
        finish = event.get("time")
        if isinstance(start, int) and isinstance(finish, int):
            intervals.append((start, finish, event.get("job_id")))

    samples: list[dict[str, Any]] = []
    intervals.sort()
    for (prev_start, prev_finish, prev_job), (start, finish, job_id) in zip(intervals, intervals[1:]):
        if start < prev_finish:
            samples.append(
                {
                    "job_ids": [prev_job, job_id],
                    "intervals": [[prev_start, prev_finish], [start, finish]],
                }
            )
    if not samples:
        return []
    return [_issue("single_cpu_non_overlap", "job execution intervals overlap", samples=samples[:20])]


def _check_causality(events: list[dict[str, Any]]) -> list[dict[str, Any]]:
    samples: list[dict[str, Any]] = []
    for event in events:
        if event.get("type") != "JobComplete":
            continue
        payload = event.get("payload", {})
        arrival = payload.get("arrival")
        runtime = payload.get("runtime")
        start = payload.get("start")
        finish = event.get("time")
        if not all(isinstance(value, int) for value in (arrival, runtime, start, finish)):
            samples.append({"event_id": event.get("event_id"), "reason": "missing timing fields"})
            continue
        if start < arrival or finish != start + runtime:
            samples.append(
                {
                    "event_id": event.get("event_id"),
                    "job_id": event.get("job_id"),
                    "arrival": arrival,
                    "start": start,
                    "finish": finish,
                    "runtime": runtime,
                }
            )
    if not samples:
        return []
    return [
        _issue(
            "causality",
            "every job must start at or after arrival and finish at start + runtime",
            samples=samples[:20],
        )
    ]


def _check_ratio_floor(events: list[dict[str, Any]]) -> list[dict[str, Any]]:
    samples: list[dict[str, Any]] = []
    for event in events:
        if event.get("type") != "JobStart":
            continue
        payload = event.get("payload", {})
        ratio = payload.get("response_ratio")
        arrival = payload.get("arrival")
        runtime = payload.get("runtime")
        start = event.get("time")
        if not isinstance(ratio, (int, float)) or not isinstance(arrival, int) or not isinstance(runtime, int):
            samples.append({"event_id": event.get("event_id"), "reason": "missing ratio fields"})
            continue
        if runtime <= 0:
            samples.append({"event_id": event.get("event_id"), "reason": "non-positive runtime"})
            continue
        expected = (float(start - arrival) + runtime) / float(runtime)
        floor_ok = ratio >= 1.0 and ((ratio == 1.0) == (start == arrival))
        if not floor_ok or not math.isclose(ratio, expected, rel_tol=RATIO_TOLERANCE, abs_tol=0.0):
            samples.append(
                {
                    "event_id": event.get("event_id"),
                    "job_id": event.get("job_id"),
                    "ratio": ratio,
                    "expected": expected,
                }
            )
    if not samples:
        return []
    return [
        _issue(
            "ratio_floor",
            "dispatch ratio must be >= 1.0, equal 1.0 only for zero waiting, and match the recorded start",
            samples=samples[:20],
        )
    ]


def _check_completeness(
    events: list[dict[str, Any]],
    expected_job_ids: Iterable[int] | None,
) -> list[dict[str, Any]]:
    arrived = Counter(e.get("job_id") for e in events if e.get("type") == "JobArrived")
    started = Counter(e.get("job_id") for e in events if e.get("type") == "JobStart")
    completed = Counter(e.get("job_id") for e in events if e.get("type") == "JobComplete")

    issues: list[dict[str, Any]] = []
    duplicated = sorted(
        {job_id for counter in (arrived, started, completed) for job_id, count in counter.items() if count > 1},
        key=str,
    )
    if duplicated:
        issues.append(_issue("completeness", "jobs dispatched or completed more than once", job_ids=duplicated))

    missing = sorted(set(arrived) - set(completed), key=str)
    if missing:
        issues.append(_issue("completeness", "arrived jobs never completed", job_ids=missing))

    if expected_job_ids is not None:
        expected = set(expected_job_ids)
        absent = sorted(expected - set(completed), key=str)
        unexpected = sorted(set(completed) - expected, key=str)
        if absent or unexpected:
            issues.append(
                _issue(
                    "completeness",
                    "completed jobs differ from the input job set",
                    missing=absent,
                    unexpected=unexpected,
                )
            )
    return issues


def _check_idle_only_when_empty(events: list[dict[str, Any]]) -> list[dict[str, Any]]:
    waiting: set[Any] = set()
    samples: list[dict[str, Any]] = []
    for idx, event in enumerate(events):
        event_type = event.get("type")
        job_id = event.get("job_id")
        if event_type == "JobArrived":
            waiting.add(job_id)
        elif event_type == "JobStart":
            waiting.discard(job_id)
        elif event_type == "CpuIdle":
            if waiting:
                samples.append(
                    {
                        "event_id": event.get("event_id"),
                        "reason": "idle while jobs were ready",
                        "ready_job_ids": sorted(waiting, key=str),
                    }
                )
            target = event.get("payload", {}).get("to")
            following = events[idx + 1] if idx + 1 < len(events) else None
            if following is None or following.get("type") != "JobArrived" or following.get("time") != target:
                samples.append(
                    {
                        "event_id": event.get("event_id"),
                        "reason": "idle jump did not land on the next arrival",
                        "to": target,
                    }
                )
    if not samples:
        return []
    return [
        _issue(
            "idle_only_when_empty",
            "the CPU may only idle with an empty ready set, up to the next arrival",
            samples=samples[:20],
        )
    ]


def _check_non_preemption(events: list[dict[str, Any]]) -> list[dict[str, Any]]:
    running: Any = None
    samples: list[dict[str, Any]] = []
    for event in events:
        event_type = event.get("type")
        job_id = event.get("job_id")
        if event_type == "JobStart":
            if running is not None:
                samples.append({"event_id": event.get("event_id"), "running": running, "started": job_id})
            running = job_id
        elif event_type == "JobComplete":
            if running != job_id:
                samples.append({"event_id": event.get("event_id"), "running": running, "completed": job_id})
            running = None
    if not samples:
        return []
    return [_issue("non_preemption", "a dispatched job was interrupted", samples=samples[:20])]


def build_audit_report(
    events: list[dict[str, Any]],
    *,
    expected_job_ids: Iterable[int] | None = None,
) -> dict[str, Any]:
    issues: list[dict[str, Any]] = []
    checks: dict[str, Any] = {}

    rules = (
        ("single_cpu_non_overlap", _check_non_overlap(events)),
        ("causality", _check_causality(events)),
        ("ratio_floor", _check_ratio_floor(events)),
        ("completeness", _check_completeness(events, expected_job_ids)),
        ("idle_only_when_empty", _check_idle_only_when_empty(events)),
        ("non_preemption", _check_non_preemption(events)),
    )
    for rule, rule_issues in rules:
        issues.extend(rule_issues)
        checks[rule] = {"passed": not rule_issues}

    errors = [event for event in events if event.get("type") == "Error"]
    if errors:
        issues.append(
            _issue(
                "engine_errors",
                "engine reported errors during the run",
                event_ids=[event.get("event_id") for event in errors[:20]],
            )
        )
    checks["engine_errors"] = {"passed": not errors}

    return {
        "status": "pass" if not issues else "fail",
        "issue_count": len(issues),
        "issues": issues,
        "checks": checks,
    }
