"""Per-job outcomes, summary statistics and the text report."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any

from hrrn_sim.model import JobRecord
from hrrn_sim.schedulers import response_ratio


REPORT_COLUMNS = (
    "id",
    "arrival",
    "runtime",
    "deadline",
    "start",
    "finish",
    "turnaround",
    "waiting",
    "RR_at_dispatch",
    "met_deadline",
)

_POLICY_TITLES = {
    "hrrn": "HRRN",
    "fcfs": "FCFS",
    "sjf": "SJF",
}


@dataclass(slots=True, frozen=True)
class JobOutcome:
    id: int
    arrival: int
    runtime: int
    deadline: int
    start: int
    finish: int
    turnaround: int
    waiting: int
    response_ratio: float
    met_deadline: bool


def build_outcomes(finished: Iterable[JobRecord]) -> list[JobOutcome]:
    """Derive report values from completed records, ordered by job id."""
    outcomes: list[JobOutcome] = []
    for job in sorted(finished, key=lambda item: item.id):
        if job.start is None or job.finish is None:
            raise ValueError(f"job {job.id} has not finished")
        outcomes.append(
            JobOutcome(
                id=job.id,
                arrival=job.arrival,
                runtime=job.runtime,
                deadline=job.deadline,
                start=job.start,
                finish=job.finish,
                turnaround=job.finish - job.arrival,
                waiting=job.start - job.arrival,
                response_ratio=response_ratio(job, job.start),
                met_deadline=job.finish <= job.deadline,
            )
        )
    return outcomes


def summarize(outcomes: list[JobOutcome]) -> dict[str, Any]:
    count = len(outcomes)
    met = sum(1 for item in outcomes if item.met_deadline)
    return {
        "jobs": count,
        "met_deadline": met,
        "missed_deadline": count - met,
        "avg_waiting": sum(item.waiting for item in outcomes) / count if count else 0.0,
        "avg_turnaround": sum(item.turnaround for item in outcomes) / count if count else 0.0,
    }


def outcomes_to_rows(outcomes: list[JobOutcome]) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for item in outcomes:
        row = asdict(item)
        row["response_ratio"] = round(item.response_ratio, 3)
        row["met_deadline"] = "YES" if item.met_deadline else "NO"
        rows.append(row)
    return rows


def format_report(finished: Iterable[JobRecord], policy_name: str = "hrrn") -> str:
    outcomes = build_outcomes(finished)
    summary = summarize(outcomes)
    title = _POLICY_TITLES.get(policy_name.lower(), policy_name.upper())

    lines = [
        f"{title} (non-preemptive) simulation report",
        "Format: " + ",".join(REPORT_COLUMNS),
    ]
    for item in outcomes:
        lines.append(
            f"{item.id},{item.arrival},{item.runtime},{item.deadline},{item.start},{item.finish},"
            f"{item.turnaround},{item.waiting},{item.response_ratio:.3f},"
            f"{'YES' if item.met_deadline else 'NO'}"
        )
    lines.append("")
    lines.append(
        f"Summary: processes={summary['jobs']}, met_deadline={summary['met_deadline']}, "
        f"missed_deadline={summary['missed_deadline']}"
    )
    lines.append(f"Average waiting time: {summary['avg_waiting']:.2f}")
    lines.append(f"Average turnaround time: {summary['avg_turnaround']:.2f}")
    return "\n".join(lines) + "\n"
