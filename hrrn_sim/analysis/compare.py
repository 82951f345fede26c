"""Metric comparison helpers for two simulation runs."""

from __future__ import annotations

from typing import Any


DEFAULT_SCALAR_KEYS: tuple[str, ...] = (
    "jobs_completed",
    "deadline_met_count",
    "deadline_miss_count",
    "deadline_miss_ratio",
    "avg_waiting_time",
    "max_waiting_time",
    "avg_turnaround_time",
    "avg_response_ratio",
    "idle_time",
    "cpu_utilization",
    "makespan",
)

# Metrics where a smaller value on the right-hand run counts as an improvement.
LOWER_IS_BETTER: frozenset[str] = frozenset(
    {
        "deadline_miss_count",
        "deadline_miss_ratio",
        "avg_waiting_time",
        "max_waiting_time",
        "avg_turnaround_time",
        "avg_response_ratio",
        "idle_time",
        "makespan",
    }
)


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _direction(key: str, delta: float) -> str:
    if abs(delta) <= 1e-12:
        return "same"
    improved = delta < 0 if key in LOWER_IS_BETTER else delta > 0
    return "better" if improved else "worse"


def _build_scalar_rows(
    left: dict[str, Any],
    right: dict[str, Any],
    *,
    keys: tuple[str, ...],
) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for key in keys:
        left_value = _to_float(left.get(key))
        right_value = _to_float(right.get(key))
        delta = right_value - left_value
        delta_ratio = (delta / left_value * 100.0) if abs(left_value) > 1e-12 else 0.0
        rows.append(
            {
                "metric": key,
                "left": left_value,
                "right": right_value,
                "delta": delta,
                "delta_ratio_pct": delta_ratio,
                "direction": _direction(key, delta),
            }
        )
    return rows


def build_compare_report(
    left_metrics: dict[str, Any],
    right_metrics: dict[str, Any],
    *,
    left_label: str = "left",
    right_label: str = "right",
    scalar_keys: tuple[str, ...] = DEFAULT_SCALAR_KEYS,
) -> dict[str, Any]:
    """Build a deterministic metric diff report for two runs, e.g. HRRN against FCFS."""

    return {
        "left_label": left_label,
        "right_label": right_label,
        "left_policy": left_metrics.get("policy"),
        "right_policy": right_metrics.get("policy"),
        "scalar_metrics": _build_scalar_rows(left_metrics, right_metrics, keys=scalar_keys),
    }


def compare_report_to_rows(report: dict[str, Any]) -> list[dict[str, Any]]:
    """Flatten compare report to CSV-friendly rows."""

    rows: list[dict[str, Any]] = []
    for item in report.get("scalar_metrics", []):
        if not isinstance(item, dict):
            continue
        rows.append({"category": "scalar", **item})
    return rows
