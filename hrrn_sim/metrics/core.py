"""Default metrics implementation."""

from __future__ import annotations

from hrrn_sim.events import EventType, SimEvent

from .base import IMetric


class CoreMetrics(IMetric):
    """Aggregate waiting, turnaround, deadline and CPU usage figures from the event stream."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._arrived: dict[int, int] = {}
        self._waiting: dict[int, int] = {}
        self._turnaround: dict[int, int] = {}
        self._ratio: dict[int, float] = {}
        self._met: set[int] = set()
        self._missed: set[int] = set()
        self._busy_time = 0
        self._idle_time = 0
        self._event_count = 0
        self._first_time: int | None = None
        self._max_time = 0

    def consume(self, event: SimEvent) -> None:
        self._event_count += 1
        self._max_time = max(self._max_time, event.time)
        if self._first_time is None:
            self._first_time = event.time

        if event.type == EventType.JOB_ARRIVED and event.job_id is not None:
            self._arrived[event.job_id] = event.time

        elif event.type == EventType.CPU_IDLE:
            idle_from = event.payload.get("from", event.time)
            idle_to = event.payload.get("to", event.time)
            if isinstance(idle_from, int) and isinstance(idle_to, int):
                self._idle_time += max(0, idle_to - idle_from)
                self._max_time = max(self._max_time, idle_to)

        elif event.type == EventType.JOB_START and event.job_id is not None:
            ratio = event.payload.get("response_ratio")
            if isinstance(ratio, (int, float)):
                self._ratio[event.job_id] = float(ratio)
            waiting = event.payload.get("waiting")
            if isinstance(waiting, int):
                self._waiting[event.job_id] = waiting

        elif event.type == EventType.JOB_COMPLETE and event.job_id is not None:
            runtime = event.payload.get("runtime")
            if isinstance(runtime, int):
                self._busy_time += runtime
            turnaround = event.payload.get("turnaround")
            if isinstance(turnaround, int):
                self._turnaround[event.job_id] = turnaround
            if event.payload.get("met_deadline"):
                self._met.add(event.job_id)

        elif event.type == EventType.DEADLINE_MISS and event.job_id is not None:
            self._missed.add(event.job_id)

    def report(self) -> dict:
        completed = len(self._turnaround)
        waiting = list(self._waiting.values())
        turnaround = list(self._turnaround.values())
        ratios = list(self._ratio.values())
        start_time = self._first_time or 0
        makespan = max(0, self._max_time - start_time)

        return {
            "jobs_arrived": len(self._arrived),
            "jobs_completed": completed,
            "deadline_met_count": len(self._met),
            "deadline_miss_count": len(self._missed),
            "deadline_miss_ratio": len(self._missed) / max(1, completed),
            "avg_waiting_time": sum(waiting) / len(waiting) if waiting else 0.0,
            "max_waiting_time": max(waiting) if waiting else 0,
            "avg_turnaround_time": sum(turnaround) / len(turnaround) if turnaround else 0.0,
            "avg_response_ratio": sum(ratios) / len(ratios) if ratios else 0.0,
            "busy_time": self._busy_time,
            "idle_time": self._idle_time,
            "cpu_utilization": self._busy_time / makespan if makespan > 0 else 0.0,
            "makespan": makespan,
            "event_count": self._event_count,
            "max_time": self._max_time,
        }
