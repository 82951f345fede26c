"""Metric consumer contract."""

from __future__ import annotations

from abc import ABC, abstractmethod

from hrrn_sim.events import SimEvent


class IMetric(ABC):
    """Event-bus subscriber that folds a dispatch trace into report figures.

    The engine calls ``reset`` before every run and ``consume`` once per
    published event, in sequence order.
    """

    @abstractmethod
    def consume(self, event: SimEvent) -> None:
        """Fold one event into the running totals."""

    @abstractmethod
    def report(self) -> dict:
        """Return the figures collected so far as a flat dict."""

    @abstractmethod
    def reset(self) -> None:
        """Drop everything collected by the previous run."""
