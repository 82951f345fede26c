"""Metrics exports."""

from .base import IMetric
from .core import CoreMetrics

__all__ = ["CoreMetrics", "IMetric"]
