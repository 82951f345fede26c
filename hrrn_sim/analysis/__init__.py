"""Analysis utilities for reporting and post-run auditing."""

from .audit import build_audit_report
from .compare import build_compare_report, compare_report_to_rows
from .report import JobOutcome, build_outcomes, format_report, outcomes_to_rows, summarize

__all__ = [
    "JobOutcome",
    "build_audit_report",
    "build_compare_report",
    "build_outcomes",
    "compare_report_to_rows",
    "format_report",
    "outcomes_to_rows",
    "summarize",
]
