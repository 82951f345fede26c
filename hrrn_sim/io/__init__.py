"""I/O exports."""

from .artifacts import write_json, write_jsonl, write_rows_csv, write_text
from .experiment_runner import BatchRunSummary, BatchSpec, ExperimentRunner, apply_factor
from .loader import ConfigError, ConfigLoader, ValidationIssue, load_jobs_csv, write_jobs_csv
from .schema import CONFIG_SCHEMA

__all__ = [
    "BatchRunSummary",
    "BatchSpec",
    "CONFIG_SCHEMA",
    "ConfigError",
    "ConfigLoader",
    "ExperimentRunner",
    "ValidationIssue",
    "apply_factor",
    "load_jobs_csv",
    "write_jobs_csv",
    "write_json",
    "write_jsonl",
    "write_rows_csv",
    "write_text",
]
