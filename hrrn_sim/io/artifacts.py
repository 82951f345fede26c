"""Run artifact writers shared by the CLI and the batch runner."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Iterable


def _prepare(path: str | Path) -> Path:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    return output


def write_json(path: str | Path, payload: dict[str, Any]) -> Path:
    output = _prepare(path)
    output.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return output


def write_jsonl(path: str | Path, rows: Iterable[dict[str, Any]]) -> Path:
    output = _prepare(path)
    with output.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row, ensure_ascii=False) + "\n")
    return output


def write_rows_csv(path: str | Path, rows: list[dict[str, Any]]) -> Path:
    """Write dict rows; the header is the union of keys in first-seen order."""
    output = _prepare(path)
    fieldnames = list(dict.fromkeys(key for row in rows for key in row))
    with output.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)
    return output


def write_text(path: str | Path, text: str) -> Path:
    output = _prepare(path)
    output.write_text(text, encoding="utf-8")
    return output
