"""JSON schema for configuration structure validation."""

from __future__ import annotations

CONFIG_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "HRRN Simulation Config",
    "type": "object",
    "required": ["version", "workload"],
    "properties": {
        "version": {"type": "string"},
        "workload": {
            "type": "object",
            "properties": {
                "jobs": {
                    "type": "array",
                    "items": {"$ref": "#/$defs/Job"},
                },
                "csv_path": {"type": "string", "minLength": 1},
                "generator": {
                    "type": "object",
                    "required": ["name"],
                    "properties": {
                        "name": {"type": "string", "minLength": 1},
                        "params": {"type": "object", "default": {}},
                    },
                    "additionalProperties": False,
                },
            },
            "additionalProperties": False,
        },
        "scheduler": {
            "type": "object",
            "required": ["name"],
            "properties": {
                "name": {"type": "string", "minLength": 1},
                "params": {
                    "type": "object",
                    "default": {},
                    "properties": {
                        "event_id_mode": {
                            "type": "string",
                            "enum": ["deterministic", "random", "seeded_random"],
                        },
                    },
                },
            },
            "additionalProperties": False,
        },
        "sim": {
            "type": "object",
            "properties": {
                "seed": {"type": "integer"},
            },
            "additionalProperties": False,
        },
    },
    "$defs": {
        "Job": {
            "type": "object",
            "required": ["id", "arrival", "runtime", "deadline"],
            "properties": {
                "id": {"type": "integer"},
                "arrival": {"type": "integer", "minimum": 0},
                "runtime": {"type": "integer", "exclusiveMinimum": 0},
                "deadline": {"type": "integer"},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}
