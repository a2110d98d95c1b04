"""Schema helpers for the table synchronisation settings."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from .. import config

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "gridsync/settings.schema.json",
    "type": "object",
    "required": ["schema", "sync"],
    "properties": {
        "schema": {"const": "gridsync/settings@1"},
        "sync": {
            "type": "object",
            "properties": {
                "loading_row_count": {"type": "integer", "minimum": 1, "maximum": 500},
                "debounce_ms": {"type": "integer", "minimum": 0},
                "fetch_timeout_ms": {"type": ["integer", "null"], "minimum": 1},
                "max_threads": {"type": "integer", "minimum": 1},
                "sentinel_max_codepoint": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 0x10FFFF,
                },
            },
            "additionalProperties": False,
        },
        "filter_skip": {
            "type": "object",
            "additionalProperties": {
                "type": "array",
                "items": {"type": "string"},
            },
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "gridsync/settings@1",
    "sync": {
        "loading_row_count": config.LOADING_ROW_COUNT,
        "debounce_ms": config.DEBOUNCE_MS,
        "fetch_timeout_ms": config.FETCH_TIMEOUT_MS,
        "max_threads": config.FETCH_MAX_THREADS,
        "sentinel_max_codepoint": config.SENTINEL_MAX_CODEPOINT,
    },
    "filter_skip": {},
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in {"sync", "filter_skip"} and isinstance(value, dict):
                target = merged.setdefault(key, {})
                for sub_key, sub_value in value.items():
                    target[sub_key] = sub_value
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
