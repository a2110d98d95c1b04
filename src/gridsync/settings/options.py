"""Typed access to the synchronisation settings."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from jsonschema import ValidationError

from ..errors import SettingsLoadError, SettingsValidationError
from .schema import DEFAULT_SETTINGS, merge_with_defaults


@dataclass(frozen=True)
class SyncSettings:
    """Tunables for one table instance.

    ``fetch_timeout_ms`` may be ``None`` to disable the fetch watchdog.
    ``filter_skip`` maps a table id to the loading row ids that stay subject
    to client-side filtering for that table.
    """

    loading_row_count: int = DEFAULT_SETTINGS["sync"]["loading_row_count"]
    debounce_ms: int = DEFAULT_SETTINGS["sync"]["debounce_ms"]
    fetch_timeout_ms: Optional[int] = DEFAULT_SETTINGS["sync"]["fetch_timeout_ms"]
    max_threads: int = DEFAULT_SETTINGS["sync"]["max_threads"]
    sentinel_max_codepoint: int = DEFAULT_SETTINGS["sync"]["sentinel_max_codepoint"]
    filter_skip: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "SyncSettings":
        """Build settings from a raw mapping, validating it first."""

        try:
            merged = merge_with_defaults(dict(data) if data else None)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        sync = merged["sync"]
        return cls(
            loading_row_count=sync["loading_row_count"],
            debounce_ms=sync["debounce_ms"],
            fetch_timeout_ms=sync["fetch_timeout_ms"],
            max_threads=sync["max_threads"],
            sentinel_max_codepoint=sync["sentinel_max_codepoint"],
            filter_skip={
                table_id: tuple(ids) for table_id, ids in merged["filter_skip"].items()
            },
        )

    def exempt_ids_for(self, table_id: Optional[str]) -> tuple[str, ...]:
        if table_id is None:
            return ()
        return self.filter_skip.get(table_id, ())


def load_settings(path: Path) -> SyncSettings:
    """Read and validate the settings JSON stored at *path*."""

    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SettingsLoadError(f"Cannot read settings from {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise SettingsLoadError(f"Settings root in {path} must be an object")
    return SyncSettings.from_mapping(payload)


__all__ = ["SyncSettings", "load_settings"]
