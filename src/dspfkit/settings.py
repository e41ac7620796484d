from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from dspfkit.model import Size

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class SettingsError(ValueError):
    """Raised when a settings file cannot be turned into StructureSettings."""


@dataclass
class StructureSettings:
    extensions: tuple[str, ...] = (".dspf",)
    default_rows: int = 24
    default_cols: int = 80
    default_label: str = "*DS3"
    log_level: str = "WARNING"

    def default_size(self) -> Size:
        return Size(
            rows=self.default_rows,
            cols=self.default_cols,
            label=self.default_label,
            source="default",
        )

    @staticmethod
    def from_mapping(payload: dict[str, Any]) -> StructureSettings:
        defaults = StructureSettings()
        extensions = payload.get("extensions", defaults.extensions)
        if isinstance(extensions, str):
            extensions = [extensions]
        try:
            settings = StructureSettings(
                extensions=tuple(
                    ext.lower() if ext.startswith(".") else f".{ext.lower()}"
                    for ext in (str(e) for e in extensions)
                ),
                default_rows=int(payload.get("default_rows", defaults.default_rows)),
                default_cols=int(payload.get("default_cols", defaults.default_cols)),
                default_label=str(payload.get("default_label", defaults.default_label)),
                log_level=str(payload.get("log_level", defaults.log_level)).upper(),
            )
        except (TypeError, ValueError) as exc:
            raise SettingsError(f"Invalid settings value: {exc}") from exc
        if settings.log_level not in LOG_LEVELS:
            raise SettingsError(f"Unknown log level '{settings.log_level}'.")
        if settings.default_rows <= 0 or settings.default_cols <= 0:
            raise SettingsError("Default display size must be positive.")
        return settings


def load_settings(path: Path) -> StructureSettings:
    """Read settings from a YAML or JSON file."""
    try:
        if path.suffix.lower() in {".yml", ".yaml"}:
            payload = yaml.safe_load(path.read_text())
        else:
            payload = json.loads(path.read_text())
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise SettingsError(f"Could not read settings from {path}: {exc}") from exc
    if payload is None:
        return StructureSettings()
    if not isinstance(payload, dict):
        raise SettingsError(f"Settings in {path} must be a mapping.")
    return StructureSettings.from_mapping(payload)
