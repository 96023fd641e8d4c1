"""Configuration helpers for the highlight exporter."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .models import InputType

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ExportConfig:
    """Holds configuration for an export run."""

    input_type: Optional[InputType] = None
    file_path: Optional[Path] = None
    list_only: bool = False
    separator: str = ""
    log_level: str = "WARNING"

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "ExportConfig":
        kwargs: Dict[str, Any] = {}
        if "input_type" in data and data["input_type"]:
            kwargs["input_type"] = InputType.from_value(data["input_type"])
        if "file_path" in data and data["file_path"]:
            kwargs["file_path"] = Path(data["file_path"])
        if "list_only" in data:
            kwargs["list_only"] = bool(data["list_only"])
        if "separator" in data and data["separator"] is not None:
            kwargs["separator"] = str(data["separator"])
        if "log_level" in data and data["log_level"]:
            level = str(data["log_level"]).upper()
            if level not in LOG_LEVELS:
                raise ValueError(f"Unknown log level {data['log_level']!r}")
            kwargs["log_level"] = level
        return cls(**kwargs)


def load_config(path: Optional[Path]) -> Dict[str, Any]:
    """Load a JSON configuration file if provided."""

    if path is None:
        return {}
    with path.expanduser().resolve().open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must contain a JSON object")
    return data
