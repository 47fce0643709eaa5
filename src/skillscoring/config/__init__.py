"\"\"\"Configuration management utilities.\"\"\""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

_SUFFIXES = (".yaml", ".yml")


class ConfigManager:
    """YAML-backed loader for named configuration documents."""

    def __init__(self, base_path: str | Path):
        self._base_path = Path(base_path)

    def path_for(self, name: str) -> Path:
        for suffix in _SUFFIXES:
            candidate = self._base_path / f"{name}{suffix}"
            if candidate.exists():
                return candidate
        raise FileNotFoundError(f"No YAML document named {name!r} under {self._base_path}")

    def load(self, name: str) -> dict[str, Any]:
        """Load a YAML configuration by name without file extension."""
        with self.path_for(name).open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"YAML document {name!r} must be a mapping")
        return loaded

    @classmethod
    def for_file(cls, path: str | Path) -> tuple["ConfigManager", str]:
        path = Path(path)
        if path.suffix not in _SUFFIXES:
            raise ValueError(f"Expected a .yaml or .yml file, got {path.name!r}")
        return cls(path.parent), path.stem


__all__ = ["ConfigManager"]
