"""Optional YAML settings: workers, max_depth, extensions."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .collector import MAX_DEPTH
from .errors import ConfigError
from .processors.zip_check import DEFAULT_EXTENSIONS

CONFIG_NAMES = ("treescan.yaml", ".treescan.yaml")


@dataclass
class Settings:
    workers: int | None = None  # None = one per CPU
    max_depth: int = MAX_DEPTH
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS


def find_config(base: Path | None = None) -> Path | None:
    """First treescan.yaml / .treescan.yaml in base (default: cwd)."""
    base = Path(base) if base else Path.cwd()
    for name in CONFIG_NAMES:
        p = base / name
        if p.is_file():
            return p
    return None


def _positive_int(data: dict[str, Any], key: str, default: int | None) -> int | None:
    if key not in data or data[key] is None:
        return default
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{key} must be a positive integer, got {value!r}")
    return value


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from path, or from a config file in cwd. Missing file -> defaults."""
    if path is None:
        path = find_config()
        if path is None:
            return Settings()
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")

    settings = Settings()
    settings.workers = _positive_int(data, "workers", settings.workers)
    settings.max_depth = _positive_int(data, "max_depth", settings.max_depth)
    exts = data.get("extensions")
    if exts is not None:
        if isinstance(exts, str):
            exts = [exts]
        if not isinstance(exts, list) or not exts or not all(isinstance(e, str) and e for e in exts):
            raise ConfigError(f"extensions must be a list of suffixes, got {exts!r}")
        settings.extensions = tuple(exts)
    return settings
