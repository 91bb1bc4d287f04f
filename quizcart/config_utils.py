"""
# Quizcart
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

config_utils.py

Settings for the extractor and its upload adapters.

Resolution order (later wins):
1. Built-in defaults
2. quizcart.yaml in the working directory, or the file named by
   QUIZCART_CONFIG
3. QUIZCART_SCRATCH_DIR / QUIZCART_HOST / QUIZCART_PORT environment variables

Example quizcart.yaml:

    upload_field: imsccFile
    max_total_size: 104857600
    port: 8080
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from quizcart.errors import ConfigurationError


CONFIG_FILENAME = "quizcart.yaml"


@dataclass(frozen=True)
class Settings:
    """Runtime settings. Sizes are in bytes."""
    upload_field: str = "imsccFile"
    scratch_dir: Optional[str] = None
    max_total_size: int = 500 * 1024 * 1024
    max_file_size: int = 50 * 1024 * 1024
    max_files: int = 10000
    max_compression_ratio: int = 100
    host: str = "127.0.0.1"
    port: int = 3000


def _coerce(name: str, value: Any, expected: type) -> Any:
    if expected is int:
        if isinstance(value, bool):
            raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{name} must be a string, got {value!r}")
    return value


def _field_types() -> Dict[str, type]:
    types = {}
    for f in fields(Settings):
        types[f.name] = int if isinstance(f.default, int) else str
    return types


def load_config_file(config_path: Path) -> Dict[str, Any]:
    """Read a quizcart.yaml file into a plain dict."""
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Cannot read {config_path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping")
    return data


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """
    Build Settings from defaults, the config file and the environment.

    Raises:
        ConfigurationError: unreadable file, unknown keys or bad values
    """
    if config_path is None:
        env_path = os.environ.get("QUIZCART_CONFIG")
        if env_path:
            config_path = Path(env_path)
            if not config_path.is_file():
                raise ConfigurationError(f"QUIZCART_CONFIG does not exist: {config_path}")
        else:
            config_path = Path.cwd() / CONFIG_FILENAME
            if not config_path.is_file():
                config_path = None
    elif not config_path.is_file():
        raise ConfigurationError(f"Config file not found: {config_path}")

    raw: Dict[str, Any] = load_config_file(config_path) if config_path else {}

    env_overrides = {
        "scratch_dir": os.environ.get("QUIZCART_SCRATCH_DIR"),
        "host": os.environ.get("QUIZCART_HOST"),
        "port": os.environ.get("QUIZCART_PORT"),
    }
    for key, value in env_overrides.items():
        if value:
            raw[key] = value

    types = _field_types()
    unknown = sorted(set(raw) - set(types))
    if unknown:
        raise ConfigurationError(f"Unknown setting(s): {', '.join(unknown)}")

    values = {name: _coerce(name, value, types[name]) for name, value in raw.items()}
    return replace(Settings(), **values)
