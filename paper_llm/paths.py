"""
Path helpers for on-disk state.

Layout:
- config/local/: instance-specific writable configs (keys, providers, models)
- data/state/: user state files (templates, scene defaults, usage log)
"""

from __future__ import annotations

from pathlib import Path

from .config import settings


def config_local_dir() -> Path:
    return Path(settings.config_dir)


def data_state_dir() -> Path:
    return Path(settings.data_dir)


def local_keys_config_path() -> Path:
    return config_local_dir() / "keys_config.yaml"


def models_config_path() -> Path:
    return config_local_dir() / "models_config.yaml"


def prompt_templates_config_path() -> Path:
    return data_state_dir() / "prompt_templates_config.yaml"


def scene_defaults_path() -> Path:
    return data_state_dir() / "scene_defaults.yaml"


def usage_log_path() -> Path:
    return data_state_dir() / "usage_records.jsonl"


def ensure_parent(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path
