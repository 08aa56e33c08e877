"""Load GlanceConfig, merging glance.yaml / glance.toml if present.

Config files are looked up next to the source file.  CLI overrides
take precedence over file values.
"""

from __future__ import annotations

import tomllib
from dataclasses import fields
from pathlib import Path

import yaml

from glance._errors import ConfigError
from glance.config import GlanceConfig

_CONFIG_NAMES = ("glance.yaml", "glance.yml", "glance.toml")

_CONFIG_KEYS = frozenset(f.name for f in fields(GlanceConfig)) - {"source"}


def load_config(source: Path, **overrides: object) -> GlanceConfig:
    """Build a GlanceConfig for *source*, optionally merging a config file.

    Overrides whose value is ``None`` are treated as "not given" so that
    unset CLI flags never mask file values.

    Raises:
        ConfigError: If a config file is malformed or contains unknown keys.

    """
    file_config = _read_glance_config(source.parent)
    given = {k: v for k, v in overrides.items() if v is not None}
    merged = {**file_config, **given}
    unknown = sorted(set(merged) - _CONFIG_KEYS)
    if unknown:
        msg = f"Unknown config keys: {', '.join(unknown)}"
        raise ConfigError(msg)
    return GlanceConfig(source=source, **merged)  # type: ignore[arg-type]


def find_config_file(directory: Path) -> Path | None:
    """Return the first glance config file present in *directory*."""
    for name in _CONFIG_NAMES:
        path = directory / name
        if path.is_file():
            return path
    return None


def _read_glance_config(directory: Path) -> dict[str, object]:
    path = find_config_file(directory)
    if path is None:
        return {}
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix == ".toml":
            data = tomllib.loads(text)
        else:
            data = yaml.safe_load(text) or {}
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)
    return _flatten_glance_section(data)


def _flatten_glance_section(data: dict[str, object]) -> dict[str, object]:
    """Lift ``glance.*`` keys to the top level; top-level keys lose to them."""
    result: dict[str, object] = {k: v for k, v in data.items() if k != "glance"}
    section = data.get("glance")
    if isinstance(section, dict):
        result.update(section)
    return result
