"""Configuration loading and validation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from clinic_points.common.errors import ConfigError
from clinic_points.common.fs import read_yaml
from clinic_points.common.schema import validate_geocoder_config

CONFIG_FILENAME = "geocoder.yml"


@dataclass(frozen=True)
class ConfigBundle:
    geocoder: dict
    max_in_flight: int
    default_format: str


def _deep_merge(base: Any, overlay: Any) -> Any:
    if overlay is None:
        return base
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    return _deep_merge(base, overlay)


def load_config(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ConfigBundle:
    overlay_path = None
    if overlay_config_dir is not None:
        overlay_path = overlay_config_dir / CONFIG_FILENAME
    cfg = validate_geocoder_config(
        _load_yaml_with_overlay(config_dir / CONFIG_FILENAME, overlay_path),
        allow_unknown=allow_unknown,
    )
    return ConfigBundle(
        geocoder=cfg["geocoder"],
        max_in_flight=cfg["dispatch"]["max_in_flight"],
        default_format=cfg["output"]["default_format"],
    )


def resolve_api_key(geocoder_cfg: dict, environ: Mapping[str, str] | None = None) -> str | None:
    env_name = geocoder_cfg.get("api_key_env")
    if not env_name:
        return None
    env = os.environ if environ is None else environ
    value = env.get(env_name, "").strip()
    return value or None
