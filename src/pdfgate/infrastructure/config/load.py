"""Merge config layers: defaults < YAML < PDFGATE_* env (and .env) < CLI."""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

# Flat env/CLI names and where they live in the sectioned YAML.
_FLAT_KEYS: dict[str, tuple[str, str]] = {
    "max_concurrent": ("admission", "max_concurrent"),
    "acquire_timeout_seconds": ("admission", "acquire_timeout_seconds"),
    "chrome_path": ("browser", "executable_path"),
    "use_bundled_chromium": ("browser", "use_bundled_chromium"),
    "browser_headless": ("browser", "headless"),
    "launch_args": ("browser", "launch_args"),
    "render_timeout_ms": ("browser", "render_timeout_ms"),
    "min_pdf_bytes": ("browser", "min_pdf_bytes"),
    "registry_base_url": ("registry", "base_url"),
    "registry_timeout_seconds": ("registry", "timeout_seconds"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "drain_timeout_seconds": ("shutdown", "drain_timeout_seconds"),
}
_SECTIONS = frozenset(section for section, _ in _FLAT_KEYS.values())


def _sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {
        key: (dict(value) if key in _SECTIONS else value)
        for key, value in layer.items()
        if key in ("app_name", "environment")
        or (key in _SECTIONS and isinstance(value, Mapping))
    }
    for flat, (section, key) in _FLAT_KEYS.items():
        if flat in layer:
            value = layer[flat]
            out.setdefault(section, {})[key] = str(value) if isinstance(value, Path) else value
    return out


def _merge_into(base: dict[str, Any], layer: Mapping[str, Any]) -> None:
    # Nested mappings merge; anything else, lists included, is replaced.
    for key, value in layer.items():
        if isinstance(base.get(key), dict) and isinstance(value, Mapping):
            _merge_into(base[key], value)
        else:
            base[key] = value


def _yaml_layer(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    parsed = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(parsed, dict):
        raise ValueError(f"{path}: expected a YAML mapping, got {type(parsed).__name__}")
    return parsed


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Build the validated :class:`AppConfig`.

    A ``.env`` file only fills variables missing from the real environment.
    Missing ``config_path`` or ``dotenv_path`` files raise ``FileNotFoundError``.
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    merged = _sectioned(deepcopy(DEFAULT_CONFIG))
    layers = [
        _yaml_layer(config_path) if config_path is not None else {},
        EnvOverrides().to_update_dict(),
        cli_overrides or {},
    ]
    for layer in layers:
        _merge_into(merged, _sectioned(layer))
    return AppConfig.model_validate(merged)
