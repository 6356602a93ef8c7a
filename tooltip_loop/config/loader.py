"""Option merging and YAML loading for the config subsystem.

``build_options`` is what the controller calls: it accepts whatever the host
passed (nothing, a mapping, or ready-made :class:`LoopOptions`) and returns a
validated, frozen options object. ``load_loop_options`` reads the same keys
from a YAML file for hosts that keep chart behaviour in config files.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from tooltip_loop.core.errors import ConfigurationError

from .models import LoopOptions


def _read_yaml(path: Path) -> Mapping:
    """Read a YAML file and return a mapping (empty dict if file is blank)."""

    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as fp:
        try:
            data = yaml.safe_load(fp) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"YAML root must be a mapping in {path}")
    return data


def _normalize_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Map camelCase aliases onto field names so later keys override cleanly."""

    aliases = {
        field.alias: name for name, field in LoopOptions.model_fields.items() if field.alias
    }
    return {aliases.get(key, key): value for key, value in raw.items()}


def build_options(options: LoopOptions | Mapping[str, Any] | None = None, **overrides: Any) -> LoopOptions:
    """Merge caller options over the defaults.

    Keys may use either snake_case names or the camelCase aliases. Keyword
    ``overrides`` win over ``options``.
    """

    if isinstance(options, LoopOptions):
        if not overrides:
            return options
        merged: dict[str, Any] = options.model_dump()
    elif options is None:
        merged = {}
    elif isinstance(options, Mapping):
        merged = _normalize_keys(options)
    else:
        raise ConfigurationError(f"Unsupported options type: {type(options).__name__}")
    merged.update(_normalize_keys(overrides))
    try:
        return LoopOptions.model_validate(merged)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid loop options: {exc}") from exc


def load_loop_options(path: Path | str, **overrides: Any) -> LoopOptions:
    """Load loop options from a YAML file.

    The root mapping may hold the options directly or under a ``tooltip_loop``
    key. Callables such as ``update_data`` cannot be expressed in YAML and are
    passed as keyword ``overrides``.
    """

    data = _read_yaml(Path(path))
    section = data.get("tooltip_loop", data)
    if not isinstance(section, Mapping):
        raise ConfigurationError("`tooltip_loop` must be a mapping")
    return build_options(section, **overrides)
