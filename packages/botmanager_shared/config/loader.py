"""Layered settings loading for Bot Manager.

Sources are layered lowest to highest priority:

1. built-in defaults (``defaults.py``)
2. the YAML settings file, ``~/.config/botmanager/botmanager.yaml`` unless a
   path is given
3. ``BOTMANAGER_`` environment variables, ``__`` separating nested keys, e.g.
   ``BOTMANAGER_BOT__WEBHOOK__URL=https://bot.example``
4. explicit CLI params

Each layer is a nested mapping; later layers replace scalars and lists and
merge into nested mappings key by key.
"""

from __future__ import annotations

import copy
import json
import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from .defaults import BUILTIN_DEFAULTS
from .models import DEFAULT_CONFIG_PATH, BotManagerSettings

ENV_PREFIX = "BOTMANAGER_"
_ENV_NESTING = "__"


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    config_path: str | Path | None = None,
) -> BotManagerSettings:
    """Resolve every source and validate the result as frozen settings."""
    return BotManagerSettings.model_validate(
        load_config(cli_params=cli_params, environ=environ, config_path=config_path)
    )


def load_config(
    *,
    cli_params: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    config_path: str | Path | None = None,
    defaults: Mapping[str, Any] | None = None,
    env_prefix: str = ENV_PREFIX,
) -> dict[str, Any]:
    """Return the raw merged configuration mapping, before validation."""
    layers: Iterable[Mapping[str, Any]] = (
        BUILTIN_DEFAULTS if defaults is None else defaults,
        _read_yaml(Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH),
        _read_environ(os.environ if environ is None else environ, env_prefix),
        cli_params or {},
    )
    merged: dict[str, Any] = {}
    for layer in layers:
        _overlay(merged, layer)
    return merged


def _read_yaml(path: Path) -> Mapping[str, Any]:
    """Parse the settings file; a missing or empty file contributes nothing."""
    if not path.is_file():
        return {}
    parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, Mapping):
        raise ValueError(f"Config file must contain a top-level mapping: {path}")
    return parsed


def _read_environ(environ: Mapping[str, str], prefix: str) -> dict[str, Any]:
    """Turn prefixed variables into a nested mapping of coerced values."""
    tree: dict[str, Any] = {}
    for name, raw in environ.items():
        if not name.startswith(prefix):
            continue
        keys = [part.strip().lower() for part in name[len(prefix) :].split(_ENV_NESTING)]
        keys = [key for key in keys if key]
        if not keys:
            continue
        *parents, leaf = keys
        node = tree
        for key in parents:
            child = node.get(key)
            if not isinstance(child, dict):
                child = node[key] = {}
            node = child
        node[leaf] = _parse_env_value(raw)
    return tree


def _overlay(target: dict[str, Any], layer: Mapping[str, Any]) -> None:
    """Merge ``layer`` into ``target`` in place; ``layer`` wins on conflicts."""
    for key, value in layer.items():
        key = str(key)
        current = target.get(key)
        if isinstance(value, Mapping):
            if not isinstance(current, dict):
                current = target[key] = {}
            _overlay(current, value)
        else:
            target[key] = copy.deepcopy(value)


def _parse_env_value(raw: str) -> Any:
    """Interpret an environment string as bool, null, JSON or number.

    A number is only produced when it prints back identically, so values such
    as ``007`` or ``1e3`` stay strings.
    """
    text = raw.strip()
    lowered = text.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if lowered in ("null", "none"):
        return None
    if text[:1] in ("{", "["):
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return raw
    for number_type in (int, float):
        try:
            number = number_type(text)
        except ValueError:
            continue
        return number if str(number) == text else raw
    return raw
