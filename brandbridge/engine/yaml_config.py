"""YAML configuration loader.

Overlays a YAML file on top of an env-derived BridgeConfig. Keys that
are absent keep their current value.

Example YAML:
    bridge:
      domain: example.eu.auth0.com
      ui_origin: http://localhost:5173
      ui_url: http://localhost:5173
      max_message_bytes: 1000000
      http_timeout_seconds: 600

    custom_text:
      locale: en
      default_text_url: https://cdn.example.com/{locale}/prompts.json
      prompts: [login]
"""
from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml

from .config import BridgeConfig

logger = logging.getLogger(__name__)

_BRIDGE_KEYS = {
    "domain": str,
    "ui_origin": str,
    "ui_url": str,
    "host": str,
    "max_message_bytes": int,
    "http_timeout_seconds": float,
    "log_level": str,
}
_CUSTOM_TEXT_KEYS = {
    "locale": str,
    "default_text_url": str,
}


def _section(raw: dict[str, Any], name: str, path: Path) -> dict[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"{path}: '{name}' must be a mapping")
    return value


def load_yaml_config(
    path: str | Path,
    base: BridgeConfig | None = None,
) -> BridgeConfig:
    """Load a YAML file and overlay it on *base* (or the defaults).

    The access token is deliberately not read from YAML; keep it in
    BRANDBRIDGE_ACCESS_TOKEN or pass --token.
    """
    path = Path(path)
    logger.info(
        "load_yaml_config: loading %s (exists=%s)", path, path.exists()
    )
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.error("load_yaml_config: config file not found at %s", path.absolute())
        raise
    except yaml.YAMLError as exc:
        logger.error("load_yaml_config: YAML parse error in %s: %s", path, exc)
        raise

    if not isinstance(raw, dict):
        raise ValueError(f"{path}: top level must be a mapping")

    overrides: dict[str, Any] = {}
    bridge = _section(raw, "bridge", path)
    for key, cast in _BRIDGE_KEYS.items():
        if key in bridge and bridge[key] is not None:
            overrides[key] = cast(bridge[key])

    custom_text = _section(raw, "custom_text", path)
    for key, cast in _CUSTOM_TEXT_KEYS.items():
        if key in custom_text and custom_text[key] is not None:
            overrides[key] = cast(custom_text[key])
    if "prompts" in custom_text:
        prompts = custom_text["prompts"] or []
        if not isinstance(prompts, list):
            raise ValueError(f"{path}: 'custom_text.prompts' must be a list")
        overrides["prompts"] = [str(p) for p in prompts]

    logger.info(
        "Parsed YAML config %s: overrides: %s",
        path.name, ", ".join(sorted(overrides)) or "(none)",
    )
    return replace(base or BridgeConfig(), **overrides)
