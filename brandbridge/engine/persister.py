"""Writes an edited branding document back to the tenant.

Each sub-resource is written independently and in parallel. There is no
transaction: if one write fails, the writes that already succeeded stay
applied and the first error is raised.
"""
from __future__ import annotations

import copy
import json
import logging
from typing import Any

from brandbridge.adapters.gateway import Gateway

from .config import BridgeConfig
from .errors import DocumentError
from .models import LOGO_URL_FIELD, THEME_ID_FIELD, CompositeDocument
from .task_group import ErrorGroup

logger = logging.getLogger(__name__)

EMPTY_OBJECT = "{}"


async def persist_data(
    gateway: Gateway,
    document: CompositeDocument,
    config: BridgeConfig | None = None,
) -> None:
    """Persist every sub-resource of *document*; *document* is not mutated."""
    config = config or BridgeConfig()
    body = document.templates.get("body")
    if not isinstance(body, str):
        # A missing body is never written as an empty template.
        raise DocumentError("templates.body must be a string")
    async with ErrorGroup() as group:
        group.go(gateway.set_universal_login_template(body))
        group.go(_persist_theme(gateway, document.themes))
        group.go(gateway.update_prompt_settings(copy.deepcopy(document.authentication_profile)))
        group.go(_persist_branding(gateway, document.branding))
        for prompt, value in document.custom_text.items():
            group.go(_persist_custom_text(gateway, prompt, value, config.locale))


async def _persist_theme(gateway: Gateway, theme: dict[str, Any]) -> None:
    # themeId is assigned by the tenant and must not be echoed into writes.
    body = copy.deepcopy(theme)
    body.pop(THEME_ID_FIELD, None)

    existing = await gateway.read_default_theme()
    if not existing or not existing.get(THEME_ID_FIELD):
        logger.info("No default theme on tenant, creating one")
        await gateway.create_theme(body)
        return
    await gateway.update_theme(existing[THEME_ID_FIELD], body)


async def _persist_branding(gateway: Gateway, branding: dict[str, Any]) -> None:
    body = copy.deepcopy(branding)
    body.pop(LOGO_URL_FIELD, None)
    await gateway.update_branding(body)


async def _persist_custom_text(
    gateway: Gateway,
    prompt: str,
    value: Any,
    locale: str,
) -> None:
    encoded = json.dumps(value, separators=(",", ":"))
    if encoded == EMPTY_OBJECT:
        logger.debug("Skipping empty custom text for prompt %s", prompt)
        return
    decoded = json.loads(encoded)
    if not isinstance(decoded, dict):
        raise DocumentError(f"custom text for prompt '{prompt}' must be a JSON object")
    if not decoded:
        return
    await gateway.set_custom_text(prompt, locale, decoded)
