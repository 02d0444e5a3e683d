"""Gathers the branding document from the tenant in parallel.

Optional sub-resources (branding settings, template, theme) fall back to
defaults so a tenant that never customised anything still gets a usable
editor. Required ones (prompt settings, tenant settings, the custom
domain precondition, custom text) abort the whole aggregation.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp

from brandbridge.adapters.gateway import Gateway

from .config import BridgeConfig
from .errors import GatewayError, GatewayTimeoutError
from .merge import merge_maps
from .models import (
    DEFAULT_BRANDING_COLORS,
    DEFAULT_THEME,
    CompositeDocument,
    TenantData,
)
from .task_group import ErrorGroup

logger = logging.getLogger(__name__)

# Read failures tolerated for optional sub-resources.
_SOFT_ERRORS = (
    GatewayError,
    GatewayTimeoutError,
    aiohttp.ClientError,
    asyncio.TimeoutError,
)


async def fetch_page_data(
    gateway: Gateway,
    tenant_domain: str,
    config: BridgeConfig | None = None,
) -> CompositeDocument:
    """Build the composite document sent to the UI at session start."""
    config = config or BridgeConfig()
    results: dict[str, Any] = {}

    async def _store(key: str, aw) -> None:
        results[key] = await aw

    async with ErrorGroup() as group:
        group.go(gateway.ensure_custom_domain_enabled())
        group.go(_store("profile", gateway.read_prompt_settings()))
        group.go(_store("branding", fetch_branding_settings_or_use_defaults(gateway)))
        group.go(_store("template", fetch_branding_template_or_use_empty(gateway)))
        group.go(_store("theme", fetch_branding_theme_or_use_default(gateway)))
        group.go(_store("tenant", gateway.read_tenant_settings()))
        group.go(_store(
            "custom_text",
            fetch_custom_text_with_defaults(gateway, config, group.cancelled),
        ))

    tenant = results["tenant"]
    return CompositeDocument(
        connected=True,
        authentication_profile=results["profile"],
        branding=results["branding"],
        templates=results["template"],
        themes=results["theme"],
        tenant=TenantData(
            friendly_name=tenant.get("friendly_name") or "",
            enabled_locales=list(tenant.get("enabled_locales") or []),
            domain=tenant_domain,
        ),
        custom_text=results["custom_text"],
    )


async def fetch_branding_settings_or_use_defaults(gateway: Gateway) -> dict[str, Any]:
    try:
        branding = await gateway.read_branding()
    except _SOFT_ERRORS as exc:
        logger.info("Branding settings unavailable, using defaults: %s", exc)
        branding = {}
    if not branding.get("colors"):
        branding["colors"] = dict(DEFAULT_BRANDING_COLORS)
    return branding


async def fetch_branding_template_or_use_empty(gateway: Gateway) -> dict[str, Any]:
    try:
        return await gateway.read_universal_login_template()
    except _SOFT_ERRORS as exc:
        logger.info("No universal login template, starting empty: %s", exc)
        return {"body": ""}


async def fetch_branding_theme_or_use_default(gateway: Gateway) -> dict[str, Any]:
    try:
        theme = await gateway.read_default_theme()
    except _SOFT_ERRORS as exc:
        logger.info("Default theme unavailable, using built-in theme: %s", exc)
        theme = None
    if theme is None:
        return DEFAULT_THEME.to_dict()
    return theme


async def fetch_custom_text_with_defaults(
    gateway: Gateway,
    config: BridgeConfig,
    cancelled: asyncio.Event | None = None,
) -> dict[str, Any]:
    """Current custom text per prompt area, with CDN defaults filled in.

    A failing read of the current text is fatal. The default bundle is a
    convenience: if it cannot be fetched or decoded, only the current
    text is returned.
    """
    custom_text: dict[str, Any] = {}

    async def _read(prompt: str) -> None:
        if cancelled is not None and cancelled.is_set():
            return
        custom_text[prompt] = await gateway.read_custom_text(prompt, config.locale)

    async with ErrorGroup() as group:
        for prompt in config.prompts:
            group.go(_read(prompt))

    if cancelled is not None and cancelled.is_set():
        return custom_text

    default_text = await _fetch_default_text(gateway, config)
    if default_text is None:
        return custom_text
    return merge_maps(default_text, custom_text)


async def _fetch_default_text(
    gateway: Gateway,
    config: BridgeConfig,
) -> dict[str, Any] | None:
    url = config.default_text_url_for_locale()
    try:
        response = await gateway.request("GET", url)
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        logger.warning("Default custom text fetch failed (non-fatal): %s", exc)
        return None
    if response.status >= 400:
        logger.warning(
            "Default custom text fetch returned status %s (non-fatal)",
            response.status,
        )
        return None
    try:
        bundle = json.loads(response.body)
    except ValueError as exc:
        logger.warning("Default custom text is not valid JSON (non-fatal): %s", exc)
        return None
    if not isinstance(bundle, list):
        logger.warning("Default custom text bundle is not a list (non-fatal)")
        return None

    enabled = set(config.prompts)
    defaults: dict[str, Any] = {}
    for entry in bundle:
        if not isinstance(entry, dict):
            continue
        for key, value in entry.items():
            if key in enabled and isinstance(value, dict):
                defaults[key] = value
    return defaults
