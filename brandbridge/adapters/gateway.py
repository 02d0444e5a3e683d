"""Remote resource gateway for the tenant's management API.

``Gateway`` is the narrow surface the aggregator and persister depend
on. ``ManagementGateway`` implements it over aiohttp against
``https://<domain>/api/v2/``.
"""
from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import quote

import aiohttp

from brandbridge.engine.errors import (
    CustomDomainRequiredError,
    GatewayError,
    GatewayTimeoutError,
)

logger = logging.getLogger(__name__)


@dataclass
class GatewayResponse:
    """Raw response returned by the generic ``request`` primitive."""

    status: int
    body: bytes


class Gateway(Protocol):
    async def ensure_custom_domain_enabled(self) -> None: ...

    async def read_prompt_settings(self) -> dict[str, Any]: ...

    async def update_prompt_settings(self, body: dict[str, Any]) -> None: ...

    async def read_branding(self) -> dict[str, Any]: ...

    async def update_branding(self, body: dict[str, Any]) -> None: ...

    async def read_universal_login_template(self) -> dict[str, Any]: ...

    async def set_universal_login_template(self, body: str) -> None: ...

    async def read_default_theme(self) -> dict[str, Any] | None: ...

    async def create_theme(self, body: dict[str, Any]) -> dict[str, Any]: ...

    async def update_theme(self, theme_id: str, body: dict[str, Any]) -> dict[str, Any]: ...

    async def read_tenant_settings(self) -> dict[str, Any]: ...

    async def read_custom_text(self, prompt: str, language: str) -> dict[str, Any]: ...

    async def set_custom_text(
        self, prompt: str, language: str, body: dict[str, Any],
    ) -> None: ...

    async def request(self, method: str, url: str) -> GatewayResponse: ...


class ManagementGateway:
    """aiohttp client for the management API.

    Owns its ClientSession; use as an async context manager or call
    ``close()``.
    """

    def __init__(
        self,
        domain: str,
        access_token: str,
        timeout_seconds: float = 600.0,
        session: aiohttp.ClientSession | None = None,
        base_url: str | None = None,
    ) -> None:
        self._base_url = (base_url or f"https://{domain}/api/v2/").rstrip("/") + "/"
        self._headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> ManagementGateway:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    def _client(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def _call(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        allow_not_found: bool = False,
    ) -> Any:
        url = self._base_url + path
        start = time.monotonic()
        try:
            async with self._client().request(
                method, url, json=body, headers=self._headers,
            ) as response:
                status = response.status
                raw = await response.read()
        except asyncio.TimeoutError as exc:
            logger.warning(
                "API %s %s timed out after %.1fs",
                method, path, time.monotonic() - start,
            )
            raise GatewayTimeoutError(method, path, self._timeout.total) from exc
        elapsed_ms = (time.monotonic() - start) * 1000
        logger.debug(
            "API %s %s status=%s duration_ms=%.1f",
            method, path, status, elapsed_ms,
        )
        if allow_not_found and status == 404:
            return None
        if status >= 400:
            raise GatewayError(status, method, path, _error_message(raw))
        if not raw:
            return None
        return json.loads(raw)

    # ── Preconditions ──

    async def ensure_custom_domain_enabled(self) -> None:
        try:
            domains = await self._call("GET", "custom-domains")
        except GatewayError as exc:
            if exc.status == 403:
                raise CustomDomainRequiredError() from exc
            raise
        for domain in domains or []:
            if domain.get("status") == "ready":
                return
        raise CustomDomainRequiredError()

    # ── Prompts ──

    async def read_prompt_settings(self) -> dict[str, Any]:
        return await self._call("GET", "prompts") or {}

    async def update_prompt_settings(self, body: dict[str, Any]) -> None:
        await self._call("PATCH", "prompts", body)

    async def read_custom_text(self, prompt: str, language: str) -> dict[str, Any]:
        path = f"prompts/{quote(prompt)}/custom-text/{quote(language)}"
        return await self._call("GET", path) or {}

    async def set_custom_text(
        self, prompt: str, language: str, body: dict[str, Any],
    ) -> None:
        path = f"prompts/{quote(prompt)}/custom-text/{quote(language)}"
        await self._call("PUT", path, body)

    # ── Branding ──

    async def read_branding(self) -> dict[str, Any]:
        return await self._call("GET", "branding") or {}

    async def update_branding(self, body: dict[str, Any]) -> None:
        await self._call("PATCH", "branding", body)

    async def read_universal_login_template(self) -> dict[str, Any]:
        return await self._call("GET", "branding/templates/universal-login") or {}

    async def set_universal_login_template(self, body: str) -> None:
        await self._call(
            "PUT", "branding/templates/universal-login", {"template": body},
        )

    async def read_default_theme(self) -> dict[str, Any] | None:
        return await self._call(
            "GET", "branding/themes/default", allow_not_found=True,
        )

    async def create_theme(self, body: dict[str, Any]) -> dict[str, Any]:
        return await self._call("POST", "branding/themes", body) or {}

    async def update_theme(self, theme_id: str, body: dict[str, Any]) -> dict[str, Any]:
        return await self._call(
            "PATCH", f"branding/themes/{quote(theme_id)}", body,
        ) or {}

    # ── Tenant ──

    async def read_tenant_settings(self) -> dict[str, Any]:
        return await self._call("GET", "tenants/settings") or {}

    # ── Generic ──

    async def request(self, method: str, url: str) -> GatewayResponse:
        """Unauthenticated request to an absolute URL (e.g. a CDN)."""
        async with self._client().request(method, url) as response:
            return GatewayResponse(status=response.status, body=await response.read())


def _error_message(raw: bytes) -> str:
    text = raw.decode("utf-8", errors="replace").strip()
    try:
        payload = json.loads(text)
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    if len(text) > 300:
        text = text[:300] + "..."
    return text
