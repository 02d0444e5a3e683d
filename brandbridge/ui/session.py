"""Session lifecycle: gather the document, serve the UI, tear down.

Usage:
    async with ManagementGateway(domain, token) as gateway:
        await customize(gateway, domain, Notifier(), config)
"""
from __future__ import annotations

import asyncio
import logging
import webbrowser
from collections.abc import Callable
from urllib.parse import urlencode, urlsplit, urlunsplit

from aiohttp import web

from brandbridge.adapters.gateway import Gateway
from brandbridge.engine.aggregator import fetch_page_data
from brandbridge.engine.config import BridgeConfig
from brandbridge.engine.errors import BrowserLaunchError
from brandbridge.engine.models import CompositeDocument
from brandbridge.shared.notices import GATHERING, PERFORM_CHANGES, Notifier

from .server import BrandingChannelServer

logger = logging.getLogger(__name__)

BrowserOpener = Callable[[str], bool]


def build_ui_url(ui_url: str, port: int) -> str:
    """Append ``ws_port=<port>`` to the editor UI URL."""
    parts = urlsplit(ui_url)
    query = parts.query + "&" if parts.query else ""
    query += urlencode({"ws_port": port})
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def _resolve_port(site: web.TCPSite, runner: web.AppRunner) -> int | None:
    sockets = getattr(getattr(site, "_server", None), "sockets", None) or ()
    if sockets:
        return sockets[0].getsockname()[1]
    addresses = getattr(runner, "addresses", None) or ()
    if addresses:
        first = addresses[0]
        if isinstance(first, tuple) and len(first) >= 2:
            return int(first[1])
    return None


async def _launch_browser(open_browser: BrowserOpener, url: str) -> None:
    try:
        opened = await asyncio.to_thread(open_browser, url)
    except webbrowser.Error as exc:
        raise BrowserLaunchError(url) from exc
    if opened is False:
        raise BrowserLaunchError(url)


async def start_websocket_server(
    gateway: Gateway,
    document: CompositeDocument,
    notifier: Notifier | None = None,
    config: BridgeConfig | None = None,
    *,
    cancel_event: asyncio.Event | None = None,
    open_browser: BrowserOpener = webbrowser.open,
) -> None:
    """Serve one UI session until it ends or *cancel_event* fires.

    Returns normally on a clean disconnect or external cancellation and
    raises the session's error otherwise.
    """
    config = config or BridgeConfig()
    notifier = notifier or Notifier()
    cancel_event = cancel_event or asyncio.Event()

    server = BrandingChannelServer(gateway, document, notifier, config)
    runner = web.AppRunner(server.app, shutdown_timeout=5.0)
    await runner.setup()
    try:
        site = web.TCPSite(runner, config.host, 0)
        await site.start()
        port = _resolve_port(site, runner)
        if port is None:
            raise RuntimeError("UI server started but no listening socket was reported.")
        server.bound(port)
        logger.info("UI server listening on %s:%d", config.host, port)

        url = build_ui_url(config.ui_url, port)
        try:
            await _launch_browser(open_browser, url)
        except BrowserLaunchError as exc:
            logger.warning("%s", exc)
            notifier.warning(f"Could not open a browser. Open {url} to continue.")

        finished_wait = asyncio.create_task(server.finished.wait())
        cancel_wait = asyncio.create_task(cancel_event.wait())
        try:
            await asyncio.wait(
                {finished_wait, cancel_wait},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            finished_wait.cancel()
            cancel_wait.cancel()

        if not server.finished.is_set():
            logger.info("Cancellation requested, shutting down UI server")
            server.cancel()
    finally:
        await runner.cleanup()
        logger.info("UI server on port %s closed", server.port)

    if server.error is not None:
        raise server.error


async def customize(
    gateway: Gateway,
    tenant_domain: str,
    notifier: Notifier | None = None,
    config: BridgeConfig | None = None,
    *,
    cancel_event: asyncio.Event | None = None,
    open_browser: BrowserOpener = webbrowser.open,
) -> None:
    """Gather the tenant's branding and run one editing session."""
    config = config or BridgeConfig()
    notifier = notifier or Notifier()

    with notifier.status(GATHERING):
        document = await fetch_page_data(gateway, tenant_domain, config)

    notifier.info(PERFORM_CHANGES)
    await start_websocket_server(
        gateway,
        document,
        notifier,
        config,
        cancel_event=cancel_event,
        open_browser=open_browser,
    )
