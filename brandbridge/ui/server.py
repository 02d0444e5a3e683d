"""Websocket server bridging the branding editor UI and the tenant.

Serves exactly one UI connection per server lifetime. The aggregated
document is pushed once right after the upgrade; every document the UI
sends back is persisted before the next one is read. A document with
``connected: false`` ends the session cleanly.
"""
from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid

from aiohttp import WSCloseCode, WSMsgType, web

from brandbridge.adapters.gateway import Gateway
from brandbridge.engine.config import BridgeConfig
from brandbridge.engine.errors import (
    BridgeError,
    ChannelError,
    DocumentError,
    PersistenceError,
)
from brandbridge.engine.lifecycle import (
    TERMINAL_STATES,
    ChannelState,
    validate_transition,
)
from brandbridge.engine.models import CompositeDocument
from brandbridge.engine.persister import persist_data
from brandbridge.shared.notices import DISCONNECTED, PERSISTING, UPDATED, Notifier

logger = logging.getLogger(__name__)


class BrandingChannelServer:
    """Single-session websocket server.

    ``finished`` is set once the session reaches a terminal state;
    ``error`` then holds the failure, if any.
    """

    def __init__(
        self,
        gateway: Gateway,
        document: CompositeDocument,
        notifier: Notifier | None = None,
        config: BridgeConfig | None = None,
    ) -> None:
        self._gateway = gateway
        self._sent_data = document
        self._notifier = notifier or Notifier()
        self._config = config or BridgeConfig()
        self.received_data: CompositeDocument | None = None
        self.state = ChannelState.LISTENING
        self.error: BridgeError | None = None
        self.finished = asyncio.Event()
        self.port: int | None = None
        self._ws: web.WebSocketResponse | None = None
        self._app = web.Application(middlewares=[self._request_logging_middleware])
        self._app.router.add_get("/", self._handle_websocket)
        self._app.on_shutdown.append(self._on_shutdown)

    @property
    def app(self) -> web.Application:
        return self._app

    # ── State ──

    def _set_state(self, target: ChannelState) -> None:
        validate_transition(self.state, target)
        logger.debug("Channel state %s -> %s", self.state.value, target.value)
        self.state = target

    def _finish(self, target: ChannelState, error: BridgeError | None = None) -> None:
        if self.state in TERMINAL_STATES:
            if error is not None:
                logger.debug("Ignoring error after session end: %s", error)
            return
        self._set_state(target)
        self.error = error
        if error is not None:
            logger.error("UI session failed: %s", error)
        else:
            logger.info("UI session closed")
        self.finished.set()

    def bound(self, port: int) -> None:
        """Record the listener port; the server now awaits the upgrade."""
        self.port = port
        self._set_state(ChannelState.AWAITING_UPGRADE)

    def cancel(self) -> None:
        """End the session from outside; treated as a clean shutdown."""
        self._finish(ChannelState.CLOSED_CLEAN)

    def check_origin(self, origin: str | None) -> bool:
        # Browsers always send Origin on websocket upgrades; non-browser
        # clients may omit it.
        if origin is None:
            return True
        return origin == self._config.ui_origin

    # ── Middleware ──

    @web.middleware
    async def _request_logging_middleware(self, request: web.Request, handler) -> web.StreamResponse:
        req_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        logger.info(
            "HTTP %s %s req=%s from=%s origin=%s",
            request.method, request.path_qs, req_id, request.remote,
            request.headers.get("Origin", "<none>"),
        )
        try:
            response = await handler(request)
            elapsed_ms = (time.monotonic() - start) * 1000
            logger.info(
                "HTTP %s %s req=%s status=%s duration_ms=%.1f",
                request.method, request.path_qs, req_id,
                getattr(response, "status", "?"), elapsed_ms,
            )
            return response
        except Exception:
            elapsed_ms = (time.monotonic() - start) * 1000
            logger.exception(
                "HTTP %s %s req=%s failed duration_ms=%.1f",
                request.method, request.path_qs, req_id, elapsed_ms,
            )
            raise

    # ── Lifecycle hooks ──

    async def _on_shutdown(self, app: web.Application) -> None:
        if self._ws is not None and not self._ws.closed:
            await self._ws.close(code=WSCloseCode.GOING_AWAY, message=b"Server shutdown")

    # ── Handler ──

    async def _handle_websocket(self, request: web.Request) -> web.StreamResponse:
        if self.state is ChannelState.LISTENING:
            self._set_state(ChannelState.AWAITING_UPGRADE)
        if self.state is not ChannelState.AWAITING_UPGRADE:
            logger.warning("Rejecting UI connection: session is %s", self.state.value)
            return web.json_response({"error": "A UI session is already active"}, status=409)

        origin = request.headers.get("Origin")
        if not self.check_origin(origin):
            logger.warning("Rejecting UI connection from origin %s", origin)
            return web.json_response({"error": "Origin not allowed"}, status=403)

        ws = web.WebSocketResponse(max_msg_size=self._config.max_message_bytes)
        if not ws.can_prepare(request).ok:
            return web.json_response({"error": "Expected a websocket upgrade"}, status=400)

        # Claim the session before the first await so a concurrent upgrade
        # sees STREAMING and is turned away with 409.
        self._set_state(ChannelState.STREAMING)
        self._ws = ws
        try:
            await ws.prepare(request)
        except (ConnectionResetError, OSError) as exc:
            self._finish(ChannelState.CLOSED_ERROR, ChannelError(f"upgrade failed: {exc}"))
            raise
        logger.info("UI connected from %s", request.remote)

        payload = self._sent_data.to_dict()
        payload["connected"] = True
        try:
            await ws.send_json(payload)
        except ConnectionResetError as exc:
            self._finish(ChannelState.CLOSED_ERROR, ChannelError(f"failed to send document: {exc}"))
            return ws

        await self._receive_loop(ws)
        return ws

    async def _receive_loop(self, ws: web.WebSocketResponse) -> None:
        while not self.finished.is_set():
            msg = await ws.receive()

            if msg.type in (WSMsgType.CLOSE, WSMsgType.CLOSING, WSMsgType.CLOSED):
                self._finish(ChannelState.CLOSED_ERROR, ChannelError("connection closed by the UI"))
                return
            if msg.type is WSMsgType.ERROR:
                self._finish(ChannelState.CLOSED_ERROR, ChannelError(str(ws.exception() or msg.data)))
                await ws.close()
                return
            if msg.type not in (WSMsgType.TEXT, WSMsgType.BINARY):
                continue

            try:
                document = CompositeDocument.from_dict(json.loads(msg.data))
            except (ValueError, DocumentError) as exc:
                self._finish(ChannelState.CLOSED_ERROR, ChannelError(f"invalid document: {exc}"))
                await ws.close(code=WSCloseCode.UNSUPPORTED_DATA)
                return

            self.received_data = document

            if not document.connected:
                # No need to wait for the close handshake to finish.
                self._notifier.info(DISCONNECTED)
                self._finish(ChannelState.CLOSED_CLEAN)
                await ws.close()
                return

            try:
                with self._notifier.status(PERSISTING):
                    await persist_data(self._gateway, document, self._config)
            except Exception as exc:
                self._finish(ChannelState.CLOSED_ERROR, PersistenceError(exc))
                await ws.close(code=WSCloseCode.INTERNAL_ERROR)
                return

            self._notifier.success(UPDATED)
