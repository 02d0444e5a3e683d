"""Exception hierarchy for the branding bridge.

One exception per failure mode. Soft fallbacks (optional sub-resources
that could not be read) are logged and never raised.
"""
from __future__ import annotations


class BridgeError(Exception):
    """Base exception for all bridge errors."""


class GatewayError(BridgeError):
    """The management API answered a call with an error status."""
    def __init__(self, status: int, method: str, path: str, message: str = ""):
        self.status = status
        self.method = method
        self.path = path
        self.message = message
        detail = f": {message}" if message else ""
        super().__init__(f"{method} {path} failed with status {status}{detail}")


class CustomDomainRequiredError(BridgeError):
    """The tenant has no verified custom domain."""
    def __init__(self) -> None:
        super().__init__(
            "this feature requires at least one custom domain to be set "
            "and verified for the tenant"
        )


class DocumentError(BridgeError):
    """A branding document could not be decoded or re-encoded."""


class ChannelError(BridgeError):
    """The UI channel broke while a session was streaming."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"UI connection lost: {reason}")


class PersistenceError(BridgeError):
    """Writing an edited document back to the tenant failed.

    Sub-resources written before the failure are not rolled back.
    """
    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Failed to persist branding data: {cause}")


class BrowserLaunchError(BridgeError):
    """The editor UI could not be opened in a browser."""
    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Could not open a browser at {url}")


class GatewayTimeoutError(BridgeError):
    """A management API call exceeded the configured time budget."""
    def __init__(self, method: str, path: str, timeout_seconds: float | None):
        self.method = method
        self.path = path
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"{method} {path} timed out after {timeout_seconds}s"
        )
