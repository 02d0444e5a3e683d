"""Branding document engine: aggregation, merging and persistence."""
from .config import BridgeConfig
from .errors import (
    BridgeError,
    BrowserLaunchError,
    ChannelError,
    CustomDomainRequiredError,
    DocumentError,
    GatewayError,
    GatewayTimeoutError,
    PersistenceError,
)
from .models import DEFAULT_THEME, CompositeDocument, TenantData, ThemeDescriptor

__all__ = [
    # Config
    "BridgeConfig",
    # Models
    "CompositeDocument",
    "DEFAULT_THEME",
    "TenantData",
    "ThemeDescriptor",
    # Errors
    "BridgeError",
    "BrowserLaunchError",
    "ChannelError",
    "CustomDomainRequiredError",
    "DocumentError",
    "GatewayError",
    "GatewayTimeoutError",
    "PersistenceError",
]
