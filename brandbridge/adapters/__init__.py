"""Adapters to services outside the bridge process."""
from .gateway import Gateway, GatewayResponse, ManagementGateway

__all__ = ["Gateway", "GatewayResponse", "ManagementGateway"]
