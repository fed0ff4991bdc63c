# pyrouter/web/__init__.py
from .server import create_fastapi_app, route_payload, routes_catalog
from .broadcast import InMemoryBroadcast
from .ws_endpoint import ChannelName, CHAN_INPUT, CHAN_NAV, CHAN_ROUTE

__all__ = [
    "create_fastapi_app",
    "route_payload",
    "routes_catalog",
    "InMemoryBroadcast",
    "ChannelName",
    "CHAN_INPUT",
    "CHAN_NAV",
    "CHAN_ROUTE",
]
