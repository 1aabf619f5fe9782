"""Limit order monitoring, persistence and backend mirroring."""

from swapengine.orders.backend import BackendOrderMirror
from swapengine.orders.monitor import LimitOrderMonitor
from swapengine.orders.store import InMemoryOrderStore, JsonFileOrderStore, OrderStore

__all__ = [
    "LimitOrderMonitor",
    "OrderStore",
    "InMemoryOrderStore",
    "JsonFileOrderStore",
    "BackendOrderMirror",
]
