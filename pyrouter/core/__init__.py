# pyrouter/core/__init__.py
from .environment import BrowserEnvironment, HistoryEntry, POPSTATE, HASHCHANGE

__all__ = [
    "BrowserEnvironment",
    "HistoryEntry",
    "POPSTATE",
    "HASHCHANGE",
]
