from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Sequence
from urllib.parse import parse_qs, urlsplit

from pyrouter.router.route import RouteNode
from pyrouter.router.router import match_route

if TYPE_CHECKING:
    from pyrouter.core.context import RouterContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteLocation:
    """Snapshot of where the application currently is."""

    href: str
    pathname: str
    search: str
    hash: str
    query: Dict[str, str]
    meta: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "href": self.href,
            "pathname": self.pathname,
            "search": self.search,
            "hash": self.hash,
            "query": dict(self.query),
            "meta": dict(self.meta),
        }


def parse_query(search: str) -> Dict[str, str]:
    """Parse a search string into a flat dict (first value for each key)."""
    q = search[1:] if search.startswith("?") else search
    return {k: (v[0] if v else "") for k, v in parse_qs(q, keep_blank_values=True).items()}


class URLState:
    """Current URL plus the active route's meta.

    ``pathname``, ``search`` and ``query`` are derived from ``href`` through
    the context's active mode adapter. Only the navigator and the adapter's
    change listener write ``href``.
    """

    def __init__(self, context: "RouterContext"):
        self._context = context
        self._href: str = context.environment.href
        self._meta: Mapping[str, Any] = {}
        self._cleanup: Optional[Callable[[], None]] = None
        self.subs: List[Callable[[str], None]] = []

    # -- listener ----------------------------------------------------------
    def reinitialize_listener(self) -> None:
        """Listen to the active adapter's change event and resync ``href``."""
        self.detach()
        self._cleanup = self._context.mode.setup_listener(self.sync)
        self.sync()

    def detach(self) -> None:
        if self._cleanup is not None:
            self._cleanup()
            self._cleanup = None

    def sync(self) -> None:
        """Follow the environment's href; meta is refreshed before subscribers run."""
        if self._context.routes:
            self.update_meta()
        self.href = self._context.environment.href

    # -- state ---------------------------------------------------------------
    @property
    def href(self) -> str:
        return self._href

    @href.setter
    def href(self, value: str) -> None:
        self._href = value
        self._notify()

    @property
    def meta(self) -> Mapping[str, Any]:
        return self._meta

    @meta.setter
    def meta(self, value: Optional[Mapping[str, Any]]) -> None:
        self._meta = value or {}

    def update_meta(self, routes: Optional[Sequence[RouteNode]] = None) -> Mapping[str, Any]:
        """Set ``meta`` from the route matching the current pathname."""
        if routes is None:
            routes = self._context.routes
        matched = match_route(routes, self.pathname)
        self.meta = matched.meta if matched is not None else {}
        return self.meta

    # -- derived -------------------------------------------------------------
    @property
    def pathname(self) -> str:
        return self._context.mode.get_current_path()

    @property
    def search(self) -> str:
        return self._context.mode.get_current_search()

    @property
    def hash(self) -> str:
        fragment = urlsplit(self._href).fragment
        return f"#{fragment}" if fragment else ""

    @property
    def query(self) -> Dict[str, str]:
        return parse_query(self.search)

    def location(self) -> RouteLocation:
        return RouteLocation(
            href=self._href,
            pathname=self.pathname,
            search=self.search,
            hash=self.hash,
            query=self.query,
            meta=dict(self._meta),
        )

    # -- subscribers ---------------------------------------------------------
    def subscribe(self, fn: Callable[[str], None]) -> Callable[[], None]:
        if fn not in self.subs:
            self.subs.append(fn)

        def unsubscribe():
            try:
                self.subs.remove(fn)
            except ValueError:
                pass

        return unsubscribe

    def _notify(self) -> None:
        for fn in list(self.subs):
            try:
                fn(self._href)
            except Exception:
                logger.exception("Error in URL state subscriber %r", fn)
