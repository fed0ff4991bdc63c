"""Programmatic navigation.

``push`` and ``replace`` consult the guard pipeline before touching the
environment and notify after-hooks once the new URL is committed.
``back`` and ``forward`` go straight to the environment's history: guards
are not consulted for traversal, the URL state only follows it through the
adapter's change listener.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Literal, Mapping, Optional
from urllib.parse import quote

from pyrouter.errors import RedirectLoopError
from pyrouter.router.router import resolve_redirect

from .guards import Cancel, RedirectTo

if TYPE_CHECKING:
    from pyrouter.core.context import RouterContext

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 16
# characters encodeURIComponent leaves alone on top of quote's defaults
QUERY_SAFE = "!'()*"

QueryParams = Mapping[str, Any]
Action = Literal["push", "replace"]


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_search_string(query: Optional[QueryParams] = None) -> str:
    """Serialize query parameters into a search string.

    ``None`` values are dropped. Returns ``''`` when nothing is left.

    >>> build_search_string({"page": 1, "q": "x y", "skip": None})
    '?page=1&q=x%20y'
    """
    if not query:
        return ""
    entries = [
        f"{quote(str(k), safe=QUERY_SAFE)}={quote(_stringify(v), safe=QUERY_SAFE)}"
        for k, v in query.items()
        if v is not None
    ]
    return "?" + "&".join(entries) if entries else ""


class Navigator:
    """Runs guarded navigations against a :class:`RouterContext`."""

    def __init__(self, context: "RouterContext"):
        self._context = context

    async def push(self, to: str, query: Optional[QueryParams] = None) -> bool:
        """Navigate to ``to`` adding a history entry.

        Returns ``False`` when a guard cancelled the navigation.
        """
        return await self._navigate("push", to, query, [])

    async def replace(self, to: str, query: Optional[QueryParams] = None) -> bool:
        """Like :meth:`push` but overwrites the current history entry."""
        return await self._navigate("replace", to, query, [])

    def back(self) -> None:
        self._context.environment.back()

    def forward(self) -> None:
        self._context.environment.forward()

    async def _navigate(
        self, action: Action, to: str, query: Optional[QueryParams], chain: List[str]
    ) -> bool:
        ctx = self._context
        adapter = ctx.mode
        from_path = adapter.get_current_path()
        search = build_search_string(query)

        chain = chain + [to]
        if len(chain) > MAX_REDIRECTS:
            logger.error("Navigation aborted: %s", RedirectLoopError(chain))
            return False

        result = await ctx.guards.run_guards(from_path, to)
        if isinstance(result, Cancel):
            logger.debug("Navigation %s -> %s cancelled", from_path, to)
            return False
        if isinstance(result, RedirectTo):
            logger.debug("Navigation %s -> %s redirected to %s", from_path, to, result.path)
            return await self._navigate(action, result.path, None, chain)

        if ctx.routes:
            target = resolve_redirect(ctx.routes, to)
            if target is not None and target != to:
                logger.debug("Route %s redirects to %s", to, target)
                return await self._navigate(action, target, None, chain)

        if action == "push":
            adapter.push(to, search)
        else:
            adapter.replace(to, search)

        ctx.state.sync()

        ctx.guards.run_after_hooks(from_path, to)
        return True


# ---------------------------------------------------------------------------
# Process-wide navigation (default RouterContext)
# ---------------------------------------------------------------------------


def _navigator() -> Navigator:
    from pyrouter.core.context import get_default_context  # avoid import cycle

    return get_default_context().navigator


async def push(to: str, query: Optional[QueryParams] = None) -> bool:
    return await _navigator().push(to, query)


async def replace(to: str, query: Optional[QueryParams] = None) -> bool:
    return await _navigator().replace(to, query)


def back() -> None:
    _navigator().back()


def forward() -> None:
    _navigator().forward()
