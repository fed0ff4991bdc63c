# context.py -------------------------------------------------
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from pyrouter.nav.guards import GuardRegistry
from pyrouter.nav.mode import HistoryModeAdapter, ModeAdapter, ModeConfig, build_mode
from pyrouter.nav.navigation import Navigator, QueryParams
from pyrouter.nav.state import URLState
from pyrouter.router.route import MatchResult, RouteNode, build_routes
from pyrouter.router.router import find_matching_routes, match_route

from .environment import BrowserEnvironment


class Services:
    """Process-wide service registry."""

    _services: Dict[str, Any] = {}

    @classmethod
    def get_service(cls, key: str, factory: Callable[[], Any]):
        service = cls._services.get(key)
        if service is None:
            service = factory()
            cls._services[key] = service
        return service

    @classmethod
    def set_service(cls, key: str, service: Any) -> None:
        cls._services[key] = service


class RouterContext:
    """Everything one router instance needs, passed around explicitly.

    Bundles the environment, the active mode adapter, the guard registry,
    the URL state and (optionally) the route tree. Independent contexts do
    not share any state, so tests can build a fresh one instead of resetting
    globals.

    The adapter is created lazily (history mode, empty base) unless one is
    given or :meth:`create_mode` is called.
    """

    def __init__(
        self,
        *,
        environment: Optional[BrowserEnvironment] = None,
        mode: Union[ModeAdapter, ModeConfig, Mapping, str, None] = None,
        guards: Optional[GuardRegistry] = None,
        routes: Iterable[Any] = (),
    ):
        self.environment = environment or BrowserEnvironment()
        self.guards = guards or GuardRegistry()
        self.routes: List[RouteNode] = list(build_routes(routes))
        self._mode: Optional[ModeAdapter] = None
        self.state = URLState(self)
        self.navigator = Navigator(self)
        if mode is not None:
            self.create_mode(mode)

    # -- mode ----------------------------------------------------------------
    @property
    def mode(self) -> ModeAdapter:
        if self._mode is None:
            self._install(HistoryModeAdapter(self.environment, ""))
        return self._mode  # type: ignore[return-value]

    def create_mode(self, config: Union[ModeAdapter, ModeConfig, Mapping, str]) -> ModeAdapter:
        if isinstance(config, ModeAdapter):
            adapter = config
        else:
            adapter = build_mode(config, self.environment)
        self._install(adapter)
        return adapter

    def reset_mode(self) -> None:
        self.state.detach()
        self._mode = None

    def _install(self, adapter: ModeAdapter) -> None:
        self._mode = adapter
        self.state.reinitialize_listener()

    # -- routes --------------------------------------------------------------
    def set_routes(self, routes: Iterable[Any]) -> None:
        self.routes = list(build_routes(routes))

    def match(self, pathname: Optional[str] = None) -> Optional[MatchResult]:
        if pathname is None:
            pathname = self.mode.get_current_path()
        return match_route(self.routes, pathname)

    def matches(self, pathname: Optional[str] = None) -> List[MatchResult]:
        if pathname is None:
            pathname = self.mode.get_current_path()
        return find_matching_routes(self.routes, pathname)

    # -- navigation ----------------------------------------------------------
    async def push(self, to: str, query: Optional[QueryParams] = None) -> bool:
        return await self.navigator.push(to, query)

    async def replace(self, to: str, query: Optional[QueryParams] = None) -> bool:
        return await self.navigator.replace(to, query)

    def back(self) -> None:
        self.navigator.back()

    def forward(self) -> None:
        self.navigator.forward()

    def __repr__(self):
        mode = self._mode.get_mode() if self._mode is not None else None
        return f"<RouterContext mode={mode!r} href={self.environment.href!r}>"


DEFAULT_CONTEXT_KEY = "router_context"


def get_default_context() -> RouterContext:
    return Services.get_service(DEFAULT_CONTEXT_KEY, RouterContext)


def set_default_context(context: RouterContext) -> None:
    Services.set_service(DEFAULT_CONTEXT_KEY, context)


def reset_default_context() -> None:
    """Drop the process-wide context (test isolation)."""
    ctx = Services._services.pop(DEFAULT_CONTEXT_KEY, None)
    if ctx is not None:
        ctx.reset_mode()
