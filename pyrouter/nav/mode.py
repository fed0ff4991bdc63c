"""Router mode adapters.

An adapter translates between a logical ``(path, search)`` pair and the
environment's addressable location. ``history`` mode uses clean paths under
an optional base prefix; ``hash`` mode keeps path and query inside the
fragment (``/#/users/1?tab=posts``).
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Literal, Mapping, Union

from pyrouter.core.environment import HASHCHANGE, POPSTATE, BrowserEnvironment
from pyrouter.errors import ConfigError
from pyrouter.router.match import normalize_path

RouterMode = Literal["hash", "history"]
MODES = ("hash", "history")


@dataclass(frozen=True)
class ModeConfig:
    mode: RouterMode = "history"
    base: str = ""

    @classmethod
    def coerce(cls, config: Union["ModeConfig", Mapping, str]) -> "ModeConfig":
        if isinstance(config, ModeConfig):
            cfg = config
        elif isinstance(config, str):
            cfg = cls(mode=config)  # type: ignore[arg-type]
        else:
            cfg = cls(mode=config.get("mode", "history"), base=config.get("base") or "")
        if cfg.mode not in MODES:
            raise ConfigError(f"Unknown router mode {cfg.mode!r}, expected one of {MODES}")
        return cfg


class ModeAdapter(ABC):
    """Common contract of both routing strategies."""

    event: str

    def __init__(self, environment: BrowserEnvironment, base: str = ""):
        self.environment = environment

    @abstractmethod
    def get_mode(self) -> RouterMode: ...

    @abstractmethod
    def get_current_path(self) -> str: ...

    @abstractmethod
    def get_current_search(self) -> str: ...

    @abstractmethod
    def build_url(self, path: str, search: str = "") -> str: ...

    @abstractmethod
    def push(self, path: str, search: str = "") -> None: ...

    @abstractmethod
    def replace(self, path: str, search: str = "") -> None: ...

    def setup_listener(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Subscribe to externally triggered navigation.

        Returns a cleanup that removes exactly this callback.
        """
        env = self.environment
        env.add_event_listener(self.event, callback)
        return lambda: env.remove_event_listener(self.event, callback)

    def __repr__(self):
        return f"<{type(self).__name__} mode={self.get_mode()!r}>"


class HistoryModeAdapter(ModeAdapter):
    """Clean URLs through ``push_state`` / ``replace_state``.

    ``base`` is stripped from the pathname when reading and prepended when
    writing; a trailing ``'/'`` on it is ignored.
    """

    event = POPSTATE

    def __init__(self, environment: BrowserEnvironment, base: str = ""):
        super().__init__(environment, base)
        self.base = base[:-1] if base.endswith("/") else base

    def get_mode(self) -> RouterMode:
        return "history"

    def get_current_path(self) -> str:
        pathname = self.environment.pathname
        base = self.base
        if base and (pathname == base or pathname.startswith(base + "/")):
            pathname = pathname[len(base) :]
        return pathname or "/"

    def get_current_search(self) -> str:
        return self.environment.search

    def build_url(self, path: str, search: str = "") -> str:
        return f"{self.environment.origin}{self.base}{normalize_path(path)}{search}"

    def push(self, path: str, search: str = "") -> None:
        self.environment.push_state({"timestamp": time.time()}, self.build_url(path, search))

    def replace(self, path: str, search: str = "") -> None:
        self.environment.replace_state(
            {"timestamp": time.time()}, self.build_url(path, search)
        )


class HashModeAdapter(ModeAdapter):
    """Routes encoded in the fragment; the physical path is never touched."""

    event = HASHCHANGE

    def get_mode(self) -> RouterMode:
        return "hash"

    def _fragment(self) -> str:
        return self.environment.hash[1:]

    def get_current_path(self) -> str:
        path = self._fragment().split("?", 1)[0]
        return path or "/"

    def get_current_search(self) -> str:
        fragment = self._fragment()
        idx = fragment.find("?")
        return fragment[idx:] if idx >= 0 else ""

    def build_url(self, path: str, search: str = "") -> str:
        env = self.environment
        return f"{env.origin}{env.pathname}#{normalize_path(path)}{search}"

    def push(self, path: str, search: str = "") -> None:
        self.environment.set_hash(f"{normalize_path(path)}{search}")

    def replace(self, path: str, search: str = "") -> None:
        self.environment.replace_state(
            {"timestamp": time.time()}, self.build_url(path, search)
        )


def build_mode(
    config: Union[ModeConfig, Mapping, str], environment: BrowserEnvironment
) -> ModeAdapter:
    cfg = ModeConfig.coerce(config)
    if cfg.mode == "hash":
        return HashModeAdapter(environment, cfg.base)
    return HistoryModeAdapter(environment, cfg.base)


# ---------------------------------------------------------------------------
# Process-wide adapter (lives on the default RouterContext)
# ---------------------------------------------------------------------------


def _default_context():
    from pyrouter.core.context import get_default_context  # avoid import cycle

    return get_default_context()


def create_mode(config: Union[ModeConfig, Mapping, str]) -> ModeAdapter:
    """Create the process-wide adapter and make it active."""
    return _default_context().create_mode(config)


def get_mode() -> ModeAdapter:
    """Active adapter; a history adapter with empty base is created on first use."""
    return _default_context().mode


def reset_mode() -> None:
    _default_context().reset_mode()
