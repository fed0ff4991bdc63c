"""Navigation guards and after-navigation hooks.

Before-guards run sequentially (each is awaited when it returns an
awaitable) and can allow, cancel or redirect a navigation. After-hooks are
notified once a navigation has been committed and have no say in it.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Set, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Allow:
    def __bool__(self):
        return True


@dataclass(frozen=True)
class Cancel:
    def __bool__(self):
        return False


@dataclass(frozen=True)
class RedirectTo:
    path: str


ALLOW = Allow()
CANCEL = Cancel()

GuardResult = Union[Allow, Cancel, RedirectTo]
GuardReturn = Union[GuardResult, bool, str, None]
NavigationGuard = Callable[[str, str], Union[GuardReturn, Awaitable[GuardReturn]]]
AfterHook = Callable[[str, str], Any]


def as_guard_result(value: Any) -> GuardResult:
    """Map what a guard returned onto one of the three outcomes.

    ``False`` cancels, a string redirects, anything else allows.
    """
    if isinstance(value, (Allow, Cancel, RedirectTo)):
        return value
    if value is False:
        return CANCEL
    if isinstance(value, str):
        return RedirectTo(value)
    return ALLOW


def _remove_by_identity(items: list, target) -> None:
    for i, item in enumerate(items):
        if item is target:
            del items[i]
            return


class GuardRegistry:
    """Ordered registries of before-guards and after-hooks."""

    def __init__(self) -> None:
        self._before: List[NavigationGuard] = []
        self._after: List[AfterHook] = []
        # keep fire-and-forget hook tasks alive until they finish
        self._pending: Set[asyncio.Future] = set()

    def before_each(self, guard: NavigationGuard) -> Callable[[], None]:
        """Register ``guard``; returns a function that removes it again.

        Example::

            def require_login(from_path, to_path):
                if to_path.startswith("/admin") and not session.user:
                    return "/login"

            remove = registry.before_each(require_login)
        """
        self._before.append(guard)
        return lambda: _remove_by_identity(self._before, guard)

    def after_each(self, hook: AfterHook) -> Callable[[], None]:
        self._after.append(hook)
        return lambda: _remove_by_identity(self._after, hook)

    @property
    def before_count(self) -> int:
        return len(self._before)

    @property
    def after_count(self) -> int:
        return len(self._after)

    def clear(self) -> None:
        self._before.clear()
        self._after.clear()

    async def run_guards(self, from_path: str, to_path: str) -> GuardResult:
        for guard in list(self._before):
            try:
                value = guard(from_path, to_path)
                if inspect.isawaitable(value):
                    value = await value
            except Exception:
                logger.exception("Error in before-navigation guard %r", guard)
                return CANCEL

            result = as_guard_result(value)
            if not isinstance(result, Allow):
                logger.debug("Guard %r: %s -> %s = %r", guard, from_path, to_path, result)
                return result
        return ALLOW

    def run_after_hooks(self, from_path: str, to_path: str) -> None:
        for hook in list(self._after):
            try:
                value = hook(from_path, to_path)
            except Exception:
                logger.exception("Error in after-navigation hook %r", hook)
                continue
            if inspect.isawaitable(value):
                self._detach(hook, value)

    def _detach(self, hook: AfterHook, awaitable) -> None:
        try:
            loop = asyncio.get_running_loop()
            fut = asyncio.ensure_future(awaitable, loop=loop)
        except RuntimeError:
            # no running loop: nothing can drive the coroutine
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            logger.warning("Async after-hook %r called outside an event loop", hook)
            return

        self._pending.add(fut)

        def _done(f: asyncio.Future) -> None:
            self._pending.discard(f)
            if not f.cancelled() and f.exception() is not None:
                logger.error(
                    "Error in after-navigation hook %r",
                    hook,
                    exc_info=f.exception(),
                )

        fut.add_done_callback(_done)


# ---------------------------------------------------------------------------
# Process-wide registry (lives on the default RouterContext)
# ---------------------------------------------------------------------------


def _registry() -> GuardRegistry:
    from pyrouter.core.context import get_default_context  # avoid import cycle

    return get_default_context().guards


def register_before_guard(guard: NavigationGuard) -> Callable[[], None]:
    return _registry().before_each(guard)


def register_after_hook(hook: AfterHook) -> Callable[[], None]:
    return _registry().after_each(hook)


async def run_guards(from_path: str, to_path: str) -> GuardResult:
    return await _registry().run_guards(from_path, to_path)


def run_after_hooks(from_path: str, to_path: str) -> None:
    _registry().run_after_hooks(from_path, to_path)


def clear_guards() -> None:
    _registry().clear()


def get_before_guards_count() -> int:
    return _registry().before_count


def get_after_hooks_count() -> int:
    return _registry().after_count
