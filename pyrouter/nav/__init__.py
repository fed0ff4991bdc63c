# pyrouter/nav/__init__.py
from .guards import (
    ALLOW,
    CANCEL,
    Allow,
    Cancel,
    RedirectTo,
    GuardRegistry,
    register_before_guard,
    register_after_hook,
    run_guards,
    run_after_hooks,
    clear_guards,
    get_before_guards_count,
    get_after_hooks_count,
)
from .mode import (
    ModeAdapter,
    ModeConfig,
    HistoryModeAdapter,
    HashModeAdapter,
    create_mode,
    get_mode,
    reset_mode,
)
from .navigation import Navigator, build_search_string, push, replace, back, forward
from .state import URLState, RouteLocation

__all__ = [
    "ALLOW",
    "CANCEL",
    "Allow",
    "Cancel",
    "RedirectTo",
    "GuardRegistry",
    "register_before_guard",
    "register_after_hook",
    "run_guards",
    "run_after_hooks",
    "clear_guards",
    "get_before_guards_count",
    "get_after_hooks_count",
    "ModeAdapter",
    "ModeConfig",
    "HistoryModeAdapter",
    "HashModeAdapter",
    "create_mode",
    "get_mode",
    "reset_mode",
    "Navigator",
    "build_search_string",
    "push",
    "replace",
    "back",
    "forward",
    "URLState",
    "RouteLocation",
]
