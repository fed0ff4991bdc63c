"""pyrouter: route matching, navigation guards and hash/history URL modes."""

from .errors import RouterError, PatternError, ConfigError, RedirectLoopError
from .router import (
    RouteNode,
    MatchResult,
    build_routes,
    match_route,
    find_matching_routes,
    normalize_path,
    extract_params,
    clear_matcher_cache,
    resolve_redirect,
)
from .nav import (
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
    ModeAdapter,
    ModeConfig,
    HistoryModeAdapter,
    HashModeAdapter,
    create_mode,
    get_mode,
    reset_mode,
    Navigator,
    build_search_string,
    push,
    replace,
    back,
    forward,
    URLState,
    RouteLocation,
)
from .core.environment import BrowserEnvironment
from .core.context import (
    RouterContext,
    get_default_context,
    set_default_context,
    reset_default_context,
)

__all__ = [
    "RouterError",
    "PatternError",
    "ConfigError",
    "RedirectLoopError",
    "RouteNode",
    "MatchResult",
    "build_routes",
    "match_route",
    "find_matching_routes",
    "normalize_path",
    "extract_params",
    "clear_matcher_cache",
    "resolve_redirect",
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
    "BrowserEnvironment",
    "RouterContext",
    "get_default_context",
    "set_default_context",
    "reset_default_context",
]
