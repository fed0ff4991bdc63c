# pyrouter/router/__init__.py
from .route import RouteNode, MatchResult, build_routes
from .match import (
    CompiledPattern,
    PatternCache,
    compile_pattern,
    clear_matcher_cache,
    extract_params,
    normalize_path,
)
from .router import (
    match_route,
    find_matching_routes,
    resolve_redirect,
    iter_routes,
    join_path,
)

__all__ = [
    "RouteNode",
    "MatchResult",
    "build_routes",
    "CompiledPattern",
    "PatternCache",
    "compile_pattern",
    "clear_matcher_cache",
    "extract_params",
    "normalize_path",
    "match_route",
    "find_matching_routes",
    "resolve_redirect",
    "iter_routes",
    "join_path",
]
