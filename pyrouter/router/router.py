"""Route tree matching.

Both matchers walk the forest in declaration order and resolve each node's
full path by joining it onto the accumulated prefix. The first subtree that
produces a match wins; a descendant always wins over its ancestor.
"""

from typing import Iterator, List, Optional, Sequence, Tuple

from .match import compile_pattern, normalize_path
from .route import MatchResult, RouteNode

ROOT = "/"


def join_path(prefix: str, path: str) -> str:
    """Resolve a node's own path against its parent's full path."""
    if prefix == ROOT:
        return normalize_path(f"/{path}")
    return normalize_path(f"{prefix}/{path}")


def _is_root(route: RouteNode, prefix: str) -> bool:
    return route.path == ROOT and prefix == ""


def _result(route: RouteNode, full_path: str, params) -> MatchResult:
    return MatchResult(route=route, path=full_path, params=params, meta=route.meta)


def match_route(
    routes: Sequence[RouteNode], pathname: str, prefix: str = ""
) -> Optional[MatchResult]:
    """Return the single most specific match for ``pathname``, or ``None``.

    A top-level ``'/'`` node is a passthrough: its children are tried first
    with prefix ``'/'`` and the node itself only matches the exact root.
    Other nodes descend into their children whether or not they match
    themselves, so a parent can act purely as a layout container.
    """
    pathname = normalize_path(pathname)

    for route in routes:
        full_path = join_path(prefix, route.path)

        if _is_root(route, prefix):
            if route.children:
                child = match_route(route.children, pathname, ROOT)
                if child is not None:
                    return child
            if pathname == ROOT:
                return _result(route, ROOT, {})
            continue

        params = compile_pattern(full_path).match(pathname)
        if route.children:
            child = match_route(route.children, pathname, full_path)
            if child is not None:
                return child
        if params is not None:
            return _result(route, full_path, params)

    return None


def find_matching_routes(
    routes: Sequence[RouteNode], pathname: str, prefix: str = ""
) -> List[MatchResult]:
    """Return every match along the winning branch, root to leaf.

    An ancestor is part of the chain when its full path matches the whole
    pathname, or covers a leading run of whole segments of it and one of its
    descendants matches. The last element is the most specific match.
    """
    pathname = normalize_path(pathname)

    for route in routes:
        full_path = join_path(prefix, route.path)

        if _is_root(route, prefix):
            if route.children:
                chain = find_matching_routes(route.children, pathname, ROOT)
                if chain:
                    return [_result(route, ROOT, {})] + chain
            if pathname == ROOT:
                return [_result(route, ROOT, {})]
            continue

        compiled = compile_pattern(full_path)
        params = compiled.match(pathname)
        if params is not None:
            chain = []
            if route.children:
                chain = find_matching_routes(route.children, pathname, full_path)
            return [_result(route, full_path, params)] + chain

        params = compiled.match(pathname, exact=False)
        if params is not None and route.children:
            chain = find_matching_routes(route.children, pathname, full_path)
            if chain:
                return [_result(route, full_path, params)] + chain

    return []


def resolve_redirect(routes: Sequence[RouteNode], pathname: str) -> Optional[str]:
    """Return the ``redirect`` target of the route matching ``pathname``."""
    matched = match_route(routes, pathname)
    if matched is None:
        return None
    return matched.route.redirect


def iter_routes(
    routes: Sequence[RouteNode], prefix: str = ""
) -> Iterator[Tuple[str, RouteNode]]:
    """Yield ``(full_path, node)`` for every node, depth-first."""
    for route in routes:
        if _is_root(route, prefix):
            yield ROOT, route
            yield from iter_routes(route.children, ROOT)
            continue
        full_path = join_path(prefix, route.path)
        yield full_path, route
        yield from iter_routes(route.children, full_path)
