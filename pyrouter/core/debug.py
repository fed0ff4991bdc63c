"""Debug helpers for inspecting route trees and the current location.

Output goes to stdout with ANSI colours, like the rest of the terminal
tooling.
"""

from typing import Any, List, Mapping, Optional, Sequence

from pyrouter.router.route import MatchResult, RouteNode
from pyrouter.router.router import ROOT, join_path

# ANSI constants (single source for this module)
RESET = "\x1b[0m"
BOLD = "\x1b[1m"
DIM = "\x1b[2m"
FG_GRAY = "\x1b[90m"
FG_YELLOW = "\x1b[33m"
FG_MAGENTA = "\x1b[35m"
FG_CYAN = "\x1b[36m"
FG_BLUE = "\x1b[34m"
FG_GREEN = "\x1b[32m"


def _fmt_val(v, depth: int = 0):
    if depth > 1:
        return f"{DIM}…{RESET}"
    if isinstance(v, bool) or v is None:
        return f"{FG_CYAN}{repr(v)}{RESET}"
    if isinstance(v, (int, float)):
        return f"{FG_BLUE}{repr(v)}{RESET}"
    if isinstance(v, str):
        text = v if len(v) <= 60 else v[:57] + "…"
        return f"{FG_YELLOW}{repr(text)}{RESET}"
    if isinstance(v, (list, tuple)):
        return f"{FG_CYAN}[{len(v)}]{RESET}"
    if isinstance(v, Mapping):
        items = []
        for i, (k, val) in enumerate(v.items()):
            if i >= 5:
                items.append(f"{DIM}…{RESET}")
                break
            items.append(f"{FG_CYAN}{k}{RESET}={_fmt_val(val, depth + 1)}")
        return "{" + ", ".join(items) + "}"
    if callable(v):
        name = getattr(v, "__name__", None) or type(v).__name__
        return f"{FG_GREEN}<fn {name}>{RESET}"
    return f"{FG_GREEN}<{type(v).__name__}>{RESET}"


def format_route_tree(
    routes: Sequence[RouteNode],
    *,
    active: Optional[Sequence[MatchResult]] = None,
    prefix: str = "",
    indent: int = 0,
) -> List[str]:
    """Return one line per node; nodes of ``active`` are marked with ``*``."""
    active_ids = {id(m.route) for m in active or ()}
    lines: List[str] = []
    pad = "  " * indent
    for route in routes:
        if route.path == ROOT and prefix == "":
            full_path = ROOT
        else:
            full_path = join_path(prefix, route.path)
        marker = f"{FG_GREEN}*{RESET}" if id(route) in active_ids else f"{FG_GRAY}-{RESET}"
        parts = [f"{pad}{marker} {FG_MAGENTA}{full_path}{RESET}"]
        if route.name:
            parts.append(f"{FG_GRAY}name={RESET}{_fmt_val(route.name)}")
        if route.redirect:
            parts.append(f"{FG_GRAY}redirect={RESET}{_fmt_val(route.redirect)}")
        if route.component is not None:
            parts.append(f"{FG_GRAY}component={RESET}{_fmt_val(route.component)}")
        if route.meta:
            parts.append(f"{FG_GRAY}meta={RESET}{_fmt_val(route.meta)}")
        lines.append(" ".join(parts))
        if route.children:
            lines.extend(
                format_route_tree(
                    route.children, active=active, prefix=full_path, indent=indent + 1
                )
            )
    return lines


def render_tree(
    routes: Sequence[RouteNode], active: Optional[Sequence[MatchResult]] = None
) -> None:
    """Pretty-print a route tree to stdout."""
    for line in format_route_tree(routes, active=active):
        print(line)


def print_location(location: Any, matches: Sequence[MatchResult] = ()) -> None:
    """Print a :class:`RouteLocation` and the matched chain."""
    print(f"\n{BOLD}{FG_CYAN}=== Route ==={RESET}")
    print(f"{FG_GRAY}path:{RESET} {FG_YELLOW}{location.pathname}{RESET}")
    if location.query:
        print(f"{FG_GRAY}query:{RESET} {FG_YELLOW}{location.query}{RESET}")
    if location.hash:
        print(f"{FG_GRAY}hash:{RESET} {FG_YELLOW}{location.hash}{RESET}")
    if location.meta:
        print(f"{FG_GRAY}meta:{RESET} {_fmt_val(location.meta)}")
    for m in matches:
        params = f" {_fmt_val(m.params)}" if m.params else ""
        print(f"{FG_GRAY}match:{RESET} {FG_MAGENTA}{m.path}{RESET}{params}")
    print(f"{BOLD}{FG_CYAN}============={RESET}\n")
