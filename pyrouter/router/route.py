# route.py
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

_EMPTY_META: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True, eq=False)
class RouteNode:
    """A single entry of a route tree.

    ``path`` is relative to the parent's resolved path. Only a top-level
    node may use ``'/'``, which makes it a passthrough layout for its
    children. ``component`` is an opaque handle the router never looks at.

    Optional fields are defaulted at construction so matching never needs to
    check for missing values:

    - ``children`` is always a tuple (lists are converted).
    - ``meta`` is always a read-only mapping (empty when not given).
    """

    path: str
    component: Any = None
    children: Tuple["RouteNode", ...] = ()
    redirect: Optional[str] = None
    meta: Mapping[str, Any] = field(default_factory=lambda: _EMPTY_META)
    name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.path, str):
            raise TypeError(f"RouteNode.path must be a string, got {self.path!r}")
        object.__setattr__(self, "children", tuple(self.children or ()))
        meta = self.meta if self.meta is not None else {}
        object.__setattr__(self, "meta", MappingProxyType(dict(meta)))

    @classmethod
    def from_dict(cls, spec: Mapping[str, Any]) -> "RouteNode":
        """Build a node (and its subtree) from a plain nested mapping."""
        return cls(
            path=spec["path"],
            component=spec.get("component"),
            children=tuple(cls.from_dict(ch) for ch in spec.get("children") or ()),
            redirect=spec.get("redirect"),
            meta=spec.get("meta") or {},
            name=spec.get("name"),
        )


def build_routes(specs: Iterable[Any]) -> Tuple[RouteNode, ...]:
    """Accept a mix of ``RouteNode`` objects and dicts, return a route forest."""
    return tuple(
        s if isinstance(s, RouteNode) else RouteNode.from_dict(s) for s in specs
    )


@dataclass(frozen=True)
class MatchResult:
    """Result of a successful match.

    ``path`` is the resolved template of the route (e.g. ``/users/:id``),
    not the navigated URL.
    """

    route: RouteNode
    path: str
    params: Dict[str, str]
    meta: Mapping[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.route.name,
            "path": self.path,
            "params": dict(self.params),
            "meta": dict(self.meta),
            "redirect": self.route.redirect,
        }
