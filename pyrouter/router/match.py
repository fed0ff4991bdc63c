import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
from urllib.parse import unquote

from pyrouter.errors import PatternError

_PARAM_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_SEPARATORS = re.compile(r"/+")

DEFAULT_PARAM_PATTERN = r"[^/]+"
DEFAULT_WILDCARD_NAME = "splat"


@dataclass(frozen=True)
class CompiledPattern:
    """A route template compiled into regular expressions.

    ``regex`` must match the whole pathname (an optional trailing separator
    is tolerated). ``prefix_regex`` matches when the template covers a
    leading run of whole segments of the pathname.
    """

    template: str
    regex: "re.Pattern[str]"
    prefix_regex: "re.Pattern[str]"
    keys: Tuple[str, ...]

    def match(self, pathname: str, exact: bool = True) -> Optional[Dict[str, str]]:
        rx = self.regex if exact else self.prefix_regex
        m = rx.match(pathname)
        if m is None:
            return None
        params: Dict[str, str] = {}
        for i, key in enumerate(self.keys):
            value = m.group(f"_{i}")
            # optional wildcard groups may not participate
            if value is not None:
                params[key] = unquote(value)
        return params


def _read_group(template: str, start: int) -> Tuple[str, int]:
    """Read a ``(...)`` custom parameter pattern starting at ``start``."""
    depth = 0
    i = start
    while i < len(template):
        c = template[i]
        if c == "\\":
            i += 2
            continue
        if c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
            if depth == 0:
                body = template[start + 1 : i]
                if not body:
                    raise PatternError(template, f"empty pattern at {start}")
                try:
                    rx = re.compile(body)
                except re.error as exc:
                    raise PatternError(template, f"bad pattern {body!r}: {exc}") from exc
                if rx.groups:
                    raise PatternError(
                        template, f"capturing groups are not allowed in {body!r}"
                    )
                return body, i + 1
        i += 1
    raise PatternError(template, f"unbalanced '(' at {start}")


def _to_regex(template: str) -> Tuple[str, List[str]]:
    tokens: List[str] = []
    keys: List[str] = []

    def _add_key(name: str) -> str:
        if name in keys:
            raise PatternError(template, f"duplicate parameter name {name!r}")
        keys.append(name)
        return f"_{len(keys) - 1}"

    i = 0
    while i < len(template):
        c = template[i]
        if c == ":":
            m = _PARAM_NAME.match(template, i + 1)
            if m is None:
                raise PatternError(template, f"missing parameter name at {i}")
            group = _add_key(m.group())
            j = m.end()
            pattern = DEFAULT_PARAM_PATTERN
            if j < len(template) and template[j] == "(":
                pattern, j = _read_group(template, j)
            tokens.append(f"(?P<{group}>{pattern})")
            i = j
        elif c == "*":
            m = _PARAM_NAME.match(template, i + 1)
            name = m.group() if m else DEFAULT_WILDCARD_NAME
            j = m.end() if m else i + 1
            if j != len(template):
                raise PatternError(template, "wildcard must be the last segment")
            group = _add_key(name)
            if tokens and tokens[-1] == "/":
                # '/files/*' also matches '/files'
                tokens.pop()
                tokens.append(f"(?:/(?P<{group}>.*))?")
            else:
                tokens.append(f"(?P<{group}>.*)")
            i = j
        elif c in "()":
            raise PatternError(template, f"unexpected {c!r} at {i}")
        else:
            tokens.append(re.escape(c))
            i += 1
    return "".join(tokens), keys


def compile_route_pattern(template: str) -> CompiledPattern:
    """Compile a route template (uncached).

    Rules:
    - ``':name'`` becomes a parameter matching one segment
    - ``':name(regex)'`` uses ``regex`` instead (no capturing groups)
    - a trailing ``'*'`` or ``'*name'`` captures the rest of the path
      (named ``splat`` when unnamed)
    - matching is case-insensitive
    """
    body, keys = _to_regex(template)
    full = re.compile("^" + body + "/?$", re.IGNORECASE)
    boundary = "" if body.endswith("/") else "(?=/|$)"
    prefix = re.compile("^" + body + boundary, re.IGNORECASE)
    return CompiledPattern(template, full, prefix, tuple(keys))


class PatternCache:
    """Memoizes compiled patterns by exact template string.

    Only static route templates are compiled, so the cache is bounded by the
    number of distinct templates in the application.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, CompiledPattern] = {}

    def get(self, template: str) -> CompiledPattern:
        compiled = self._entries.get(template)
        if compiled is None:
            compiled = compile_route_pattern(template)
            self._entries[template] = compiled
        return compiled

    def clear(self) -> None:
        # regex and keys live in the same entry, so one swap clears both
        self._entries = {}

    def __contains__(self, template: str) -> bool:
        return template in self._entries

    def __len__(self) -> int:
        return len(self._entries)


_CACHE = PatternCache()


def get_pattern_cache() -> PatternCache:
    return _CACHE


def compile_pattern(template: str) -> CompiledPattern:
    return _CACHE.get(template)


def clear_matcher_cache() -> None:
    _CACHE.clear()


def normalize_path(path: str) -> str:
    """Canonicalize a path.

    ``''`` and ``'/'`` become ``'/'``, runs of ``'/'`` collapse, a leading
    ``'/'`` is added and a trailing one removed (except for the root).

    >>> normalize_path('//users//123/')
    '/users/123'
    """
    if not path or path == "/":
        return "/"
    normalized = _SEPARATORS.sub("/", path)
    if not normalized.startswith("/"):
        normalized = "/" + normalized
    if len(normalized) > 1 and normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized


def match_path(
    template: str, pathname: str, exact: bool = True
) -> Tuple[bool, Dict[str, str]]:
    """Match a pathname against a template and return (ok, params)."""
    params = compile_pattern(template).match(pathname, exact=exact)
    return (params is not None, params or {})


def matches(template: str, pathname: str, exact: bool = True) -> bool:
    """Convenience function that only returns a boolean match result."""
    ok, _ = match_path(template, pathname, exact)
    return ok


def extract_params(template: str, pathname: str) -> Dict[str, str]:
    """Extract decoded parameters, or ``{}`` when the template does not match.

    >>> extract_params('/posts/:post/comments/:comment', '/posts/1/comments/2')
    {'post': '1', 'comment': '2'}
    """
    _, params = match_path(template, pathname, exact=True)
    return params
