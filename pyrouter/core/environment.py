"""In-process model of the browser's addressable location.

Mode adapters read and write the URL through this object instead of a real
``window``. It keeps a session history (a list of entries plus a cursor) and
dispatches ``popstate`` / ``hashchange`` events the way a browser does:

- ``push_state`` / ``replace_state`` never fire events.
- Setting the hash to a new value adds an entry and fires ``hashchange``.
- Traversal (``back`` / ``forward`` / ``go``) fires ``popstate``, plus
  ``hashchange`` when the two entries differ only by fragment.

Commit listeners registered with :meth:`BrowserEnvironment.subscribe` are told
about every change the application makes, which lets a bridge replay it on a
real browser.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Optional, TypedDict
from urllib.parse import urljoin, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

POPSTATE = "popstate"
HASHCHANGE = "hashchange"
EVENT_TYPES = (POPSTATE, HASHCHANGE)


class Commit(TypedDict, total=False):
    type: Literal["push", "replace", "traverse"]
    href: str
    delta: int
    ts: float


Listener = Callable[[], None]
Subscriber = Callable[[Commit], None]


@dataclass
class HistoryEntry:
    href: str
    state: Any = None


def _split(href: str):
    return urlsplit(href)


def _without_fragment(href: str) -> str:
    parts = _split(href)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, parts.query, ""))


@dataclass
class BrowserEnvironment:
    href: str = "http://localhost/"
    entries: List[HistoryEntry] = field(default_factory=list)
    index: int = 0
    _listeners: Dict[str, List[Listener]] = field(default_factory=dict)
    _subs: List[Subscriber] = field(default_factory=list)

    def __post_init__(self):
        self.href = self._resolve(self.href)
        if not self.entries:
            self.entries = [HistoryEntry(self.href)]
            self.index = 0

    # ------------------------------------------------------------------
    # location
    # ------------------------------------------------------------------
    @property
    def origin(self) -> str:
        parts = _split(self.href)
        return f"{parts.scheme}://{parts.netloc}"

    @property
    def pathname(self) -> str:
        return _split(self.href).path or "/"

    @property
    def search(self) -> str:
        query = _split(self.href).query
        return f"?{query}" if query else ""

    @property
    def hash(self) -> str:
        fragment = _split(self.href).fragment
        return f"#{fragment}" if fragment else ""

    @property
    def state(self) -> Any:
        return self.entries[self.index].state

    @property
    def length(self) -> int:
        return len(self.entries)

    def _resolve(self, url: str) -> str:
        base = getattr(self, "href", None) or "http://localhost/"
        resolved = urljoin(base, url)
        parts = _split(resolved)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"Cannot resolve {url!r} to an absolute URL")
        return urlunsplit(
            (parts.scheme, parts.netloc, parts.path or "/", parts.query, parts.fragment)
        )

    # ------------------------------------------------------------------
    # history
    # ------------------------------------------------------------------
    def _add_entry(self, href: str, state: Any = None) -> None:
        del self.entries[self.index + 1 :]
        self.entries.append(HistoryEntry(href, state))
        self.index = len(self.entries) - 1
        self.href = href

    def _same_origin(self, url: Optional[str]) -> str:
        if url is None:
            return self.href
        href = self._resolve(url)
        target = _split(href)
        if f"{target.scheme}://{target.netloc}" != self.origin:
            raise ValueError(f"{url!r} is not same-origin with {self.origin!r}")
        return href

    def push_state(self, state: Any, url: Optional[str] = None) -> None:
        href = self._same_origin(url)
        self._add_entry(href, state)
        self._emit({"type": "push", "href": href, "ts": time.time()})

    def replace_state(self, state: Any, url: Optional[str] = None) -> None:
        href = self._same_origin(url)
        self.entries[self.index] = HistoryEntry(href, state)
        self.href = href
        self._emit({"type": "replace", "href": href, "ts": time.time()})

    def set_hash(self, fragment: str) -> None:
        """Equivalent of ``location.hash = fragment``."""
        fragment = fragment[1:] if fragment.startswith("#") else fragment
        parts = _split(self.href)
        href = urlunsplit(
            (parts.scheme, parts.netloc, parts.path, parts.query, fragment)
        )
        if href == self.href:
            return
        self._add_entry(href)
        self._emit({"type": "push", "href": href, "ts": time.time()})
        self.dispatch(HASHCHANGE)

    def assign(self, url: str) -> None:
        """User-initiated navigation (typing a URL, following a link)."""
        href = self._resolve(url)
        if href == self.href:
            return
        same_document = _without_fragment(href) == _without_fragment(self.href)
        self._add_entry(href)
        if same_document:
            self.dispatch(HASHCHANGE)

    def go(self, delta: int = 0) -> None:
        target = self.index + delta
        if delta == 0 or not 0 <= target < len(self.entries):
            return
        previous = self.href
        self.index = target
        self.href = self.entries[target].href
        self._emit({"type": "traverse", "delta": delta, "href": self.href, "ts": time.time()})
        self.dispatch(POPSTATE)
        if previous != self.href and _without_fragment(previous) == _without_fragment(
            self.href
        ):
            self.dispatch(HASHCHANGE)

    def back(self) -> None:
        self.go(-1)

    def forward(self) -> None:
        self.go(1)

    def apply_external(self, href: str, event: Optional[str] = POPSTATE) -> None:
        """Mirror a change that already happened in a real browser.

        The current entry is overwritten (the real history lives in the
        browser) and ``event`` is dispatched if given.
        """
        resolved = self._resolve(href)
        self.entries[self.index] = HistoryEntry(resolved, self.state)
        self.href = resolved
        if event is not None:
            self.dispatch(event)

    # ------------------------------------------------------------------
    # events
    # ------------------------------------------------------------------
    def add_event_listener(self, event: str, listener: Listener) -> None:
        if event not in EVENT_TYPES:
            raise ValueError(f"Unknown event type {event!r}")
        bucket = self._listeners.setdefault(event, [])
        if not any(fn is listener for fn in bucket):
            bucket.append(listener)

    def remove_event_listener(self, event: str, listener: Listener) -> None:
        bucket = self._listeners.get(event, [])
        for i, fn in enumerate(bucket):
            if fn is listener:
                del bucket[i]
                return

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def dispatch(self, event: str) -> None:
        for fn in list(self._listeners.get(event, [])):
            try:
                fn()
            except Exception:
                # one broken listener must not starve the others
                logger.exception("Error in %s listener %r", event, fn)

    # ------------------------------------------------------------------
    # commit subscribers
    # ------------------------------------------------------------------
    def subscribe(self, fn: Subscriber):
        if fn not in self._subs:
            self._subs.append(fn)

        def unsubscribe():
            try:
                self._subs.remove(fn)
            except ValueError:
                pass

        return unsubscribe

    def _emit(self, commit: Commit) -> None:
        for fn in list(self._subs):
            try:
                fn(commit)
            except Exception:
                logger.exception("Error in commit subscriber %r", fn)
