"""In-memory history stack standing in for the browser address bar.

The wizard only ever talks to a ``Navigator``: it pushes a URL whenever the
selection changes.  ``HistoryNavigator`` keeps the pushed URLs in order and
lets a front end walk them with ``back()`` / ``forward()``; every move is
broadcast to subscribers so the wizard can rebuild its state from the URL.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol

UrlListener = Callable[[str], None]


class Navigator(Protocol):
    """Single-writer log of visited URLs."""

    def push(self, url: str) -> None: ...

    def replace(self, url: str) -> None: ...


class HistoryNavigator:
    """Ordered history with a cursor, like a browser tab's session history."""

    def __init__(self) -> None:
        self.entries: list[str] = []
        self.index: int = -1
        self._listeners: list[UrlListener] = []

    @property
    def current(self) -> Optional[str]:
        if self.index < 0:
            return None
        return self.entries[self.index]

    def can_go_back(self) -> bool:
        return self.index > 0

    def can_go_forward(self) -> bool:
        return self.index < len(self.entries) - 1

    def subscribe(self, listener: UrlListener) -> None:
        """Register *listener* to be called with the URL after back/forward."""
        self._listeners.append(listener)

    # -- Navigator protocol -------------------------------------------------

    def push(self, url: str) -> None:
        """Append *url*, discarding any entries ahead of the cursor."""
        del self.entries[self.index + 1:]
        self.entries.append(url)
        self.index = len(self.entries) - 1

    def replace(self, url: str) -> None:
        """Overwrite the current entry (or push the first one)."""
        if self.index < 0:
            self.push(url)
        else:
            self.entries[self.index] = url

    # -- History traversal --------------------------------------------------

    def back(self) -> Optional[str]:
        if not self.can_go_back():
            return None
        self.index -= 1
        return self._notify()

    def forward(self) -> Optional[str]:
        if not self.can_go_forward():
            return None
        self.index += 1
        return self._notify()

    def _notify(self) -> str:
        url = self.entries[self.index]
        for listener in self._listeners:
            listener(url)
        return url
