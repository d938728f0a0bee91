"""Subscription bus — "something changed", with no payload.

Callbacks run synchronously in subscription order. There is no
deduplication: subscribing the same callback twice delivers twice. A
callback that raises aborts delivery to the ones after it.
"""

from __future__ import annotations

from typing import Callable

Listener = Callable[[], None]
Unsubscribe = Callable[[], None]


class _Registration:
    __slots__ = ("callback",)

    def __init__(self, callback: Listener) -> None:
        self.callback = callback


class SubscriptionBus:
    """Ordered fan-out of no-argument callbacks."""

    __slots__ = ("_registrations",)

    def __init__(self) -> None:
        self._registrations: list[_Registration] = []

    def subscribe(self, callback: Listener) -> Unsubscribe:
        """Register a callback. Returns a function that removes it."""
        registration = _Registration(callback)
        self._registrations.append(registration)

        def _unsubscribe() -> None:
            try:
                self._registrations.remove(registration)
            except ValueError:
                pass  # already removed

        return _unsubscribe

    def unsubscribe(self, callback: Listener) -> None:
        """Remove the earliest registration of callback, if any."""
        for i, registration in enumerate(self._registrations):
            if registration.callback == callback:
                del self._registrations[i]
                return

    def notify(self) -> None:
        # Snapshot: callbacks may subscribe, unsubscribe or notify again.
        # Registrations removed mid-delivery are skipped.
        for registration in list(self._registrations):
            if registration in self._registrations:
                registration.callback()

    def __len__(self) -> int:
        return len(self._registrations)

    def __repr__(self) -> str:
        return f"SubscriptionBus(listeners={len(self._registrations)})"
