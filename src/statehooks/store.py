"""Store — reducer-driven state container on a subscription bus.

State only changes through dispatch(): the reducer computes the next state
from the current one and the action, then every subscriber is notified.

With persist=True the whole state is mirrored as JSON in a storage slot.
A stored value wins over initial_state at construction; afterwards every
notification rewrites the slot.
"""

from __future__ import annotations

import json
import logging
from typing import Callable, Generic, TypeVar

from statehooks import storage as _storage
from statehooks.bus import Listener, SubscriptionBus, Unsubscribe
from statehooks.storage import Storage

logger = logging.getLogger("statehooks.store")

S = TypeVar("S")
A = TypeVar("A")

Reducer = Callable[[S, A], S]


class Store(Generic[S, A]):
    """Reducer-driven state container with optional JSON persistence."""

    def __init__(
        self,
        initial_state: S,
        reducer: Reducer,
        *,
        persist: bool = False,
        key: str = "state",
        storage: Storage | None = None,
    ) -> None:
        self._state = initial_state
        self._reducer = reducer
        self._bus = SubscriptionBus()
        self._key = key
        self._storage: Storage | None = None
        if persist:
            self._storage = _storage.resolve(storage)
            self._attach_storage()

    @property
    def key(self) -> str:
        return self._key

    @property
    def persisted(self) -> bool:
        return self._storage is not None

    def _attach_storage(self) -> None:
        stored = self._storage.get(self._key)
        if stored is None:
            self._storage.set(self._key, json.dumps(self._state))
            logger.debug("Seeded %r with initial state", self._key)
        else:
            self._state = json.loads(stored)
            logger.info("Restored state from %r", self._key)
        self._bus.subscribe(self._write_back)

    def _write_back(self) -> None:
        self._storage.set(self._key, json.dumps(self._state))

    def get_state(self) -> S:
        return self._state

    def dispatch(self, action: A) -> None:
        """Reduce action into the state, then notify subscribers.

        If the reducer raises, the state is left as it was.
        """
        self._state = self._reducer(self._state, action)
        self._bus.notify()

    def subscribe(self, callback: Listener) -> Unsubscribe:
        return self._bus.subscribe(callback)

    def unsubscribe(self, callback: Listener) -> None:
        self._bus.unsubscribe(callback)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._state!r})"


def use_store(
    initial_state: S,
    reducer: Reducer,
    *,
    persist: bool = False,
    key: str = "state",
    storage: Storage | None = None,
) -> Store[S, A]:
    """Factory for a Store.

    Usage:
        def reducer(state, action):
            if action["type"] == "inc":
                return {"count": state["count"] + 1}
            return state

        counter = use_store({"count": 0}, reducer)
        counter.dispatch({"type": "inc"})
        counter.get_state()  # {"count": 1}
    """
    return Store(initial_state, reducer, persist=persist, key=key, storage=storage)
