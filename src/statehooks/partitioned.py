"""Partitioned store — a Store whose fields persist one slot each.

The state must be a flat mapping of field name to scalar. With
persist=True, field ``f`` lives in slot ``"{key}:f"`` as plain text:

- At construction an empty slot is seeded with the field's initial value.
  A filled slot is decoded through the field's coercer and replaces it.
- On every notification, a field whose value differs from its slot's raw
  text gets a deferred write on the scheduler. At most one write per field
  is pending; it stores whatever the field holds when it runs.

The comparison is against the raw text, so a number never equals its
stored string and is written back after every notification.
"""

from __future__ import annotations

import logging
from typing import Mapping, TypeVar

from statehooks import _scheduling
from statehooks._scheduling import Scheduler
from statehooks.coercion import SCALAR_TYPES, Coercer, infer_coercer, to_text
from statehooks.storage import Storage
from statehooks.store import Reducer, Store

logger = logging.getLogger("statehooks.partitioned")

A = TypeVar("A")

State = dict[str, object]


class PartitionedStore(Store[State, A]):
    """Store with per-field persistence and text coercion on load."""

    def __init__(
        self,
        initial_state: Mapping[str, object],
        reducer: Reducer,
        *,
        persist: bool = False,
        key: str = "state",
        storage: Storage | None = None,
        scheduler: Scheduler | None = None,
        schema: Mapping[str, Coercer] | None = None,
    ) -> None:
        state = dict(initial_state)
        for field, value in state.items():
            if not isinstance(value, SCALAR_TYPES):
                raise TypeError(
                    f"field {field!r} must be a scalar, got {type(value).__name__}"
                )
        unknown = set(schema or ()) - set(state)
        if unknown:
            raise KeyError(f"schema names unknown field(s): {sorted(unknown)}")

        self._scheduler = _scheduling.resolve(scheduler)
        self._schema = dict(schema or {})
        self._pending: set[str] = set()
        super().__init__(state, reducer, persist=persist, key=key, storage=storage)

    def slot(self, field: str) -> str:
        """Storage slot name for a field."""
        return f"{self._key}:{field}"

    def _attach_storage(self) -> None:
        for field in list(self._state):
            slot = self.slot(field)
            stored = self._storage.get(slot)
            if stored is None:
                self._storage.set(slot, to_text(self._state[field]))
                logger.debug("Seeded %r", slot)
            else:
                coerce = self._schema.get(field) or infer_coercer(self._state[field])
                self._state[field] = coerce(stored)
                logger.debug("Restored %r", slot)
            self._bus.subscribe(lambda field=field: self._check_field(field))

    def _check_field(self, field: str) -> None:
        if field in self._pending:
            return
        if self._state.get(field) != self._storage.get(self.slot(field)):
            self._pending.add(field)
            self._scheduler.schedule(lambda: self._write_field(field))

    def _write_field(self, field: str) -> None:
        self._pending.discard(field)
        self._storage.set(self.slot(field), to_text(self._state.get(field)))


def use_partitioned_store(
    initial_state: Mapping[str, object],
    reducer: Reducer,
    *,
    persist: bool = False,
    key: str = "state",
    storage: Storage | None = None,
    scheduler: Scheduler | None = None,
    schema: Mapping[str, Coercer] | None = None,
) -> PartitionedStore:
    """Factory for a PartitionedStore.

    Usage:
        prefs = use_partitioned_store(
            {"volume": 5, "muted": False},
            reducer,
            persist=True,
            key="prefs",
        )
        # slots "prefs:volume" == "5", "prefs:muted" == "false"
    """
    return PartitionedStore(
        initial_state,
        reducer,
        persist=persist,
        key=key,
        storage=storage,
        scheduler=scheduler,
        schema=schema,
    )
