"""Tests for Store and use_store."""

import json
import logging
from functools import reduce

import pytest

from statehooks import MemoryStorage, Store, use_store


def counter(state, action):
    if action["type"] == "inc":
        return {"count": state["count"] + 1}
    if action["type"] == "add":
        return {"count": state["count"] + action["by"]}
    return state


class TestDispatch:
    def test_increment_twice(self):
        s = Store({"count": 0}, counter)
        s.dispatch({"type": "inc"})
        s.dispatch({"type": "inc"})
        assert s.get_state() == {"count": 2}

    def test_state_is_left_fold_of_actions(self):
        actions = [{"type": "add", "by": n} for n in (3, -1, 7)] + [{"type": "noop"}]
        s = Store({"count": 0}, counter)
        for action in actions:
            s.dispatch(action)
        assert s.get_state() == reduce(counter, actions, {"count": 0})

    def test_notifies_after_state_update(self):
        s = Store({"count": 0}, counter)
        seen = []
        s.subscribe(lambda: seen.append(s.get_state()["count"]))
        s.dispatch({"type": "inc"})
        assert seen == [1]

    def test_notifies_even_when_state_unchanged(self):
        s = Store({"count": 0}, counter)
        log = []
        s.subscribe(lambda: log.append(1))
        s.dispatch({"type": "noop"})
        assert log == [1]

    def test_reducer_error_leaves_state(self):
        def bad(state, action):
            raise ValueError("bad action")

        s = Store({"count": 5}, bad)
        log = []
        s.subscribe(lambda: log.append(1))
        with pytest.raises(ValueError, match="bad action"):
            s.dispatch({"type": "inc"})
        assert s.get_state() == {"count": 5}
        assert log == []

    def test_subscriber_error_propagates(self):
        s = Store({"count": 0}, counter)

        def boom():
            raise RuntimeError("boom")

        s.subscribe(boom)
        with pytest.raises(RuntimeError):
            s.dispatch({"type": "inc"})
        assert s.get_state() == {"count": 1}


class TestSubscriptions:
    def test_unsubscribe_handle(self):
        s = Store({"count": 0}, counter)
        log = []
        unsub = s.subscribe(lambda: log.append(1))
        s.dispatch({"type": "inc"})
        unsub()
        s.dispatch({"type": "inc"})
        s.dispatch({"type": "inc"})
        assert log == [1]

    def test_unsubscribe_by_callback(self):
        s = Store({"count": 0}, counter)
        log = []

        def cb():
            log.append(1)

        s.subscribe(cb)
        s.unsubscribe(cb)
        s.dispatch({"type": "inc"})
        assert log == []


class TestPersistence:
    def test_no_persistence_by_default(self, storage):
        Store({"count": 0}, counter)
        assert len(storage) == 0

    def test_seeds_empty_storage(self, storage):
        s = Store({"count": 0}, counter, persist=True)
        assert s.persisted
        assert json.loads(storage.get("state")) == {"count": 0}

    def test_stored_state_wins(self, storage):
        storage.set("state", json.dumps({"count": 41}))
        s = Store({"count": 0}, counter, persist=True)
        assert s.get_state() == {"count": 41}

    def test_writes_on_every_dispatch(self, storage):
        s = Store({"count": 0}, counter, persist=True)
        s.dispatch({"type": "inc"})
        assert json.loads(storage.get("state")) == {"count": 1}
        s.dispatch({"type": "add", "by": 10})
        assert json.loads(storage.get("state")) == {"count": 11}

    def test_custom_key(self, storage):
        s = Store({"count": 0}, counter, persist=True, key="counter")
        assert s.key == "counter"
        assert storage.get("counter") is not None
        assert storage.get("state") is None

    def test_injected_storage(self, storage):
        own = MemoryStorage()
        Store({"count": 0}, counter, persist=True, storage=own)
        assert own.get("state") == '{"count": 0}'
        assert len(storage) == 0

    def test_survives_reconstruction(self):
        own = MemoryStorage()
        first = Store({"count": 0}, counter, persist=True, storage=own)
        first.dispatch({"type": "inc"})
        second = Store({"count": 0}, counter, persist=True, storage=own)
        assert second.get_state() == {"count": 1}

    def test_malformed_storage_fails_construction(self, storage):
        storage.set("state", "{not json")
        with pytest.raises(json.JSONDecodeError):
            Store({"count": 0}, counter, persist=True)

    def test_logs_restore(self, storage, caplog):
        storage.set("state", "[]")
        with caplog.at_level(logging.INFO, logger="statehooks.store"):
            Store([], lambda s, a: s, persist=True)
        assert "Restored state from 'state'" in caplog.text


class TestUseStore:
    def test_factory(self, storage):
        s = use_store({"count": 0}, counter, persist=True, key="k")
        assert isinstance(s, Store)
        s.dispatch({"type": "inc"})
        assert json.loads(storage.get("k")) == {"count": 1}

    def test_repr(self):
        assert "Store({'count': 0})" in repr(use_store({"count": 0}, counter))
