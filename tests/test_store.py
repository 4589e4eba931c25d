"""Tests for StoreType and StoreState."""

import threading

from storescope import StoreRegistry, create_store, transaction
from storescope.store import StoreState


class TestStoreType:
    def test_unique_keys(self):
        a = create_store(0, name="thing")
        b = create_store(0, name="thing")
        assert a.key != b.key
        assert a.key.startswith("thing#")

    def test_unnamed_store(self):
        s = create_store(0)
        assert s.name == "store"

    def test_factory_initial_state(self):
        calls = []

        def make():
            calls.append(1)
            return {"items": []}

        s = create_store(make)
        assert s.initial_state() == {"items": []}
        assert s.initial_state() == {"items": []}
        assert len(calls) == 2

    def test_top_level_container_is_copied(self):
        s = create_store({"items": []})
        first = s.create_state()
        second = s.create_state()
        first.get_state()["extra"] = 1
        assert second.get_state() == {"items": []}
        assert first.get_state() is not second.get_state()

    def test_uncopyable_values_allowed(self):
        lock = threading.Lock()
        s = create_store({"lock": lock, "n": 0})
        instance = StoreRegistry().get_store(s)
        assert instance.store_state.get_state()["lock"] is lock
        instance.store_state.set_state({"n": 1})
        instance.store_state.reset_state()
        assert instance.store_state.get_state() == {"lock": lock, "n": 0}


class TestStoreState:
    def test_get_state(self):
        st = StoreState("k", 5)
        assert st.get_state() == 5

    def test_set_state_replaces_scalars(self):
        st = StoreState("k", 5)
        st.set_state(6)
        assert st.get_state() == 6

    def test_set_state_merges_dicts(self):
        st = StoreState("k", {"a": 1, "b": 2})
        before = st.get_state()
        st.set_state({"b": 3})
        assert st.get_state() == {"a": 1, "b": 3}
        assert st.get_state() is not before

    def test_listeners_notified_with_new_state(self):
        st = StoreState("k", 0)
        log = []
        st.subscribe(log.append)
        st.set_state(1)
        assert log == [1]

    def test_equal_value_does_not_notify(self):
        st = StoreState("k", {"a": 1})
        log = []
        st.subscribe(log.append)
        st.set_state({"a": 1})
        assert log == []

    def test_unsubscribe(self):
        st = StoreState("k", 0)
        log = []
        unsubscribe = st.subscribe(log.append)
        assert len(st.listeners()) == 1
        unsubscribe()
        unsubscribe()  # second call is a no-op
        assert st.listeners() == []
        st.set_state(1)
        assert log == []

    def test_listeners_returns_copy(self):
        st = StoreState("k", 0)
        st.subscribe(lambda s: None)
        st.listeners().clear()
        assert len(st.listeners()) == 1

    def test_reset_state(self):
        st = StoreState("k", {"a": 1})
        log = []
        st.subscribe(log.append)
        st.set_state({"b": 2})
        st.reset_state()
        assert st.get_state() == {"a": 1}
        assert log[-1] == {"a": 1}

    def test_reset_state_deferred_in_transaction(self):
        st = StoreState("k", 0)
        log = []
        st.subscribe(log.append)
        with transaction():
            st.set_state(3)
            st.reset_state()
            assert log == []
        assert log == [0]
