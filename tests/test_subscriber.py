"""Tests for Subscription and subscribe()."""

from storescope import Subscription, create_container, create_store, default_registry, subscribe, transaction


def add_item(item):
    def thunk(api, props):
        api.set_state({"items": [*api.get_state()["items"], item]})
    return thunk


def rename(title):
    def thunk(api, props):
        api.set_state({"title": title})
    return thunk


Todos = create_store({"items": [], "title": ""}, {"add_item": add_item, "rename": rename}, name="todos")


class TestSubscription:
    def test_initial_state(self):
        sub = subscribe(None, Todos)
        assert sub.state == {"items": [], "title": ""}
        assert isinstance(sub, Subscription)

    def test_on_change(self):
        log = []
        sub = subscribe(None, Todos, log.append)
        sub.actions.add_item("milk")
        assert log == [{"items": ["milk"], "title": ""}]

    def test_selector_dedups(self):
        counts = []
        sub = subscribe(None, Todos, counts.append, selector=lambda s, p: len(s["items"]))
        sub.actions.rename("groceries")
        assert counts == []
        sub.actions.add_item("eggs")
        assert counts == [1]
        assert sub.state == 1

    def test_selector_receives_props(self):
        sub = subscribe(None, Todos, selector=lambda s, p: s["items"][: p["limit"]], props={"limit": 1})
        sub.actions.add_item("a")
        sub.actions.add_item("b")
        assert sub.state == ["a"]

    def test_update_props(self):
        log = []
        sub = subscribe(None, Todos, log.append, selector=lambda s, p: s["items"][: p["limit"]], props={"limit": 1})
        sub.actions.add_item("a")
        sub.actions.add_item("b")
        sub.update_props({"limit": 2})
        assert log == [["a"], ["a", "b"]]

    def test_scope(self):
        a = subscribe(None, Todos, scope="a")
        b = subscribe(None, Todos, scope="b")
        a.actions.add_item("x")
        assert b.state == {"items": [], "title": ""}

    def test_counts_as_listener(self):
        sub = subscribe(None, Todos, scope="s")
        assert default_registry.delete_store(Todos, "s") is False
        sub.dispose()
        assert sub.disposed
        assert default_registry.delete_store(Todos, "s") is True

    def test_dispose_stops_updates(self):
        log = []
        sub = subscribe(None, Todos, log.append)
        sub.dispose()
        sub.dispose()
        sub.actions.add_item("late")
        assert log == []

    def test_context_manager(self):
        with subscribe(None, Todos, scope="cm") as sub:
            assert not sub.disposed
        assert sub.disposed

    def test_batched_mutations_notify_once(self):
        log = []
        sub = subscribe(None, Todos, log.append)
        with transaction():
            sub.actions.add_item("a")
            sub.actions.rename("list")
        assert log == [{"items": ["a"], "title": "list"}]

    def test_through_container_gets_prop_bound_actions(self):
        def add_default():
            def thunk(api, props):
                api.dispatch(add_item(props["default"]))
            return thunk

        store_type = create_store({"items": []}, {"add_default": add_default})
        c = create_container(store_type)({"default": "bread"})
        sub = subscribe(c.api, store_type)
        sub.actions.add_default()
        assert sub.state == {"items": ["bread"]}
