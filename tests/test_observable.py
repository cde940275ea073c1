"""Tests for observe(), the wrapper factory and both trap families."""

import copy
import gc
import logging
from dataclasses import dataclass, field
from types import SimpleNamespace

import pytest

from reactree import _anchor
from reactree import (
    ObservableDict,
    ObservableList,
    ObservableObject,
    ObservableSet,
    is_observable,
    node_for,
    observable,
    observe,
    shallow,
    to_plain,
    to_raw,
    wrap,
)


@dataclass(eq=False)
class Tag:
    name: str


@dataclass
class Counter:
    count: int = 0
    history: list = field(default_factory=list)

    def bump(self):
        self.count += 1
        self.history.append(self.count)
        return self.count


class TestObserve:
    def test_primitives_pass_through(self):
        assert observe(None, "k", 42) == 42
        assert observe(None, "k", "text") == "text"
        assert observe(None, "k", None) is None

    def test_callables_pass_through(self):
        def handler():
            pass

        assert observe(None, "k", handler) is handler
        assert observe(None, "k", Counter) is Counter

    def test_unsupported_values_pass_through(self):
        point = (1, 2)
        frozen = frozenset({1})
        plain = object()
        assert observe(None, "k", point) is point
        assert observe(None, "k", frozen) is frozen
        assert observe(None, "k", plain) is plain

    def test_wraps_aggregates(self):
        assert isinstance(observe(None, None, {}), ObservableDict)
        assert isinstance(observe(None, None, set()), ObservableSet)
        assert isinstance(observe(None, None, []), ObservableList)
        assert isinstance(observe(None, None, SimpleNamespace()), ObservableObject)

    def test_idempotent_for_raw_value(self):
        raw = {"a": 1}
        first = observable(raw)
        second = observable(raw)
        assert first is second

    def test_idempotent_for_wrapper(self):
        proxy = observable({"a": 1})
        assert observable(proxy) is proxy
        assert observe({}, "x", proxy) is proxy

    def test_deep_and_shallow_are_distinct(self):
        raw = {"a": 1}
        deep = observable(raw)
        flat = shallow(raw)
        assert deep is not flat
        assert to_raw(deep) is to_raw(flat) is raw
        assert shallow(raw) is flat

    def test_shallow_parent_stops_recursion(self):
        child = {"x": 1}
        parent = {"child": child}
        flat = shallow(parent)
        assert observe(parent, "child", child) is child
        assert type(flat["child"]) is dict

    def test_anchor_maps_both_directions(self):
        raw = {"a": 1}
        proxy = observable(raw)
        assert _anchor.lookup_raw(proxy) is raw
        assert _anchor.lookup_raw(raw) is None
        assert _anchor.lookup_proxy(raw) is proxy
        assert _anchor.lookup_proxy(raw, shallow=True) is None
        assert not _anchor.is_shallow(raw)

    def test_deep_wrapping_is_lazy(self):
        inner = {"b": 1}
        state = observable({"a": inner})
        assert _anchor.lookup_proxy(inner) is None
        child = state["a"]
        assert is_observable(child)
        assert to_raw(child) is inner
        assert _anchor.lookup_proxy(inner) is child

    def test_nested_reads_return_same_wrapper(self):
        state = observable({"a": {"b": 1}})
        child = state["a"]
        assert state["a"] is child

    def test_reattach_moves_node(self):
        value = {"n": 1}
        parent_a = {"x": value}
        parent_b = {"y": value}
        proxy = observe(parent_a, "x", value)
        assert observe(parent_b, "y", value) is proxy
        node = node_for(value)
        assert node.target is parent_b
        assert node.key == "y"

    def test_reattach_without_keeping_wrappers(self):
        value = {"n": 1}
        parent_a, parent_b = {"x": value}, {"y": value}
        observe(parent_a, "x", value)
        observe(parent_b, "y", value)
        gc.collect()
        node = node_for(value)
        assert node.target is parent_b
        assert node.key == "y"

    def test_shallow_wrapper_writes_do_not_attach(self):
        flat = shallow({})
        child = {}
        flat["child"] = child
        assert node_for(child).target is None
        assert flat["child"] is child

    def test_deep_wrapper_under_shallow_root(self):
        raw = {"child": {"x": 1}}
        deep = observable(raw)
        flat = shallow(raw)
        # While the raw value owns a shallow wrapper, its children stay raw.
        assert type(deep["child"]) is dict
        assert flat is shallow(raw)

    def test_root_request_keeps_attachment(self):
        state = observable({"a": {"b": 1}})
        child = state["a"]
        assert observable(child) is child
        assert node_for(child).path == ["a"]

    def test_wrap_rejects_unsupported(self):
        with pytest.raises(TypeError):
            wrap(42)

    def test_logs_wrapper_creation(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="reactree.observable"):
            observable({"a": 1})
        assert "Wrapped dict as ObservableDict" in caplog.text


class TestObservableDict:
    def test_behaves_like_dict(self):
        d = observable({"a": 1, "b": 2})
        assert isinstance(d, dict)
        assert d == {"a": 1, "b": 2}
        assert d["a"] == 1
        assert d.get("c", 99) == 99
        assert "a" in d
        assert len(d) == 2
        assert set(d) == {"a", "b"}
        assert bool(d) is True
        assert repr(d) == repr({"a": 1, "b": 2})

    def test_views_wrap_values(self):
        d = observable({"a": {"x": 1}, "b": 2})
        assert set(d.keys()) == {"a", "b"}
        values = list(d.values())
        assert is_observable(values[0])
        assert values[1] == 2
        items = dict(d.items())
        assert is_observable(items["a"])

    def test_writes_pass_through(self):
        raw = {"a": 1}
        d = observable(raw)
        d["b"] = 2
        del d["a"]
        assert raw == {"b": 2}

    def test_stores_raw_values(self):
        raw = {}
        d = observable(raw)
        child = observable({"x": 1})
        d["child"] = child
        assert raw["child"] is to_raw(child)

    def test_pop_setdefault_update_clear(self):
        raw = {"a": 1, "b": 2}
        d = observable(raw)
        assert d.pop("a") == 1
        assert d.pop("missing", None) is None
        with pytest.raises(KeyError):
            d.pop("missing")
        assert d.setdefault("b", 99) == 2
        assert is_observable(d.setdefault("c", {"deep": True}))
        d.update({"e": 5}, f=6)
        assert raw["e"] == 5 and raw["f"] == 6
        d.clear()
        assert raw == {}

    def test_copy_is_plain(self):
        d = observable({"a": {"x": 1}})
        plain = d.copy()
        assert type(plain) is dict
        assert plain == {"a": {"x": 1}}


class TestObservableList:
    def test_behaves_like_list(self):
        lst = observable([1, 2, 3])
        assert isinstance(lst, list)
        assert len(lst) == 3
        assert lst[0] == 1
        assert lst[-1] == 3
        assert list(lst) == [1, 2, 3]
        assert 2 in lst
        assert lst == [1, 2, 3]
        assert lst + [4] == [1, 2, 3, 4]
        assert lst[1:] == [2, 3]

    def test_iteration_wraps_children(self):
        lst = observable([{"a": 1}, 2])
        first, second = list(lst)
        assert is_observable(first)
        assert second == 2
        assert node_for(first).path == [0]

    def test_mutators_pass_through(self):
        raw = [1, 2, 3]
        lst = observable(raw)
        lst.append(4)
        lst.insert(0, 0)
        assert raw == [0, 1, 2, 3, 4]
        assert lst.pop() == 4
        lst.remove(0)
        lst[0] = 10
        del lst[1]
        assert raw == [10, 3]
        lst.extend([5, 6])
        lst += [7]
        assert raw == [10, 3, 5, 6, 7]
        lst.sort(reverse=True)
        assert raw == [10, 7, 6, 5, 3]
        lst.reverse()
        assert raw == [3, 5, 6, 7, 10]
        lst.clear()
        assert raw == []

    def test_index_and_count(self):
        lst = observable(["a", "b", "a"])
        assert lst.index("b") == 1
        assert lst.count("a") == 2


class TestObservableSet:
    def test_behaves_like_set(self):
        s = observable({1, 2})
        assert isinstance(s, set)
        assert 1 in s
        assert len(s) == 2
        assert s == {1, 2}
        assert s | {3} == {1, 2, 3}
        assert s.issubset({1, 2, 3})

    def test_mutators_pass_through(self):
        raw = {1, 2}
        s = observable(raw)
        s.add(3)
        s.discard(1)
        s.remove(2)
        assert raw == {3}
        with pytest.raises(KeyError):
            s.remove(42)
        s.update([4, 5])
        s -= {4}
        assert raw == {3, 5}
        s.clear()
        assert raw == set()

    def test_iteration_wraps_members(self):
        tag = Tag("urgent")
        s = observable({tag})
        (member,) = list(s)
        assert is_observable(member)
        assert to_raw(member) is tag
        assert member in s
        assert node_for(member).target is to_raw(s)


class TestObservableObject:
    def test_private_names_reach_the_object(self):
        raw = SimpleNamespace(_node="mine", _raw=1, _report=[], _child={})
        obj = observable(raw)
        assert obj._node == "mine"
        assert obj._raw == 1
        assert is_observable(obj._report)
        assert is_observable(obj._child)
        obj._node = "changed"
        assert raw._node == "changed"

    def test_wrapper_slots_are_not_visible(self):
        obj = observable(SimpleNamespace())
        with pytest.raises(AttributeError):
            obj.__reactree_target__

    def test_attribute_access(self):
        raw = SimpleNamespace(name="todo", tags=["a"], meta={"k": "v"})
        obj = observable(raw)
        assert isinstance(obj, SimpleNamespace)
        assert obj.name == "todo"
        assert isinstance(obj.tags, ObservableList)
        assert isinstance(obj.meta, ObservableDict)
        assert node_for(obj.meta).path == ["meta"]

    def test_writes_pass_through(self):
        raw = SimpleNamespace(name="todo")
        obj = observable(raw)
        obj.name = "done"
        obj.extra = [1]
        assert raw.name == "done"
        assert raw.extra == [1]
        del obj.extra
        assert not hasattr(raw, "extra")

    def test_methods_run_against_wrapper(self, ops):
        counter = observable(Counter())
        assert counter.bump() == 1
        assert to_raw(counter).history == [1]
        writes = [(op.type, op.path) for op in ops if not op.is_read]
        assert ("set", ["count"]) in writes
        assert ("add", ["history", 0]) in writes

    def test_equality_and_copy(self):
        counter = observable(Counter(count=3))
        assert counter == Counter(count=3)
        clone = copy.deepcopy(counter)
        assert type(clone) is Counter
        assert clone == Counter(count=3)


class TestToPlain:
    def test_unwraps_everything(self):
        state = observable({"a": [{"b": 1}], "s": {1}, "ns": SimpleNamespace(x=[2])})
        state["a"][0]["c"] = 2
        plain = to_plain(state)
        assert plain == {"a": [{"b": 1, "c": 2}], "s": {1}, "ns": SimpleNamespace(x=[2])}
        assert type(plain["a"]) is list
        assert plain["a"] is not to_raw(state)["a"]

    def test_handles_cycles(self):
        raw = {"self": None}
        raw["self"] = raw
        plain = to_plain(observable(raw))
        assert plain["self"] is plain
