import pytest

from heinjector.domain import UNSET, Payload, PayloadKind
from heinjector.errors import EmptyPayloadError, WrongShapeError
from heinjector.registry import Registry
from heinjector.resolution import RESOLUTION_ORDER, resolve_payload


@pytest.fixture
def registry():
    return Registry()


class Foo:
    foo = "foo"


def test_resolves_newable(registry):
    registry.bind("Foo").as_newable(Foo).done()

    assert registry.resolve("Foo").foo == "foo"


def test_singleton_newable_is_cached(registry):
    registry.bind(Foo).as_newable(Foo).done()

    assert registry.resolve(Foo) is registry.resolve(Foo)
    assert isinstance(registry.get(Foo).cache, Foo)


def test_priority_order():
    payload = Payload(value="value", array=["array"], factory=lambda: "factory")

    assert resolve_payload("foo", payload) == "value"

    payload.value = UNSET
    assert resolve_payload("foo", payload) == ["array"]

    payload.array = UNSET
    assert resolve_payload("foo", payload) == "factory"


def test_cache_wins_only_for_singletons():
    payload = Payload(value="value", cache="cached")
    assert resolve_payload("foo", payload) == "cached"

    payload.singleton = False
    assert resolve_payload("foo", payload) == "value"
    assert resolve_payload("foo", payload, PayloadKind.CACHE) == "cached"


def test_newable_before_factory():
    payload = Payload(newable=Foo, factory=lambda: "factory", singleton=False)

    assert isinstance(resolve_payload("foo", payload), Foo)


def test_resolution_order_lists_every_kind():
    assert set(RESOLUTION_ORDER) == set(PayloadKind)
    assert RESOLUTION_ORDER[0] is PayloadKind.CACHE


def test_explicit_kind_restricts_resolution(registry):
    registry.bind("foo").as_value("value").done()
    registry.define("foo").as_factory(lambda: "factory").done()

    assert registry.resolve("foo") == "value"
    assert registry.resolve("foo", PayloadKind.FACTORY) == "factory"
    assert registry.resolve("foo", "value") == "value"


def test_explicit_kind_does_not_fall_through(registry):
    registry.bind("foo").as_value("value").done()

    with pytest.raises(EmptyPayloadError, match="for kind 'newable'"):
        registry.resolve("foo", "newable")


def test_unknown_kind_is_rejected(registry):
    registry.bind("foo").as_value("value").done()

    with pytest.raises(ValueError):
        registry.resolve("foo", "constant")


def test_resolve_rejects_arrays(registry):
    registry.bind("foo").as_array(1, 2).done()

    with pytest.raises(WrongShapeError, match="Expected a scalar"):
        registry.resolve("foo")
    assert registry.resolve_any("foo") == [1, 2]


def test_resolve_array_rejects_scalars(registry):
    registry.bind("foo").as_value(1).done()

    with pytest.raises(WrongShapeError, match="Expected an array"):
        registry.resolve_array("foo")


def test_newable_array_resolves_in_registration_order(registry):
    class First:
        pass

    class Second:
        pass

    registry.bind("plugins").as_newable_array(First, Second).done()

    plugins = registry.resolve_array("plugins")

    assert [type(plugin) for plugin in plugins] == [First, Second]
    assert registry.resolve_array("plugins") is plugins


def test_factory_array_shares_payload_scope(registry):
    calls = []

    def first():
        calls.append("first")
        return object()

    def second():
        calls.append("second")
        return object()

    registry.bind("items").as_factory_array(first, second).not_in_singleton_scope().done()

    one = registry.resolve_array("items")
    two = registry.resolve_array("items")

    assert calls == ["first", "second", "first", "second"]
    assert one[0] is not two[0]


def test_producer_errors_propagate(registry):
    def broken():
        raise RuntimeError("cannot connect")

    registry.bind("db").as_factory(broken).done()

    with pytest.raises(RuntimeError, match="cannot connect"):
        registry.resolve("db")
    assert registry.get("db").cache is UNSET
