from typing import Annotated

import pytest

from heinjector.domain import PayloadKind
from heinjector.errors import EmptyPayloadError, ReadOnlyPropertyError
from heinjector.markers import Inject
from heinjector.registry import Registry


@pytest.fixture
def registry():
    return Registry()


@pytest.fixture
def inject(registry):
    return registry.create_inject_decorator


@pytest.fixture
def injectable(registry):
    return registry.create_injectable_decorator


@pytest.fixture
def injectable_array(registry):
    return registry.create_injectable_array_decorator


def test_injectable_registers_class(registry, injectable):
    @injectable()
    class Foo:
        pass

    assert isinstance(registry.resolve(Foo), Foo)
    assert registry.get(Foo).newable is Foo


def test_injectable_returns_class_unchanged(injectable):
    class Foo:
        def __init__(self, name):
            self.name = name

    assert injectable()(Foo) is Foo
    assert Foo("direct").name == "direct"


def test_injectable_under_identifier(registry, injectable):
    @injectable("service")
    class Service:
        pass

    assert isinstance(registry.resolve("service"), Service)
    assert not registry.has(Service)


def test_injectable_redefines_existing_binding(registry, injectable):
    registry.bind("service").as_value("placeholder")

    @injectable("service")
    class Service:
        pass

    assert registry.get("service").newable is Service
    assert isinstance(registry.resolve("service", PayloadKind.NEWABLE), Service)


def test_injectable_array_collects_in_declaration_order(registry, injectable_array):
    @injectable_array("routes")
    class FooRoute:
        pass

    @injectable_array("routes")
    class BarRoute:
        pass

    routes = registry.resolve_array("routes")

    assert len(routes) == 2
    assert [type(route) for route in routes] == [FooRoute, BarRoute]


def test_inject_field_resolves_on_every_read(registry, inject, injectable):
    @injectable()
    class Foo:
        foo = inject()

    foo = registry.resolve(Foo)

    registry.define("foo").as_value("MyFooValue").done()
    assert foo.foo == "MyFooValue"

    registry.define("foo").as_value("MyBarValue").done()
    assert foo.foo == "MyBarValue"


def test_inject_binds_identifier_at_class_definition(registry, inject):
    class Foo:
        bar = inject("custom")

    assert registry.has("custom")
    with pytest.raises(EmptyPayloadError):
        Foo().bar


def test_inject_keeps_existing_binding(registry, inject):
    registry.bind("foo").as_value("existing").done()

    class Foo:
        foo = inject()

    assert Foo().foo == "existing"


def test_inject_field_is_read_only(inject):
    class Foo:
        foo = inject()

    with pytest.raises(ReadOnlyPropertyError, match="Property foo for .*Foo is readonly"):
        Foo().foo = "other"


def test_inject_on_class_returns_marker(inject):
    class Foo:
        foo = inject("bar")

    assert isinstance(Foo.foo, Inject)
    assert Foo.foo.identifier == "bar"
    assert Foo.foo.name == "foo"


def test_inject_constructor_parameter(registry, inject, injectable):
    @injectable()
    class Foo:
        def __init__(self, bar: Annotated[str, inject()]):
            self.initial_bar = bar

    registry.define("bar").as_value("MyBarValue").done()
    foo = registry.resolve(Foo)

    assert foo.initial_bar == "MyBarValue"
    assert foo.bar == "MyBarValue"

    registry.define("bar").as_value("MyFooValue").done()
    assert foo.bar == "MyFooValue"


def test_constructor_parameter_accepts_explicit_argument(registry, inject, injectable):
    @injectable()
    class Greeter:
        def __init__(self, prefix: str, name: Annotated[str, inject("user")]):
            self.greeting = f"{prefix} {name}"

    registry.define("user").as_value("Arthur").done()

    assert Greeter("Hello").greeting == "Hello Arthur"
    assert Greeter("Hi", "Martha").greeting == "Hi Martha"


def test_constructor_parameter_is_read_only(registry, inject, injectable):
    @injectable()
    class Foo:
        def __init__(self, bar: Annotated[str, inject()]):
            pass

    registry.define("bar").as_value("bar").done()
    foo = registry.resolve(Foo)

    with pytest.raises(AttributeError):
        foo.bar = "other"


def test_server_receives_route_collection(registry, inject, injectable, injectable_array):
    @injectable()
    class Server:
        def __init__(self, routes: Annotated[list, inject("routes")]):
            self.route_count = len(routes)

    @injectable_array("routes")
    class FooRoute:
        pass

    @injectable_array("routes")
    class BarRoute:
        pass

    server = registry.resolve(Server)

    assert server.route_count == 2
    assert [type(route) for route in server.routes] == [FooRoute, BarRoute]


def test_markers_only_register_in_their_registry(registry):
    other = Registry()

    @other.create_injectable_decorator()
    class Foo:
        def __init__(self, bar: Annotated[str, registry.create_inject_decorator()] = "default"):
            self.bar_value = bar

    assert other.has(Foo)
    assert not registry.has(Foo)
    assert not registry.has("bar")
    assert other.resolve(Foo).bar_value == "default"


def test_injectable_with_forward_referenced_parameter(registry, injectable):
    @injectable()
    class Service:
        def __init__(self, helper: "Helper" = None):
            self.helper = helper

    class Helper:
        pass

    assert isinstance(registry.resolve(Service), Service)
    assert Service(Helper()).helper is not None


def test_marker_found_beside_forward_referenced_parameter(registry, inject, injectable):
    @injectable()
    class Service:
        def __init__(self, name: Annotated[str, inject("name")], helper: "Helper" = None):
            self.greeting = f"Hello {name}"

    class Helper:
        pass

    registry.define("name").as_value("Arthur").done()

    assert registry.resolve(Service).greeting == "Hello Arthur"
