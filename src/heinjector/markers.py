"""Declarative markers that register classes and wire attributes.

Markers are bound to one :class:`~heinjector.registry.Registry` and are
evaluated once, when the decorated class is defined:

    >>> inject = registry.create_inject_decorator
    >>> injectable = registry.create_injectable_decorator
    >>> injectable_array = registry.create_injectable_array_decorator
    >>>
    >>> @injectable_array("routes")
    >>> class HomeRoute: ...
    >>>
    >>> @injectable()
    >>> class Server:
    ...     config = inject("config")
    ...
    ...     def __init__(self, routes: Annotated[list, inject("routes")]):
    ...         self.route_count = len(routes)

``Server.config`` and ``Server.routes`` are read-only attributes resolved from
the registry on every read.
"""

import functools
import inspect
import logging
from typing import (
    TYPE_CHECKING,
    Annotated,
    Any,
    Callable,
    Optional,
    TypeVar,
    get_args,
    get_origin,
    get_type_hints,
)

from heinjector.domain import Identifier, describe_identifier
from heinjector.errors import ReadOnlyPropertyError

if TYPE_CHECKING:
    from heinjector.registry import Registry

__all__ = ["Inject", "injectable", "injectable_array"]

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=type)


class Inject:
    """A read-only attribute resolved from a registry each time it is read.

    Declared either as a class attribute, where the attribute name is the
    default identifier, or as ``Annotated`` metadata on an ``__init__``
    parameter of a class decorated with :func:`injectable` or
    :func:`injectable_array`, where the parameter name is the default
    identifier. In both cases the identifier is bound in the registry, with
    an empty payload, if it is not registered yet.

    Values are not memoised here: caching is governed by the binding's scope.
    """

    def __init__(self, registry: "Registry", identifier: Optional[Identifier] = None):
        self._registry = registry
        self._identifier = identifier
        self.owner: Optional[type] = None
        self.name: Optional[str] = None

    @property
    def identifier(self) -> Identifier:
        return self._identifier if self._identifier is not None else self.name

    def __set_name__(self, owner: type, name: str):
        self.attach(owner, name)

    def attach(self, owner: type, name: str):
        """Bind this marker to ``owner.name`` and ensure its identifier is registered."""
        self.owner = owner
        self.name = name
        if not self._registry.has(self.identifier):
            self._registry.bind(self.identifier)
        logger.debug(
            "Wired %s.%s to %s",
            owner.__qualname__,
            name,
            describe_identifier(self.identifier),
        )

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        return self._registry.resolve_any(self.identifier)

    def __set__(self, instance: Any, value: Any):
        raise ReadOnlyPropertyError(type(instance), self.name, self.identifier)

    def __repr__(self) -> str:
        return f"Inject({describe_identifier(self.identifier)})"


def injectable(registry: "Registry", identifier: Optional[Identifier] = None) -> Callable[[C], C]:
    """Class decorator registering the class as a newable under ``identifier``.

    Args:
        registry: The registry to register in.
        identifier: The identifier to register under; defaults to the class itself.

    Returns:
        A decorator that registers the class and returns it unchanged.

    Example:
        @registry.create_injectable_decorator()
        class Database:
            pass

        registry.resolve(Database)
    """

    def decorator(cls: C) -> C:
        _wire_constructor(registry, cls)
        target = identifier if identifier is not None else cls
        if registry.has(target):
            registry.define(target).as_newable(cls).done()
        else:
            registry.bind(target).as_newable(cls).done()
        logger.debug("Registered %s as newable for %s", cls.__qualname__, describe_identifier(target))
        return cls

    return decorator


def injectable_array(registry: "Registry", identifier: Identifier) -> Callable[[C], C]:
    """Class decorator appending the class to the newable array under ``identifier``.

    Classes are resolved in the order they were decorated.

    Example:
        @registry.create_injectable_array_decorator("routes")
        class HomeRoute:
            pass

        @registry.create_injectable_array_decorator("routes")
        class AboutRoute:
            pass

        registry.resolve_array("routes")  # [HomeRoute(), AboutRoute()]
    """

    def decorator(cls: C) -> C:
        _wire_constructor(registry, cls)
        if registry.has(identifier):
            registry.define(identifier).as_newable_array(cls).done()
        else:
            registry.bind(identifier).as_newable_array(cls).done()
        logger.debug("Appended %s to newable array %s", cls.__qualname__, describe_identifier(identifier))
        return cls

    return decorator


def _wire_constructor(registry: "Registry", cls: type):
    """Install accessors for ``__init__`` parameters annotated with an Inject marker.

    Each marked parameter becomes a read-only class attribute of the same name,
    and the constructor is wrapped so that a marked parameter the caller omits
    receives its currently resolved value.
    """
    init = cls.__dict__.get("__init__")
    if init is None:
        return

    signature = inspect.signature(init)
    hints = _parameter_annotations(init)
    injected: dict[str, Inject] = {}

    for name in signature.parameters:
        marker = _inject_marker(hints.get(name), registry)
        if marker is None:
            continue
        marker.attach(cls, name)
        setattr(cls, name, marker)
        injected[name] = marker

    if injected:
        cls.__init__ = _supplying_injected(init, signature, injected)


def _parameter_annotations(init: Callable) -> dict[str, Any]:
    """Return ``init``'s parameter annotations, evaluating string annotations if possible.

    Annotations that are already objects are used as they are. String
    annotations are evaluated with ``get_type_hints``; if one refers to a name
    that does not exist yet, the raw annotations are returned instead, so only
    markers declared without forward references are found.
    """
    annotations = dict(getattr(init, "__annotations__", {}))
    if not any(isinstance(annotation, str) for annotation in annotations.values()):
        return annotations

    try:
        return get_type_hints(init, include_extras=True)
    except NameError as e:
        logger.debug("Unresolved annotation on %s: %s", init.__qualname__, e)
        return annotations


def _inject_marker(annotation: Any, registry: "Registry") -> Optional[Inject]:
    if get_origin(annotation) is not Annotated:
        return None
    _, *metadata = get_args(annotation)
    return next(
        (m for m in metadata if isinstance(m, Inject) and m._registry is registry),
        None,
    )


def _supplying_injected(
    init: Callable, signature: inspect.Signature, injected: dict[str, Inject]
) -> Callable:
    @functools.wraps(init)
    def __init__(self, *args, **kwargs):
        bound = signature.bind_partial(self, *args, **kwargs)
        for name, marker in injected.items():
            if name not in bound.arguments:
                bound.arguments[name] = marker.__get__(self, type(self))
        init(*bound.args, **bound.kwargs)

    return __init__
