"""Domain models used throughout the container."""

import inspect
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Hashable, Union

__all__ = ["Identifier", "Payload", "PayloadKind", "UNSET", "describe_identifier"]


Identifier = Union[str, int, type, Hashable]
"""Type alias for keys used to address registry entries.

Primitive keys (strings, numbers, sentinels, enum members) compare by value;
classes compare by identity.

Example:
    >>> registry.bind("database")   # primitive key
    >>> registry.bind(Database)     # class key
"""


class PayloadKind(str, Enum):
    """Names of the payload fields a resolution may be restricted to."""

    VALUE = "value"
    ARRAY = "array"
    NEWABLE = "newable"
    NEWABLE_ARRAY = "newable_array"
    FACTORY = "factory"
    FACTORY_ARRAY = "factory_array"
    CACHE = "cache"


class Sentinel:
    def __init__(self, name: str):
        self._name = name

    def __repr__(self) -> str:
        return self._name


UNSET: Any = Sentinel("UNSET")
"""Marks a payload field that holds nothing; ``None`` is a legitimate value."""


@dataclass
class Payload:
    """The recipe registered for one identifier.

    Attributes:
        value: A precomputed constant.
        array: An accumulated list of constants.
        newable: A class instantiated with no arguments on resolution.
        newable_array: Classes instantiated in order on resolution.
        factory: A zero-argument callable invoked on resolution.
        factory_array: Zero-argument callables invoked in order on resolution.
        cache: The memoised result of the last resolution, scalar or list.
        singleton: Whether repeated resolutions reuse ``cache``.
        no_cache: Whether writes to ``cache`` are suppressed.

    A field counts as populated when it is not :data:`UNSET`.
    """

    value: Any = UNSET
    array: Any = UNSET
    newable: Any = UNSET
    newable_array: Any = UNSET
    factory: Any = UNSET
    factory_array: Any = UNSET
    cache: Any = UNSET
    singleton: bool = True
    no_cache: bool = False

    def copy(self) -> "Payload":
        """Return an independent record; list fields are copied, values shared."""
        return replace(
            self,
            array=_copied(self.array),
            newable_array=_copied(self.newable_array),
            factory_array=_copied(self.factory_array),
            cache=_copied(self.cache),
        )


def _copied(field_value: Any) -> Any:
    return list(field_value) if isinstance(field_value, list) else field_value


def describe_identifier(identifier: Identifier) -> str:
    """Render an identifier for log records and error messages.

    Example:
        >>> describe_identifier(Database)   # Returns "Database"
        >>> describe_identifier("routes")   # Returns "'routes'"
    """
    if inspect.isclass(identifier):
        return identifier.__qualname__
    return repr(identifier)
