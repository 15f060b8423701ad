"""Fluent builders for configuring and committing bindings.

A binding is configured in three stages over a single payload:

    registry.bind("routes")            # BindingBuilder: choose a producer
        .as_array(home, about)         # ArrayConfig: optional scope controls
        .no_cache()
        .done()                        # commit via Registry.override

Scalar producers return an :class:`ObjectConfig`; array producers return an
:class:`ArrayConfig`, which additionally supports :meth:`ArrayConfig.override`.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from heinjector.domain import (
    UNSET,
    Identifier,
    Payload,
    PayloadKind,
    Sentinel,
    describe_identifier,
)

if TYPE_CHECKING:
    from heinjector.registry import Registry

__all__ = ["BindingSession", "BindingBuilder", "ObjectConfig", "ArrayConfig", "LAZY"]

logger = logging.getLogger(__name__)


LAZY = Sentinel("LAZY")
"""The producer must run at resolution time; nothing can be cached on commit."""


@dataclass
class BindingSession:
    """
    Transient state shared by the stages of one builder chain.

    Attributes:
        registry: The registry the payload is committed to.
        identifier: The identifier being configured.
        payload: The live payload mutated by the chain.
        old_value: The payload's value before the producer call, or :data:`UNSET`.
        new_value: The literal to cache on commit, :data:`LAZY`, or :data:`UNSET`
            when no producer call has been made.
        args: The arguments of the most recent array producer call.
        array_kind: The array field that call appended to.
    """

    registry: "Registry"
    identifier: Identifier
    payload: Payload
    old_value: Any = UNSET
    new_value: Any = UNSET
    args: Optional[list] = None
    array_kind: Optional[PayloadKind] = None


class _Stage:
    def __init__(self, session: BindingSession):
        self._session = session


class DoneConfig(_Stage):
    def done(self) -> "Registry":
        """Commit the configured payload to the registry.

        A literal produced by ``as_value``/``as_array`` becomes the payload's
        cache unless caching is disabled. Lazy producers, and payloads with
        caching disabled, drop any cache left by a previous producer.

        Returns:
            The registry, for chaining further operations.

        Raises:
            NotRegisteredError: If the identifier was unbound mid-chain.
        """
        session = self._session
        payload = session.payload

        if session.new_value is LAZY or payload.no_cache:
            payload.cache = UNSET
        elif session.new_value is not UNSET:
            payload.cache = session.new_value

        logger.debug(
            "Committing binding for %s (previous value %r)",
            describe_identifier(session.identifier),
            session.old_value,
        )
        return session.registry.override(session.identifier, payload)


class ObjectConfig(DoneConfig):
    def not_in_singleton_scope(self) -> "ObjectConfig":
        """Invoke the producer on every resolution instead of reusing the cache."""
        self._session.payload.singleton = False
        return self

    def no_cache(self) -> "ObjectConfig":
        """Keep the singleton flag but never write produced values to the cache."""
        self._session.payload.no_cache = True
        return self


class ArrayConfig(ObjectConfig):
    def override(self) -> "ArrayConfig":
        """Replace the accumulated list with the arguments of the last call only."""
        session = self._session
        replacement = list(session.args)
        setattr(session.payload, session.array_kind.value, replacement)
        if session.array_kind is PayloadKind.ARRAY:
            session.new_value = list(replacement)
        return self


class BindingBuilder(_Stage):
    """First stage of the chain: choose how values are produced."""

    def as_value(self, value: Any) -> ObjectConfig:
        """Bind a constant."""
        payload = self._begin()
        payload.value = value
        self._session.new_value = value
        return ObjectConfig(self._session)

    def as_array(self, *values: Any) -> ArrayConfig:
        """Append constants to the identifier's array."""
        accumulated = self._append(PayloadKind.ARRAY, values)
        self._session.new_value = list(accumulated)
        return ArrayConfig(self._session)

    def as_newable(self, newable: type) -> ObjectConfig:
        """Bind a class, instantiated with no arguments on resolution."""
        payload = self._begin()
        payload.newable = newable
        self._session.new_value = LAZY
        return ObjectConfig(self._session)

    def as_newable_array(self, *newables: type) -> ArrayConfig:
        """Append classes to the identifier's newable array."""
        self._append(PayloadKind.NEWABLE_ARRAY, newables)
        self._session.new_value = LAZY
        return ArrayConfig(self._session)

    def as_factory(self, factory: Callable[[], Any]) -> ObjectConfig:
        """Bind a zero-argument callable, invoked on resolution."""
        payload = self._begin()
        payload.factory = factory
        self._session.new_value = LAZY
        return ObjectConfig(self._session)

    def as_factory_array(self, *factories: Callable[[], Any]) -> ArrayConfig:
        """Append zero-argument callables to the identifier's factory array."""
        self._append(PayloadKind.FACTORY_ARRAY, factories)
        self._session.new_value = LAZY
        return ArrayConfig(self._session)

    def _begin(self) -> Payload:
        self._session.old_value = self._session.payload.value
        return self._session.payload

    def _append(self, kind: PayloadKind, items: tuple) -> list:
        payload = self._begin()
        existing = getattr(payload, kind.value)
        accumulated = [*(existing if existing is not UNSET else []), *items]
        setattr(payload, kind.value, accumulated)
        self._session.args = list(items)
        self._session.array_kind = kind
        return accumulated
