"""The registry: identifiers mapped to payloads, with snapshot support."""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, TypeVar, Union

from heinjector.builders import BindingBuilder, BindingSession
from heinjector.config import RegistryConfig
from heinjector.domain import Identifier, Payload, PayloadKind, describe_identifier
from heinjector.errors import AlreadyRegisteredError, NotRegisteredError
from heinjector.markers import Inject, injectable, injectable_array
from heinjector.resolution import check_shape, resolve_payload

__all__ = ["Registry"]

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=type)
Kind = Union[PayloadKind, str, None]


class Registry:
    """Registry of payloads keyed by identifier.

    Bindings are created with :meth:`bind`, reconfigured with :meth:`define`
    and resolved with :meth:`resolve` or :meth:`resolve_array`:

        >>> registry = Registry()
        >>> registry.bind("greeting").as_value("Hello").done()
        >>> registry.resolve("greeting")
        'Hello'

    Registries are independent of each other; markers created through the
    ``create_*_decorator`` methods register into the registry that created them.
    """

    def __init__(self, config: Optional[RegistryConfig] = None):
        self.config = config or RegistryConfig()
        self._payloads: dict[Identifier, Payload] = {}
        self._snapshots: list[dict[Identifier, Payload]] = []

    def bind(self, identifier: Identifier) -> BindingBuilder:
        """Register ``identifier`` with an empty payload.

        The entry is visible to :meth:`has` immediately, before a producer is chosen.

        Returns:
            A builder for choosing the identifier's producer.

        Raises:
            AlreadyRegisteredError: If the identifier is already registered.
        """
        if identifier in self._payloads:
            raise AlreadyRegisteredError(identifier)

        payload = Payload(
            singleton=self.config.default_singleton,
            no_cache=self.config.default_no_cache,
        )
        self._payloads[identifier] = payload
        logger.debug("[%s] Bound %s", self.config.name, describe_identifier(identifier))
        return self._builder(identifier, payload)

    def unbind(self, identifier: Identifier) -> "Registry":
        """Remove ``identifier`` from the registry.

        Raises:
            NotRegisteredError: If the identifier is not registered.
        """
        self._payload_or_raise(identifier)
        del self._payloads[identifier]
        logger.debug("[%s] Unbound %s", self.config.name, describe_identifier(identifier))
        return self

    def rebind(self, identifier: Identifier) -> BindingBuilder:
        """Replace the binding for ``identifier`` with a fresh, empty one."""
        return self.unbind(identifier).bind(identifier)

    def define(self, identifier: Identifier) -> BindingBuilder:
        """Reconfigure the existing payload for ``identifier``.

        Array producers append to the arrays already on the payload, and scope
        flags set previously are kept.

        Raises:
            NotRegisteredError: If the identifier is not registered.
        """
        return self._builder(identifier, self._payload_or_raise(identifier))

    def override(self, identifier: Identifier, payload: Payload) -> "Registry":
        """Replace the payload stored for ``identifier``.

        Raises:
            NotRegisteredError: If the identifier is not registered.
        """
        self._payload_or_raise(identifier)
        self._payloads[identifier] = payload
        logger.debug("[%s] Stored payload for %s", self.config.name, describe_identifier(identifier))
        return self

    def has(self, identifier: Identifier) -> bool:
        return identifier in self._payloads

    def get(self, identifier: Identifier) -> Optional[Payload]:
        return self._payloads.get(identifier)

    def __contains__(self, identifier: Identifier) -> bool:
        return self.has(identifier)

    def __len__(self) -> int:
        return len(self._payloads)

    def __repr__(self) -> str:
        return f"Registry(name={self.config.name!r}, entries={len(self._payloads)})"

    def resolve(self, identifier: Identifier, kind: Kind = None) -> Any:
        """Resolve a scalar value for ``identifier``.

        Args:
            identifier: The identifier to resolve.
            kind: Restrict resolution to one payload field, as a
                :class:`~heinjector.domain.PayloadKind` or its string value.

        Raises:
            NotRegisteredError: If the identifier is not registered.
            EmptyPayloadError: If the payload has nothing to produce.
            WrongShapeError: If the resolved value is a list.
        """
        return check_shape(identifier, self.resolve_any(identifier, kind), expect_array=False)

    def resolve_array(self, identifier: Identifier, kind: Kind = None) -> list:
        """Resolve a list of values for ``identifier``.

        Raises:
            NotRegisteredError: If the identifier is not registered.
            EmptyPayloadError: If the payload has nothing to produce.
            WrongShapeError: If the resolved value is not a list.
        """
        return check_shape(identifier, self.resolve_any(identifier, kind), expect_array=True)

    def resolve_any(self, identifier: Identifier, kind: Kind = None) -> Any:
        """Resolve ``identifier`` without checking whether the result is a list."""
        return resolve_payload(identifier, self._payload_or_raise(identifier), kind)

    def snapshot(self) -> "Registry":
        """Save the current bindings; :meth:`restore` returns to them."""
        self._snapshots.append(
            {identifier: payload.copy() for identifier, payload in self._payloads.items()}
        )
        logger.debug("[%s] Snapshot %d taken", self.config.name, len(self._snapshots))
        return self

    def restore(self) -> "Registry":
        """Return to the most recent snapshot, discarding it. No-op without snapshots."""
        if self._snapshots:
            logger.debug("[%s] Restoring snapshot %d", self.config.name, len(self._snapshots))
            self._payloads = self._snapshots.pop()
        return self

    def clear(self) -> "Registry":
        """Remove every binding. Saved snapshots are kept."""
        self._payloads.clear()
        logger.debug("[%s] Cleared", self.config.name)
        return self

    @contextmanager
    def snapshotted(self) -> Iterator["Registry"]:
        """Snapshot on entry and restore on exit.

        Example:
            with registry.snapshotted():
                registry.rebind(Database).as_value(FakeDatabase()).done()
                ...
        """
        self.snapshot()
        try:
            yield self
        finally:
            self.restore()

    def create_inject_decorator(self, identifier: Optional[Identifier] = None) -> Inject:
        """Create a read-only accessor resolving ``identifier`` from this registry."""
        return Inject(self, identifier)

    def create_injectable_decorator(
        self, identifier: Optional[Identifier] = None
    ) -> Callable[[C], C]:
        """Create a class decorator registering the class as a newable."""
        return injectable(self, identifier)

    def create_injectable_array_decorator(self, identifier: Identifier) -> Callable[[C], C]:
        """Create a class decorator appending the class to a newable array."""
        return injectable_array(self, identifier)

    def _payload_or_raise(self, identifier: Identifier) -> Payload:
        payload = self._payloads.get(identifier)
        if payload is None:
            raise NotRegisteredError(identifier)
        return payload

    def _builder(self, identifier: Identifier, payload: Payload) -> BindingBuilder:
        return BindingBuilder(BindingSession(self, identifier, payload))
