"""Producing values from registered payloads.

The resolution engine reads a :class:`~heinjector.domain.Payload` and returns
either a stored constant or the output of one of its producers. Producers are
invoked according to the payload's scope flags:

    - ``singleton=False``: the producer runs on every resolution.
    - ``singleton=True``: the producer runs and its output is written to
      ``cache``, which later resolutions return directly.
    - ``singleton=True, no_cache=True``: the producer runs on every
      resolution and nothing is written to ``cache``.

Without an explicit kind, fields are consulted in :data:`RESOLUTION_ORDER`.
"""

import logging
from typing import Any, Callable, Optional, Union

from heinjector.domain import UNSET, Identifier, Payload, PayloadKind, describe_identifier
from heinjector.errors import EmptyPayloadError, WrongShapeError

__all__ = ["RESOLUTION_ORDER", "resolve_payload", "check_shape", "as_kind"]

logger = logging.getLogger(__name__)

RESOLUTION_ORDER: tuple[PayloadKind, ...] = (
    PayloadKind.CACHE,
    PayloadKind.VALUE,
    PayloadKind.ARRAY,
    PayloadKind.NEWABLE,
    PayloadKind.NEWABLE_ARRAY,
    PayloadKind.FACTORY,
    PayloadKind.FACTORY_ARRAY,
)

_NOT_FOUND = object()


def as_kind(kind: Union[PayloadKind, str, None]) -> Optional[PayloadKind]:
    """Normalise an explicit kind given as an enum member or its string value."""
    if kind is None or isinstance(kind, PayloadKind):
        return kind
    return PayloadKind(kind)


def resolve_payload(
    identifier: Identifier, payload: Payload, kind: Union[PayloadKind, str, None] = None
) -> Any:
    """Produce the value registered in ``payload``.

    Args:
        identifier: The identifier the payload is registered under, used for
            log records and error messages.
        payload: The payload to resolve.
        kind: Restrict resolution to a single payload field. If None, fields
            are tried in :data:`RESOLUTION_ORDER`.

    Returns:
        The resolved value; a list for array fields.

    Raises:
        EmptyPayloadError: If no consulted field is populated.
    """
    kind = as_kind(kind)
    if kind is not None:
        result = _resolve_kind(identifier, payload, kind, explicit=True)
    else:
        result = next(
            (
                resolved
                for resolved in (
                    _resolve_kind(identifier, payload, candidate, explicit=False)
                    for candidate in RESOLUTION_ORDER
                )
                if resolved is not _NOT_FOUND
            ),
            _NOT_FOUND,
        )

    if result is _NOT_FOUND:
        raise EmptyPayloadError(identifier, kind)
    return result


def check_shape(identifier: Identifier, resolved: Any, expect_array: bool) -> Any:
    """Return ``resolved`` if its shape matches, otherwise raise WrongShapeError."""
    if isinstance(resolved, list) != expect_array:
        raise WrongShapeError(identifier, expect_array)
    return resolved


def _resolve_kind(
    identifier: Identifier, payload: Payload, kind: PayloadKind, explicit: bool
) -> Any:
    if kind is PayloadKind.CACHE:
        # the implicit path only trusts the cache for singletons
        if payload.cache is UNSET or not (explicit or payload.singleton):
            return _NOT_FOUND
        return payload.cache

    if kind is PayloadKind.VALUE:
        return payload.value if payload.value is not UNSET else _NOT_FOUND
    if kind is PayloadKind.ARRAY:
        return payload.array if payload.array is not UNSET else _NOT_FOUND

    if kind is PayloadKind.NEWABLE and payload.newable is not UNSET:
        return _produce(identifier, payload, lambda: _produce_one(payload.newable))
    if kind is PayloadKind.FACTORY and payload.factory is not UNSET:
        return _produce(identifier, payload, lambda: _produce_one(payload.factory))
    if kind is PayloadKind.NEWABLE_ARRAY and payload.newable_array is not UNSET:
        return _produce(identifier, payload, lambda: _produce_all(payload.newable_array))
    if kind is PayloadKind.FACTORY_ARRAY and payload.factory_array is not UNSET:
        return _produce(identifier, payload, lambda: _produce_all(payload.factory_array))

    return _NOT_FOUND


def _produce(identifier: Identifier, payload: Payload, creator: Callable[[], Any]) -> Any:
    produced = creator()
    if payload.singleton and not payload.no_cache:
        payload.cache = produced
        logger.debug("Cached produced value for %s", describe_identifier(identifier))
    return produced


def _produce_one(producer: Callable[[], Any]) -> Any:
    logger.debug("Invoking producer %r", producer)
    return producer()


def _produce_all(producers: list[Callable[[], Any]]) -> list:
    return [_produce_one(producer) for producer in producers]
