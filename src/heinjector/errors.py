from typing import Any

from heinjector.domain import describe_identifier

__all__ = [
    "InjectionError",
    "AlreadyRegisteredError",
    "NotRegisteredError",
    "EmptyPayloadError",
    "WrongShapeError",
    "ReadOnlyPropertyError",
]


class InjectionError(Exception):
    """Base class for errors raised by the container."""

    def __init__(self, message: str, identifier: Any = None):
        super().__init__(message)
        self.identifier = identifier


class AlreadyRegisteredError(InjectionError):
    """Raised when binding an identifier that is already registered."""

    def __init__(self, identifier: Any):
        super().__init__(
            f"Identifier {describe_identifier(identifier)} already registered", identifier
        )


class NotRegisteredError(InjectionError, KeyError):
    """Raised when an operation needs an identifier that is not registered."""

    def __init__(self, identifier: Any):
        super().__init__(
            f"Identifier {describe_identifier(identifier)} not in registry", identifier
        )

    def __str__(self) -> str:
        # KeyError would otherwise render the message with quotes around it
        return self.args[0]


class EmptyPayloadError(InjectionError):
    """Raised when resolution finds no populated producer for an identifier."""

    def __init__(self, identifier: Any, kind: Any = None):
        restriction = f" for kind '{kind.value}'" if kind is not None else ""
        super().__init__(
            f"Payload for identifier {describe_identifier(identifier)} is empty{restriction}",
            identifier,
        )
        self.kind = kind


class WrongShapeError(InjectionError):
    """Raised when resolve returns a list, or resolve_array returns a scalar."""

    def __init__(self, identifier: Any, expected_array: bool):
        expected, got = ("an array", "a scalar") if expected_array else ("a scalar", "an array")
        super().__init__(
            f"Expected {expected} for identifier {describe_identifier(identifier)} but resolved {got}",
            identifier,
        )
        self.expected_array = expected_array


class ReadOnlyPropertyError(InjectionError, AttributeError):
    """Raised when assigning to an attribute wired by an inject marker."""

    def __init__(self, owner: type, name: str, identifier: Any):
        super().__init__(
            f"Property {name} for {owner.__qualname__} is readonly", identifier
        )
        self.owner = owner
        self.name = name
