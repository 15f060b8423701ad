"""Per-registry configuration."""

from dataclasses import dataclass

__all__ = ["RegistryConfig"]


@dataclass(frozen=True)
class RegistryConfig:
    """
    Defaults applied by a :class:`~heinjector.registry.Registry`.

    Attributes:
        name: Label used in log records and the registry's repr.
        default_singleton: ``singleton`` flag given to payloads created by ``bind``.
        default_no_cache: ``no_cache`` flag given to payloads created by ``bind``.

    Example:
        >>> registry = Registry(RegistryConfig(name="request", default_singleton=False))
    """

    name: str = "default"
    default_singleton: bool = True
    default_no_cache: bool = False
