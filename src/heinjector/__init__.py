"""heinjector dependency injection container.

heinjector maps identifiers (strings, sentinels or classes) to payloads that
describe how a value is produced, and resolves them on demand. Bindings are
configured with a fluent builder, and classes can register themselves and
wire their attributes with declarative markers.

Key Features:
    - Fluent binding of constants, arrays, classes and factories
    - Singleton, transient and uncached scopes per binding
    - Array bindings accumulated from many call sites
    - Snapshot and restore of the whole registry for test isolation
    - Class markers for auto-registration and lazily resolved attributes

Basic Usage:
    >>> from heinjector.registry import Registry
    >>>
    >>> registry = Registry()
    >>> inject = registry.create_inject_decorator
    >>> injectable = registry.create_injectable_decorator
    >>>
    >>> registry.bind("dsn").as_value("sqlite://").done()
    >>>
    >>> @injectable()
    >>> class Database:
    ...     dsn = inject()
    >>>
    >>> registry.resolve(Database).dsn
    'sqlite://'

The package consists of several modules:
    - registry: The registry and its public operations
    - builders: The fluent binding builder chain
    - resolution: Producing values from payloads
    - markers: Class decorators and injected attributes
    - domain: Identifiers and payloads
    - config: Per-registry defaults
    - errors: Container-specific exceptions
"""
