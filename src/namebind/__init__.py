"""Name-keyed dependency injection container.

This package maps string identifiers to the objects an application needs:
pre-built instances, singleton or factory callbacks, aliases between names,
and classes built reflectively from their ``__init__`` annotations.

Exports:
- `Container`: the registry and resolution engine.
- `DI`: a `Container` with attribute, item and call syntax.
- `Lifetime`: whether a callback's result is cached (singleton) or not (factory).
- `ContainerError` and its subclasses for resolution failures.
"""

from ._container import ALIAS_RESOLVE_LIMIT, Container, Lifetime, Registration
from ._errors import (
    CircularDependencyError,
    ContainerError,
    NotFoundError,
    Unresolvable,
    UnresolvableAliasError,
    UnresolvableDependencyError,
    UnresolvableParameterError,
    UnresolvableTypeError,
)
from ._reflection import type_name
from ._sugar import DI


__all__ = [
    "ALIAS_RESOLVE_LIMIT",
    "DI",
    "CircularDependencyError",
    "Container",
    "ContainerError",
    "Lifetime",
    "NotFoundError",
    "Registration",
    "Unresolvable",
    "UnresolvableAliasError",
    "UnresolvableDependencyError",
    "UnresolvableParameterError",
    "UnresolvableTypeError",
    "type_name",
]
