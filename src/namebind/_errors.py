from __future__ import annotations

from enum import Enum


class Unresolvable(Enum):
    """Why reflective construction refused a type."""

    ABSTRACT = "Abstract Class"
    INTERFACE = "Interface"
    TYPING_CONSTRUCT = "Typing Construct"
    NOT_A_CLASS = "Class"
    NONEXISTENT = "Nonexistent Class"


class ContainerError(RuntimeError):
    pass


class NotFoundError(ContainerError, LookupError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Nothing registered or constructible for {name!r}")
        self.name = name


class UnresolvableDependencyError(ContainerError):
    """`name` exists but something it needs was not found."""

    def __init__(self, name: str, dependency: str) -> None:
        super().__init__(f"Cannot build {name!r}: dependency {dependency!r} not found")
        self.name = name
        self.dependency = dependency


class UnresolvableAliasError(ContainerError):
    def __init__(self, alias: str, reached: str, limit: int) -> None:
        super().__init__(f"Alias resolve limit ({limit}) reached for {alias} at alias {reached}")
        self.alias = alias
        self.reached = reached
        self.limit = limit


class UnresolvableTypeError(ContainerError):
    def __init__(self, name: str, reason: Unresolvable) -> None:
        super().__init__(f"Unresolvable {reason.value} [ {name} ]")
        self.name = name
        self.reason = reason


class UnresolvableParameterError(ContainerError):
    def __init__(self, parameter: str, owner: str, annotation: str = "no-annotation") -> None:
        super().__init__(
            f"Cannot satisfy constructor parameter '{parameter}' for {owner}. "
            f"No override/argument/default found (annotation: {annotation})."
        )
        self.parameter = parameter
        self.owner = owner


class CircularDependencyError(ContainerError):
    def __init__(self, chain: list[str]) -> None:
        super().__init__(f"Circular dependency: {' -> '.join(chain)}")
        self.chain = chain
