from __future__ import annotations

import functools
import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from ._errors import (
    ContainerError,
    NotFoundError,
    Unresolvable,
    UnresolvableAliasError,
    UnresolvableDependencyError,
    UnresolvableTypeError,
)
from ._reflection import Constructor, type_name


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable

    Identifier = str | type
    Callback = Callable[["Container"], object]


ALIAS_RESOLVE_LIMIT = 50

# Values that are never accepted as registered instances.
_SCALAR_TYPES = (type(None), bool, int, float, complex, str, bytes, bytearray)

# Construction failures that mean "there is nothing by that name".
_MISSING = frozenset({Unresolvable.NONEXISTENT, Unresolvable.NOT_A_CLASS})


class Lifetime(Enum):
    SINGLETON = "singleton"
    FACTORY = "factory"


@dataclass
class Registration:
    callback: Callback
    lifetime: Lifetime


class Container:
    """Dependency injection container keyed by string identifiers.

    - pre-built instances, returned as-is
    - singleton callbacks, invoked once and cached
    - factory callbacks, invoked on every lookup
    - aliases, followed up to `alias_resolve_limit` hops
    - reflective construction of classes from ``__init__`` annotations.

    Anywhere an identifier is expected a class may be passed instead; it stands
    for its dotted ``module.QualName``.
    """

    def __init__(self, *, alias_resolve_limit: int = ALIAS_RESOLVE_LIMIT, case_insensitive: bool = True) -> None:
        if not isinstance(alias_resolve_limit, int) or isinstance(alias_resolve_limit, bool) or alias_resolve_limit < 0:
            msg = f"alias_resolve_limit must be a non-negative int, got {alias_resolve_limit!r}"
            raise ValueError(msg)

        self._alias_resolve_limit = alias_resolve_limit
        self._case_insensitive = case_insensitive

        self._objects: dict[str, object] = {}
        self._callbacks: dict[str, Registration] = {}
        self._aliases: dict[str, str] = {}
        self._arguments: dict[str, Any] = {}
        self._types: dict[str, type] = {}
        self._constructor = Constructor(self, self._types, self._arguments)

    @property
    def alias_resolve_limit(self) -> int:
        return self._alias_resolve_limit

    @property
    def case_insensitive(self) -> bool:
        return self._case_insensitive

    def _key(self, name: Identifier, *, remember: bool = True) -> str:
        """Normalize an identifier; classes are kept for reflective lookup when `remember` is set."""
        if inspect.isclass(name):
            key = type_name(name)
            if remember:
                self._types[key] = name
            return key

        if not isinstance(name, str):
            msg = f"Identifiers must be strings or classes, got {type(name).__name__}"
            raise ContainerError(msg)

        return name

    def set_argument(self, key: str, value: Any) -> None:
        """Set a fallback value for constructor parameters named `key`."""
        self._arguments[key] = value

    def register(self, name: Identifier, callback: Any, *, lifetime: Lifetime = Lifetime.SINGLETON) -> Callback:
        """Register a callback that builds the object for `name`.

        The callback may take the container as its single argument, take no
        arguments at all, or be a class (built reflectively). The normalized
        callback is returned.

        Example:
          container.register("db", lambda c: Database(c.get("settings")))
          container.register(Repo, SqlRepo)

        """
        key = self._key(name)
        normalized = self._make_callback(callback)
        self._callbacks[key] = Registration(callback=normalized, lifetime=lifetime)
        logger.debug("Registered %s callback for %r", lifetime.value, key)
        return normalized

    def factory(self, name: Identifier, callback: Any) -> Callback:
        """Register a callback that is invoked on every lookup."""
        return self.register(name, callback, lifetime=Lifetime.FACTORY)

    def instance(self, name: Identifier, obj: object) -> object:
        """Register a pre-built object."""
        if isinstance(obj, _SCALAR_TYPES):
            msg = f"Instance registered for {name!r} must be an object, got {type(obj).__name__}"
            raise ContainerError(msg)

        self._objects[self._key(name)] = obj
        return obj

    def alias(self, alias_name: Identifier, target_name: Identifier) -> None:
        self._aliases[self._key(alias_name)] = self._key(target_name)

    def unregister(self, name: Identifier) -> None:
        """Remove every object, callback, alias, argument and remembered class keyed by `name`."""
        key = self._key(name, remember=False)
        for table in (self._objects, self._callbacks, self._aliases, self._arguments, self._types):
            table.pop(key, None)
        logger.debug("Unregistered %r", key)

    def has(self, name: Identifier) -> bool:
        """Shallow check: is `name` present in any table. Aliases are not followed."""
        key = self._key(name, remember=False)
        return any(key in table for table in (self._callbacks, self._objects, self._aliases, self._arguments))

    def is_factory(self, name: Identifier) -> bool:
        reg = self._callbacks.get(self._key(name, remember=False))
        return reg is not None and reg.lifetime is Lifetime.FACTORY

    def resolve_alias(self, name: Identifier) -> str:
        """Follow aliases from `name` to the identifier they end at."""
        requested = current = self._key(name, remember=False)
        if current not in self._aliases:
            return current

        hops = 0
        while current in self._aliases:
            current = self._aliases[current]
            hops += 1
            if hops > self.alias_resolve_limit:
                raise UnresolvableAliasError(requested, current, self.alias_resolve_limit)

        return current

    def get(self, name: Identifier) -> object:
        """Get the object for `name`.

        Tried with `name` as given and, when that fails, once more ignoring case.
        Raises NotFoundError when nothing is registered under `name` and no class
        can be found for it.
        """
        key = self._key(name)

        try:
            return self._get(key)
        except ContainerError as exc:
            first = exc
            folded = self._fold_case(key)
            if not self._case_insensitive or folded == key:
                self._raise_not_found(key, first)
                raise

        try:
            return self._get(folded)
        except ContainerError as exc:
            second = exc

        if _is_missing(first):
            self._raise_not_found(key, second)
            raise second from first
        raise first

    def _get(self, name: str) -> object:
        name = self.resolve_alias(name)

        if name in self._objects:
            logger.debug("Returning cached instance for %r", name)
            return self._objects[name]

        # A NotFoundError raised in here comes from a nested get(), never from `name` itself.
        try:
            reg = self._callbacks.get(name)
            if reg is not None:
                logger.debug("Invoking %s callback for %r", reg.lifetime.value, name)
                obj = reg.callback(self)
                if reg.lifetime is Lifetime.FACTORY:
                    return obj
                self._objects[name] = obj
                return obj

            return self._constructor.construct(name)
        except NotFoundError as exc:
            raise UnresolvableDependencyError(name, exc.name) from exc

    def resolve(self, name: Identifier, /, **overrides: Any) -> object:
        """Build a class reflectively, bypassing registrations for the class itself.

        `overrides` supply constructor arguments by parameter name.
        """
        return self._constructor.construct(self._key(name), overrides)

    def _fold_case(self, key: str) -> str:
        """Lower-case `key`, preferring an existing registration that differs only by case."""
        lowered = key.lower()
        tables = (self._objects, self._callbacks, self._aliases)
        if any(lowered in table for table in tables):
            return lowered

        for table in tables:
            for candidate in table:
                if candidate.lower() == lowered:
                    return candidate

        return lowered

    def _raise_not_found(self, key: str, exc: ContainerError) -> None:
        if not _is_missing(exc):
            return
        if self.has(key) or (self._case_insensitive and self.has(self._fold_case(key))):
            return
        raise NotFoundError(key) from exc

    def _make_callback(self, callback: Any) -> Callback:
        if inspect.isclass(callback):
            cls_key = self._key(callback)

            def build(container: Container) -> object:
                return container.resolve(cls_key)

            return build

        if not callable(callback):
            msg = f"Callback must be callable, got {type(callback).__name__}"
            raise ContainerError(msg)

        if _accepts_container(callback):
            return callback

        @functools.wraps(callback)
        def call_without_container(container: Container) -> object:  # noqa: ARG001
            return callback()

        return call_without_container


def _is_missing(exc: ContainerError) -> bool:
    return isinstance(exc, UnresolvableTypeError) and exc.reason in _MISSING


def _accepts_container(callback: Callable[..., Any]) -> bool:
    try:
        params = inspect.signature(callback).parameters.values()
    except (TypeError, ValueError):
        return True

    return any(
        p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.VAR_POSITIONAL)
        for p in params
    )
