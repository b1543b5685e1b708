from __future__ import annotations

import builtins
import importlib
import inspect
import logging
import typing
from typing import TYPE_CHECKING, Any, TypeVar, get_type_hints

from ._errors import CircularDependencyError, Unresolvable, UnresolvableParameterError, UnresolvableTypeError


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._container import Container


_TYPING_MODULES = frozenset({"typing", "typing_extensions"})


def type_name(cls: type) -> str:
    """Identifier under which a class is registered and resolved."""
    return f"{cls.__module__}.{cls.__qualname__}"


def locate_type(name: str, known: Mapping[str, Any]) -> Any | None:
    """Find the object a type identifier refers to.

    Lookup order:
    1. classes the container has already seen
    2. dotted import path (``package.module.Outer.Inner``)
    3. bare builtin name (``object``, ``dict``)

    Returns None when nothing matches.
    """
    if name in known:
        return known[name]

    parts = name.split(".")
    if not all(parts):
        return None

    if len(parts) == 1:
        return getattr(builtins, name, None)

    # Longest importable module prefix wins; the rest is an attribute path.
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            obj: Any = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            # Only a missing `module_name` (or parent package) means "try a shorter prefix";
            # a module that exists but fails its own imports is a real error.
            if not _is_same_or_parent_module(exc.name, module_name):
                raise
            continue

        for attr in parts[split:]:
            obj = getattr(obj, attr, None)
            if obj is None:
                return None
        return obj

    return None


def _is_same_or_parent_module(missing: str | None, module_name: str) -> bool:
    if not missing:
        return False
    return module_name == missing or module_name.startswith(f"{missing}.")


def unresolvable_reason(obj: Any) -> Unresolvable | None:
    """Return why `obj` cannot be instantiated, or None when it can."""
    if isinstance(obj, TypeVar) or typing.get_origin(obj) is not None:
        return Unresolvable.TYPING_CONSTRUCT
    if getattr(obj, "__module__", None) in _TYPING_MODULES:
        return Unresolvable.TYPING_CONSTRUCT
    if not inspect.isclass(obj):
        return Unresolvable.NOT_A_CLASS
    if _is_protocol(obj):
        return Unresolvable.INTERFACE
    if inspect.isabstract(obj):
        return Unresolvable.ABSTRACT
    return None


def is_dependency_type(annotation: Any) -> bool:
    """Whether a parameter annotation names something the container should build."""
    # Parameter.empty is itself a class.
    if annotation is inspect.Parameter.empty or not inspect.isclass(annotation):
        return False
    if getattr(annotation, "__module__", "") in ("builtins", *_TYPING_MODULES):
        return False
    return typing.get_origin(annotation) is None


class Constructor:
    """Builds classes by resolving their ``__init__`` parameters through a container.

    Parameter precedence:
    1. explicit override
    2. class annotation, resolved with ``container.get``
    3. argument fallback table, keyed by parameter name
    4. declared default
    5. error.
    """

    def __init__(self, container: Container, types: Mapping[str, Any], arguments: Mapping[str, Any]) -> None:
        self._container = container
        self._types = types
        self._arguments = arguments
        self._resolving: list[str] = []

    def construct(self, name: str, overrides: dict[str, Any] | None = None) -> object:
        obj = locate_type(name, self._types)
        if obj is None:
            raise UnresolvableTypeError(name, Unresolvable.NONEXISTENT)

        reason = unresolvable_reason(obj)
        if reason is not None:
            raise UnresolvableTypeError(name, reason)

        if name in self._resolving:
            chain = self._resolving[self._resolving.index(name) :]
            raise CircularDependencyError([*chain, name])

        self._resolving.append(name)
        try:
            return self._build(obj, overrides or {})
        finally:
            self._resolving.pop()

    def _build(self, cls: type, overrides: dict[str, Any]) -> object:
        try:
            params = inspect.signature(cls).parameters
        except (TypeError, ValueError):
            # Some builtins and extension types expose no signature.
            params = {}

        if not params:
            logger.debug("Constructing %s without arguments", cls.__qualname__)
            return cls()

        hints = _get_init_type_hints(cls)
        args: list[Any] = []
        kwargs: dict[str, Any] = {}

        for name, p in params.items():
            if p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD):
                continue

            value = self._resolve_parameter(cls, p, hints, overrides)
            if p.kind is p.KEYWORD_ONLY:
                kwargs[name] = value
            else:
                args.append(value)

        logger.debug("Constructing %s with %d argument(s)", cls.__qualname__, len(args) + len(kwargs))
        return cls(*args, **kwargs)

    def _resolve_parameter(
        self,
        cls: type,
        p: inspect.Parameter,
        hints: dict[str, Any],
        overrides: dict[str, Any],
    ) -> Any:
        if p.name in overrides:
            return overrides[p.name]

        ann = hints.get(p.name, p.annotation)
        if is_dependency_type(ann):
            return self._container.get(ann)

        if p.name in self._arguments:
            return self._arguments[p.name]

        if p.default is not p.empty:
            return p.default

        if ann is p.empty:
            ann_repr = "no-annotation"
        else:
            ann_repr = getattr(ann, "__name__", repr(ann))
        raise UnresolvableParameterError(p.name, type_name(cls), ann_repr)


if hasattr(typing, "is_protocol"):
    # https://docs.python.org/3/library/typing.html#typing.is_protocol
    def _is_protocol(tp: type) -> bool:
        return typing.is_protocol(tp)

else:

    def _is_protocol(tp: type) -> bool:
        """Detect whether 'tp' is a typing.Protocol class (not a subclass implementing one)."""
        return bool(getattr(tp, "_is_protocol", False))


def _get_init_type_hints(cls: type) -> dict[str, Any]:
    try:
        init = inspect.getattr_static(cls, "__init__")
        hints = get_type_hints(init)
    except (AttributeError, TypeError):
        hints = {}
    except NameError as exc:
        logger.warning("'%s' name error retrieving %s (%s) type hints", exc.name, cls.__name__, cls.__qualname__)
        hints = {}

    return hints
