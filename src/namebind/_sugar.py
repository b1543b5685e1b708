from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ._container import Container
from ._errors import ContainerError


if TYPE_CHECKING:
    from collections.abc import Iterator


class DI(Container):
    """Container with attribute, item and call syntax.

    - ``di("db")``, ``di.db`` and ``di["db"]`` resolve like `get`
    - ``di.db = callback`` and ``di["db"] = callback`` register singletons
    - ``"db" in di`` tells whether an instance is cached
    - ``del di.db`` and ``del di["db"]`` drop the cached instance
    - iterating yields the cached instances.

    Names starting with an underscore keep plain attribute semantics.
    """

    def __call__(self, name: Any) -> object:
        return self.get(name)

    def __getattr__(self, name: str) -> object:
        # Only reached when normal attribute lookup fails.
        if name.startswith("_"):
            raise AttributeError(name)
        return self.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or hasattr(type(self), name):
            super().__setattr__(name, value)
            return
        self.register(name, value)

    def __delattr__(self, name: str) -> None:
        if name.startswith("_") or hasattr(type(self), name):
            super().__delattr__(name)
            return
        self._objects.pop(name, None)

    def __getitem__(self, name: Any) -> object:
        return self.get(name)

    def __setitem__(self, name: Any, callback: Any) -> None:
        if not callable(callback):
            msg = f"Cannot assign non-callable {type(callback).__name__} to {name!r}; use instance() for objects"
            raise ContainerError(msg)
        self.register(name, callback)

    def __delitem__(self, name: Any) -> None:
        self._objects.pop(self._key(name, remember=False), None)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, (str, type)):
            return False
        return self._key(name, remember=False) in self._objects

    def __iter__(self) -> Iterator[object]:
        return iter(list(self._objects.values()))
