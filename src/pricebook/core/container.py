"""DI container: register by type or key, resolve with constructor injection."""
from __future__ import annotations

import inspect
import sys
import typing
from typing import Any, Callable, TypeVar

T = TypeVar("T")


def _constructor_hints(cls: type[Any]) -> dict[str, Any]:
    """Annotations of cls.__init__, resolved against the module that defines cls."""
    try:
        return typing.get_type_hints(cls.__init__)
    except (NameError, TypeError):
        mod = sys.modules.get(cls.__module__)
        namespace = vars(mod) if mod is not None else {}
        hints: dict[str, Any] = {}
        for name, param in inspect.signature(cls).parameters.items():
            ann = param.annotation
            if isinstance(ann, str):
                ann = namespace.get(ann, ann)
            hints[name] = ann
        return hints


def _instantiate_with_container(container: Container, cls: type[T]) -> T:
    """Create cls, resolving each annotated __init__ parameter from the container."""
    hints = _constructor_hints(cls)
    kwargs: dict[str, Any] = {}
    for name, param in inspect.signature(cls).parameters.items():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        ann = hints.get(name, param.annotation)
        if ann is inspect.Parameter.empty:
            continue
        if not container.has(ann) and param.default is not inspect.Parameter.empty:
            continue
        kwargs[name] = container.resolve(ann)
    return cls(**kwargs)


class Container:
    """
    Register by type (or string key) and resolve via factory.
    Implementations can be bound to an abstract base class or protocol.
    """

    def __init__(self) -> None:
        self._registry: dict[Any, Callable[[], Any]] = {}
        self._singletons: dict[Any, Any] = {}
        self._singleton_keys: set[Any] = set()

    def register(self, key: Any, factory: Callable[[], T], singleton: bool = True) -> None:
        """Register a factory for a type or string key."""
        self._registry[key] = factory
        self._singletons.pop(key, None)
        if singleton:
            self._singleton_keys.add(key)
        else:
            self._singleton_keys.discard(key)

    def register_instance(self, key: Any, instance: T) -> None:
        """Register a ready-made instance."""
        self._registry[key] = lambda: instance
        self._singletons[key] = instance
        self._singleton_keys.add(key)

    def register_class(self, cls: type[T], singleton: bool = True) -> None:
        """Register a class: on resolve it is built with dependencies from the container."""
        self.register(cls, lambda: _instantiate_with_container(self, cls), singleton=singleton)

    def has(self, key: Any) -> bool:
        return key in self._registry

    def resolve(self, key: Any) -> Any:
        """Resolve an instance by type or key. Raises KeyError when nothing is registered."""
        if key not in self._registry:
            raise KeyError(f"No registration for {key}")
        if key in self._singletons:
            return self._singletons[key]
        instance = self._registry[key]()
        if key in self._singleton_keys:
            self._singletons[key] = instance
        return instance
