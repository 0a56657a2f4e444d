"""Type handler registry addressable by schema kind name."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from importlib import metadata
from typing import TYPE_CHECKING, Any

import pluggy

from pydantic_forge.plugins import hookspecs

if TYPE_CHECKING:  # pragma: no cover
    from pydantic_forge.generation.dispatch import TypeHandlerContext
    from pydantic_forge.schema.nodes import SchemaNode

TypeHandler = Callable[["SchemaNode", "TypeHandlerContext"], Any]


@dataclass(slots=True)
class TypeHandlerRef:
    """Descriptor for a registered type handler."""

    kind: str
    name: str
    func: TypeHandler


class TypeHandlerRegistry:
    """Registry of handlers that replace built-in generation for one kind each."""

    def __init__(self) -> None:
        self._handlers: dict[str, TypeHandlerRef] = {}
        self._plugin_manager = pluggy.PluginManager("pforge")
        self._plugin_manager.add_hookspecs(hookspecs)

    # ------------------------------------------------------------------ registration
    def register(
        self,
        kind: str,
        handler: TypeHandler,
        *,
        name: str | None = None,
        override: bool = False,
    ) -> TypeHandlerRef:
        if not callable(handler):
            raise TypeError("Type handler must be callable.")
        if not override and kind in self._handlers:
            raise ValueError(f"Type handler already registered for {kind!r}.")
        ref = TypeHandlerRef(
            kind=kind,
            name=name or getattr(handler, "__name__", type(handler).__name__),
            func=handler,
        )
        self._handlers[kind] = ref
        return ref

    def unregister(self, kind: str) -> bool:
        return self._handlers.pop(kind, None) is not None

    # ------------------------------------------------------------------ lookup
    def get(self, kind: str) -> TypeHandlerRef | None:
        return self._handlers.get(kind)

    def available(self) -> Iterable[TypeHandlerRef]:
        return self._handlers.values()

    def kinds(self) -> list[str]:
        return list(self._handlers)

    def clear(self) -> None:
        self._handlers.clear()

    def __contains__(self, kind: object) -> bool:
        return kind in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    # ------------------------------------------------------------------ plugins
    def register_plugin(self, plugin: Any) -> None:
        """Register a plugin object and invoke its type handler hook."""

        self._plugin_manager.register(plugin)
        self._plugin_manager.hook.pforge_register_type_handlers(registry=self)

    def load_entrypoint_plugins(self, group: str = "pydantic_forge") -> None:
        """Load plugins defined via Python entry points and invoke hooks."""

        for entry in metadata.entry_points().select(group=group):
            plugin = entry.load()
            self.register_plugin(plugin)


_DEFAULT_REGISTRY = TypeHandlerRegistry()


def default_registry() -> TypeHandlerRegistry:
    """The process-level handler set consulted after per-factory handlers."""

    return _DEFAULT_REGISTRY


def register_type_handler(kind: str, handler: TypeHandler) -> TypeHandlerRef:
    return _DEFAULT_REGISTRY.register(kind, handler, override=True)


def unregister_type_handler(kind: str) -> bool:
    return _DEFAULT_REGISTRY.unregister(kind)


def registered_type_handlers() -> list[str]:
    return _DEFAULT_REGISTRY.kinds()


def clear_type_handlers() -> None:
    _DEFAULT_REGISTRY.clear()


def _complex_handler(node: SchemaNode, context: TypeHandlerContext) -> complex:
    rng = context.random
    return complex(round(rng.uniform(-1000, 1000), 3), round(rng.uniform(-1000, 1000), 3))


def _callable_handler(node: SchemaNode, context: TypeHandlerContext) -> Callable[..., Any]:
    word = context.faker.word()

    def produce(*args: Any, **kwargs: Any) -> str:
        return word

    return produce


def _subclass_handler(node: SchemaNode, context: TypeHandlerContext) -> Any:
    return node.cls


BUILTIN_TYPE_HANDLERS: dict[str, TypeHandler] = {
    "complex": _complex_handler,
    "callable": _callable_handler,
    "is-subclass": _subclass_handler,
}


def register_builtin_type_handlers(registry: TypeHandlerRegistry | None = None) -> None:
    """Opt in to handlers for kinds that have no generic representative value."""

    target = registry if registry is not None else _DEFAULT_REGISTRY
    for kind, handler in BUILTIN_TYPE_HANDLERS.items():
        target.register(kind, handler, override=True)


__all__ = [
    "BUILTIN_TYPE_HANDLERS",
    "TypeHandler",
    "TypeHandlerRef",
    "TypeHandlerRegistry",
    "clear_type_handlers",
    "default_registry",
    "register_builtin_type_handlers",
    "register_type_handler",
    "registered_type_handlers",
    "unregister_type_handler",
]
