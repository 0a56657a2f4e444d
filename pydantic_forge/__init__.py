"""Top-level package for pydantic-forge."""

from __future__ import annotations

from .core import (
    CircularReferenceError,
    ConfigError,
    ConfigurationError,
    Cycle,
    Deferred,
    Factory,
    FactoryView,
    ForgeConfig,
    ForgeError,
    PersistenceAdapter,
    Sample,
    UnsupportedKindError,
    ValidationError,
    load_config,
    merge,
    resolve_value,
    resolve_value_async,
)
from .core.version import get_tool_version
from .generation import SchemaValueGenerator, TypeHandlerContext, depth_fallback
from .providers.registry import (
    TypeHandlerRegistry,
    clear_type_handlers,
    default_registry,
    register_builtin_type_handlers,
    register_type_handler,
    registered_type_handlers,
    unregister_type_handler,
)
from .schema import Check, IntrospectedSchema, SchemaNode, introspect
from .schema_factory import SchemaFactory

__all__ = [
    "Check",
    "CircularReferenceError",
    "ConfigError",
    "ConfigurationError",
    "Cycle",
    "Deferred",
    "Factory",
    "FactoryView",
    "ForgeConfig",
    "ForgeError",
    "IntrospectedSchema",
    "PersistenceAdapter",
    "Sample",
    "SchemaFactory",
    "SchemaNode",
    "SchemaValueGenerator",
    "TypeHandlerContext",
    "TypeHandlerRegistry",
    "UnsupportedKindError",
    "ValidationError",
    "__version__",
    "clear_type_handlers",
    "default_registry",
    "depth_fallback",
    "get_tool_version",
    "introspect",
    "load_config",
    "merge",
    "register_builtin_type_handlers",
    "register_type_handler",
    "registered_type_handlers",
    "resolve_value",
    "resolve_value_async",
    "unregister_type_handler",
]

__version__ = get_tool_version()
