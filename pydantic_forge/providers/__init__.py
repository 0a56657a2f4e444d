"""Value producers and the type handler registry."""

from .instances import generate_instance
from .numbers import NumberBounds, generate_number
from .registry import (
    TypeHandler,
    TypeHandlerRef,
    TypeHandlerRegistry,
    clear_type_handlers,
    default_registry,
    register_builtin_type_handlers,
    register_type_handler,
    registered_type_handlers,
    unregister_type_handler,
)
from .strings import FORMAT_GENERATORS, format_value, generate_string

__all__ = [
    "FORMAT_GENERATORS",
    "NumberBounds",
    "TypeHandler",
    "TypeHandlerRef",
    "TypeHandlerRegistry",
    "clear_type_handlers",
    "default_registry",
    "format_value",
    "generate_instance",
    "generate_number",
    "generate_string",
    "register_builtin_type_handlers",
    "register_type_handler",
    "registered_type_handlers",
    "unregister_type_handler",
]
