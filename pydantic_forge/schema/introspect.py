"""Select the schema adapter by structural probing."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from .core import CoreSchemaNode, type_adapter_for
from .nodes import SchemaNode


@dataclass(frozen=True, slots=True)
class IntrospectedSchema:
    """A schema together with its root node and its own validating parse step."""

    schema: Any
    node: SchemaNode
    representation: str
    validator: Callable[[Any], Any]

    def validate(self, value: Any) -> Any:
        return self.validator(value)


def is_core_schema(candidate: Any) -> bool:
    return isinstance(candidate, Mapping) and isinstance(candidate.get("type"), str)


def has_core_schema(candidate: Any) -> bool:
    return isinstance(candidate, type) and hasattr(candidate, "__pydantic_core_schema__")


def _core_validator(schema: Mapping[str, Any]) -> Callable[[Any], Any]:
    from pydantic_core import SchemaValidator

    return SchemaValidator(dict(schema)).validate_python


def introspect(schema: Any) -> IntrospectedSchema:
    """Wrap ``schema`` behind the accessor interface.

    pydantic v2 types and raw core schemas are probed first; classes that
    carry a ``__fields__`` dict and ``__config__`` are read through the
    ``pydantic.v1`` adapter; any other annotation goes through a
    ``TypeAdapter``.
    """

    if isinstance(schema, IntrospectedSchema):
        return schema
    if isinstance(schema, SchemaNode):
        return IntrospectedSchema(schema, schema, schema.representation, lambda value: value)

    if is_core_schema(schema):
        node = CoreSchemaNode.from_schema(schema)
        return IntrospectedSchema(schema, node, "core", _core_validator(schema))

    if has_core_schema(schema) or not is_legacy_model(schema):
        adapter = type_adapter_for(schema)
        node = CoreSchemaNode.from_schema(adapter.core_schema)
        if isinstance(schema, type) and issubclass(schema, BaseModel):
            validator: Callable[[Any], Any] = schema.model_validate
        else:
            validator = adapter.validate_python
        return IntrospectedSchema(schema, node, "core", validator)

    from . import legacy

    return IntrospectedSchema(
        schema,
        legacy.model_node(schema),
        "legacy",
        legacy.validator_for(schema),
    )


def is_legacy_model(schema: Any) -> bool:
    """Structural probe: a class carrying a ``__fields__`` dict and ``__config__``."""

    # __config__ first: v2 models expose __fields__ only as a deprecated property.
    return (
        isinstance(schema, type)
        and hasattr(schema, "__config__")
        and isinstance(getattr(schema, "__fields__", None), dict)
    )


__all__ = [
    "IntrospectedSchema",
    "has_core_schema",
    "introspect",
    "is_core_schema",
    "is_legacy_model",
]
