"""Uniform read-only view over pydantic v2 core schemas and pydantic.v1 models."""

from .core import CoreSchemaNode, type_adapter_for
from .introspect import IntrospectedSchema, introspect, is_core_schema, is_legacy_model
from .nodes import ABSENT, MISSING, Check, Field, SchemaNode

__all__ = [
    "ABSENT",
    "MISSING",
    "Check",
    "CoreSchemaNode",
    "Field",
    "IntrospectedSchema",
    "SchemaNode",
    "introspect",
    "is_core_schema",
    "is_legacy_model",
    "type_adapter_for",
]
