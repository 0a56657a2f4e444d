"""Accessor adapter over pydantic v2 core schemas."""

from __future__ import annotations

import collections.abc
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import (
    EmailStr,
    IPvAnyAddress,
    IPvAnyInterface,
    IPvAnyNetwork,
    NameEmail,
    TypeAdapter,
)

from .nodes import MISSING, Check, Field, SchemaNode, length_checks

# Validation-only wrappers that do not change the shape of the accepted value.
_TRANSPARENT_KINDS = frozenset({"function-after", "function-before", "function-wrap", "custom-error"})
_LENGTH_KINDS = frozenset({"str", "bytes", "list", "set", "frozenset", "dict", "generator", "tuple"})
_BOUND_KINDS = frozenset({"int", "float", "decimal", "date", "datetime", "time", "timedelta"})
_ITEM_KINDS = frozenset({"list", "set", "frozenset", "generator"})
_WRAPPER_KINDS = frozenset({"nullable", "default", "optional"})
_AWAITABLE_CLASSES = (collections.abc.Awaitable, collections.abc.Coroutine)

_ANY_SCHEMA: dict[str, Any] = {"type": "any"}

_FORMAT_OWNERS: tuple[tuple[type[Any], str], ...] = (
    (EmailStr, "email"),
    (NameEmail, "name-email"),
    (IPvAnyAddress, "ipv4"),
    (IPvAnyInterface, "cidrv4"),
    (IPvAnyNetwork, "cidrv4"),
)

_TYPE_ADAPTER_CACHE: dict[Any, TypeAdapter[Any]] = {}


def type_adapter_for(annotation: Any) -> TypeAdapter[Any]:
    """Return a cached ``TypeAdapter`` for hashable annotations."""

    try:
        adapter = _TYPE_ADAPTER_CACHE.get(annotation)
    except TypeError:
        return TypeAdapter(annotation)
    if adapter is None:
        adapter = TypeAdapter(annotation)
        _TYPE_ADAPTER_CACHE[annotation] = adapter
    return adapter


def collect_definitions(schema: Any) -> dict[str, dict[str, Any]]:
    """Gather every referenceable sub-schema, keyed by its ``ref``."""

    definitions: dict[str, dict[str, Any]] = {}
    pending: list[Any] = [schema]
    while pending:
        current = pending.pop()
        if isinstance(current, Mapping):
            ref = current.get("ref")
            if isinstance(ref, str) and "type" in current:
                definitions.setdefault(ref, dict(current))
            pending.extend(current.values())
        elif isinstance(current, (list, tuple)):
            pending.extend(current)
    return definitions


def _validator_format(function: Any) -> str | None:
    if not isinstance(function, Mapping):
        return None
    owner = getattr(function.get("function"), "__self__", None)
    if not isinstance(owner, type):
        return None
    for cls, tag in _FORMAT_OWNERS:
        if issubclass(owner, cls):
            return tag
    return None


def unwrap(schema: Mapping[str, Any]) -> tuple[Mapping[str, Any], str | None]:
    """Strip validation-only wrappers, returning the shape schema and any format tag."""

    current = schema
    while True:
        kind = current.get("type")
        if kind in _TRANSPARENT_KINDS:
            tag = _validator_format(current.get("function"))
            if tag is not None:
                return {"type": "str"}, tag
            current = current["schema"]
        elif kind == "json-or-python":
            current = current["python_schema"]
        elif kind == "lax-or-strict":
            current = current["strict_schema"]
        elif kind == "definitions":
            current = current["schema"]
        elif kind == "model" and current.get("root_model"):
            current = current["schema"]
        elif kind == "function-plain":
            tag = _validator_format(current.get("function"))
            if tag is not None:
                return {"type": "str"}, tag
            if not isinstance(current.get("json_schema_input_schema"), Mapping):
                return current, None
            current = current["json_schema_input_schema"]
        else:
            return current, None


def _js_metadata(*sources: Mapping[str, Any] | None) -> dict[str, Any]:
    collected: dict[str, Any] = {}
    for source in sources:
        if not isinstance(source, Mapping):
            continue
        metadata = source.get("metadata")
        if not isinstance(metadata, Mapping):
            continue
        for key in ("pydantic_js_extra", "pydantic_js_updates"):
            value = metadata.get(key)
            if isinstance(value, Mapping):
                for name, item in value.items():
                    collected.setdefault(name, item)
    return collected


class CoreSchemaNode(SchemaNode):
    """View of one pydantic-core schema dict.

    Field metadata comes from the owning class's ``FieldInfo`` when it is
    available, otherwise from the JSON-schema hints pydantic stores in the
    core metadata.
    """

    representation = "core"

    def __init__(
        self,
        schema: Mapping[str, Any],
        *,
        definitions: Mapping[str, Mapping[str, Any]] | None = None,
        field_info: Any = None,
        field_schema: Mapping[str, Any] | None = None,
    ) -> None:
        self._definitions = definitions if definitions is not None else collect_definitions(schema)
        shape, detected = unwrap(schema)
        self._schema = shape
        self._field_info = field_info
        self._hints = _js_metadata(field_schema, schema, shape)
        self._format = self._field_format() or detected

    @classmethod
    def from_schema(cls, schema: Mapping[str, Any]) -> CoreSchemaNode:
        return cls(schema, definitions=collect_definitions(schema))

    # ------------------------------------------------------------------ identity
    @property
    def raw(self) -> Mapping[str, Any]:
        return self._schema

    @property
    def kind(self) -> str:
        kind = self._schema.get("type")
        if kind == "is-instance":
            target = self._schema.get("cls")
            if isinstance(target, type) and issubclass(target, _AWAITABLE_CLASSES):
                return "awaitable"
        return str(kind) if kind else "any"

    def _child(
        self,
        schema: Mapping[str, Any] | None,
        *,
        field_info: Any = None,
        field_schema: Mapping[str, Any] | None = None,
    ) -> CoreSchemaNode:
        return CoreSchemaNode(
            schema if schema is not None else _ANY_SCHEMA,
            definitions=self._definitions,
            field_info=field_info,
            field_schema=field_schema,
        )

    # ------------------------------------------------------------------ structure
    @property
    def inner(self) -> SchemaNode | None:
        kind = self._schema.get("type")
        if kind in _ITEM_KINDS:
            return self._child(self._schema.get("items_schema"))
        if kind in _WRAPPER_KINDS or kind == "json":
            return self._child(self._schema.get("schema"))
        return None

    @property
    def fields(self) -> tuple[Field, ...]:
        kind = self._schema.get("type")
        if kind == "model":
            body, _ = unwrap(self._schema["schema"])
            return self._field_entries(body.get("fields", {}).items(), required_default=True)
        if kind == "dataclass":
            body, _ = unwrap(self._schema["schema"])
            entries = [
                (item["name"], item)
                for item in body.get("fields", ())
                if item.get("init", True) is not False
            ]
            return self._field_entries(entries, required_default=True)
        if kind == "typed-dict":
            required = self._schema.get("total", True)
            return self._field_entries(self._schema.get("fields", {}).items(), required_default=required)
        return ()

    def _field_entries(
        self,
        entries: Any,
        *,
        required_default: bool,
    ) -> tuple[Field, ...]:
        owner_fields = getattr(self._schema.get("cls"), "__pydantic_fields__", None) or {}
        typed_dict = self._schema.get("type") == "typed-dict"
        result: list[Field] = []
        for name, spec in entries:
            alias = spec.get("validation_alias")
            key = alias if isinstance(alias, str) else name
            info = owner_fields.get(name)
            schema = spec["schema"]
            if typed_dict and not spec.get("required", required_default):
                schema = {"type": "optional", "schema": schema}
            result.append(
                Field(key=key, node=self._child(schema, field_info=info, field_schema=spec))
            )
        return tuple(result)

    @property
    def members(self) -> tuple[SchemaNode, ...]:
        kind = self._schema.get("type")
        if kind == "union":
            choices = self._schema.get("choices", ())
            return tuple(
                self._child(choice[0] if isinstance(choice, tuple) else choice) for choice in choices
            )
        if kind == "tagged-union":
            choices = self._schema.get("choices", {})
            return tuple(
                self._child(choice) for choice in choices.values() if isinstance(choice, Mapping)
            )
        if kind == "chain":
            return tuple(self._child(step) for step in self._schema.get("steps", ()))
        if kind == "tuple":
            return tuple(self._child(item) for item in self._schema.get("items_schema", ()))
        return ()

    @property
    def variadic_index(self) -> int | None:
        if self._schema.get("type") == "tuple":
            return self._schema.get("variadic_item_index")
        return None

    @property
    def keys(self) -> SchemaNode | None:
        if self._schema.get("type") == "dict":
            return self._child(self._schema.get("keys_schema"))
        return None

    @property
    def values(self) -> SchemaNode | None:
        if self._schema.get("type") == "dict":
            return self._child(self._schema.get("values_schema"))
        return None

    @property
    def choices(self) -> tuple[Any, ...]:
        kind = self._schema.get("type")
        if kind == "literal":
            return tuple(self._schema.get("expected", ()))
        if kind == "enum":
            unique: list[Any] = []
            for member in self._schema.get("members", ()):
                if not any(member is seen for seen in unique):
                    unique.append(member)
            return tuple(unique)
        return ()

    @property
    def cls(self) -> type[Any] | None:
        return self._schema.get("cls")

    @property
    def ref(self) -> str | None:
        if self._schema.get("type") == "definition-ref":
            return self._schema.get("schema_ref")
        return None

    def resolve(self) -> SchemaNode:
        ref = self.ref
        if ref is None:
            return super().resolve()
        return self._child(self._definitions[ref])

    # ------------------------------------------------------------------ checks
    @property
    def checks(self) -> tuple[Check, ...]:
        schema = self._schema
        kind = schema.get("type")
        checks: list[Check] = []
        if kind in _LENGTH_KINDS:
            checks.extend(length_checks(schema.get("min_length"), schema.get("max_length")))
        if kind in ("set", "frozenset"):
            checks.append(Check("unique", True))
        if kind in _BOUND_KINDS:
            for bound in ("ge", "gt", "le", "lt", "multiple_of"):
                if schema.get(bound) is not None:
                    checks.append(Check(bound, schema[bound]))
        if kind == "str" and schema.get("pattern"):
            checks.append(Check("pattern", schema["pattern"]))
        if kind == "decimal":
            for name in ("max_digits", "decimal_places"):
                if schema.get(name) is not None:
                    checks.append(Check(name, schema[name]))
        if kind == "float" and schema.get("allow_inf_nan") is not None:
            checks.append(Check("allow_inf_nan", schema["allow_inf_nan"]))
        if kind == "datetime" and schema.get("tz_constraint") is not None:
            checks.append(Check("timezone", schema["tz_constraint"]))
        if kind == "uuid" and schema.get("version") is not None:
            checks.append(Check("version", schema["version"]))
        if kind in ("url", "multi-host-url"):
            if schema.get("allowed_schemes"):
                checks.append(Check("allowed_schemes", tuple(schema["allowed_schemes"])))
            if schema.get("max_length") is not None:
                checks.append(Check("max_length", schema["max_length"]))
        if self._format:
            checks.append(Check("format", format=self._format))
        return tuple(checks)

    # ------------------------------------------------------------------ metadata
    def _field_format(self) -> str | None:
        extra = getattr(self._field_info, "json_schema_extra", None)
        if isinstance(extra, Mapping) and isinstance(extra.get("format"), str):
            return extra["format"]
        hinted = self._hints.get("format")
        return hinted if isinstance(hinted, str) else None

    @property
    def description(self) -> str | None:
        description = getattr(self._field_info, "description", None)
        if description:
            return description
        hinted = self._hints.get("description")
        return hinted if isinstance(hinted, str) else None

    @property
    def example(self) -> Any:
        extra = getattr(self._field_info, "json_schema_extra", None)
        if isinstance(extra, Mapping) and "example" in extra:
            return extra["example"]
        return self._hints.get("example", MISSING)

    @property
    def examples(self) -> Sequence[Any] | dict[str, Any] | None:
        examples = getattr(self._field_info, "examples", None)
        if examples:
            return examples
        hinted = self._hints.get("examples")
        return hinted or None


__all__ = ["CoreSchemaNode", "collect_definitions", "type_adapter_for", "unwrap"]
