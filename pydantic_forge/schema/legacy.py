"""Accessor adapter over ``pydantic.v1`` model fields."""

from __future__ import annotations

import collections.abc
import datetime as dt
import decimal
import enum
import re
import sys
import typing
import uuid
from collections.abc import Callable, Sequence
from typing import Any, ForwardRef, Literal, get_args, get_origin

from pydantic.v1 import BaseModel, EmailStr, NameEmail, SecretBytes, SecretStr
from pydantic.v1 import fields as v1_fields
from pydantic.v1.networks import AnyUrl
from pydantic.v1.typing import evaluate_forwardref, is_union

from .nodes import MISSING, Check, Field, SchemaNode, length_checks

_LIST_SHAPES = frozenset(
    {
        v1_fields.SHAPE_LIST,
        v1_fields.SHAPE_SEQUENCE,
        v1_fields.SHAPE_DEQUE,
        v1_fields.SHAPE_ITERABLE,
    }
)
_MAPPING_SHAPES = frozenset(
    {
        v1_fields.SHAPE_MAPPING,
        v1_fields.SHAPE_DICT,
        v1_fields.SHAPE_DEFAULTDICT,
        v1_fields.SHAPE_COUNTER,
    }
)
_NUMBER_BOUNDS = ("gt", "ge", "lt", "le", "multiple_of")

# Checked in order; subclasses before their bases.
_SCALAR_KINDS: tuple[tuple[type[Any], str], ...] = (
    (bool, "bool"),
    (SecretStr, "str"),
    (SecretBytes, "bytes"),
    (str, "str"),
    (int, "int"),
    (float, "float"),
    (decimal.Decimal, "decimal"),
    (bytes, "bytes"),
    (dt.datetime, "datetime"),
    (dt.date, "date"),
    (dt.time, "time"),
    (dt.timedelta, "timedelta"),
    (uuid.UUID, "uuid"),
)
_BARE_CONTAINERS: tuple[tuple[type[Any], str], ...] = (
    (list, "list"),
    (set, "set"),
    (frozenset, "frozenset"),
    (dict, "dict"),
)


class LegacyNode(SchemaNode):
    """Node synthesized from a ``pydantic.v1`` ``ModelField`` or type."""

    representation = "legacy"

    def __init__(
        self,
        kind: str,
        *,
        raw: Any = None,
        checks: Sequence[Check] = (),
        inner: SchemaNode | None = None,
        fields: Callable[[], tuple[Field, ...]] | None = None,
        members: Sequence[SchemaNode] = (),
        variadic_index: int | None = None,
        keys: SchemaNode | None = None,
        values: SchemaNode | None = None,
        choices: Sequence[Any] = (),
        cls: type[Any] | None = None,
        ref: str | None = None,
        resolver: Callable[[], SchemaNode] | None = None,
    ) -> None:
        self._kind = kind
        self._raw = raw
        self._checks = tuple(checks)
        self._inner = inner
        self._fields_factory = fields
        self._fields: tuple[Field, ...] | None = None
        self._members = tuple(members)
        self._variadic_index = variadic_index
        self._keys = keys
        self._values = values
        self._choices = tuple(choices)
        self._cls = cls
        self._ref = ref
        self._resolver = resolver
        self._description: str | None = None
        self._example: Any = MISSING
        self._examples: Any = None

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def raw(self) -> Any:
        return self._raw

    @property
    def checks(self) -> tuple[Check, ...]:
        return self._checks

    @property
    def inner(self) -> SchemaNode | None:
        return self._inner

    @property
    def fields(self) -> tuple[Field, ...]:
        if self._fields is None:
            self._fields = self._fields_factory() if self._fields_factory else ()
        return self._fields

    @property
    def members(self) -> tuple[SchemaNode, ...]:
        return self._members

    @property
    def variadic_index(self) -> int | None:
        return self._variadic_index

    @property
    def keys(self) -> SchemaNode | None:
        return self._keys

    @property
    def values(self) -> SchemaNode | None:
        return self._values

    @property
    def choices(self) -> tuple[Any, ...]:
        return self._choices

    @property
    def cls(self) -> type[Any] | None:
        return self._cls

    @property
    def ref(self) -> str | None:
        return self._ref

    def resolve(self) -> SchemaNode:
        if self._resolver is None:
            return super().resolve()
        return self._resolver()

    @property
    def description(self) -> str | None:
        return self._description

    @property
    def example(self) -> Any:
        return self._example

    @property
    def examples(self) -> Any:
        return self._examples

    def annotate(self, field_info: Any) -> LegacyNode:
        self._description = getattr(field_info, "description", None)
        extra = getattr(field_info, "extra", None) or {}
        if "example" in extra:
            self._example = extra["example"]
        if extra.get("examples"):
            self._examples = extra["examples"]
        return self


def model_node(model: type[Any]) -> LegacyNode:
    def build_fields() -> tuple[Field, ...]:
        return tuple(
            Field(key=model_field.alias, node=field_node(model_field, model))
            for model_field in model.__fields__.values()
        )

    return LegacyNode("model", raw=model, cls=model, fields=build_fields)


def field_node(model_field: Any, owner: type[Any]) -> LegacyNode:
    node = _shape_node(model_field, owner)
    if model_field.allow_none and node.kind not in ("none", "any"):
        node = LegacyNode("nullable", raw=model_field, inner=node)
    if model_field.required is False:
        node = LegacyNode("default", raw=model_field, inner=node)
    return node.annotate(model_field.field_info)


def _any(raw: Any = None) -> LegacyNode:
    return LegacyNode("any", raw=raw)


def _sub_node(model_field: Any, owner: type[Any], index: int = 0) -> SchemaNode:
    sub_fields = model_field.sub_fields or ()
    if len(sub_fields) > index:
        return field_node(sub_fields[index], owner)
    return _any()


def _shape_node(model_field: Any, owner: type[Any]) -> LegacyNode:
    shape = model_field.shape
    if shape in _LIST_SHAPES or shape in (v1_fields.SHAPE_SET, v1_fields.SHAPE_FROZENSET):
        kind = "list"
        if shape == v1_fields.SHAPE_SET:
            kind = "set"
        elif shape == v1_fields.SHAPE_FROZENSET:
            kind = "frozenset"
        return LegacyNode(
            kind,
            raw=model_field,
            inner=_sub_node(model_field, owner),
            checks=_collection_checks(model_field, unique=kind != "list"),
        )
    if shape in _MAPPING_SHAPES:
        keys = field_node(model_field.key_field, owner) if model_field.key_field else _any()
        if shape == v1_fields.SHAPE_COUNTER:
            values: SchemaNode = LegacyNode("int", checks=[Check("ge", 0)])
        else:
            values = _sub_node(model_field, owner)
        return LegacyNode(
            "dict",
            raw=model_field,
            keys=keys,
            values=values,
            checks=_collection_checks(model_field, unique=False),
        )
    if shape == v1_fields.SHAPE_TUPLE:
        members = [field_node(sub, owner) for sub in model_field.sub_fields or ()]
        return LegacyNode("tuple", raw=model_field, members=members)
    if shape == v1_fields.SHAPE_TUPLE_ELLIPSIS:
        return LegacyNode(
            "tuple",
            raw=model_field,
            members=[_sub_node(model_field, owner)],
            variadic_index=0,
        )
    if shape != v1_fields.SHAPE_SINGLETON:
        return _any(model_field)
    if model_field.sub_fields and is_union(get_origin(model_field.type_)):
        members = [field_node(sub, owner) for sub in model_field.sub_fields]
        return LegacyNode("union", raw=model_field, members=members)
    return type_node(model_field.type_, owner, model_field.field_info)


def _collection_checks(model_field: Any, *, unique: bool) -> list[Check]:
    info = model_field.field_info
    outer = model_field.outer_type_
    min_items = _first(info.min_items, getattr(outer, "min_items", None))
    max_items = _first(info.max_items, getattr(outer, "max_items", None))
    checks = length_checks(min_items, max_items)
    if unique or info.unique_items or getattr(outer, "unique_items", None):
        checks.append(Check("unique", True))
    return checks


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _pattern(value: Any) -> str | None:
    if isinstance(value, re.Pattern):
        return value.pattern
    return value if isinstance(value, str) else None


def _scalar_checks(kind: str, tp: type[Any], field_info: Any) -> list[Check]:
    checks: list[Check] = []
    if kind in ("str", "bytes"):
        checks.extend(
            length_checks(
                _first(getattr(field_info, "min_length", None), getattr(tp, "min_length", None)),
                _first(getattr(field_info, "max_length", None), getattr(tp, "max_length", None)),
            )
        )
    if kind == "str":
        pattern = _pattern(_first(getattr(field_info, "regex", None), getattr(tp, "regex", None)))
        if pattern:
            checks.append(Check("pattern", pattern))
    if kind in ("int", "float", "decimal"):
        for bound in _NUMBER_BOUNDS:
            value = _first(getattr(field_info, bound, None), getattr(tp, bound, None))
            if value is not None:
                checks.append(Check(bound, value))
    if kind == "decimal":
        for name in ("max_digits", "decimal_places"):
            value = _first(getattr(field_info, name, None), getattr(tp, name, None))
            if value is not None:
                checks.append(Check(name, value))
    if kind == "uuid":
        version = getattr(tp, "_required_version", None)
        if version is not None:
            checks.append(Check("version", version))
    return checks


def _model_ref(model: type[Any]) -> str:
    return f"{model.__module__}.{model.__qualname__}"


def _lazy_model(model: type[Any]) -> LegacyNode:
    return LegacyNode(
        "definition-ref",
        raw=model,
        cls=model,
        ref=_model_ref(model),
        resolver=lambda: model_node(model),
    )


def _lazy_forward_ref(ref: ForwardRef, owner: type[Any], field_info: Any) -> LegacyNode:
    def resolve() -> SchemaNode:
        module = sys.modules.get(owner.__module__)
        namespace = dict(vars(module)) if module is not None else {}
        namespace.setdefault(owner.__name__, owner)
        target = evaluate_forwardref(ref, namespace, None)
        return type_node(target, owner, field_info)

    return LegacyNode(
        "definition-ref",
        raw=ref,
        ref=f"{owner.__module__}.{ref.__forward_arg__}",
        resolver=resolve,
    )


def type_node(tp: Any, owner: type[Any], field_info: Any = None) -> LegacyNode:
    """Map a bare annotation, as stored on a ``ModelField``, to a node."""

    if isinstance(tp, str):
        tp = ForwardRef(tp)
    if isinstance(tp, ForwardRef):
        return _lazy_forward_ref(tp, owner, field_info)
    if tp is typing.Any or tp is object:
        return _any(tp)
    if tp is None or tp is type(None):
        return LegacyNode("none", raw=tp)
    if tp is typing.NoReturn or tp is getattr(typing, "Never", None):
        return LegacyNode("never", raw=tp)

    origin = get_origin(tp)
    if origin is Literal:
        return LegacyNode("literal", raw=tp, choices=get_args(tp))
    if origin is collections.abc.Callable or tp is collections.abc.Callable:
        return LegacyNode("callable", raw=tp)
    if origin in (collections.abc.Awaitable, collections.abc.Coroutine):
        return LegacyNode("awaitable", raw=tp)
    if not isinstance(tp, type):
        return _any(tp)

    if issubclass(tp, BaseModel):
        return _lazy_model(tp)
    if issubclass(tp, enum.Enum):
        return LegacyNode("enum", raw=tp, cls=tp, choices=list(tp))
    if issubclass(tp, (collections.abc.Awaitable, collections.abc.Coroutine)):
        return LegacyNode("awaitable", raw=tp, cls=tp)
    if issubclass(tp, EmailStr):
        return LegacyNode("str", raw=tp, checks=[Check("format", format="email")])
    if issubclass(tp, NameEmail):
        return LegacyNode("str", raw=tp, checks=[Check("format", format="name-email")])
    if issubclass(tp, AnyUrl):
        checks: list[Check] = []
        if tp.allowed_schemes:
            checks.append(Check("allowed_schemes", tuple(sorted(tp.allowed_schemes))))
        if tp.max_length is not None:
            checks.append(Check("max_length", tp.max_length))
        return LegacyNode("url", raw=tp, checks=checks)
    for base, kind in _SCALAR_KINDS:
        if issubclass(tp, base):
            return LegacyNode(kind, raw=tp, checks=_scalar_checks(kind, tp, field_info))
    for base, kind in _BARE_CONTAINERS:
        if issubclass(tp, base):
            if kind == "dict":
                return LegacyNode(kind, raw=tp, keys=_any(), values=_any())
            return LegacyNode(kind, raw=tp, inner=_any())
    if issubclass(tp, tuple):
        return LegacyNode("tuple", raw=tp, members=[_any()], variadic_index=0)
    return LegacyNode("is-instance", raw=tp, cls=tp)


def validator_for(model: type[Any]) -> Callable[[Any], Any]:
    return model.parse_obj


__all__ = [
    "LegacyNode",
    "field_node",
    "model_node",
    "type_node",
    "validator_for",
]
