"""Neutral values substituted once generation reaches the depth limit."""

from __future__ import annotations

import decimal
from typing import Any

from faker import Faker

from pydantic_forge.core.constants import STRING_PLACEHOLDER
from pydantic_forge.providers.strings import format_value
from pydantic_forge.schema.nodes import ABSENT, MISSING, SchemaNode

_EMPTY_LIST_KINDS = frozenset({"list", "generator"})
_EMPTY_DICT_KINDS = frozenset({"dict", "model", "dataclass", "typed-dict", "definition-ref"})

# Composite and lazily resolved kinds stop at the bound, as do the wrappers
# that can legitimately produce nothing.
DEPTH_LIMITED_KINDS = frozenset(
    {
        "list",
        "set",
        "frozenset",
        "generator",
        "tuple",
        "dict",
        "model",
        "dataclass",
        "typed-dict",
        "json",
        "definition-ref",
        "optional",
        "nullable",
        "default",
    }
)


def depth_fallback(node: SchemaNode, faker: Faker) -> Any:
    kind = node.kind
    if kind in ("optional", "default"):
        return ABSENT
    if kind == "nullable":
        return None
    if kind in _EMPTY_LIST_KINDS:
        return []
    if kind == "set":
        return set()
    if kind == "frozenset":
        return frozenset()
    if kind == "tuple":
        return ()
    if kind in _EMPTY_DICT_KINDS:
        return {}
    if kind == "json":
        return "{}"
    if kind in ("int", "float"):
        return 0
    if kind == "decimal":
        return decimal.Decimal(0)
    formatted = format_value(node.format, faker)
    if formatted is not MISSING:
        return formatted
    return STRING_PLACEHOLDER


__all__ = ["DEPTH_LIMITED_KINDS", "depth_fallback"]
