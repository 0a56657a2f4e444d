"""Recursive generation of candidate values from schema nodes."""

from __future__ import annotations

import json
import random
from collections.abc import Callable, Mapping
from typing import Any

from faker import Faker

from pydantic_forge.core.constants import (
    ARRAY_DEFAULT_MAX,
    ARRAY_DEFAULT_MIN,
    ARRAY_MIN_ONLY_EXTRA,
    DEFAULT_MAX_DEPTH,
    NULLABLE_PRESENT_PROBABILITY,
    OPTIONAL_PRESENT_PROBABILITY,
    RECORD_DEFAULT_MAX,
    RECORD_DEFAULT_MIN,
    SET_DEFAULT_MAX,
    SET_DEFAULT_MIN,
    TUPLE_REST_MAX,
    TUPLE_REST_MIN,
    UNIQUE_DRAW_ATTEMPTS,
)
from pydantic_forge.core.errors import CircularReferenceError, UnsupportedKindError
from pydantic_forge.logging import get_logger
from pydantic_forge.providers import numbers, strings, temporal
from pydantic_forge.providers.instances import generate_instance
from pydantic_forge.providers.registry import TypeHandler, TypeHandlerRegistry, default_registry
from pydantic_forge.schema.nodes import ABSENT, MISSING, SchemaNode

from .fallback import DEPTH_LIMITED_KINDS, depth_fallback

MetadataGenerator = Callable[[], Any]

# Kinds with no generic representative value; a registered handler is the
# only way to generate them.
REQUIRES_HANDLER_KINDS = frozenset(
    {"callable", "awaitable", "function-plain", "is-subclass", "complex"}
)
UNINHABITED_KINDS = frozenset({"never", "invalid"})


class TypeHandlerContext:
    """What a type handler sees besides the node itself."""

    def __init__(self, generator: SchemaValueGenerator, node: SchemaNode, depth: int) -> None:
        self._generator = generator
        self.node = node
        self.depth = depth

    @property
    def faker(self) -> Faker:
        return self._generator.faker

    @property
    def random(self) -> random.Random:
        return self._generator.faker.random

    @property
    def max_depth(self) -> int:
        return self._generator.max_depth

    def generate(self, node: SchemaNode | None = None) -> Any:
        """Generate ``node`` (default: the inner node) one level deeper."""

        target = node if node is not None else self.node.inner
        if target is None:
            raise ValueError(f"{self.node.kind!r} node has no inner node to generate.")
        return self._generator.generate(target, self.depth + 1)

    def __repr__(self) -> str:
        return f"TypeHandlerContext(kind={self.node.kind!r}, depth={self.depth})"


class SchemaValueGenerator:
    """Turn a schema node into a candidate value.

    Resolution order per node: the depth-limit fallback for composite,
    lazy and wrapper nodes at or beyond ``max_depth``; a metadata override
    (description tag, example, examples); a type handler registered on this
    generator or in ``registry``; the built-in generator for the kind.
    """

    def __init__(
        self,
        *,
        faker: Faker | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        handlers: Mapping[str, TypeHandler] | None = None,
        registry: TypeHandlerRegistry | None = None,
        metadata_generators: Mapping[str, MetadataGenerator] | None = None,
    ) -> None:
        self.faker = faker or Faker()
        self.max_depth = max_depth
        self.handlers: dict[str, TypeHandler] = dict(handlers or {})
        self.registry = registry if registry is not None else default_registry()
        self.metadata_generators: dict[str, MetadataGenerator] = dict(metadata_generators or {})
        self._resolving: set[tuple[str, int]] = set()
        self._logger = get_logger()
        self._builtins: dict[str, Callable[[SchemaNode, int], Any]] = {
            "str": self._string,
            "int": self._number,
            "float": self._number,
            "decimal": self._number,
            "bool": self._bool,
            "bytes": self._bytes,
            "date": self._temporal(temporal.generate_date),
            "datetime": self._temporal(temporal.generate_datetime),
            "time": self._temporal(temporal.generate_time),
            "timedelta": self._temporal(temporal.generate_timedelta),
            "uuid": self._uuid,
            "url": self._url,
            "multi-host-url": self._url,
            "none": self._none,
            "any": self._any,
            "literal": self._choice,
            "enum": self._choice,
            "list": self._list,
            "generator": self._list,
            "set": self._set,
            "frozenset": self._set,
            "tuple": self._tuple,
            "dict": self._dict,
            "model": self._object,
            "dataclass": self._object,
            "typed-dict": self._object,
            "union": self._union,
            "tagged-union": self._union,
            "chain": self._chain,
            "optional": self._optional,
            "nullable": self._nullable,
            "default": self._default,
            "definition-ref": self._lazy,
            "json": self._json,
            "is-instance": self._instance,
        }

    @property
    def random(self) -> random.Random:
        return self.faker.random

    # ------------------------------------------------------------------ entry point
    def generate(self, node: SchemaNode, depth: int = 0) -> Any:
        value = self._generate(node, depth)
        return None if value is ABSENT else value

    def _generate(self, node: SchemaNode, depth: int) -> Any:
        kind = node.kind
        if depth >= self.max_depth and kind in DEPTH_LIMITED_KINDS:
            self._logger.debug(
                "Depth limit reached, using fallback value.",
                event="depth_fallback",
                kind=kind,
                depth=depth,
            )
            return depth_fallback(node, self.faker)

        override = self._metadata_value(node)
        if override is not MISSING:
            return override

        handler = self._handler_for(kind)
        if handler is not None:
            self._logger.debug("Dispatching to type handler.", event="type_handler", kind=kind)
            return handler(node, TypeHandlerContext(self, node, depth))

        builtin = self._builtins.get(kind)
        if builtin is not None:
            return builtin(node, depth)
        if kind in UNINHABITED_KINDS:
            raise UnsupportedKindError(
                f"Schema kind {kind!r} has no valid values.",
                details={"kind": kind},
            )
        if kind in REQUIRES_HANDLER_KINDS:
            raise self._requires_handler(node)

        self._logger.debug("Unknown schema kind, using a word.", event="unknown_kind", kind=kind)
        return self.faker.word()

    # ------------------------------------------------------------------ overrides
    def _metadata_value(self, node: SchemaNode) -> Any:
        description = node.description
        if description and description in self.metadata_generators:
            self._logger.debug(
                "Using metadata generator.",
                event="metadata_override",
                source="description",
                tag=description,
            )
            return self.metadata_generators[description]()

        example = node.example
        if example is not MISSING:
            self._logger.debug("Using declared example.", event="metadata_override", source="example")
            return example

        examples = node.examples
        if examples:
            self._logger.debug(
                "Using one of the declared examples.", event="metadata_override", source="examples"
            )
            if isinstance(examples, Mapping):
                entry = self.random.choice(list(examples.values()))
                if isinstance(entry, Mapping) and "value" in entry:
                    return entry["value"]
                return entry
            return self.random.choice(list(examples))
        return MISSING

    def _handler_for(self, kind: str) -> TypeHandler | None:
        handler = self.handlers.get(kind)
        if handler is not None:
            return handler
        ref = self.registry.get(kind)
        return ref.func if ref is not None else None

    def _requires_handler(self, node: SchemaNode) -> UnsupportedKindError:
        kind = node.kind
        target = getattr(node.cls, "__name__", None)
        subject = f"{kind!r} ({target})" if target else repr(kind)
        return UnsupportedKindError(
            f"Cannot generate values for schema kind {subject}. "
            f"Register a type handler for {kind!r} to support it.",
            details={"kind": kind, "cls": target},
        )

    # ------------------------------------------------------------------ scalars
    def _string(self, node: SchemaNode, depth: int) -> Any:
        return strings.generate_string(node, self.faker)

    def _number(self, node: SchemaNode, depth: int) -> Any:
        return numbers.generate_number(node, self.random)

    def _bool(self, node: SchemaNode, depth: int) -> bool:
        return self.random.random() < 0.5

    def _bytes(self, node: SchemaNode, depth: int) -> bytes:
        return strings.generate_bytes(node, self.faker)

    def _temporal(
        self, producer: Callable[[SchemaNode, Faker], Any]
    ) -> Callable[[SchemaNode, int], Any]:
        def generate(node: SchemaNode, depth: int) -> Any:
            return producer(node, self.faker)

        return generate

    def _uuid(self, node: SchemaNode, depth: int) -> Any:
        return strings.generate_uuid(node, self.faker)

    def _url(self, node: SchemaNode, depth: int) -> str:
        return strings.generate_url(node, self.faker)

    def _none(self, node: SchemaNode, depth: int) -> None:
        return None

    def _any(self, node: SchemaNode, depth: int) -> str:
        return self.faker.word()

    def _choice(self, node: SchemaNode, depth: int) -> Any:
        choices = node.choices
        if not choices:
            return None
        return self.random.choice(list(choices))

    def _instance(self, node: SchemaNode, depth: int) -> Any:
        value = generate_instance(node.cls, self.faker)
        if value is MISSING:
            raise self._requires_handler(node)
        return value

    # ------------------------------------------------------------------ containers
    def _size(self, node: SchemaNode, default_min: int, default_max: int) -> int:
        exact = node.check("length")
        if exact is not None:
            return int(exact)
        minimum = node.check("min_length")
        maximum = node.check("max_length")
        if minimum is not None and maximum is not None:
            return self.random.randint(int(minimum), max(int(minimum), int(maximum)))
        if minimum is not None:
            return int(minimum) + self.random.randint(0, ARRAY_MIN_ONLY_EXTRA)
        if maximum is not None:
            return self.random.randint(min(default_min, int(maximum)), int(maximum))
        return self.random.randint(default_min, default_max)

    def _child(self, node: SchemaNode | None, depth: int) -> Any:
        if node is None:
            return self.faker.word()
        value = self._generate(node, depth)
        return None if value is ABSENT else value

    def _draw_unique(self, node: SchemaNode | None, size: int, depth: int) -> list[Any]:
        items: list[Any] = []
        for _ in range(size):
            for _attempt in range(UNIQUE_DRAW_ATTEMPTS):
                candidate = self._child(node, depth)
                if candidate not in items:
                    items.append(candidate)
                    break
        return items

    def _list(self, node: SchemaNode, depth: int) -> list[Any]:
        size = self._size(node, ARRAY_DEFAULT_MIN, ARRAY_DEFAULT_MAX)
        if node.check("unique"):
            return self._draw_unique(node.inner, size, depth + 1)
        return [self._child(node.inner, depth + 1) for _ in range(size)]

    def _set(self, node: SchemaNode, depth: int) -> set[Any] | frozenset[Any]:
        size = self._size(node, SET_DEFAULT_MIN, SET_DEFAULT_MAX)
        items = self._draw_unique(node.inner, size, depth + 1)
        if node.kind == "frozenset":
            return frozenset(items)
        return set(items)

    def _tuple(self, node: SchemaNode, depth: int) -> tuple[Any, ...]:
        members = node.members
        index = node.variadic_index
        if index is None or index >= len(members):
            return tuple(self._child(member, depth + 1) for member in members)

        head = [self._child(member, depth + 1) for member in members[:index]]
        tail = [self._child(member, depth + 1) for member in members[index + 1 :]]
        fixed = len(head) + len(tail)
        if node.checks:
            rest = max(self._size(node, fixed + TUPLE_REST_MIN, fixed + TUPLE_REST_MAX) - fixed, 0)
        else:
            rest = self.random.randint(TUPLE_REST_MIN, TUPLE_REST_MAX)
        middle = [self._child(members[index], depth + 1) for _ in range(rest)]
        return tuple(head + middle + tail)

    def _dict(self, node: SchemaNode, depth: int) -> dict[Any, Any]:
        size = self._size(node, RECORD_DEFAULT_MIN, RECORD_DEFAULT_MAX)
        keys = self._draw_unique(node.keys, size, depth + 1)
        return {key: self._child(node.values, depth + 1) for key in keys}

    def _object(self, node: SchemaNode, depth: int) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for field in node.fields:
            value = self._generate(field.node, depth + 1)
            if value is ABSENT:
                continue
            result[field.key] = value
        return result

    def _json(self, node: SchemaNode, depth: int) -> str:
        return json.dumps(self._child(node.inner, depth + 1), default=str)

    # ------------------------------------------------------------------ combinators
    def _union(self, node: SchemaNode, depth: int) -> Any:
        members = node.members
        if not members:
            return None
        return self._generate(self.random.choice(members), depth)

    def _chain(self, node: SchemaNode, depth: int) -> Any:
        members = node.members
        if not members:
            return None
        result = self._generate(members[0], depth)
        for member in members[1:]:
            right = self._generate(member, depth)
            if isinstance(result, Mapping) and isinstance(right, Mapping):
                result = {**result, **right}
        return result

    def _optional(self, node: SchemaNode, depth: int) -> Any:
        if self.random.random() < OPTIONAL_PRESENT_PROBABILITY:
            return self._wrapped(node, depth)
        return ABSENT

    def _nullable(self, node: SchemaNode, depth: int) -> Any:
        if self.random.random() < NULLABLE_PRESENT_PROBABILITY:
            return self._wrapped(node, depth)
        return None

    def _default(self, node: SchemaNode, depth: int) -> Any:
        return self._wrapped(node, depth)

    def _wrapped(self, node: SchemaNode, depth: int) -> Any:
        inner = node.inner
        if inner is None:
            return self.faker.word()
        return self._generate(inner, depth)

    def _lazy(self, node: SchemaNode, depth: int) -> Any:
        key = (node.ref or repr(node.raw), depth)
        if key in self._resolving:
            raise CircularReferenceError(
                f"Reference {key[0]!r} refers back to itself without nesting.",
                details={"ref": key[0], "depth": depth},
            )
        try:
            resolved = node.resolve()
        except Exception as exc:
            self._logger.debug(
                "Lazy reference could not be resolved, using an empty object.",
                event="lazy_resolution_failed",
                ref=key[0],
                error=str(exc),
            )
            return {}
        self._resolving.add(key)
        try:
            return self._generate(resolved, depth)
        finally:
            self._resolving.discard(key)


__all__ = [
    "MetadataGenerator",
    "REQUIRES_HANDLER_KINDS",
    "SchemaValueGenerator",
    "TypeHandlerContext",
    "UNINHABITED_KINDS",
]
