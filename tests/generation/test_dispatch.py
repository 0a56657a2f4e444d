from __future__ import annotations

import enum
import json
import random
import re
import collections.abc
from collections.abc import Callable
from typing import Any, Literal, Optional, Union

import pytest
from faker import Faker
from pydantic import BaseModel, Field, TypeAdapter
from typing_extensions import NotRequired, TypedDict

from pydantic_forge.core.errors import CircularReferenceError, UnsupportedKindError
from pydantic_forge.generation import SchemaValueGenerator, TypeHandlerContext
from pydantic_forge.providers.registry import TypeHandlerRegistry, register_type_handler
from pydantic_forge.schema import CoreSchemaNode, introspect
from pydantic_forge.schema.nodes import SchemaNode

UUID4_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


class Person(BaseModel):
    id: str = Field(json_schema_extra={"format": "uuid"})
    age: int = Field(ge=18, le=120)
    code: str = Field(min_length=10, max_length=10)
    nickname: str = Field(min_length=5, max_length=10)


class TreeNode(BaseModel):
    value: int
    children: list[TreeNode] = []


class Chain(BaseModel):
    value: int
    next: Optional[Chain] = None


class Status(enum.IntEnum):
    ACTIVE = 1
    INACTIVE = 2


class Draft(TypedDict):
    title: str
    notes: NotRequired[str]


def _generator(seed: int = 0, **kwargs: Any) -> SchemaValueGenerator:
    faker = Faker()
    faker.seed_instance(seed)
    kwargs.setdefault("registry", TypeHandlerRegistry())
    return SchemaValueGenerator(faker=faker, **kwargs)


def _root(annotation: Any) -> SchemaNode:
    return introspect(annotation).node


def _tree_depth(value: Any) -> int:
    if not isinstance(value, dict):
        return 0
    children = value.get("children") or []
    return 1 + max((_tree_depth(child) for child in children), default=0)


def test_scenario_uuid_and_age_bounds() -> None:
    generator = _generator(1)

    for _ in range(50):
        value = generator.generate(_root(Person))
        assert UUID4_RE.match(value["id"])
        assert 18 <= value["age"] <= 120
        assert len(value["code"]) == 10
        assert 5 <= len(value["nickname"]) <= 10
        Person.model_validate(value)


@pytest.mark.parametrize("max_depth", [1, 2, 3, 4])
def test_self_referential_schema_respects_max_depth(max_depth: int) -> None:
    generator = _generator(2, max_depth=max_depth)
    root = _root(TreeNode)

    for _ in range(20):
        value = generator.generate(root)
        assert _tree_depth(value) <= max_depth


def test_optional_self_reference_terminates() -> None:
    generator = _generator(3, max_depth=3)

    for _ in range(20):
        value = generator.generate(_root(Chain))
        Chain.model_validate(value)


def test_registered_handler_replaces_builtin() -> None:
    generator = _generator(handlers={"int": lambda node, context: 7})

    assert generator.generate(_root(list[int]))[0] == 7
    assert generator.generate(CoreSchemaNode({"type": "int", "ge": 100})) == 7


def test_registry_handlers_are_consulted_after_instance_handlers() -> None:
    registry = TypeHandlerRegistry()
    registry.register("str", lambda node, context: "from-registry")
    generator = _generator(registry=registry)

    assert generator.generate(CoreSchemaNode({"type": "str"})) == "from-registry"

    generator.handlers["str"] = lambda node, context: "from-instance"
    assert generator.generate(CoreSchemaNode({"type": "str"})) == "from-instance"


def test_default_registry_is_used_when_none_given() -> None:
    register_type_handler("bool", lambda node, context: "handled")
    faker = Faker()

    assert SchemaValueGenerator(faker=faker).generate(CoreSchemaNode({"type": "bool"})) == "handled"


def test_handler_context_generates_inner_nodes_one_level_down() -> None:
    seen: list[TypeHandlerContext] = []

    def handler(node: SchemaNode, context: TypeHandlerContext) -> Any:
        seen.append(context)
        return [context.generate(), context.generate()]

    generator = _generator(handlers={"list": handler})
    value = generator.generate(CoreSchemaNode({"type": "list", "items_schema": {"type": "bool"}}), 2)

    assert len(value) == 2 and all(isinstance(item, bool) for item in value)
    assert seen[0].depth == 2
    assert seen[0].max_depth == generator.max_depth
    assert isinstance(seen[0].random, random.Random)


def test_metadata_generator_matches_description() -> None:
    class Account(BaseModel):
        handle: str = Field(description="twitter-handle")

    generator = _generator(metadata_generators={"twitter-handle": lambda: "@forge"})

    assert generator.generate(_root(Account)) == {"handle": "@forge"}


def test_example_wins_over_examples_and_generation() -> None:
    class Product(BaseModel):
        sku: str = Field(json_schema_extra={"example": "SKU-1"}, examples=["A", "B"])
        color: str = Field(examples=["red", "blue"])

    generator = _generator()

    for _ in range(10):
        value = generator.generate(_root(Product))
        assert value["sku"] == "SKU-1"
        assert value["color"] in {"red", "blue"}


def test_examples_mapping_uses_value_entries() -> None:
    node = CoreSchemaNode(
        {
            "type": "str",
            "metadata": {
                "pydantic_js_extra": {"examples": {"first": {"value": "one"}, "second": {"value": "two"}}}
            },
        }
    )

    assert _generator().generate(node) in {"one", "two"}


def test_typed_dict_optional_keys_are_sometimes_absent() -> None:
    generator = _generator(4)
    values = [generator.generate(_root(Draft)) for _ in range(100)]

    assert all("title" in value for value in values)
    assert any("notes" in value for value in values)
    assert any("notes" not in value for value in values)


def test_nullable_is_sometimes_none() -> None:
    generator = _generator(5)
    values = [generator.generate(_root(Optional[int])) for _ in range(100)]

    assert any(value is None for value in values)
    assert any(isinstance(value, int) for value in values)


def test_union_and_literal_and_enum() -> None:
    generator = _generator(6)

    assert {type(generator.generate(_root(Union[int, str]))) for _ in range(50)} == {int, str}
    assert {generator.generate(_root(Literal["a", "b"])) for _ in range(50)} == {"a", "b"}
    assert {generator.generate(_root(Status)) for _ in range(50)} == {Status.ACTIVE, Status.INACTIVE}


def test_containers_respect_sizes() -> None:
    generator = _generator(7)

    for _ in range(20):
        assert 1 <= len(generator.generate(_root(list[int]))) <= 5
        assert len(generator.generate(CoreSchemaNode({"type": "list", "min_length": 3, "max_length": 3}))) == 3
        assert 1 <= len(generator.generate(_root(dict[str, int]))) <= 3
        assert isinstance(generator.generate(_root(frozenset[int])), frozenset)
        variadic = generator.generate(_root(tuple[str, ...]))
        assert isinstance(variadic, tuple) and len(variadic) <= 3
        fixed = generator.generate(_root(tuple[int, str, bool]))
        assert [type(item) for item in fixed] == [int, str, bool]


def test_tuple_rest_element_follows_declared_head() -> None:
    generator = _generator(11)
    node = CoreSchemaNode(
        {"type": "tuple", "items_schema": [{"type": "int"}, {"type": "str"}], "variadic_item_index": 1}
    )

    for _ in range(20):
        value = generator.generate(node)
        assert isinstance(value[0], int)
        assert 0 <= len(value) - 1 <= 3
        assert all(isinstance(item, str) for item in value[1:])


def test_tuple_rest_element_keeps_tail_slots() -> None:
    generator = _generator(12)
    node = CoreSchemaNode(
        {
            "type": "tuple",
            "items_schema": [{"type": "int"}, {"type": "str"}, {"type": "bool"}],
            "variadic_item_index": 1,
        }
    )

    for _ in range(20):
        value = generator.generate(node)
        assert isinstance(value[0], int)
        assert isinstance(value[-1], bool)
        assert all(isinstance(item, str) for item in value[1:-1])


def test_tuple_length_checks_drive_rest_count() -> None:
    generator = _generator(13)
    node = CoreSchemaNode(
        {
            "type": "tuple",
            "items_schema": [{"type": "int"}, {"type": "str"}],
            "variadic_item_index": 1,
            "min_length": 3,
            "max_length": 4,
        }
    )

    for _ in range(20):
        value = generator.generate(node)
        assert 3 <= len(value) <= 4
        assert isinstance(value[0], int)
        assert all(isinstance(item, str) for item in value[1:])


def test_sets_hold_unique_values() -> None:
    generator = _generator(8)
    node = CoreSchemaNode({"type": "set", "items_schema": {"type": "int", "ge": 0, "le": 100}, "min_length": 4, "max_length": 4})

    assert len(generator.generate(node)) == 4


def test_json_kind_is_encoded() -> None:
    from pydantic import Json

    value = _generator(9).generate(_root(Json[list[int]]))

    assert isinstance(json.loads(value), list)


def test_chain_merges_mapping_steps() -> None:
    node = CoreSchemaNode(
        {
            "type": "chain",
            "steps": [
                {"type": "typed-dict", "fields": {"a": {"type": "typed-dict-field", "schema": {"type": "int"}}}},
                {"type": "typed-dict", "fields": {"b": {"type": "typed-dict-field", "schema": {"type": "str"}}}},
            ],
        }
    )

    value = _generator().generate(node)

    assert set(value) == {"a", "b"}


def test_chain_keeps_left_scalar() -> None:
    node = CoreSchemaNode({"type": "chain", "steps": [{"type": "int"}, {"type": "str"}]})

    assert isinstance(_generator().generate(node), int)


def test_recognized_instance_classes() -> None:
    import ipaddress

    value = _generator().generate(_root(ipaddress.IPv4Address))

    assert isinstance(value, ipaddress.IPv4Address)


@pytest.mark.parametrize(
    "node",
    [
        _root(Callable[[int], int]),
        _root(complex),
        CoreSchemaNode({"type": "is-instance", "cls": collections.abc.Awaitable}),
        CoreSchemaNode({"type": "is-subclass", "cls": int}),
    ],
)
def test_requires_handler_kinds_raise(node: SchemaNode) -> None:
    with pytest.raises(UnsupportedKindError, match="Register a type handler"):
        _generator().generate(node)


def test_unknown_instance_class_requires_handler() -> None:
    class Widget:
        pass

    node = CoreSchemaNode({"type": "is-instance", "cls": Widget})

    with pytest.raises(UnsupportedKindError) as info:
        _generator().generate(node)
    assert info.value.details["cls"] == "Widget"


def test_handler_unlocks_requires_handler_kind() -> None:
    generator = _generator(handlers={"callable": lambda node, context: len})

    assert generator.generate(_root(Callable[[str], int])) is len


@pytest.mark.parametrize("kind", ["never", "invalid"])
def test_uninhabited_kinds_raise(kind: str) -> None:
    with pytest.raises(UnsupportedKindError):
        _generator().generate(CoreSchemaNode({"type": kind}))


def test_uninhabited_kind_with_handler_is_generated() -> None:
    generator = _generator(handlers={"never": lambda node, context: "reached"})

    assert generator.generate(CoreSchemaNode({"type": "never"})) == "reached"


def test_unknown_kind_falls_back_to_a_word(debug_logging: None, capsys: pytest.CaptureFixture[str]) -> None:
    value = _generator().generate(CoreSchemaNode({"type": "mystery"}))

    assert isinstance(value, str) and value
    assert "Unknown schema kind" in capsys.readouterr().err


def test_wrapper_only_cycle_raises_circular_reference() -> None:
    schema = {
        "type": "definitions",
        "schema": {"type": "definition-ref", "schema_ref": "loop"},
        "definitions": [
            {"type": "nullable", "schema": {"type": "definition-ref", "schema_ref": "loop"}, "ref": "loop"},
        ],
    }
    generator = _generator()
    generator.random.random = lambda: 0.0  # nullable always yields its inner value

    with pytest.raises(CircularReferenceError):
        generator.generate(CoreSchemaNode.from_schema(schema))


def test_unresolvable_reference_falls_back_to_empty_object() -> None:
    node = CoreSchemaNode({"type": "definition-ref", "schema_ref": "missing"}, definitions={})

    assert _generator().generate(node) == {}


def test_depth_limit_uses_fallbacks() -> None:
    generator = _generator(max_depth=1)
    value = generator.generate(_root(dict[str, list[int]]))

    assert all(items == [] for items in value.values())


def test_root_at_max_depth_is_fallback_value() -> None:
    generator = _generator(max_depth=0)

    assert generator.generate(_root(list[int])) == []
    assert generator.generate(_root(Person)) == {}
    assert isinstance(generator.generate(_root(int)), int)


def test_same_seed_same_value() -> None:
    first = _generator(42).generate(_root(TreeNode))
    second = _generator(42).generate(_root(TreeNode))

    assert first == second


def test_type_adapter_validates_generated_values() -> None:
    annotation = dict[str, list[Union[int, Literal["x"]]]]
    generator = _generator(10)
    adapter = TypeAdapter(annotation)

    for _ in range(20):
        adapter.validate_python(generator.generate(_root(annotation)))
