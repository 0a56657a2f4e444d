from __future__ import annotations

import asyncio
import copy
from typing import Any

import pytest

from pydantic_forge.core.assembly import (
    Deferred,
    merge,
    reject_awaitable,
    resolve_value,
    resolve_value_async,
)
from pydantic_forge.core.errors import ConfigurationError
from pydantic_forge.core.sequences import Cycle


def test_merge_combines_nested_mappings_without_mutation() -> None:
    target = {"a": 1, "b": {"c": 2}}
    source = {"b": {"d": 3}}
    target_copy = copy.deepcopy(target)
    source_copy = copy.deepcopy(source)

    result = merge(target, source)

    assert result == {"a": 1, "b": {"c": 2, "d": 3}}
    assert target == target_copy
    assert source == source_copy


def test_merge_replaces_sequences_wholesale() -> None:
    result = merge({"tags": [1, 2, 3], "nested": {"items": [1]}}, {"tags": [9], "nested": {"items": []}})

    assert result == {"tags": [9], "nested": {"items": []}}


def test_merge_replaces_mapping_with_scalar_and_back() -> None:
    assert merge({"a": {"b": 1}}, {"a": None}) == {"a": None}
    assert merge({"a": 1}, {"a": {"b": 2}}, {"a": {"c": 3}}) == {"a": {"b": 2, "c": 3}}


def test_merge_ignores_non_mapping_sources() -> None:
    assert merge({"a": 1}, None) == {"a": 1}
    assert merge(None, {"a": 1}) == {"a": 1}


def test_resolve_value_invokes_deferred_and_pulls_iterators() -> None:
    calls: list[tuple[Any, ...]] = []

    def handler(*args: Any) -> str:
        calls.append(args)
        return "resolved"

    tree = {
        "ref": Deferred(handler, ("x", 1)),
        "seq": Cycle([1, 2]),
        "nested": {"inner": Deferred(lambda: 5)},
        "plain": [1, 2],
    }

    result = resolve_value(tree)

    assert result == {"ref": "resolved", "seq": 1, "nested": {"inner": 5}, "plain": [1, 2]}
    assert calls == [("x", 1)]


def test_deferred_passes_keyword_arguments() -> None:
    deferred = Deferred(lambda prefix, *, name: f"{prefix}-{name}", ("id",), {"name": "joe"})

    assert resolve_value(deferred) == "id-joe"


def test_resolve_value_rejects_awaitables() -> None:
    async def produce() -> int:
        return 1

    with pytest.raises(ConfigurationError):
        resolve_value({"value": Deferred(produce)})


def test_reject_awaitable_closes_coroutines() -> None:
    async def produce() -> int:
        return 1

    coroutine = produce()
    with pytest.raises(ConfigurationError):
        reject_awaitable(coroutine)
    assert coroutine.cr_frame is None


def test_resolve_value_async_awaits_nested_results() -> None:
    async def fetch(value: int) -> int:
        await asyncio.sleep(0)
        return value * 2

    async def numbers():
        yield 10

    async def build() -> dict[str, Any]:
        return await resolve_value_async(
            {
                "doubled": Deferred(fetch, (21,)),
                "awaited": fetch(2),
                "stream": numbers(),
                "nested": {"sync": Deferred(lambda: "ok")},
            }
        )

    assert asyncio.run(build()) == {
        "doubled": 42,
        "awaited": 4,
        "stream": 10,
        "nested": {"sync": "ok"},
    }
