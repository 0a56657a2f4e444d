from __future__ import annotations

import asyncio
from typing import Any

import pytest

from pydantic_forge.core.errors import ValidationError
from pydantic_forge.core.factory import Factory, FactoryView


async def _account(view: FactoryView, iteration: int) -> dict[str, Any]:
    await asyncio.sleep(0)
    return {"id": iteration, "owner": view.faker.name(), "balance": 0}


def test_build_async_awaits_generator_and_hooks() -> None:
    order: list[str] = []

    async def before(params: dict[str, Any]) -> dict[str, Any]:
        order.append("before")
        await asyncio.sleep(0)
        return {**params, "balance": 10}

    def after(value: dict[str, Any]) -> dict[str, Any]:
        order.append("after")
        return {**value, "audited": True}

    factory = Factory(_account).before_build(before).after_build(after)

    result = asyncio.run(factory.build_async())

    assert result["balance"] == 10
    assert result["audited"] is True
    assert order == ["before", "after"]


def test_build_async_accepts_sync_generator() -> None:
    factory = Factory(lambda view, i: {"value": i})

    assert asyncio.run(factory.build_async({"extra": 1})) == {"value": 0, "extra": 1}


def test_hooks_run_sequentially() -> None:
    events: list[str] = []

    def make_hook(name: str):
        async def hook(value: dict[str, Any]) -> dict[str, Any]:
            events.append(f"{name}:start")
            await asyncio.sleep(0)
            events.append(f"{name}:end")
            return value

        return hook

    factory = Factory(_account).after_build(make_hook("one")).after_build(make_hook("two"))
    asyncio.run(factory.build_async())

    assert events == ["one:start", "one:end", "two:start", "two:end"]


def test_batch_async_builds_in_order() -> None:
    factory = Factory(_account)

    items = asyncio.run(factory.batch_async(3, [{"owner": "a"}, {"owner": "b"}]))

    assert [item["id"] for item in items] == [0, 1, 2]
    assert [item["owner"] for item in items] == ["a", "b", "a"]


def test_batch_async_validates_size() -> None:
    with pytest.raises(ValidationError):
        asyncio.run(Factory(_account).batch_async(-1))


def test_async_self_reference_stops_at_max_depth() -> None:
    async def node(view: FactoryView, iteration: int) -> dict[str, Any]:
        return {"depth": view.depth, "child": await view.build(), "leaves": await view.batch(1)}

    tree = asyncio.run(Factory(node, max_depth=2).build_async())

    assert tree["depth"] == 0
    assert tree["child"]["depth"] == 1
    assert tree["child"]["child"] is None
    assert tree["child"]["leaves"] == []


def test_async_deferred_values_are_awaited() -> None:
    async def lookup(key: str) -> str:
        await asyncio.sleep(0)
        return key.upper()

    factory = Factory(lambda view, i: {"code": view.use(lookup, "abc")})

    assert asyncio.run(factory.build_async()) == {"code": "ABC"}


def test_compose_with_async_factory_entry() -> None:
    base = Factory(lambda view, i: {"name": "base"})

    composed = base.compose({"account": Factory(_account), "flag": True})

    assert composed.is_async
    value = asyncio.run(composed.build_async())
    assert value["name"] == "base"
    assert value["flag"] is True
    assert value["account"]["balance"] == 0


def test_extend_async_base_with_sync_extension() -> None:
    extended = Factory(_account).extend(lambda view, i: {"balance": 99})

    assert asyncio.run(extended.build_async())["balance"] == 99


def test_extend_sync_base_with_async_extension() -> None:
    async def extension(view: FactoryView, iteration: int) -> dict[str, Any]:
        return {"tags": ["async"]}

    extended = Factory(lambda view, i: {"tags": ["sync"], "id": i}).extend(extension)

    assert asyncio.run(extended.build_async()) == {"tags": ["async"], "id": 0}
