"""Value assembly: deferred calls, one-pass resolution and deep merging."""

from __future__ import annotations

import inspect
from collections.abc import AsyncIterator, Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import ASYNC_GENERATOR_MESSAGE, ConfigurationError


@dataclass(frozen=True, slots=True)
class Deferred:
    """A function call captured at definition time and invoked during assembly."""

    handler: Callable[..., Any]
    args: tuple[Any, ...] = ()
    kwargs: Mapping[str, Any] = field(default_factory=dict)

    def __call__(self) -> Any:
        return self.handler(*self.args, **self.kwargs)


def resolve_value(value: Any) -> Any:
    """Resolve a generator output tree synchronously.

    Deferred calls are invoked, iterators yield one value and mappings are
    walked field by field. Anything awaitable means the caller picked the
    wrong entry point.
    """

    if isinstance(value, Deferred):
        return reject_awaitable(value())
    if isinstance(value, Iterator):
        return reject_awaitable(next(value))
    if isinstance(value, Mapping):
        return {key: resolve_value(item) for key, item in value.items()}
    return reject_awaitable(value)


async def resolve_value_async(value: Any) -> Any:
    """Asynchronous twin of :func:`resolve_value` that awaits nested results."""

    if inspect.isawaitable(value):
        return await resolve_value_async(await value)
    if isinstance(value, Deferred):
        result = value()
        if inspect.isawaitable(result):
            result = await result
        return result
    if isinstance(value, AsyncIterator):
        return await anext(value)
    if isinstance(value, Iterator):
        result = next(value)
        if inspect.isawaitable(result):
            result = await result
        return result
    if isinstance(value, Mapping):
        resolved: dict[Any, Any] = {}
        for key, item in value.items():
            resolved[key] = await resolve_value_async(item)
        return resolved
    return value


def merge(target: Any, *sources: Any) -> dict[Any, Any]:
    """Deep-merge ``sources`` over ``target`` into a new dict.

    Nested mappings merge recursively; every other value, sequences included,
    replaces the accumulated one wholesale. Inputs are never mutated.
    """

    output: dict[Any, Any] = dict(target) if isinstance(target, Mapping) else {}
    for source in sources:
        if not isinstance(source, Mapping):
            continue
        for key, incoming in source.items():
            existing = output.get(key)
            if isinstance(existing, Mapping) and isinstance(incoming, Mapping):
                output[key] = merge(existing, incoming)
            else:
                output[key] = incoming
    return output


def reject_awaitable(value: Any) -> Any:
    if inspect.isawaitable(value):
        if inspect.iscoroutine(value):
            value.close()
        raise ConfigurationError(ASYNC_GENERATOR_MESSAGE)
    return value


__all__ = ["Deferred", "merge", "reject_awaitable", "resolve_value", "resolve_value_async"]
