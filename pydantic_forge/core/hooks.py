"""Build hooks tagged as synchronous or asynchronous at registration time."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


def is_async_callable(func: Any) -> bool:
    """Return ``True`` for coroutine functions, including partials and callables."""

    while isinstance(func, functools.partial):
        func = func.func
    if inspect.iscoroutinefunction(func):
        return True
    call = getattr(func, "__call__", None)
    return call is not None and inspect.iscoroutinefunction(call)


@dataclass(frozen=True, slots=True)
class Hook:
    func: Callable[[Any], Any]
    is_async: bool

    @classmethod
    def wrap(cls, func: Callable[[Any], Any]) -> Hook:
        if not callable(func):
            raise TypeError("Hook must be a function")
        return cls(func=func, is_async=is_async_callable(func))

    def __call__(self, value: Any) -> Any:
        return self.func(value)


__all__ = ["Hook", "is_async_callable"]
