"""Recursion context threaded through nested factory builds."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

from .constants import DEFAULT_MAX_DEPTH


@dataclass(frozen=True, slots=True)
class RecursionContext:
    """Current depth and the bound it is checked against."""

    depth: int = 0
    max_depth: int = DEFAULT_MAX_DEPTH

    @property
    def exhausted(self) -> bool:
        return self.depth >= self.max_depth

    def descend(self) -> RecursionContext:
        return RecursionContext(depth=self.depth + 1, max_depth=self.max_depth)


# Holds the context of the generator currently running, so a factory built
# from inside another factory's generator continues at the next depth.
_ACTIVE_CONTEXT: ContextVar[RecursionContext | None] = ContextVar(
    "pydantic_forge_active_context", default=None
)


def entry_context(max_depth: int) -> RecursionContext:
    """Return the context a public ``build``/``batch`` call should start from."""

    active = _ACTIVE_CONTEXT.get()
    if active is None:
        return RecursionContext(depth=0, max_depth=max_depth)
    return RecursionContext(depth=active.depth + 1, max_depth=max_depth)


@contextmanager
def activate(context: RecursionContext) -> Iterator[RecursionContext]:
    token = _ACTIVE_CONTEXT.set(context)
    try:
        yield context
    finally:
        _ACTIVE_CONTEXT.reset(token)


__all__ = ["RecursionContext", "activate", "entry_context"]
