"""Infinite, pull-based sequences over a fixed domain."""

from __future__ import annotations

import random
from collections.abc import Iterable, Iterator
from typing import Generic, TypeVar

from .errors import ValidationError

T = TypeVar("T")


class _DomainSequence(Iterator[T], Generic[T]):
    """Materializes the domain once and rejects empty input."""

    def __init__(self, domain: Iterable[T]) -> None:
        self._values: tuple[T, ...] = tuple(domain)
        if not self._values:
            raise ValidationError("Cannot create a sequence from an empty domain.")

    @property
    def domain(self) -> tuple[T, ...]:
        return self._values

    def __iter__(self) -> Iterator[T]:
        return self


class Cycle(_DomainSequence[T]):
    """Yield the domain in order, wrapping back to the start forever."""

    def __init__(self, domain: Iterable[T]) -> None:
        super().__init__(domain)
        self._cursor = 0

    def __next__(self) -> T:
        value = self._values[self._cursor]
        self._cursor = (self._cursor + 1) % len(self._values)
        return value


class Sample(_DomainSequence[T]):
    """Yield uniformly drawn domain values, never repeating the previous draw.

    A domain whose values are all equal keeps yielding that value.
    """

    def __init__(
        self,
        domain: Iterable[T],
        *,
        random_generator: random.Random | None = None,
    ) -> None:
        super().__init__(domain)
        self._rng = random_generator or random.Random()
        self._has_last = False
        self._last: T | None = None

    def __next__(self) -> T:
        if len(self._values) == 1:
            return self._values[0]
        if not self._has_last:
            value = self._rng.choice(self._values)
        else:
            candidates = [value for value in self._values if value != self._last]
            value = self._rng.choice(candidates) if candidates else self._values[0]
        self._last = value
        self._has_last = True
        return value


__all__ = ["Cycle", "Sample"]
