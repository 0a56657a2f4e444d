"""Read-only accessor surface shared by both schema representations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Final


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


class _Absent:
    __slots__ = ()

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()
"""Marks metadata that was not declared."""

ABSENT: Final = _Absent()
"""Generated in place of an optional value; object generation drops the key."""


@dataclass(frozen=True, slots=True)
class Check:
    """One declared constraint.

    ``kind`` is one of ``length``, ``min_length``, ``max_length``, ``ge``,
    ``gt``, ``le``, ``lt``, ``multiple_of``, ``pattern``, ``format``,
    ``max_digits``, ``decimal_places``, ``unique``, ``version``,
    ``allowed_schemes``, ``timezone`` or ``allow_inf_nan``.
    """

    kind: str
    value: Any = None
    format: str | None = None


@dataclass(frozen=True, slots=True)
class Field:
    key: str
    node: SchemaNode


class SchemaNode(ABC):
    """A node of an external constraint tree, seen through one accessor API.

    Kind names follow the pydantic-core ``type`` vocabulary. Accessors that
    do not apply to a kind return an empty value.
    """

    representation: str = ""

    @property
    @abstractmethod
    def kind(self) -> str:
        """Kind tag used for dispatch and handler lookup."""

    @property
    @abstractmethod
    def raw(self) -> Any:
        """The underlying representation object."""

    @property
    def checks(self) -> tuple[Check, ...]:
        return ()

    @property
    def inner(self) -> SchemaNode | None:
        """Wrapped node for wrappers, item node for list-like kinds, payload for ``json``."""

        return None

    @property
    def fields(self) -> tuple[Field, ...]:
        return ()

    @property
    def members(self) -> tuple[SchemaNode, ...]:
        """Union branches, chain steps or tuple positions."""

        return ()

    @property
    def variadic_index(self) -> int | None:
        return None

    @property
    def keys(self) -> SchemaNode | None:
        return None

    @property
    def values(self) -> SchemaNode | None:
        return None

    @property
    def choices(self) -> tuple[Any, ...]:
        """Allowed values of ``literal`` and ``enum`` nodes."""

        return ()

    @property
    def cls(self) -> type[Any] | None:
        return None

    @property
    def ref(self) -> str | None:
        return None

    def resolve(self) -> SchemaNode:
        """Resolve a lazily referenced node."""

        raise TypeError(f"{self.kind!r} nodes are not lazily resolved.")

    @property
    def description(self) -> str | None:
        return None

    @property
    def example(self) -> Any:
        return MISSING

    @property
    def examples(self) -> Sequence[Any] | dict[str, Any] | None:
        return None

    # ------------------------------------------------------------------ checks
    def check(self, kind: str, default: Any = None) -> Any:
        for item in self.checks:
            if item.kind == kind:
                return item.value
        return default

    @property
    def format(self) -> str | None:
        for item in self.checks:
            if item.kind == "format" and item.format:
                return item.format
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r})"


def length_checks(min_length: Any, max_length: Any) -> list[Check]:
    """Collapse equal bounds into a single exact ``length`` check."""

    if min_length is not None and min_length == max_length:
        return [Check("length", min_length)]
    checks: list[Check] = []
    if min_length is not None:
        checks.append(Check("min_length", min_length))
    if max_length is not None:
        checks.append(Check("max_length", max_length))
    return checks


__all__ = ["ABSENT", "MISSING", "Check", "Field", "SchemaNode", "length_checks"]
