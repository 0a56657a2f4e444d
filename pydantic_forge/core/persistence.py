"""Persistence seam used by ``Factory.create`` and ``Factory.create_many``."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PersistenceAdapter(Protocol):
    """Stores built instances in a data store and returns what was stored."""

    async def create(self, instance: Any) -> Any:  # pragma: no cover - protocol
        ...

    async def create_many(self, instances: Sequence[Any]) -> list[Any]:  # pragma: no cover
        ...


NO_ADAPTER_MESSAGE = (
    "No persistence adapter configured. Pass adapter= or set a default with with_adapter()."
)


__all__ = ["NO_ADAPTER_MESSAGE", "PersistenceAdapter"]
