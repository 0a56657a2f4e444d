"""Hookspec definitions for pydantic-forge plugins."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:  # pragma: no cover
    from pydantic_forge.providers.registry import TypeHandlerRegistry

hookspec = pluggy.HookspecMarker("pforge")
hookimpl = pluggy.HookimplMarker("pforge")


@hookspec
def pforge_register_type_handlers(registry: TypeHandlerRegistry) -> None:  # pragma: no cover
    """Register additional type handlers with the given registry."""


__all__ = ["hookspec", "hookimpl", "pforge_register_type_handlers"]
