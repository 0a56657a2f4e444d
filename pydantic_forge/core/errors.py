"""Error hierarchy shared by the factory engine and the schema generator."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class ForgeError(Exception):
    """Base class for errors raised by pydantic-forge."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = dict(details or {})

    def __str__(self) -> str:
        return self.message


class ConfigurationError(ForgeError):
    """Raised when a factory is used through an entry point it cannot honour."""


class ValidationError(ForgeError, ValueError):
    """Raised for invalid arguments such as a negative batch size."""


class CircularReferenceError(ForgeError):
    """Raised when a composition cycle would never reach the depth guard."""


class UnsupportedKindError(ForgeError, TypeError):
    """Raised when a schema kind has no generic representative value."""


class ConfigError(ForgeError):
    """Raised when configuration values cannot be parsed."""


ASYNC_GENERATOR_MESSAGE = (
    "Async factory function detected. Use build_async() to build instances with async factories."
)
ASYNC_HOOKS_MESSAGE = "Async hooks detected. Use build_async() to build instances with async hooks."


__all__ = [
    "ASYNC_GENERATOR_MESSAGE",
    "ASYNC_HOOKS_MESSAGE",
    "CircularReferenceError",
    "ConfigError",
    "ConfigurationError",
    "ForgeError",
    "UnsupportedKindError",
    "ValidationError",
]
