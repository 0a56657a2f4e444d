"""Factory engine, value assembly and shared configuration."""

from .assembly import Deferred, merge, resolve_value, resolve_value_async
from .config import ForgeConfig, apply_logging, load_config, normalize_seed
from .context import RecursionContext
from .errors import (
    CircularReferenceError,
    ConfigError,
    ConfigurationError,
    ForgeError,
    UnsupportedKindError,
    ValidationError,
)
from .factory import Factory, FactoryView
from .persistence import PersistenceAdapter
from .sequences import Cycle, Sample
from .version import get_tool_version

__all__ = [
    "CircularReferenceError",
    "ConfigError",
    "ConfigurationError",
    "Cycle",
    "Deferred",
    "Factory",
    "FactoryView",
    "ForgeConfig",
    "ForgeError",
    "PersistenceAdapter",
    "RecursionContext",
    "Sample",
    "UnsupportedKindError",
    "ValidationError",
    "apply_logging",
    "get_tool_version",
    "load_config",
    "merge",
    "normalize_seed",
    "resolve_value",
    "resolve_value_async",
]
