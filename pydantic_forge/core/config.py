"""Configuration loading from pyproject, environment variables and overrides."""

from __future__ import annotations

import dataclasses
import hashlib
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic_forge.logging import get_logger

from .constants import DEFAULT_MAX_DEPTH
from .errors import ConfigError

PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_SECTION = ("tool", "pydantic_forge")
ENV_PREFIX = "PFORGE_"

_LOG_LEVELS = {"error", "warn", "info", "debug", "silent"}
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class ForgeConfig:
    """Resolved settings shared by factories and the logger."""

    max_depth: int = DEFAULT_MAX_DEPTH
    seed: int | None = None
    locale: str | None = None
    log_level: str = "info"
    log_json: bool = False


def normalize_seed(seed: int | str | None) -> int | None:
    """Map an int or string seed onto a stable non-negative integer."""

    if seed is None:
        return None
    if isinstance(seed, bool):
        raise ConfigError("Seed must be an integer or string.", details={"seed": seed})
    if isinstance(seed, int):
        return seed
    if isinstance(seed, str):
        stripped = seed.strip()
        if stripped.lstrip("-").isdigit():
            return int(stripped)
        digest = hashlib.sha256(stripped.encode("utf-8")).digest()
        return int.from_bytes(digest[:8], "big")
    raise ConfigError("Seed must be an integer or string.", details={"seed": repr(seed)})


def load_config(
    *,
    root: Path | str | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ForgeConfig:
    """Layer defaults, ``[tool.pydantic_forge]``, ``PFORGE_*`` variables and overrides."""

    data: dict[str, Any] = {}
    data.update(_load_pyproject(Path(root) if root is not None else Path.cwd()))
    data.update(_load_env(os.environ if env is None else env))
    if overrides:
        data.update({key: value for key, value in overrides.items() if value is not None})
    return _build_config(data)


def _load_pyproject(root: Path) -> dict[str, Any]:
    path = root / PYPROJECT_FILENAME
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Failed to parse {PYPROJECT_FILENAME}: {exc}",
            details={"path": str(path)},
        ) from exc

    section: Any = document
    for key in PYPROJECT_SECTION:
        if not isinstance(section, Mapping):
            return {}
        section = section.get(key, {})
    if not isinstance(section, Mapping):
        raise ConfigError(
            "[tool.pydantic_forge] must be a table.",
            details={"path": str(path)},
        )
    return {str(key).replace("-", "_"): value for key, value in section.items()}


def _load_env(env: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX) :].lower()
        values[name] = value
    return values


def _build_config(data: Mapping[str, Any]) -> ForgeConfig:
    known = {item.name for item in dataclasses.fields(ForgeConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(
            f"Unknown configuration key(s): {', '.join(unknown)}",
            details={"keys": unknown},
        )

    kwargs: dict[str, Any] = {}
    if "max_depth" in data:
        kwargs["max_depth"] = _coerce_depth(data["max_depth"])
    if "seed" in data:
        kwargs["seed"] = normalize_seed(data["seed"])
    if "locale" in data:
        kwargs["locale"] = _coerce_optional_str(data["locale"], label="locale")
    if "log_level" in data:
        kwargs["log_level"] = _coerce_log_level(data["log_level"])
    if "log_json" in data:
        kwargs["log_json"] = _coerce_bool(data["log_json"], label="log_json")
    return ForgeConfig(**kwargs)


def _coerce_depth(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError("max_depth must be a non-negative integer.", details={"value": value})
    try:
        depth = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            "max_depth must be a non-negative integer.", details={"value": value}
        ) from exc
    if depth < 0 or (isinstance(value, float) and not value.is_integer()):
        raise ConfigError("max_depth must be a non-negative integer.", details={"value": value})
    return depth


def _coerce_optional_str(value: Any, *, label: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{label} must be a string.", details={"value": value})
    stripped = value.strip()
    return stripped or None


def _coerce_log_level(value: Any) -> str:
    if not isinstance(value, str) or value.strip().lower() not in _LOG_LEVELS:
        raise ConfigError(
            f"log_level must be one of: {', '.join(sorted(_LOG_LEVELS))}.",
            details={"value": value},
        )
    return value.strip().lower()


def _coerce_bool(value: Any, *, label: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    raise ConfigError(f"{label} must be a boolean.", details={"value": value})


def apply_logging(config: ForgeConfig) -> None:
    """Push the configured level and output mode into the global logger."""

    get_logger().configure(level=config.log_level, json_mode=config.log_json)


__all__ = ["ENV_PREFIX", "ForgeConfig", "apply_logging", "load_config", "normalize_seed"]
