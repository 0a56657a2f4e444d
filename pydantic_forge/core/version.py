"""Installed package version lookup."""

from __future__ import annotations

from importlib import metadata

_PACKAGE_NAME = "pydantic-forge"


def get_tool_version() -> str:
    try:
        return metadata.version(_PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


__all__ = ["get_tool_version"]
