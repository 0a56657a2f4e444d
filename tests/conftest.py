from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pydantic_forge.logging import LOG_LEVELS, get_logger  # noqa: E402
from pydantic_forge.providers.registry import default_registry  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_process_state() -> Iterator[None]:
    """Keep the default handler set and the global logger clean between tests."""

    registry = default_registry()
    saved = {ref.kind: ref.func for ref in registry.available()}
    logger = get_logger()
    level, json_mode = logger.config.level, logger.config.json
    yield
    registry.clear()
    for kind, handler in saved.items():
        registry.register(kind, handler)
    logger.config.level = level
    logger.config.json = json_mode


@pytest.fixture
def debug_logging() -> Iterator[None]:
    get_logger().configure(level="debug")
    yield
    get_logger().config.level = LOG_LEVELS["info"]
