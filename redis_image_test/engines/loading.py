"""Container engine plugins, discovered through entry points."""

from collections.abc import Sequence
from importlib.metadata import entry_points
from typing import Any

from redis_image_test.engines.manifest import EngineManifest
from redis_image_test.errors import HarnessError

ENTRY_POINT_GROUP = "redis_image_test.engines"


class EngineNotFoundError(HarnessError):
    """Raised when no usable container engine is registered under a key."""


def available_engines() -> Sequence[str]:
    """Keys of the installed container engines, sorted."""
    return sorted({entry.name for entry in entry_points(group=ENTRY_POINT_GROUP)})


def load_engine_manifest(key: str) -> EngineManifest[Any]:
    """Load the manifest of the engine registered as ``key``.

    Raises:
        EngineNotFoundError: If the key is unknown, or its entry point does
            not refer to an engine manifest

    """
    matches = entry_points(group=ENTRY_POINT_GROUP, name=key)
    if not matches:
        raise EngineNotFoundError(
            f"Engine '{key}' not found. Available engines: {available_engines()}"
        )

    manifest = next(iter(matches)).load()
    if not isinstance(manifest, EngineManifest):
        raise EngineNotFoundError(
            f"Entry point '{key}' refers to {manifest!r}, not an engine manifest"
        )
    return manifest
