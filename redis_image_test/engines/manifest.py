"""Engine manifest definition for the plugin system."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

from redis_image_test.engines.base import ContainerEngine

ConfigT = TypeVar("ConfigT", bound=BaseModel)


@dataclass(frozen=True, kw_only=True)
class EngineManifest(Generic[ConfigT]):
    """Ties an engine's configuration model to the factory building it.

    The configuration is validated before the factory runs, so a bad
    ``--engine-config`` fails before any container is started.
    """

    config_cls: type[ConfigT]
    engine_factory: Callable[[ConfigT], AbstractAsyncContextManager[ContainerEngine]]

    def parse_config(self, raw: str) -> ConfigT:
        """Validate a JSON engine configuration; empty means all defaults."""
        return self.config_cls.model_validate_json(raw or "{}")

    def open(self, raw_config: str) -> AbstractAsyncContextManager[ContainerEngine]:
        """Validate ``raw_config`` and enter the engine factory with it."""
        return self.engine_factory(self.parse_config(raw_config))
