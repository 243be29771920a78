"""Explicit state of one harness run."""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path

from redis_image_test.client import RedisCli
from redis_image_test.engines.base import ContainerEngine
from redis_image_test.lifecycle import ContainerLifecycle
from redis_image_test.models.config import HarnessConfig
from redis_image_test.models.result import Outcome, ScenarioResult
from redis_image_test.registry import RunRegistry
from redis_image_test.retry import Sleep

log = logging.getLogger(__name__)


@dataclass(kw_only=True)
class RunContext:
    """Everything the scenarios share, passed to each of them.

    ``outcome`` starts as failure and is only flipped to success once every
    step of the run has passed.
    """

    config: HarnessConfig
    engine: ContainerEngine
    registry: RunRegistry
    lifecycle: ContainerLifecycle
    client: RedisCli
    sleep: Sleep = asyncio.sleep
    outcome: Outcome = "failure"
    results: list[ScenarioResult] = field(default_factory=list)

    @classmethod
    @asynccontextmanager
    async def open(
        cls,
        config: HarnessConfig,
        engine: ContainerEngine,
        *,
        sleep: Sleep = asyncio.sleep,
        base_dir: Path | None = None,
    ) -> AsyncGenerator["RunContext", None]:
        """Create a run context whose containers are torn down on exit.

        Teardown happens on every exit path: normal return, a raised error,
        or cancellation of the running task.
        """
        registry = RunRegistry.create(base_dir)
        lifecycle = ContainerLifecycle(engine=engine, registry=registry, config=config)
        context = cls(
            config=config,
            engine=engine,
            registry=registry,
            lifecycle=lifecycle,
            client=RedisCli(engine=engine, image_name=config.image_name),
            sleep=sleep,
        )
        try:
            yield context
        finally:
            await lifecycle.teardown()
