"""Fixtures for unit tests, backed by the in-memory container engine."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import pytest

from redis_image_test.context import RunContext
from redis_image_test.models.config import HarnessConfig
from redis_image_test.testing.engine import FakeContainerEngine
from redis_image_test.testing.protocols import OpenContextFn

IMAGE_NAME = "quay.io/test/redis-32:latest"


@pytest.fixture
def sleeps() -> list[float]:
    """Sleeps requested by the harness, recorded instead of awaited."""
    return []


@pytest.fixture
def config() -> HarnessConfig:
    """Configuration used by the unit tests."""
    return HarnessConfig(
        image_name=IMAGE_NAME,
        version="3.2.4",
        connect_attempts=3,
        connect_interval=2.0,
    )


@pytest.fixture
def engine() -> FakeContainerEngine:
    """Engine simulating a healthy Redis image."""
    return FakeContainerEngine()


@pytest.fixture
def open_context(
    config: HarnessConfig, tmp_path: Path, sleeps: list[float]
) -> OpenContextFn:
    """Return a function opening run contexts over a given engine."""

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    @asynccontextmanager
    async def _open(
        engine: FakeContainerEngine, **overrides: Any
    ) -> AsyncGenerator[RunContext, None]:
        run_config = config.model_copy(update=overrides)
        async with RunContext.open(
            run_config, engine, sleep=fake_sleep, base_dir=tmp_path
        ) as ctx:
            yield ctx

    return _open


@pytest.fixture
async def ctx(
    open_context: OpenContextFn, engine: FakeContainerEngine
) -> AsyncGenerator[RunContext, None]:
    """Run context over the default fake engine."""
    async with open_context(engine) as context:
        yield context
