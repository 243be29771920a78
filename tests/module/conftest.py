"""Fixtures for module tests against a real container engine."""

import os
import shutil

import pytest

from redis_image_test.cli import build_config, build_parser
from redis_image_test.models.config import HarnessConfig


@pytest.fixture(scope="session")
def engine_key() -> str:
    """Engine to test with, skipping when its executable is not installed."""
    key = os.environ.get("CONTAINER_ENGINE", "docker")
    if shutil.which(key) is None:
        pytest.skip(f"{key} is not installed")
    return key


@pytest.fixture(scope="session")
def harness_config() -> HarnessConfig:
    """Configuration from the environment; IMAGE_NAME must name a local image."""
    if "IMAGE_NAME" not in os.environ:
        pytest.skip("IMAGE_NAME is not set")
    return build_config(build_parser().parse_args([]))
