"""Podman container engine.

Podman accepts the same run/stop/rm/inspect/exec/logs surface as docker.
"""

from redis_image_test.engines.cli import CliContainerEngine, CliEngineConfig
from redis_image_test.engines.manifest import EngineManifest


class PodmanConfig(CliEngineConfig):
    """Configuration for the podman engine."""

    executable: str = "podman"


podman_manifest = EngineManifest(
    config_cls=PodmanConfig,
    engine_factory=CliContainerEngine.from_config,
)
