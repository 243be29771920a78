"""Docker container engine."""

from redis_image_test.engines.cli import CliContainerEngine, CliEngineConfig
from redis_image_test.engines.manifest import EngineManifest


class DockerConfig(CliEngineConfig):
    """Configuration for the docker engine."""

    executable: str = "docker"


docker_manifest = EngineManifest(
    config_cls=DockerConfig,
    engine_factory=CliContainerEngine.from_config,
)
