"""Configuration for a harness run."""

from collections.abc import Sequence
from typing import Literal

from pydantic import Field, SecretStr

from redis_image_test.models.base import Model

DEFAULT_IMAGE_NAME = "centos/redis-32-centos7-candidate"


class DocumentationArtifact(Model):
    """A documentation file expected inside the image."""

    path: str = Field(..., description="Absolute path of the file in the image")
    format: Literal["roff", "any"] = Field(
        default="any", description="Document format the file must be in"
    )


DEFAULT_DOCUMENTATION: Sequence[DocumentationArtifact] = (
    DocumentationArtifact(path="/help.1", format="roff"),
    DocumentationArtifact(path="/usr/share/container-scripts/redis/README.md"),
)

DEFAULT_DOCUMENTATION_PATTERNS: Sequence[str] = ("6379", "REDIS.*PASSWORD", "volume")


class HarnessConfig(Model):
    """Settings shared by every step of a run."""

    image_name: str = Field(default=DEFAULT_IMAGE_NAME, description="Image under test")
    version: str | None = Field(
        default=None, description="Expected substring of 'redis-server --version'"
    )
    docker_args: Sequence[str] = Field(
        default=(), description="Extra engine arguments for every created container"
    )
    container_args: Sequence[str] = Field(
        default=(), description="Arguments appended after the image name"
    )
    password: SecretStr | None = Field(
        default=None, description="Password for a single-suite run (PASS)"
    )
    suite_name: str = Field(default="no_root", description="Single-suite run name")
    connect_attempts: int = Field(default=10, ge=1)
    connect_interval: float = Field(default=2.0, ge=0)
    creation_timeout: float = Field(
        default=60.0, gt=0, description="Hard timeout for invalid-input launches"
    )
    documentation: Sequence[DocumentationArtifact] = DEFAULT_DOCUMENTATION
    documentation_patterns: Sequence[str] = DEFAULT_DOCUMENTATION_PATTERNS
