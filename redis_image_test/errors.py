"""Exceptions raised by the test harness."""

from redis_image_test.models.result import CommandResult


class HarnessError(Exception):
    """Base class for fatal harness errors."""


class ContainerEngineError(HarnessError):
    """Raised when a container engine command that must succeed fails."""

    def __init__(self, message: str, result: CommandResult) -> None:
        super().__init__(f"{message}: {result.describe()}")
        self.result = result


class ContainerLaunchError(ContainerEngineError):
    """Raised when a container cannot be started."""


class ContainerNotReadyError(HarnessError):
    """Raised when a container never answers the readiness probe."""


class ScenarioFailedError(HarnessError):
    """Raised when a scenario assertion does not hold."""
