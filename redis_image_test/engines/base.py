"""Abstract base class for container engines."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from redis_image_test.models.result import CommandResult

ADDRESS_FORMAT = "{{.NetworkSettings.IPAddress}}"
EXIT_CODE_FORMAT = "{{.State.ExitCode}}"


def env_args(env: Mapping[str, str] | None) -> list[str]:
    """Turn an environment mapping into engine '-e KEY=VALUE' arguments."""
    args: list[str] = []
    for key, value in (env or {}).items():
        args.extend(("-e", f"{key}={value}"))
    return args


@dataclass(frozen=True, kw_only=True)
class ContainerEngine(ABC):
    """Abstract base for container engines driven through their CLI.

    Every operation is expressed as an argument list handed to ``execute``;
    implementations only decide how those arguments reach the engine.
    """

    @abstractmethod
    async def execute(
        self,
        args: Sequence[str],
        *,
        timeout: float | None = None,
    ) -> CommandResult:
        """Run one engine command.

        Args:
            args: Engine arguments, without the engine executable
            timeout: Hard limit in seconds, the command is killed when exceeded

        Returns:
            The command result, flagged ``timed_out`` when it was killed

        """

    async def run_detached(
        self,
        image: str,
        *,
        cidfile: Path,
        args: Sequence[str] = (),
        env: Mapping[str, str] | None = None,
        command: Sequence[str] = (),
    ) -> CommandResult:
        """Start a detached container and write its id to ``cidfile``."""
        return await self.execute(
            [
                "run",
                "-d",
                "--cidfile",
                str(cidfile),
                *args,
                *env_args(env),
                image,
                *command,
            ]
        )

    async def run_foreground(
        self,
        image: str,
        *,
        args: Sequence[str] = (),
        env: Mapping[str, str] | None = None,
        command: Sequence[str] = (),
        cidfile: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Run a throwaway container and wait for it to exit."""
        cid_args = ["--cidfile", str(cidfile)] if cidfile is not None else []
        return await self.execute(
            ["run", "--rm", *cid_args, *args, *env_args(env), image, *command],
            timeout=timeout,
        )

    async def stop(self, container_id: str) -> CommandResult:
        """Stop a running container."""
        return await self.execute(["stop", container_id])

    async def remove(self, container_id: str) -> CommandResult:
        """Remove a container together with its anonymous volumes."""
        return await self.execute(["rm", "-v", container_id])

    async def inspect(
        self, container_id: str, fmt: str | None = None
    ) -> CommandResult:
        """Inspect a container, optionally with a Go template format."""
        fmt_args = ["-f", fmt] if fmt is not None else []
        return await self.execute(["inspect", *fmt_args, container_id])

    async def exec(
        self,
        container_id: str,
        command: Sequence[str],
        *,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Run a command inside a running container."""
        return await self.execute(["exec", *env_args(env), container_id, *command])

    async def logs(self, container_id: str) -> CommandResult:
        """Fetch the logs of a container."""
        return await self.execute(["logs", container_id])
