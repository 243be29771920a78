"""Container engine running the engine CLI as a subprocess."""

import asyncio
import logging
import shlex
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass

from pydantic import BaseModel

from redis_image_test.engines.base import ContainerEngine
from redis_image_test.models.result import CommandResult, redact

log = logging.getLogger(__name__)

# Exit status a shell reports for a command it cannot find
COMMAND_NOT_FOUND = 127


class CliEngineConfig(BaseModel):
    """Configuration shared by CLI-driven engines."""

    executable: str


@dataclass(frozen=True, kw_only=True)
class CliContainerEngine(ContainerEngine):
    """Engine invoking ``<executable> <args...>`` without a shell."""

    executable: str

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: CliEngineConfig
    ) -> AsyncGenerator["CliContainerEngine", None]:
        """Create engine from its configuration."""
        yield cls(executable=config.executable)

    async def execute(
        self,
        args: Sequence[str],
        *,
        timeout: float | None = None,
    ) -> CommandResult:
        """Run the engine executable with the given arguments."""
        argv = [self.executable, *args]
        log.debug("+ %s", shlex.join(redact(argv)))

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            return CommandResult(
                args=argv, returncode=COMMAND_NOT_FOUND, stderr=str(exc)
            )

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout)
        except TimeoutError:
            log.debug("Killing '%s' after %ss", shlex.join(redact(argv)), timeout)
            process.kill()
            returncode = await process.wait()
            return CommandResult(args=argv, returncode=returncode, timed_out=True)

        result = CommandResult(
            args=argv,
            returncode=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
        )
        log.debug("exit=%d", result.returncode)
        return result
