"""Redis command-line client, run from the image under test."""

from collections.abc import Sequence
from dataclasses import dataclass

from redis_image_test.engines.base import ContainerEngine
from redis_image_test.models.result import CommandResult


@dataclass(frozen=True, kw_only=True)
class RedisCli:
    """Runs ``redis-cli`` in a throwaway container of the image."""

    engine: ContainerEngine
    image_name: str
    executable: str = "redis-cli"

    def build_args(
        self, address: str, command: Sequence[str], *, password: str = ""
    ) -> list[str]:
        """Build the client argument list; ``-a`` only when a password is set."""
        args = [self.executable, "-h", address]
        if password:
            args.extend(("-a", password))
        return [*args, *command]

    async def command(
        self, address: str, *command: str, password: str = ""
    ) -> CommandResult:
        """Send one command to the server at ``address``."""
        return await self.engine.run_foreground(
            self.image_name,
            command=self.build_args(address, command, password=password),
        )

    async def reply(self, address: str, *command: str, password: str = "") -> str:
        """Send one command and return the stripped reply."""
        result = await self.command(address, *command, password=password)
        return result.output
