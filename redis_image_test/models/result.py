"""Models for command and scenario results."""

import shlex
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal, TypeAlias

Outcome: TypeAlias = Literal["success", "failure"]
ScenarioStatus: TypeAlias = Literal["success", "failure", "error"]

MASK = "*****"
# Options whose value is a credential
SECRET_OPTIONS = frozenset({"-a"})
# Environment assignments whose value is a credential
SECRET_ASSIGNMENTS = ("REDIS_PASSWORD=",)


def redact(args: Sequence[str]) -> list[str]:
    """Copy of ``args`` with passwords replaced by a mask."""
    redacted: list[str] = []
    secret_follows = False
    for arg in args:
        if secret_follows:
            arg = MASK
        elif arg.startswith(SECRET_ASSIGNMENTS):
            arg = arg.partition("=")[0] + "=" + MASK
        secret_follows = arg in SECRET_OPTIONS
        redacted.append(arg)
    return redacted


@dataclass(frozen=True, kw_only=True)
class CommandResult:
    """Result of a single container engine invocation."""

    args: Sequence[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        """Whether the command completed with exit status 0."""
        return not self.timed_out and self.returncode == 0

    @property
    def output(self) -> str:
        """Stripped standard output."""
        return self.stdout.strip()

    def describe(self) -> str:
        """Describe the command and how it ended, passwords masked."""
        command = shlex.join(redact(self.args))
        if self.timed_out:
            return f"'{command}' timed out"
        detail = self.stderr.strip() or self.stdout.strip()
        if detail:
            return f"'{command}' exited with {self.returncode}: {detail}"
        return f"'{command}' exited with {self.returncode}"


@dataclass(frozen=True, kw_only=True)
class ScenarioResult:
    """Result of one step of the run.

    Contains only the execution outcome - the orchestrator knows the order.
    """

    name: str
    status: ScenarioStatus
    duration: float
    message: str | None = None
