"""Assertion scenarios run against the image under test.

Each scenario raises ``ScenarioFailedError`` when its check does not hold.
Rejections that are expected (a wrong password, an invalid configuration)
are passing outcomes, not errors.
"""

import logging
import re
import tempfile
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Literal, TypeAlias

from redis_image_test.context import RunContext
from redis_image_test.errors import ScenarioFailedError
from redis_image_test.models.config import DocumentationArtifact
from redis_image_test.models.plan import SuiteDefinition
from redis_image_test.models.result import CommandResult
from redis_image_test.probe import READY_REPLY, wait_until_ready

log = logging.getLogger(__name__)

CreationOutcome: TypeAlias = Literal["rejected", "accepted", "hung"]

PASSWORD_ENV = "REDIS_PASSWORD"
WRONG_PASSWORD_SUFFIX = "_foo"
INVALID_PASSWORD = "pass with space"
VERSION_COMMAND = "redis-server --version"
DATA_VOLUME_PATH = "/var/lib/redis/data"
PASSWORD_CHANGE_CONTAINERS = frozenset({"testpass1", "testpass2"})
# Evaluated by the shell inside the container, against its own environment
LOCAL_PING = 'redis-cli ${REDIS_PASSWORD:+-a "$REDIS_PASSWORD"} ping'

ROFF_LINE = re.compile(r"""^(?:[.']\\"|\.[A-Za-z]{1,3}\b)""")


async def check_basic_functionality(
    ctx: RunContext, address: str, password: str = ""
) -> None:
    """Write two keys and read the second one back."""
    log.info("Testing Redis (%s)", "with password" if password else "without password")
    await ctx.client.command(address, "set", "a", "1", password=password)
    await ctx.client.command(address, "set", "b", "2", password=password)
    reply = await ctx.client.reply(address, "get", "b", password=password)
    if reply != "2":
        raise ScenarioFailedError(f"Expected 'get b' to return '2', got {reply!r}")
    log.info("Success!")


async def check_login_access(
    ctx: RunContext,
    address: str,
    password: str,
    *,
    expect_success: bool,
    label: str = "configured password",
) -> None:
    """Ping with ``password`` and check access is granted or denied as expected.

    ``label`` names the password in messages, the password itself is never logged.
    """
    reply = await ctx.client.reply(address, "ping", password=password)
    granted = reply == READY_REPLY
    if granted != expect_success:
        expectation = "succeed" if expect_success else "fail"
        raise ScenarioFailedError(
            f"Login with the {label} should {expectation}, got {reply!r}"
        )
    log.info(
        "Login with the %s %s as expected",
        label,
        "succeeded" if granted else "failed",
    )


async def check_auth_matrix(ctx: RunContext, address: str, password: str) -> None:
    """The configured password works and, if there is one, a wrong one does not.

    Without a password any credential is accepted, so the wrong-password
    case is only checked when a password is configured.
    """
    log.info("Testing login accesses")
    await check_login_access(ctx, address, password, expect_success=True)
    if password:
        await check_login_access(
            ctx,
            address,
            password + WRONG_PASSWORD_SUFFIX,
            expect_success=False,
            label="wrong password",
        )


async def check_local_access(ctx: RunContext, name: str) -> None:
    """Reach the server from inside its own container over loopback."""
    log.info("Testing local access")
    record = ctx.registry.get(name)
    result = await ctx.engine.exec(record.container_id, ["bash", "-c", LOCAL_PING])
    if result.output != READY_REPLY:
        raise ScenarioFailedError(
            f"Local access to container '{name}' failed: {result.describe()}"
        )


async def check_version_probe(ctx: RunContext, name: str) -> None:
    """The server binary reports the expected version however the shell is entered."""
    expected = ctx.config.version
    if not expected:
        log.info("No expected version configured, skipping version probe")
        return

    log.info("Testing the image environment (expecting '%s')", expected)
    record = ctx.registry.get(name)
    probes: list[tuple[str, Callable[[], Awaitable[CommandResult]]]] = [
        (
            "run /bin/bash -c",
            lambda: ctx.engine.run_foreground(
                ctx.config.image_name, command=["/bin/bash", "-c", VERSION_COMMAND]
            ),
        ),
        (
            "exec /bin/bash -c",
            lambda: ctx.engine.exec(
                record.container_id, ["/bin/bash", "-c", VERSION_COMMAND]
            ),
        ),
        (
            "exec /bin/sh -ic",
            lambda: ctx.engine.exec(
                record.container_id, ["/bin/sh", "-ic", VERSION_COMMAND]
            ),
        ),
    ]
    for mode, probe in probes:
        result = await probe()
        if expected not in result.stdout + result.stderr:
            raise ScenarioFailedError(
                f"'{VERSION_COMMAND}' through {mode} does not report '{expected}': "
                f"{result.describe()}"
            )


def classify_creation(result: CommandResult) -> CreationOutcome:
    """Tell how a foreground launch ended."""
    if result.timed_out:
        return "hung"
    if result.returncode == 0:
        return "accepted"
    return "rejected"


async def check_container_creation_fails(ctx: RunContext) -> None:
    """A password containing whitespace must make the container exit with an error.

    The launch runs in the foreground under ``creation_timeout``. A container
    still running at the deadline is killed and counts as not rejected.
    """
    name = "container_creation"
    log.info("Testing image entrypoint usage")

    result = await ctx.engine.run_foreground(
        ctx.config.image_name,
        args=ctx.config.docker_args,
        env={PASSWORD_ENV: INVALID_PASSWORD},
        command=ctx.config.container_args,
        cidfile=ctx.registry.reserve(name),
        timeout=ctx.config.creation_timeout,
    )

    outcome = classify_creation(result)
    if outcome != "hung":
        # --rm already removed it; a hung one stays registered for teardown
        ctx.registry.forget(name)

    if outcome == "accepted":
        raise ScenarioFailedError(
            f"Container creation with {PASSWORD_ENV}='{INVALID_PASSWORD}' "
            "should fail, but it succeeded"
        )
    if outcome == "hung":
        raise ScenarioFailedError(
            f"Container creation with {PASSWORD_ENV}='{INVALID_PASSWORD}' did not "
            f"terminate within {ctx.config.creation_timeout}s"
        )
    log.info("Invalid configuration rejected (exit status %d)", result.returncode)


async def check_password_change(ctx: RunContext) -> None:
    """A new password applies to data persisted under the old one."""
    log.info("Testing password change")
    with tempfile.TemporaryDirectory(
        prefix="redis-image-test-data-", ignore_cleanup_errors=True
    ) as tmpdir:
        data_dir = Path(tmpdir) / "data"
        data_dir.mkdir()
        # The container user is arbitrary, the volume has to be writable by it
        Path(tmpdir).chmod(0o777)
        data_dir.chmod(0o777)
        volume = f"{data_dir}:{DATA_VOLUME_PATH}:Z"

        # Both containers go before the volume directory does
        try:
            await ctx.lifecycle.create(
                "testpass1", "-v", volume, env={PASSWORD_ENV: "foo"}
            )
            await wait_until_ready(ctx, "testpass1", "foo")
            await ctx.lifecycle.stop("testpass1")

            await ctx.lifecycle.create(
                "testpass2", "-v", volume, env={PASSWORD_ENV: "bar"}
            )
            await wait_until_ready(ctx, "testpass2", "bar")

            address = await ctx.lifecycle.require_address("testpass2")
            await check_login_access(
                ctx, address, "bar", expect_success=True, label="new password"
            )
            await check_login_access(
                ctx, address, "foo", expect_success=False, label="old password"
            )
        finally:
            for record in reversed(ctx.registry.records()):
                if record.name in PASSWORD_CHANGE_CONTAINERS:
                    await ctx.lifecycle.stop_and_remove(record)


def is_roff_document(text: str) -> bool:
    """Whether ``text`` starts like a roff (troff/groff) source document."""
    for line in text.splitlines():
        if line.strip():
            return ROFF_LINE.match(line) is not None
    return False


async def check_documentation_artifact(
    ctx: RunContext, artifact: DocumentationArtifact
) -> None:
    """Read one documentation file from the image and check its content."""
    result = await ctx.engine.run_foreground(
        ctx.config.image_name, command=["cat", artifact.path]
    )
    if not result.ok:
        raise ScenarioFailedError(f"Cannot read {artifact.path}: {result.describe()}")

    for pattern in ctx.config.documentation_patterns:
        if re.search(pattern, result.stdout) is None:
            raise ScenarioFailedError(
                f"File {artifact.path} does not include '{pattern}'"
            )

    if artifact.format == "roff" and not is_roff_document(result.stdout):
        raise ScenarioFailedError(f"File {artifact.path} is not in troff or groff format")


async def check_documentation(ctx: RunContext) -> None:
    """Every documentation file the image must ship is present and complete."""
    log.info("Testing documentation in the container image")
    for artifact in ctx.config.documentation:
        await check_documentation_artifact(ctx, artifact)
    log.info("Success!")


async def run_suite(ctx: RunContext, suite: SuiteDefinition) -> None:
    """Start one container and run the per-container battery against it."""
    env = {PASSWORD_ENV: suite.password} if suite.password else None
    await ctx.lifecycle.create(suite.name, *suite.engine_args, env=env)
    await wait_until_ready(ctx, suite.name, suite.password)

    address = await ctx.lifecycle.require_address(suite.name)
    await check_version_probe(ctx, suite.name)
    await check_auth_matrix(ctx, address, suite.password)
    await check_local_access(ctx, suite.name)
    await check_basic_functionality(ctx, address, suite.password)
