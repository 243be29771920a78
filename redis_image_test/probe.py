"""Waiting for a freshly started Redis container to accept connections."""

import logging

from redis_image_test.context import RunContext
from redis_image_test.errors import ContainerNotReadyError
from redis_image_test.retry import retry

log = logging.getLogger(__name__)

READY_REPLY = "PONG"


async def wait_until_ready(
    ctx: RunContext,
    name: str,
    password: str = "",
    *,
    max_attempts: int | None = None,
    interval: float | None = None,
) -> None:
    """Ping the container registered as ``name`` until it answers PONG.

    The address is resolved again on every attempt. Attempts and interval
    default to the run configuration.

    Raises:
        ContainerNotReadyError: If no attempt got PONG; the container logs
            are dumped first

    """
    if max_attempts is None:
        max_attempts = ctx.config.connect_attempts
    if interval is None:
        interval = ctx.config.connect_interval

    log.info(
        "Testing Redis connection to %s (%s)...",
        name,
        "with password" if password else "without password",
    )

    async def is_ready() -> bool:
        address = await ctx.lifecycle.resolve_address(name)
        if address:
            reply = await ctx.client.reply(address, "ping", password=password)
            if reply == READY_REPLY:
                return True
        log.info("Trying to connect...")
        return False

    if await retry(is_ready, times=max_attempts, interval=interval, sleep=ctx.sleep):
        log.info("Success!")
        return

    log.error("Giving up: Failed to connect to %s", name)
    await ctx.lifecycle.dump_logs(name)
    raise ContainerNotReadyError(
        f"Container '{name}' did not answer {READY_REPLY} "
        f"after {max_attempts} attempts"
    )
