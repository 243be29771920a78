"""Creation and teardown of the containers used by the scenarios."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from redis_image_test.engines.base import (
    ADDRESS_FORMAT,
    EXIT_CODE_FORMAT,
    ContainerEngine,
)
from redis_image_test.errors import (
    ContainerEngineError,
    ContainerLaunchError,
    HarnessError,
)
from redis_image_test.models.config import HarnessConfig
from redis_image_test.registry import ContainerRecord, RunRegistry

log = logging.getLogger(__name__)


@dataclass(kw_only=True)
class ContainerLifecycle:
    """Starts containers from the image under test and tears them down."""

    engine: ContainerEngine
    registry: RunRegistry
    config: HarnessConfig
    _torn_down: bool = field(default=False, init=False, repr=False)

    async def create(
        self,
        name: str,
        *extra_args: str,
        env: Mapping[str, str] | None = None,
    ) -> ContainerRecord:
        """Start a detached container and register it as ``name``.

        Raises:
            ContainerLaunchError: If the engine fails to start the container

        """
        cidfile = self.registry.reserve(name)
        result = await self.engine.run_detached(
            self.config.image_name,
            cidfile=cidfile,
            args=[*self.config.docker_args, *extra_args],
            env=env,
            command=self.config.container_args,
        )
        if not result.ok:
            raise ContainerLaunchError(f"Failed to create container '{name}'", result)

        record = self.registry.get(name)
        log.info("Created container %s (%s)", record.container_id, name)
        return record

    async def resolve_address(self, name: str) -> str:
        """Return the current network address of ``name``, empty if unassigned."""
        record = self.registry.get(name)
        result = await self.engine.inspect(record.container_id, ADDRESS_FORMAT)
        if not result.ok:
            raise ContainerEngineError(f"Cannot inspect container '{name}'", result)
        return result.output

    async def require_address(self, name: str) -> str:
        """Like ``resolve_address`` but the address must be assigned."""
        if not (address := await self.resolve_address(name)):
            raise HarnessError(f"Container '{name}' has no network address")
        return address

    async def stop(self, name: str) -> None:
        """Stop ``name`` but keep it registered for teardown."""
        record = self.registry.get(name)
        result = await self.engine.stop(record.container_id)
        if not result.ok:
            raise ContainerEngineError(f"Failed to stop container '{name}'", result)

    async def dump_logs(self, name: str) -> None:
        """Log the output of the container registered as ``name``."""
        record = self.registry.get(name)
        result = await self.engine.logs(record.container_id)
        log.error(
            "Logs of container %s (%s):\n%s%s",
            record.container_id,
            name,
            result.stdout,
            result.stderr,
        )

    async def stop_and_remove(self, record: ContainerRecord) -> None:
        """Stop and remove a container, dumping diagnostics if it failed.

        Inspection output and logs are captured before removal, once the
        container is gone they cannot be recovered.
        """
        if record.container_id:
            log.info("Stopping and removing container %s...", record.container_id)
            result = await self.engine.stop(record.container_id)
            if not result.ok:
                raise ContainerEngineError(
                    f"Failed to stop container '{record.name}'", result
                )

            state = await self.engine.inspect(record.container_id, EXIT_CODE_FORMAT)
            if not state.ok:
                log.info("Container %s is already gone", record.container_id)
            else:
                if state.output != "0":
                    await self._dump_diagnostics(record, state.output)
                await self.engine.remove(record.container_id)

        self.registry.forget(record.name)
        log.info("Done.")

    async def teardown(self) -> None:
        """Stop and remove every registered container, then the registry.

        Runs once; later calls do nothing. A container that cannot be torn
        down is reported and skipped so the others are still reclaimed.
        """
        if self._torn_down:
            return
        self._torn_down = True

        for record in self.registry.records():
            try:
                await self.stop_and_remove(record)
            except HarnessError:
                log.exception("Cleanup of container '%s' failed", record.name)
                self.registry.forget(record.name)
        self.registry.close()

    async def _dump_diagnostics(self, record: ContainerRecord, exit_code: str) -> None:
        log.warning(
            "Container %s (%s) exited with %s, inspecting it",
            record.container_id,
            record.name,
            exit_code,
        )
        inspection = await self.engine.inspect(record.container_id)
        log.warning("%s", inspection.stdout)
        logs = await self.engine.logs(record.container_id)
        log.warning("%s%s", logs.stdout, logs.stderr)
