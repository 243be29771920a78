"""Bookkeeping of the containers started during a run.

Each container is recorded as one file named after its logical test name in
a temporary directory; the file holds the engine-assigned container id (the
engine writes it through ``--cidfile``). The directory is the only source of
truth for what has to be torn down.
"""

import logging
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from redis_image_test.errors import HarnessError

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ContainerRecord:
    """A container started by the harness."""

    name: str
    container_id: str
    cidfile: Path


class RunRegistry:
    """Directory of cid files, one per named container."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    @classmethod
    def create(cls, base_dir: Path | None = None) -> "RunRegistry":
        """Create a registry backed by a fresh temporary directory."""
        directory = Path(tempfile.mkdtemp(prefix="redis-image-test-", dir=base_dir))
        log.debug("Container registry at %s", directory)
        return cls(directory)

    def reserve(self, name: str) -> Path:
        """Return the cid file path for a new container called ``name``.

        The file itself is left for the engine to create.
        """
        cidfile = self.directory / name
        if cidfile.exists():
            raise HarnessError(f"A container named '{name}' is already registered")
        return cidfile

    def get(self, name: str) -> ContainerRecord:
        """Return the record of the container registered as ``name``."""
        cidfile = self.directory / name
        try:
            container_id = cidfile.read_text().strip()
        except FileNotFoundError:
            raise HarnessError(f"No container registered as '{name}'") from None
        return ContainerRecord(name=name, container_id=container_id, cidfile=cidfile)

    def records(self) -> Sequence[ContainerRecord]:
        """All records, including ones whose container never got an id."""
        if not self.directory.exists():
            return []
        return [self.get(path.name) for path in sorted(self.directory.iterdir())]

    def forget(self, name: str) -> None:
        """Drop the record of ``name``, if there is one."""
        (self.directory / name).unlink(missing_ok=True)

    def close(self) -> None:
        """Remove the registry directory; it must be empty by then."""
        if self.directory.exists():
            self.directory.rmdir()
