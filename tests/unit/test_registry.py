"""Tests for the run registry."""

from pathlib import Path

import pytest

from redis_image_test.errors import HarnessError
from redis_image_test.registry import ContainerRecord, RunRegistry


@pytest.fixture
def registry(tmp_path: Path) -> RunRegistry:
    """Registry in a temporary directory."""
    return RunRegistry.create(tmp_path)


def test_create_makes_private_directory(tmp_path: Path) -> None:
    """Each registry gets its own fresh directory."""
    first = RunRegistry.create(tmp_path)
    second = RunRegistry.create(tmp_path)

    assert first.directory.is_dir()
    assert first.directory.parent == tmp_path
    assert first.directory.name.startswith("redis-image-test-")
    assert first.directory != second.directory


def test_reserve_returns_unwritten_path(registry: RunRegistry) -> None:
    """Reserving leaves the cid file for the engine to write."""
    cidfile = registry.reserve("no_pass")

    assert cidfile == registry.directory / "no_pass"
    assert not cidfile.exists()


def test_reserve_rejects_registered_name(registry: RunRegistry) -> None:
    """A name can only be registered once."""
    registry.reserve("no_pass").write_text("abc123")

    with pytest.raises(HarnessError, match="already registered"):
        registry.reserve("no_pass")


def test_get_reads_container_id(registry: RunRegistry) -> None:
    """Returns the record with the stripped container id."""
    cidfile = registry.reserve("no_root")
    cidfile.write_text("abc123\n")

    assert registry.get("no_root") == ContainerRecord(
        name="no_root", container_id="abc123", cidfile=cidfile
    )


def test_get_raises_for_unknown_name(registry: RunRegistry) -> None:
    """Raises HarnessError when nothing is registered under the name."""
    with pytest.raises(HarnessError, match="No container registered as 'missing'"):
        registry.get("missing")


def test_records_lists_every_container(registry: RunRegistry) -> None:
    """Lists all records sorted by name, including ones without an id."""
    registry.reserve("testpass2").write_text("bbb")
    registry.reserve("no_pass").write_text("aaa")
    registry.reserve("broken").write_text("")

    records = registry.records()

    assert [r.name for r in records] == ["broken", "no_pass", "testpass2"]
    assert [r.container_id for r in records] == ["", "aaa", "bbb"]


def test_forget_removes_record(registry: RunRegistry) -> None:
    """Forgetting drops the record and tolerates unknown names."""
    registry.reserve("no_pass").write_text("aaa")

    registry.forget("no_pass")
    registry.forget("never_started")

    assert registry.records() == []


def test_close_removes_directory(registry: RunRegistry) -> None:
    """Closing an empty registry deletes its directory."""
    registry.close()

    assert not registry.directory.exists()
    assert registry.records() == []
