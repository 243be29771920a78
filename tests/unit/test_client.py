"""Tests for the redis-cli wrapper."""

from redis_image_test.client import RedisCli
from redis_image_test.testing.engine import FakeContainerEngine

IMAGE_NAME = "quay.io/test/redis-32:latest"


def test_build_args_without_password() -> None:
    """Omits -a when no password is configured."""
    client = RedisCli(engine=FakeContainerEngine(), image_name=IMAGE_NAME)

    assert client.build_args("172.17.0.2", ["ping"]) == [
        "redis-cli",
        "-h",
        "172.17.0.2",
        "ping",
    ]


def test_build_args_with_password() -> None:
    """Passes the password as one argument, whatever it contains."""
    client = RedisCli(engine=FakeContainerEngine(), image_name=IMAGE_NAME)

    args = client.build_args("172.17.0.2", ["get", "b"], password="pass with space")

    assert args == [
        "redis-cli",
        "-h",
        "172.17.0.2",
        "-a",
        "pass with space",
        "get",
        "b",
    ]


async def test_command_runs_client_from_image() -> None:
    """The client runs in a throwaway container of the image under test."""
    engine = FakeContainerEngine()
    client = RedisCli(engine=engine, image_name=IMAGE_NAME)

    result = await client.command("172.17.0.2", "ping")

    assert engine.calls == [
        ["run", "--rm", IMAGE_NAME, "redis-cli", "-h", "172.17.0.2", "ping"]
    ]
    assert result.returncode == 1
    assert "Connection refused" in result.stderr


async def test_reply_returns_stripped_output() -> None:
    """Returns the reply without the trailing newline."""
    engine = FakeContainerEngine()
    client = RedisCli(engine=engine, image_name=IMAGE_NAME)
    started = await engine.execute(["run", "-d", IMAGE_NAME])
    address = engine.containers[started.output].address

    assert await client.reply(address, "ping") == "PONG"
    assert await client.reply(address, "set", "a", "1") == "OK"
    assert await client.reply(address, "get", "a") == "1"
