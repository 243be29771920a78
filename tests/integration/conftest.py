"""Fixtures for integration tests."""

import stat
from pathlib import Path

import pytest

from redis_image_test.engines.cli import CliContainerEngine

FAKE_ENGINE = """\
#!/bin/sh
printf '%s\\n' "$*" >> "{log}"
case "$1" in
  echo)
    shift
    for arg in "$@"; do printf '%s\\n' "$arg"; done
    ;;
  fail)
    echo boom >&2
    exit 3
    ;;
  sleep)
    exec sleep "$2"
    ;;
  run)
    shift
    while [ $# -gt 0 ]; do
      if [ "$1" = "--cidfile" ]; then
        printf 'c0ffee\\n' > "$2"
        shift
      fi
      shift
    done
    echo c0ffee
    ;;
  inspect)
    if [ "$2" = "-f" ]; then
      case "$3" in
        *IPAddress*) echo 172.17.0.2 ;;
        *ExitCode*) echo 0 ;;
      esac
    else
      echo '[{{}}]'
    fi
    ;;
  stop|rm|logs)
    echo c0ffee
    ;;
  *)
    echo "unknown command $1" >&2
    exit 125
    ;;
esac
"""


@pytest.fixture
def engine_log(tmp_path: Path) -> Path:
    """File the fake engine appends each of its invocations to."""
    return tmp_path / "engine.log"


@pytest.fixture
def engine_executable(tmp_path: Path, engine_log: Path) -> Path:
    """Shell script standing in for the docker executable."""
    script = tmp_path / "docker"
    script.write_text(FAKE_ENGINE.format(log=engine_log))
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    return script


@pytest.fixture
def engine(engine_executable: Path) -> CliContainerEngine:
    """CLI engine driving the fake executable."""
    return CliContainerEngine(executable=str(engine_executable))
