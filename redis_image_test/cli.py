"""CLI entry point for the Redis image test harness."""

import argparse
import asyncio
import logging
import os
import shlex
import signal
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

from pydantic import SecretStr, ValidationError

from redis_image_test.context import RunContext
from redis_image_test.engines.loading import available_engines, load_engine_manifest
from redis_image_test.errors import HarnessError
from redis_image_test.models.config import DEFAULT_IMAGE_NAME, HarnessConfig
from redis_image_test.models.plan import RunPlan, default_plan, single_suite_plan
from redis_image_test.models.result import Outcome, ScenarioResult
from redis_image_test.orchestrator import TestOrchestrator

STATUS_SYMBOLS = {
    "success": "✅",
    "failure": "❌",
    "error": "❗",
}


def log_results_summary(
    log: logging.Logger, results: Sequence[ScenarioResult]
) -> None:
    """Log a formatted summary of the executed steps."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for result in results:
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        log.info("%s %s: %s (%.2fs)", symbol, result.name, result.status, result.duration)
        if result.message:
            log.info("  Message: %s", result.message)


def env_flag(value: str | None) -> bool:
    """Interpret an environment variable as a boolean switch."""
    return value is not None and value.strip().lower() not in {"", "0", "false", "no"}


def split_args(value: str | None) -> Sequence[str]:
    """Split a shell-style argument string, as found in DOCKER_ARGS."""
    return tuple(shlex.split(value)) if value else ()


def build_plan(config: HarnessConfig, plan_path: Path | None = None) -> RunPlan:
    """Pick the plan: an explicit file, a single PASS suite, or the default."""
    if plan_path is not None:
        return RunPlan.model_validate_json(plan_path.read_text())
    if config.password is not None:
        return single_suite_plan(config.suite_name, config.password.get_secret_value())
    return default_plan()


async def run(
    engine_key: str,
    engine_config_json: str,
    config: HarnessConfig,
    plan: RunPlan,
) -> int:
    """Run the plan against the image and return the exit code."""
    log = logging.getLogger("redis_image_test")

    loop = asyncio.get_running_loop()
    if (task := asyncio.current_task()) is not None:
        loop.add_signal_handler(signal.SIGTERM, task.cancel)

    outcome: Outcome = "failure"
    results: Sequence[ScenarioResult] = []
    try:
        log.info("Loading container engine: %s", engine_key)
        manifest = load_engine_manifest(engine_key)
        async with (
            manifest.open(engine_config_json) as engine,
            RunContext.open(config, engine) as ctx,
        ):
            results = ctx.results
            orchestrator = TestOrchestrator(plan=plan)
            await orchestrator.run(ctx)
            outcome = ctx.outcome
    except (HarnessError, ValidationError) as exc:
        log.error("Cannot set up the run: %s", exc)
    except asyncio.CancelledError:
        log.error("Run interrupted, containers have been cleaned up")
    finally:
        loop.remove_signal_handler(signal.SIGTERM)

    log_results_summary(log, results)

    if outcome == "success":
        print("Test succeeded.")
        return 0
    print("Test failed.")
    return 1


def build_config(args: argparse.Namespace) -> HarnessConfig:
    """Create the harness configuration from parsed arguments."""
    return HarnessConfig(
        image_name=args.image_name,
        version=args.expected_version or None,
        docker_args=split_args(args.docker_args),
        container_args=split_args(args.container_args),
        password=SecretStr(args.password) if args.password else None,
        suite_name=args.suite_name,
        connect_attempts=args.connect_attempts,
        connect_interval=args.connect_interval,
        creation_timeout=args.creation_timeout,
    )


def build_parser(environ: Mapping[str, str] = os.environ) -> argparse.ArgumentParser:
    """Build the argument parser; defaults come from the environment."""
    parser = argparse.ArgumentParser(
        description="Run integration tests against a Redis container image"
    )
    parser.add_argument(
        "--image-name",
        default=environ.get("IMAGE_NAME", DEFAULT_IMAGE_NAME),
        help="Image to test (IMAGE_NAME)",
    )
    parser.add_argument(
        "--expected-version",
        default=environ.get("VERSION", ""),
        help="Substring expected in 'redis-server --version' (VERSION)",
    )
    parser.add_argument(
        "--engine",
        default=environ.get("CONTAINER_ENGINE", "docker"),
        help=f"Container engine key, one of {available_engines()} (CONTAINER_ENGINE)",
    )
    parser.add_argument(
        "--engine-config",
        default="{}",
        help="JSON configuration for the container engine",
    )
    parser.add_argument(
        "--docker-args",
        default=environ.get("DOCKER_ARGS", ""),
        help="Extra engine arguments for every container (DOCKER_ARGS)",
    )
    parser.add_argument(
        "--container-args",
        default=environ.get("CONTAINER_ARGS", ""),
        help="Arguments passed to the container command (CONTAINER_ARGS)",
    )
    parser.add_argument(
        "--password",
        default=environ.get("PASS", ""),
        help="Run a single suite with this password (PASS)",
    )
    parser.add_argument(
        "--suite-name",
        default="no_root",
        help="Container name of the single suite selected by --password",
    )
    parser.add_argument(
        "--plan",
        type=Path,
        default=None,
        help="JSON file describing the steps to run",
    )
    parser.add_argument("--connect-attempts", type=int, default=10)
    parser.add_argument("--connect-interval", type=float, default=2.0)
    parser.add_argument(
        "--creation-timeout",
        type=float,
        default=60.0,
        help="Seconds an invalid configuration may take to be rejected",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=env_flag(environ.get("DEBUG")),
        help="Trace every engine command (DEBUG)",
    )
    return parser


def main() -> None:
    """CLI entry point."""
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        config = build_config(args)
        plan = build_plan(config, args.plan)
    except (OSError, ValidationError) as exc:
        logging.getLogger("redis_image_test").error("Invalid configuration: %s", exc)
        print("Test failed.")
        sys.exit(1)

    exit_code = asyncio.run(
        run(
            engine_key=args.engine,
            engine_config_json=args.engine_config,
            config=config,
            plan=plan,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
