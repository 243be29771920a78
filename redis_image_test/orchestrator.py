"""Test orchestrator running the steps of a plan one after another."""

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass

from redis_image_test import scenarios
from redis_image_test.context import RunContext
from redis_image_test.errors import HarnessError
from redis_image_test.models.plan import PlanStep, RunPlan
from redis_image_test.models.result import ScenarioResult

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class TestOrchestrator:
    """Runs a plan linearly, stopping at the first step that fails."""

    __test__ = False

    plan: RunPlan

    async def run(self, ctx: RunContext) -> Sequence[ScenarioResult]:
        """Run every step of the plan against the context.

        Args:
            ctx: Run context the steps share

        Returns:
            One result per executed step; the run stops after the first
            result that is not a success

        """
        steps = self.plan.to_steps()
        log.info("Running %d step(s) against %s", len(steps), ctx.config.image_name)

        for step in steps:
            result = await self._run_step(ctx, step)
            ctx.results.append(result)
            if result.status != "success":
                log.error("Step %s failed, aborting the run", step.name)
                return ctx.results

        ctx.outcome = "success"
        return ctx.results

    async def _run_step(self, ctx: RunContext, step: PlanStep) -> ScenarioResult:
        """Run one step and turn its outcome into a result."""
        log.info("Running tests for %s", step.name)
        started = time.monotonic()

        try:
            await self._dispatch(ctx, step)
        except HarnessError as exc:
            log.error("%s: %s", step.name, exc)
            return ScenarioResult(
                name=step.name,
                status="failure",
                duration=time.monotonic() - started,
                message=str(exc),
            )
        except Exception as exc:
            log.error("Step %s raised: %s", step.name, exc, exc_info=exc)
            return ScenarioResult(
                name=step.name,
                status="error",
                duration=time.monotonic() - started,
                message=str(exc),
            )

        duration = time.monotonic() - started
        log.info("Step %s passed (%.1fs)", step.name, duration)
        return ScenarioResult(name=step.name, status="success", duration=duration)

    async def _dispatch(self, ctx: RunContext, step: PlanStep) -> None:
        match step.kind:
            case "container-creation":
                await scenarios.check_container_creation_fails(ctx)
            case "suite":
                if step.suite is None:
                    raise HarnessError(f"Suite step {step.name} has no suite")
                await scenarios.run_suite(ctx, step.suite)
            case "password-change":
                await scenarios.check_password_change(ctx)
            case "documentation":
                await scenarios.check_documentation(ctx)
