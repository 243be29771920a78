"""Models describing which steps a run executes."""

from collections.abc import Sequence
from typing import Literal

from pydantic import Field

from redis_image_test.models.base import Model

ALT_UID_ARGS: Sequence[str] = ("-u", "12345")


class SuiteDefinition(Model):
    """One container and the battery of checks run against it."""

    name: str = Field(..., description="Logical container name, e.g. 'no_pass'")
    password: str = Field(default="", description="REDIS_PASSWORD, empty for none")
    engine_args: Sequence[str] = Field(
        default=(), description="Extra engine arguments for this container"
    )


class PlanStep(Model):
    """A single step of a run, in execution order."""

    name: str
    kind: Literal["container-creation", "suite", "password-change", "documentation"]
    suite: SuiteDefinition | None = None


class RunPlan(Model):
    """Complete run plan, either the default one or loaded from JSON."""

    version: str = Field(default="1.0", description="Plan schema version")
    container_creation: bool = Field(
        default=True, description="Check that invalid configuration is rejected"
    )
    suites: Sequence[SuiteDefinition] = Field(default_factory=list)
    password_change: bool = Field(
        default=True, description="Check password rotation on a shared volume"
    )
    documentation: bool = Field(
        default=True, description="Check the documentation shipped in the image"
    )

    def to_steps(self) -> Sequence[PlanStep]:
        """Flatten the plan into the ordered list of steps to execute."""
        steps: list[PlanStep] = []
        if self.container_creation:
            steps.append(PlanStep(name="container_creation", kind="container-creation"))
        for suite in self.suites:
            steps.append(PlanStep(name=suite.name, kind="suite", suite=suite))
        if self.password_change:
            steps.append(PlanStep(name="password_change", kind="password-change"))
        if self.documentation:
            steps.append(PlanStep(name="documentation", kind="documentation"))
        return steps


def default_plan() -> RunPlan:
    """Plan covering every scenario, with and without a password and root."""
    return RunPlan(
        suites=[
            SuiteDefinition(name="no_pass"),
            SuiteDefinition(name="no_root", password="pass"),
            SuiteDefinition(name="no_pass_altuid", engine_args=ALT_UID_ARGS),
            SuiteDefinition(
                name="no_root_altuid", password="pass", engine_args=ALT_UID_ARGS
            ),
        ],
    )


def single_suite_plan(name: str, password: str) -> RunPlan:
    """Plan running one suite only, as selected by PASS."""
    return RunPlan(
        container_creation=False,
        suites=[SuiteDefinition(name=name, password=password)],
        password_change=False,
        documentation=False,
    )
