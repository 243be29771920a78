"""Tests for run plan models."""

import pytest
from pydantic import ValidationError

from redis_image_test.models.plan import (
    ALT_UID_ARGS,
    PlanStep,
    RunPlan,
    SuiteDefinition,
    default_plan,
    single_suite_plan,
)
from redis_image_test.testing.factories import SuiteDefinitionFactory


def test_default_plan_order() -> None:
    """The default plan runs creation, four suites, password change, docs."""
    steps = default_plan().to_steps()

    assert [(step.name, step.kind) for step in steps] == [
        ("container_creation", "container-creation"),
        ("no_pass", "suite"),
        ("no_root", "suite"),
        ("no_pass_altuid", "suite"),
        ("no_root_altuid", "suite"),
        ("password_change", "password-change"),
        ("documentation", "documentation"),
    ]


def test_default_suites() -> None:
    """Suites cover password and alternate uid combinations."""
    suites = {suite.name: suite for suite in default_plan().suites}

    assert suites["no_pass"].password == ""
    assert suites["no_pass"].engine_args == ()
    assert suites["no_root"].password == "pass"
    assert suites["no_pass_altuid"].engine_args == ALT_UID_ARGS
    assert suites["no_root_altuid"].password == "pass"
    assert suites["no_root_altuid"].engine_args == ("-u", "12345")


def test_single_suite_plan() -> None:
    """Only the selected suite runs."""
    steps = single_suite_plan("no_root", "secret").to_steps()

    assert len(steps) == 1
    assert steps[0].suite == SuiteDefinition(name="no_root", password="secret")


def test_suite_steps_carry_their_suite() -> None:
    """Each suite step references the suite it runs."""
    suite = SuiteDefinitionFactory.build()
    plan = RunPlan(
        container_creation=False,
        suites=[suite],
        password_change=False,
        documentation=False,
    )

    assert plan.to_steps() == [PlanStep(name=suite.name, kind="suite", suite=suite)]


def test_plan_from_json() -> None:
    """Plans load from JSON with defaults for omitted fields."""
    plan = RunPlan.model_validate_json(
        '{"suites": [{"name": "custom", "password": "x", "engine_args": ["-u", "7"]}],'
        ' "documentation": false}'
    )

    assert plan.version == "1.0"
    assert plan.container_creation is True
    assert plan.suites[0].engine_args == ["-u", "7"]
    assert [step.name for step in plan.to_steps()] == [
        "container_creation",
        "custom",
        "password_change",
    ]


def test_rejects_unknown_step_kind() -> None:
    """Step kinds are restricted to the known scenarios."""
    with pytest.raises(ValidationError):
        PlanStep(name="x", kind="unknown")  # type: ignore[arg-type]


def test_models_are_frozen() -> None:
    """Plan models cannot be modified after creation."""
    suite = SuiteDefinition(name="no_pass")

    with pytest.raises(ValidationError):
        suite.password = "changed"  # type: ignore[misc]


def test_plan_rejects_unknown_fields() -> None:
    """A misspelt option in a plan file is an error, not a silent default."""
    with pytest.raises(ValidationError, match="documentaton"):
        RunPlan.model_validate_json('{"documentaton": false}')
