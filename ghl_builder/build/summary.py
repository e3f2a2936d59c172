"""Rollup of step outcomes into a build summary."""

from dataclasses import dataclass, field
from typing import Any

from ..core.models import BuildStatus, StepKind, StepOutcome, utc_timestamp


@dataclass(frozen=True)
class BuildError:
    """A failed step as recorded in the build's error log."""
    step: str
    error: str
    timestamp: str

    def to_dict(self) -> dict[str, str]:
        return {"step": self.step, "error": self.error, "timestamp": self.timestamp}


@dataclass(frozen=True)
class BuildSummary:
    """Aggregate view of one customization run."""
    status: BuildStatus
    customization_status: str
    tags_created: list[str] = field(default_factory=list)
    custom_fields_created: list[str] = field(default_factory=list)
    templates_created: list[str] = field(default_factory=list)
    calendars_created: list[str] = field(default_factory=list)
    error_log: list[BuildError] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "customization_status": self.customization_status,
            "tags_created": list(self.tags_created),
            "custom_fields_created": list(self.custom_fields_created),
            "templates_created": list(self.templates_created),
            "calendars_created": list(self.calendars_created),
            "error_log": [e.to_dict() for e in self.error_log],
        }


def _created(steps: list[StepOutcome], kind: StepKind) -> list[str]:
    return [s.name for s in steps if s.step_kind == kind and s.succeeded]


def summarize_steps(steps: list[StepOutcome]) -> BuildSummary:
    """
    Roll a list of step outcomes up into a BuildSummary.

    A build is COMPLETED when at least one step succeeded (or there were
    no steps) and FAILED when every step failed. customization_status is
    "completed" only when every step succeeded, otherwise "partial".

    Args:
        steps: Outcomes in the order they were produced

    Returns:
        BuildSummary for the run
    """
    all_success = all(s.succeeded for s in steps)
    any_success = any(s.succeeded for s in steps)

    status = BuildStatus.COMPLETED if any_success or not steps else BuildStatus.FAILED

    error_log = [
        BuildError(
            step=f"{s.step_kind.value}: {s.name}",
            error=s.error or "Unknown error",
            timestamp=s.timestamp or utc_timestamp(),
        )
        for s in steps
        if not s.succeeded
    ]

    return BuildSummary(
        status=status,
        customization_status="completed" if all_success else "partial",
        tags_created=_created(steps, StepKind.CREATE_TAG),
        custom_fields_created=_created(steps, StepKind.CREATE_CUSTOM_FIELD),
        templates_created=_created(steps, StepKind.CREATE_EMAIL_TEMPLATE),
        calendars_created=_created(steps, StepKind.CREATE_CALENDAR),
        error_log=error_log,
    )
