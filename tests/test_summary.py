"""Tests for the build summary rollup."""

import pytest

from ghl_builder.core.models import BuildStatus, StepKind, StepOutcome, StepStatus
from ghl_builder.build.summary import BuildError, summarize_steps


def success(kind, name):
    return StepOutcome(step_kind=kind, name=name, status=StepStatus.SUCCESS)


def failure(kind, name, error="boom"):
    return StepOutcome(
        step_kind=kind,
        name=name,
        status=StepStatus.FAILED,
        error=error,
        timestamp="2026-01-01T00:00:00+00:00",
    )


def test_all_success():
    """Test a fully successful run."""
    steps = [
        success(StepKind.CREATE_TAG, "VIP Client"),
        success(StepKind.CREATE_CUSTOM_FIELD, "Goal"),
        success(StepKind.CREATE_EMAIL_TEMPLATE, "Welcome"),
        success(StepKind.CREATE_CALENDAR, "Intro Call"),
        success(StepKind.CREATE_CALENDAR, "Session"),
    ]

    summary = summarize_steps(steps)

    assert summary.status == BuildStatus.COMPLETED
    assert summary.customization_status == "completed"
    assert summary.tags_created == ["VIP Client"]
    assert summary.custom_fields_created == ["Goal"]
    assert summary.templates_created == ["Welcome"]
    assert summary.calendars_created == ["Intro Call", "Session"]
    assert summary.error_log == []


def test_partial_success():
    """Test a run with some failures is completed but partial."""
    steps = [
        success(StepKind.CREATE_TAG, "VIP Client"),
        failure(StepKind.CREATE_TAG, "Lead", error="GHL API POST /locations/l/tags: 400 dup"),
        success(StepKind.CREATE_CALENDAR, "Session"),
    ]

    summary = summarize_steps(steps)

    assert summary.status == BuildStatus.COMPLETED
    assert summary.customization_status == "partial"
    assert summary.tags_created == ["VIP Client"]
    assert summary.error_log == [
        BuildError(
            step="create_tag: Lead",
            error="GHL API POST /locations/l/tags: 400 dup",
            timestamp="2026-01-01T00:00:00+00:00",
        )
    ]


def test_all_failed():
    """Test a run where everything failed."""
    steps = [
        failure(StepKind.CREATE_CALENDAR, "Intro Call"),
        failure(StepKind.CREATE_CALENDAR, "Session"),
    ]

    summary = summarize_steps(steps)

    assert summary.status == BuildStatus.FAILED
    assert summary.customization_status == "partial"
    assert summary.calendars_created == []
    assert len(summary.error_log) == 2


def test_missing_error_message_defaults():
    """Test a failed step without an error is logged as 'Unknown error'."""
    steps = [failure(StepKind.CREATE_TAG, "VIP Client", error=None)]

    summary = summarize_steps(steps)

    assert summary.error_log[0].error == "Unknown error"


def test_empty_steps_completed():
    """Test an empty run counts as completed."""
    summary = summarize_steps([])

    assert summary.status == BuildStatus.COMPLETED
    assert summary.customization_status == "completed"


def test_summary_to_dict():
    """Test the summary serializes with plain values."""
    summary = summarize_steps([
        success(StepKind.CREATE_TAG, "VIP Client"),
        failure(StepKind.CREATE_EMAIL_TEMPLATE, "Welcome"),
    ])

    data = summary.to_dict()

    assert data["status"] == "completed"
    assert data["customization_status"] == "partial"
    assert data["tags_created"] == ["VIP Client"]
    assert data["templates_created"] == []
    assert data["error_log"] == [{
        "step": "create_email_template: Welcome",
        "error": "boom",
        "timestamp": "2026-01-01T00:00:00+00:00",
    }]
