"""
Customizer

Turns a ConfigurationSpec into an ordered list of CRM creation calls
and executes them one at a time. A failing item becomes a failed
StepOutcome; it never stops the remaining items.
"""

import logging
from dataclasses import dataclass
from typing import Any

from ..core.models import (
    ConfigurationSpec,
    Credentials,
    StepKind,
    StepOutcome,
    StepStatus,
)
from .client import GHLClient

logger = logging.getLogger(__name__)

CALENDAR_EVENT_TYPE = "RoundRobin_OptimizeForAvailability"
DISCOVERY_CALL_DESCRIPTION = "Book a free discovery call to see if we're a good fit."
DISCOVERY_CALL_MINUTES = 30
COACHING_SESSION_DESCRIPTION = "Your coaching session calendar."
COACHING_SESSION_MINUTES = 60
EMAIL_TEMPLATE_TYPE = "html"


@dataclass(frozen=True)
class PlannedStep:
    """A single creation call, ready to execute."""
    step_kind: StepKind
    name: str
    method: str
    path: str
    body: dict[str, Any]


def _tag_steps(location_id: str, spec: ConfigurationSpec) -> list[PlannedStep]:
    return [
        PlannedStep(
            step_kind=StepKind.CREATE_TAG,
            name=tag.name,
            method="POST",
            path=f"/locations/{location_id}/tags",
            body={"name": tag.name},
        )
        for tag in spec.tags
    ]


def _custom_field_steps(location_id: str, spec: ConfigurationSpec) -> list[PlannedStep]:
    steps = []
    for field in spec.custom_fields:
        body: dict[str, Any] = {"name": field.name, "dataType": field.data_type.value}
        if field.options is not None:
            body["options"] = list(field.options)
        steps.append(PlannedStep(
            step_kind=StepKind.CREATE_CUSTOM_FIELD,
            name=field.name,
            method="POST",
            path=f"/locations/{location_id}/customFields",
            body=body,
        ))
    return steps


def _email_template_steps(location_id: str, spec: ConfigurationSpec) -> list[PlannedStep]:
    # The template builder endpoint takes the location in the body, not the path
    return [
        PlannedStep(
            step_kind=StepKind.CREATE_EMAIL_TEMPLATE,
            name=template.name,
            method="POST",
            path="/emails/builder",
            body={
                "locationId": location_id,
                "name": template.name,
                "subject": template.subject,
                "type": EMAIL_TEMPLATE_TYPE,
            },
        )
        for template in spec.email_templates
    ]


def _calendar_steps(location_id: str, spec: ConfigurationSpec) -> list[PlannedStep]:
    calendars = [
        (spec.calendar_config.discovery_call_name, DISCOVERY_CALL_DESCRIPTION, DISCOVERY_CALL_MINUTES),
        (spec.calendar_config.coaching_session_name, COACHING_SESSION_DESCRIPTION, COACHING_SESSION_MINUTES),
    ]
    return [
        PlannedStep(
            step_kind=StepKind.CREATE_CALENDAR,
            name=name,
            method="POST",
            path="/calendars/",
            body={
                "locationId": location_id,
                "name": name,
                "description": description,
                "eventType": CALENDAR_EVENT_TYPE,
                "slotDuration": minutes,
            },
        )
        for name, description, minutes in calendars
    ]


def plan_customizations(location_id: str, spec: ConfigurationSpec) -> list[PlannedStep]:
    """
    Build the ordered list of creation calls for a spec.

    Order is tags, custom fields, email templates, then the discovery
    call and coaching session calendars; input order is kept within
    each category.

    Args:
        location_id: Target GHL location
        spec: Configuration to apply

    Returns:
        One PlannedStep per item
    """
    return (
        _tag_steps(location_id, spec)
        + _custom_field_steps(location_id, spec)
        + _email_template_steps(location_id, spec)
        + _calendar_steps(location_id, spec)
    )


def execute_step(client: GHLClient, api_key: str, planned: PlannedStep) -> StepOutcome:
    """
    Execute one planned step and record its outcome.

    Any exception raised by the call, including a malformed response,
    is converted into a failed StepOutcome.
    """
    try:
        client.request(planned.method, planned.path, planned.body, api_key=api_key)
    except Exception as e:
        message = str(e) or "Unknown error"
        logger.warning(f"{planned.step_kind.value} '{planned.name}' failed: {message}")
        return StepOutcome(
            step_kind=planned.step_kind,
            name=planned.name,
            status=StepStatus.FAILED,
            error=message,
        )

    logger.debug(f"{planned.step_kind.value} '{planned.name}' succeeded")
    return StepOutcome(
        step_kind=planned.step_kind,
        name=planned.name,
        status=StepStatus.SUCCESS,
    )


def apply_customizations(
    client: GHLClient,
    credentials: Credentials,
    spec: ConfigurationSpec,
) -> list[StepOutcome]:
    """
    Apply a configuration spec to a GHL location.

    Steps run sequentially; each produces exactly one StepOutcome in
    plan order, so outcomes line up with the spec's items.

    Args:
        client: GHL client used for every call
        credentials: API key and location to customize
        spec: Configuration to apply

    Returns:
        Ordered list of StepOutcome, one per item
    """
    plan = plan_customizations(credentials.location_id, spec)
    logger.info(f"Applying {len(plan)} customizations to location {credentials.location_id}")

    outcomes = [execute_step(client, credentials.api_key, planned) for planned in plan]

    failed = sum(1 for o in outcomes if not o.succeeded)
    logger.info(f"Applied customizations: {len(outcomes) - failed} succeeded, {failed} failed")
    return outcomes
