"""
Build runner

Entry point for an orchestrator holding stored credentials and a
generated configuration spec: applies the spec and rolls the outcomes
up into a report.
"""

import logging
from dataclasses import dataclass
from typing import Any

from ..core.models import ConfigError, ConfigurationSpec, Credentials, StepOutcome, utc_timestamp
from ..ghl.client import GHLClient
from ..ghl.customizer import apply_customizations
from .summary import BuildSummary, summarize_steps

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildReport:
    """Everything recorded about one build run."""
    archetype: str
    steps: list[StepOutcome]
    summary: BuildSummary
    started_at: str
    finished_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "archetype": self.archetype,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "summary": self.summary.to_dict(),
            "steps": [s.to_dict() for s in self.steps],
        }


def run_build(
    client: GHLClient,
    credentials: Credentials,
    spec: ConfigurationSpec,
) -> BuildReport:
    """
    Apply a configuration spec and summarize the result.

    Args:
        client: GHL client to issue requests with
        credentials: Customer's API key and location
        spec: Generated configuration to apply

    Returns:
        BuildReport with every step outcome and the rollup

    Raises:
        ConfigError: If the credentials are incomplete; no request is made
    """
    if not credentials.api_key or not credentials.location_id:
        raise ConfigError("GHL not connected: credentials need an api_key and a location_id")

    started_at = utc_timestamp()
    logger.info(f"Starting build for archetype '{spec.archetype}'")

    steps = apply_customizations(client, credentials, spec)
    summary = summarize_steps(steps)

    logger.info(
        f"Build {summary.status.value} ({summary.customization_status}); "
        f"{len(summary.error_log)} errors"
    )
    return BuildReport(
        archetype=spec.archetype,
        steps=steps,
        summary=summary,
        started_at=started_at,
        finished_at=utc_timestamp(),
    )
