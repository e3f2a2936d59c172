"""
GHL API access

The API client and the customizer that applies a configuration spec
to a location.
"""

from .client import (
    GHLClient,
    APIError,
    RateLimitError,
    Account,
    CredentialCheck,
    CredentialStatus,
    validate_credential,
)
from .customizer import PlannedStep, plan_customizations, execute_step, apply_customizations

__all__ = [
    "GHLClient",
    "APIError",
    "RateLimitError",
    "Account",
    "CredentialCheck",
    "CredentialStatus",
    "validate_credential",
    "PlannedStep",
    "plan_customizations",
    "execute_step",
    "apply_customizations",
]
