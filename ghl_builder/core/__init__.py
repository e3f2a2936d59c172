"""Core components for the GHL Builder."""

from .models import (
    FieldDataType,
    StepKind,
    StepStatus,
    BuildStatus,
    Credentials,
    TagSpec,
    CustomFieldSpec,
    EmailTemplateSpec,
    CalendarConfig,
    ConfigurationSpec,
    StepOutcome,
    ConfigError,
    CredentialsNotFoundError,
)
from .config_store import (
    ClientSettings,
    get_base_dir,
    load_client_settings,
    save_json,
    load_json,
    save_credentials,
    load_credentials,
    load_config_spec,
    save_build_report,
    load_build_report,
)

__all__ = [
    "FieldDataType",
    "StepKind",
    "StepStatus",
    "BuildStatus",
    "Credentials",
    "TagSpec",
    "CustomFieldSpec",
    "EmailTemplateSpec",
    "CalendarConfig",
    "ConfigurationSpec",
    "StepOutcome",
    "ConfigError",
    "CredentialsNotFoundError",
    "ClientSettings",
    "get_base_dir",
    "load_client_settings",
    "save_json",
    "load_json",
    "save_credentials",
    "load_credentials",
    "load_config_spec",
    "save_build_report",
    "load_build_report",
]
