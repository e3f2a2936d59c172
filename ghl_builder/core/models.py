"""Core data models for the GHL Builder."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class FieldDataType(Enum):
    """Data type of a GHL custom field."""
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    DATE = "DATE"
    SINGLE_OPTIONS = "SINGLE_OPTIONS"
    MULTIPLE_OPTIONS = "MULTIPLE_OPTIONS"
    CHECKBOX = "CHECKBOX"


class StepKind(Enum):
    """Kind of customization step applied to a location."""
    CREATE_TAG = "create_tag"
    CREATE_CUSTOM_FIELD = "create_custom_field"
    CREATE_EMAIL_TEMPLATE = "create_email_template"
    CREATE_CALENDAR = "create_calendar"


class StepStatus(Enum):
    """Outcome of a single customization step."""
    SUCCESS = "success"
    FAILED = "failed"


class BuildStatus(Enum):
    """Final status of a build run."""
    COMPLETED = "completed"
    FAILED = "failed"


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Credentials:
    """API key and target location for one customer."""
    api_key: str
    location_id: str

    def __repr__(self) -> str:
        return f"Credentials(api_key='***', location_id={self.location_id!r})"

    def to_dict(self) -> dict[str, str]:
        return {"api_key": self.api_key, "location_id": self.location_id}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Credentials":
        return cls(api_key=data["api_key"], location_id=data["location_id"])


@dataclass(frozen=True)
class TagSpec:
    """A tag to create in the location."""
    name: str
    description: str = ""


@dataclass(frozen=True)
class CustomFieldSpec:
    """A custom contact field to create in the location."""
    name: str
    field_key: str
    data_type: FieldDataType
    options: tuple[str, ...] | None = None
    description: str = ""


@dataclass(frozen=True)
class EmailTemplateSpec:
    """
    An email template to create.

    Only name and subject are sent to the CRM; purpose and body_outline
    describe the template for whoever writes the body later.
    """
    name: str
    subject: str
    purpose: str = ""
    body_outline: str = ""


@dataclass(frozen=True)
class CalendarConfig:
    """Display names of the two calendars every build creates."""
    discovery_call_name: str
    coaching_session_name: str


@dataclass(frozen=True)
class ConfigurationSpec:
    """
    Generated CRM configuration for one customer.

    Built from the JSON document produced by the configuration generator.
    Entries have no identity beyond their position.
    """
    archetype: str
    tags: tuple[TagSpec, ...]
    custom_fields: tuple[CustomFieldSpec, ...]
    email_templates: tuple[EmailTemplateSpec, ...]
    calendar_config: CalendarConfig
    archetype_reasoning: str = ""
    build_notes: str = ""
    branding: dict[str, Any] = field(default_factory=dict)
    automation_config: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert ConfigurationSpec back to the generated document shape."""
        custom_fields = []
        for f in self.custom_fields:
            entry = {
                "name": f.name,
                "field_key": f.field_key,
                "data_type": f.data_type.value,
                "description": f.description,
            }
            if f.options is not None:
                entry["options"] = list(f.options)
            custom_fields.append(entry)

        return {
            "archetype": self.archetype,
            "archetype_reasoning": self.archetype_reasoning,
            "customizations": {
                "tags": [{"name": t.name, "description": t.description} for t in self.tags],
                "custom_fields": custom_fields,
                "email_templates": [
                    {
                        "name": t.name,
                        "subject": t.subject,
                        "purpose": t.purpose,
                        "body_outline": t.body_outline,
                    }
                    for t in self.email_templates
                ],
                "calendar_config": {
                    "discovery_call_name": self.calendar_config.discovery_call_name,
                    "coaching_session_name": self.calendar_config.coaching_session_name,
                },
                "branding": dict(self.branding),
                "automation_config": dict(self.automation_config),
            },
            "build_notes": self.build_notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConfigurationSpec":
        """
        Create ConfigurationSpec from a generated configuration document.

        Args:
            data: Document with 'archetype' and a nested 'customizations' mapping

        Returns:
            The parsed ConfigurationSpec

        Raises:
            ConfigError: If required fields are missing or malformed
        """
        if not isinstance(data, dict) or not data.get("archetype") or not data.get("customizations"):
            raise ConfigError("Invalid config spec: missing required fields")

        custom = data["customizations"]
        try:
            tags = tuple(
                TagSpec(name=t["name"], description=t.get("description", ""))
                for t in custom.get("tags", [])
            )

            fields = []
            for f in custom.get("custom_fields", []):
                try:
                    data_type = FieldDataType(f["data_type"])
                except ValueError:
                    raise ConfigError(
                        f"Invalid data_type '{f['data_type']}' for custom field '{f['name']}'"
                    )
                options = f.get("options")
                if options is not None and not isinstance(options, list):
                    raise ConfigError(f"options for custom field '{f['name']}' must be a list")
                fields.append(CustomFieldSpec(
                    name=f["name"],
                    field_key=f.get("field_key", ""),
                    data_type=data_type,
                    options=tuple(options) if options is not None else None,
                    description=f.get("description", ""),
                ))

            templates = tuple(
                EmailTemplateSpec(
                    name=t["name"],
                    subject=t["subject"],
                    purpose=t.get("purpose", ""),
                    body_outline=t.get("body_outline", ""),
                )
                for t in custom.get("email_templates", [])
            )

            calendars = custom["calendar_config"]
            calendar_config = CalendarConfig(
                discovery_call_name=calendars["discovery_call_name"],
                coaching_session_name=calendars["coaching_session_name"],
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ConfigError(f"Invalid config spec: {e}")

        branding = custom.get("branding") or {}
        automation_config = custom.get("automation_config") or {}
        for key, value in (("branding", branding), ("automation_config", automation_config)):
            if not isinstance(value, dict):
                raise ConfigError(f"Invalid config spec: '{key}' must be a mapping")

        return cls(
            archetype=data["archetype"],
            tags=tags,
            custom_fields=tuple(fields),
            email_templates=templates,
            calendar_config=calendar_config,
            archetype_reasoning=data.get("archetype_reasoning", ""),
            build_notes=data.get("build_notes", ""),
            branding=dict(branding),
            automation_config=dict(automation_config),
        )


@dataclass(frozen=True)
class StepOutcome:
    """Result of one customization step."""
    step_kind: StepKind
    name: str
    status: StepStatus
    error: str | None = None
    timestamp: str = field(default_factory=utc_timestamp)

    @property
    def succeeded(self) -> bool:
        return self.status == StepStatus.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        """Convert StepOutcome to a dictionary."""
        data = {
            "step": self.step_kind.value,
            "name": self.name,
            "status": self.status.value,
            "timestamp": self.timestamp,
        }
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StepOutcome":
        """Create StepOutcome from a dictionary."""
        return cls(
            step_kind=StepKind(data["step"]),
            name=data["name"],
            status=StepStatus(data["status"]),
            error=data.get("error"),
            timestamp=data.get("timestamp") or utc_timestamp(),
        )


class ConfigError(Exception):
    """Raised when there is an error loading or saving configuration."""
    pass


class CredentialsNotFoundError(ConfigError):
    """Raised when no credentials are stored for a customer."""
    pass
