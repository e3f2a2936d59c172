"""Tests for core data models."""

import dataclasses
import pytest

from ghl_builder.core.models import (
    FieldDataType,
    StepKind,
    StepStatus,
    BuildStatus,
    Credentials,
    ConfigurationSpec,
    StepOutcome,
    ConfigError,
    CredentialsNotFoundError,
)


@pytest.fixture
def spec_document():
    """A configuration document as produced by the generator."""
    return {
        "archetype": "high_ticket_1on1",
        "archetype_reasoning": "Sells premium 1:1 packages",
        "customizations": {
            "tags": [
                {"name": "VIP Client", "description": "Top tier"},
                {"name": "Lead - Cold", "description": "No response yet"},
            ],
            "custom_fields": [
                {
                    "name": "Coaching Goal",
                    "field_key": "coaching_goal",
                    "data_type": "TEXT",
                    "description": "Main goal",
                },
                {
                    "name": "Program Tier",
                    "field_key": "program_tier",
                    "data_type": "SINGLE_OPTIONS",
                    "options": ["Starter", "Premium"],
                    "description": "Purchased tier",
                },
            ],
            "email_templates": [
                {
                    "name": "Welcome",
                    "subject": "Welcome aboard!",
                    "purpose": "Onboarding",
                    "body_outline": "Greet, set expectations",
                },
            ],
            "calendar_config": {
                "discovery_call_name": "Free Discovery Call",
                "coaching_session_name": "1:1 Coaching Session",
            },
            "branding": {
                "business_name": "Bright Path",
                "niche_label": "Career coaching",
                "welcome_message": "Hi!",
            },
            "automation_config": {
                "follow_up_speed": "same_day",
                "preferred_channels": ["email", "sms"],
            },
        },
        "build_notes": "Check calendar availability",
    }


def test_field_data_type_enum():
    """Test FieldDataType covers the GHL field types."""
    assert {t.value for t in FieldDataType} == {
        "TEXT", "NUMBER", "DATE", "SINGLE_OPTIONS", "MULTIPLE_OPTIONS", "CHECKBOX",
    }


def test_step_kind_and_status_values():
    """Test step kinds and statuses serialize to the stored strings."""
    assert StepKind.CREATE_TAG.value == "create_tag"
    assert StepKind.CREATE_CUSTOM_FIELD.value == "create_custom_field"
    assert StepKind.CREATE_EMAIL_TEMPLATE.value == "create_email_template"
    assert StepKind.CREATE_CALENDAR.value == "create_calendar"
    assert StepStatus("success") == StepStatus.SUCCESS
    assert StepStatus("failed") == StepStatus.FAILED
    assert BuildStatus.COMPLETED.value == "completed"


def test_credentials_repr_hides_api_key():
    """Test the API key never appears in repr."""
    creds = Credentials(api_key="secret-key", location_id="loc1")

    assert "secret-key" not in repr(creds)
    assert "loc1" in repr(creds)


def test_credentials_round_trip():
    """Test Credentials to_dict/from_dict."""
    creds = Credentials(api_key="secret-key", location_id="loc1")

    assert Credentials.from_dict(creds.to_dict()) == creds


def test_spec_from_dict(spec_document):
    """Test parsing a full generated document."""
    spec = ConfigurationSpec.from_dict(spec_document)

    assert spec.archetype == "high_ticket_1on1"
    assert [t.name for t in spec.tags] == ["VIP Client", "Lead - Cold"]
    assert spec.custom_fields[0].data_type == FieldDataType.TEXT
    assert spec.custom_fields[0].options is None
    assert spec.custom_fields[1].options == ("Starter", "Premium")
    assert spec.email_templates[0].body_outline == "Greet, set expectations"
    assert spec.calendar_config.discovery_call_name == "Free Discovery Call"
    assert spec.calendar_config.coaching_session_name == "1:1 Coaching Session"
    assert spec.branding["business_name"] == "Bright Path"
    assert spec.automation_config["follow_up_speed"] == "same_day"
    assert spec.build_notes == "Check calendar availability"


def test_spec_to_dict_matches_document(spec_document):
    """Test to_dict reproduces the generated document shape."""
    spec = ConfigurationSpec.from_dict(spec_document)

    assert spec.to_dict() == spec_document


def test_spec_is_immutable(spec_document):
    """Test the spec cannot be modified after parsing."""
    spec = ConfigurationSpec.from_dict(spec_document)

    with pytest.raises(dataclasses.FrozenInstanceError):
        spec.archetype = "other"


def test_spec_optional_categories_default_empty(spec_document):
    """Test missing categories parse as empty."""
    del spec_document["customizations"]["tags"]
    del spec_document["customizations"]["email_templates"]

    spec = ConfigurationSpec.from_dict(spec_document)

    assert spec.tags == ()
    assert spec.email_templates == ()


@pytest.mark.parametrize("missing", ["archetype", "customizations"])
def test_spec_missing_required_fields(spec_document, missing):
    """Test a document without archetype or customizations is rejected."""
    del spec_document[missing]

    with pytest.raises(ConfigError) as exc_info:
        ConfigurationSpec.from_dict(spec_document)

    assert "missing required fields" in str(exc_info.value)


def test_spec_missing_calendar_config(spec_document):
    """Test calendar_config is required."""
    del spec_document["customizations"]["calendar_config"]

    with pytest.raises(ConfigError):
        ConfigurationSpec.from_dict(spec_document)


def test_spec_unknown_data_type(spec_document):
    """Test an unknown data_type is rejected."""
    spec_document["customizations"]["custom_fields"][0]["data_type"] = "EMOJI"

    with pytest.raises(ConfigError) as exc_info:
        ConfigurationSpec.from_dict(spec_document)

    assert "EMOJI" in str(exc_info.value)


def test_spec_options_must_be_list(spec_document):
    """Test a comma separated options string is not split into characters."""
    spec_document["customizations"]["custom_fields"][1]["options"] = "Starter,Premium"

    with pytest.raises(ConfigError) as exc_info:
        ConfigurationSpec.from_dict(spec_document)

    assert "Program Tier" in str(exc_info.value)


@pytest.mark.parametrize("key,value", [
    ("branding", "Bright Path"),
    ("branding", ["business_name", "Bright Path"]),
    ("automation_config", ["email", "sms"]),
    ("automation_config", 42),
])
def test_spec_rejects_non_mapping_extras(spec_document, key, value):
    """Test branding and automation_config must be mappings."""
    spec_document["customizations"][key] = value

    with pytest.raises(ConfigError) as exc_info:
        ConfigurationSpec.from_dict(spec_document)

    assert key in str(exc_info.value)


def test_spec_rejects_non_dict():
    """Test a non-mapping document is rejected."""
    with pytest.raises(ConfigError):
        ConfigurationSpec.from_dict(["not", "a", "spec"])


def test_step_outcome_to_dict_success():
    """Test a success outcome omits the error key."""
    outcome = StepOutcome(
        step_kind=StepKind.CREATE_TAG,
        name="VIP Client",
        status=StepStatus.SUCCESS,
        timestamp="2026-01-01T00:00:00+00:00",
    )

    assert outcome.to_dict() == {
        "step": "create_tag",
        "name": "VIP Client",
        "status": "success",
        "timestamp": "2026-01-01T00:00:00+00:00",
    }
    assert outcome.succeeded is True


def test_step_outcome_round_trip_failed():
    """Test a failed outcome survives to_dict/from_dict."""
    outcome = StepOutcome(
        step_kind=StepKind.CREATE_CALENDAR,
        name="Session",
        status=StepStatus.FAILED,
        error="boom",
    )

    restored = StepOutcome.from_dict(outcome.to_dict())

    assert restored == outcome
    assert restored.succeeded is False


def test_step_outcome_default_timestamp():
    """Test outcomes are timestamped in UTC by default."""
    outcome = StepOutcome(step_kind=StepKind.CREATE_TAG, name="x", status=StepStatus.SUCCESS)

    assert outcome.timestamp.endswith("+00:00")


def test_credentials_not_found_is_config_error():
    """Test CredentialsNotFoundError can be caught as ConfigError."""
    with pytest.raises(ConfigError):
        raise CredentialsNotFoundError("missing")
