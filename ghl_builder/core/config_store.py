"""Configuration and persistence for credentials, specs and build reports."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .models import ConfigurationSpec, Credentials, ConfigError, CredentialsNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://services.leadconnectorhq.com"
DEFAULT_API_VERSION = "2021-07-28"
DEFAULT_MAX_RATE_LIMIT_RETRIES = 5
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class ClientSettings:
    """Connection settings for the GHL API client."""
    base_url: str = DEFAULT_BASE_URL
    api_version: str = DEFAULT_API_VERSION
    max_rate_limit_retries: int = DEFAULT_MAX_RATE_LIMIT_RETRIES
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


def get_base_dir() -> Path:
    """
    Get the base directory for storing configuration.

    The directory is determined by:
    1. Environment variable GHL_BUILDER_HOME if set
    2. Otherwise, ~/.ghl_builder

    The directory is created if it does not exist.

    Returns:
        Path to the base directory
    """
    env_home = os.environ.get("GHL_BUILDER_HOME")
    if env_home:
        base_dir = Path(env_home)
    else:
        base_dir = Path.home() / ".ghl_builder"

    base_dir.mkdir(parents=True, exist_ok=True)
    return base_dir


def load_client_settings() -> ClientSettings:
    """
    Build ClientSettings from GHL_BUILDER_* environment variables.

    Unset variables fall back to the production defaults.

    Raises:
        ConfigError: If a numeric variable cannot be parsed
    """
    max_retries_raw = os.environ.get("GHL_BUILDER_MAX_RATE_LIMIT_RETRIES")
    timeout_raw = os.environ.get("GHL_BUILDER_TIMEOUT")

    try:
        max_retries = int(max_retries_raw) if max_retries_raw else DEFAULT_MAX_RATE_LIMIT_RETRIES
    except ValueError:
        raise ConfigError(
            f"GHL_BUILDER_MAX_RATE_LIMIT_RETRIES must be an integer, got '{max_retries_raw}'"
        )
    if max_retries < 0:
        raise ConfigError("GHL_BUILDER_MAX_RATE_LIMIT_RETRIES must not be negative")

    try:
        timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT_SECONDS
    except ValueError:
        raise ConfigError(f"GHL_BUILDER_TIMEOUT must be a number, got '{timeout_raw}'")

    return ClientSettings(
        base_url=os.environ.get("GHL_BUILDER_BASE_URL") or DEFAULT_BASE_URL,
        api_version=os.environ.get("GHL_BUILDER_API_VERSION") or DEFAULT_API_VERSION,
        max_rate_limit_retries=max_retries,
        timeout_seconds=timeout,
    )


def store_path(name: str, suffix: str) -> Path:
    """
    Get the path for a stored JSON file.

    Args:
        name: Owner key (usually a customer ID)
        suffix: File suffix (e.g. "credentials", "report")

    Returns:
        Path to the file
    """
    base_dir = get_base_dir()
    return base_dir / f"{name}_{suffix}.json"


def save_json(name: str, suffix: str, data: dict) -> Path:
    """
    Save a dictionary as JSON under the base directory.

    Args:
        name: Owner key
        suffix: File suffix
        data: Dictionary to save

    Returns:
        Path to the saved file
    """
    path = store_path(name, suffix)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        logger.debug(f"Saved JSON to {path}")
        return path
    except (OSError, TypeError) as e:
        raise ConfigError(f"Failed to save JSON to {path}: {e}")


def load_json(name: str, suffix: str) -> dict:
    """
    Load a dictionary saved with save_json.

    Raises:
        ConfigError: If the file does not exist or JSON is invalid
    """
    return _read_json_file(store_path(name, suffix))


def _read_json_file(path: Path) -> Any:
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path, "r") as f:
            data = json.load(f)
        logger.debug(f"Loaded JSON from {path}")
        return data
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to load JSON from {path}: {e}")


def save_credentials(customer_id: str, credentials: Credentials) -> Path:
    """Persist a customer's API key and location ID."""
    return save_json(customer_id, "credentials", credentials.to_dict())


def load_credentials(customer_id: str) -> Credentials:
    """
    Load a customer's stored credentials.

    Raises:
        CredentialsNotFoundError: If the customer has never been connected
        ConfigError: If the stored file is invalid
    """
    path = store_path(customer_id, "credentials")
    if not path.exists():
        raise CredentialsNotFoundError(
            f"No credentials stored for '{customer_id}'. "
            f"Run 'ghl-builder connect --customer {customer_id}' first."
        )

    data = _read_json_file(path)
    try:
        return Credentials.from_dict(data)
    except (KeyError, TypeError) as e:
        raise ConfigError(f"Failed to parse credentials for '{customer_id}': {e}")


def load_config_spec(path: Path | str) -> ConfigurationSpec:
    """
    Load a generated configuration spec from a JSON file.

    Args:
        path: Path to the JSON document

    Returns:
        The parsed ConfigurationSpec

    Raises:
        ConfigError: If the file is missing, not JSON, or not a valid spec
    """
    data = _read_json_file(Path(path))
    return ConfigurationSpec.from_dict(data)


def save_build_report(customer_id: str, report: dict) -> Path:
    """Persist the latest build report for a customer."""
    return save_json(customer_id, "report", report)


def load_build_report(customer_id: str) -> dict:
    """Load the latest build report for a customer."""
    return load_json(customer_id, "report")
