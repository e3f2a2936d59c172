"""
GHL API Client

Wraps outbound calls to the GoHighLevel (LeadConnector) REST API:
bearer authentication, the API version header, bounded retry on
rate limiting and uniform error formatting.
"""

import logging
import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from ..core.config_store import (
    ClientSettings,
    DEFAULT_API_VERSION,
    DEFAULT_BASE_URL,
    DEFAULT_MAX_RATE_LIMIT_RETRIES,
    DEFAULT_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)

ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})

# Seconds to wait on a 429 without a usable retry-after header
DEFAULT_RETRY_AFTER_SECONDS = 10

# Longest wait honoured for a single 429
MAX_RETRY_AFTER_SECONDS = 300


class APIError(Exception):
    """Raised when a GHL API request fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(APIError):
    """Raised when a request is still rate limited after all retries."""

    def __init__(self, message: str, attempts: int):
        super().__init__(message, status_code=429)
        self.attempts = attempts


def parse_retry_after(value: str | None) -> int:
    """
    Parse a retry-after header value in whole seconds.

    Args:
        value: Raw header value, or None if the header was absent

    Returns:
        Seconds to wait; DEFAULT_RETRY_AFTER_SECONDS if absent, unparsable,
        non-finite or negative, and at most MAX_RETRY_AFTER_SECONDS
    """
    if value is None:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        parsed = float(value.strip())
    except ValueError:
        return DEFAULT_RETRY_AFTER_SECONDS
    if not math.isfinite(parsed) or parsed < 0:
        return DEFAULT_RETRY_AFTER_SECONDS
    return min(int(parsed), MAX_RETRY_AFTER_SECONDS)


class GHLClient:
    """
    Client for the GHL REST API.

    Features:
    - Bearer authentication and API version header on every request
    - Sleep-and-retry on HTTP 429, bounded by max_rate_limit_retries
    - Descriptive APIError for every other failure
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        http_client: httpx.Client | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_rate_limit_retries: int = DEFAULT_MAX_RATE_LIMIT_RETRIES,
    ):
        """
        Initialize the GHL client.

        Args:
            base_url: API host, e.g. a sandbox or the production host
            api_version: Value sent in the Version header
            http_client: Optional httpx client (created if None)
            timeout_seconds: Request timeout in seconds
            max_rate_limit_retries: How many times a 429 is retried before
                RateLimitError is raised
        """
        self.base_url = base_url
        self.api_version = api_version
        self.timeout_seconds = timeout_seconds
        self.max_rate_limit_retries = max_rate_limit_retries

        # Track if we own the HTTP client (for cleanup)
        self._owns_client = http_client is None

        if http_client is None:
            self.http_client = httpx.Client(timeout=timeout_seconds)
        else:
            self.http_client = http_client

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        http_client: httpx.Client | None = None,
    ) -> "GHLClient":
        """Create a client from ClientSettings."""
        return cls(
            base_url=settings.base_url,
            api_version=settings.api_version,
            http_client=http_client,
            timeout_seconds=settings.timeout_seconds,
            max_rate_limit_retries=settings.max_rate_limit_retries,
        )

    def close(self) -> None:
        """Close the HTTP client if we created it."""
        if self._owns_client and self.http_client:
            self.http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _build_url(self, path: str) -> str:
        """
        Build full URL from base URL and path.

        Trailing slashes on the path are kept; some GHL endpoints
        (e.g. "/calendars/") require them.
        """
        base_url = self.base_url.rstrip("/")
        path = path.lstrip("/")
        return f"{base_url}/{path}"

    def _build_headers(self, api_key: str, has_body: bool) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Version": self.api_version,
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    def request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        *,
        api_key: str,
    ) -> Any:
        """
        Make an authenticated request against the GHL API.

        Args:
            method: GET, POST, PUT or DELETE
            path: API path relative to the base URL
            body: Optional JSON body
            api_key: Bearer token for the location

        Returns:
            Parsed JSON response ({} for an empty body)

        Raises:
            ValueError: If method is not supported, or the response body
                is not valid JSON
            RateLimitError: If the request is still rate limited after
                max_rate_limit_retries retries
            APIError: On any other non-2xx response or transport failure
        """
        method = method.upper()
        if method not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        url = self._build_url(path)
        headers = self._build_headers(api_key, has_body=body is not None)

        attempt = 0
        while True:
            attempt += 1
            try:
                response = self.http_client.request(
                    method=method,
                    url=url,
                    headers=headers,
                    json=body,
                )
            except httpx.RequestError as e:
                raise APIError(f"GHL API {method} {path}: request failed: {e}")

            if response.status_code == 429:
                if attempt > self.max_rate_limit_retries:
                    raise RateLimitError(
                        f"GHL API {method} {path}: 429 rate limited after {attempt} attempts",
                        attempts=attempt,
                    )
                delay = parse_retry_after(response.headers.get("retry-after"))
                logger.warning(
                    f"Rate limited on {method} {path}; retrying in {delay}s "
                    f"(retry {attempt}/{self.max_rate_limit_retries})"
                )
                time.sleep(delay)
                continue

            if not 200 <= response.status_code < 300:
                raise APIError(
                    f"GHL API {method} {path}: {response.status_code} {response.text}",
                    status_code=response.status_code,
                )

            logger.debug(f"{method} {path} -> {response.status_code}")
            return response.json() if response.content else {}


class CredentialStatus(Enum):
    """Result kind of a credential check."""
    OK = "ok"
    NOT_FOUND = "not_found"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class Account:
    """A GHL location the API key has access to."""
    account_id: str
    name: str


@dataclass(frozen=True)
class CredentialCheck:
    """
    Outcome of validate_credential.

    account is set only for OK; detail carries the error text for
    TRANSPORT_ERROR.
    """
    status: CredentialStatus
    account: Account | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == CredentialStatus.OK

    def account_or_none(self) -> Account | None:
        return self.account if self.ok else None


def validate_credential(client: GHLClient, api_key: str) -> CredentialCheck:
    """
    Check an API key by looking up the locations it can access.

    Never raises for request failures; the failure mode is reported in
    the returned CredentialCheck.

    Args:
        client: GHL client to issue the lookup with
        api_key: Private integration API key to check

    Returns:
        CredentialCheck with the first location on success
    """
    try:
        data = client.request("GET", "/locations/search", api_key=api_key)
    except (APIError, ValueError) as e:
        logger.info(f"Credential check failed: {e}")
        return CredentialCheck(status=CredentialStatus.TRANSPORT_ERROR, detail=str(e))

    locations = data.get("locations") if isinstance(data, dict) else None
    if not locations:
        return CredentialCheck(status=CredentialStatus.NOT_FOUND)

    first = locations[0]
    try:
        account = Account(account_id=first["id"], name=first.get("name", ""))
    except (KeyError, TypeError, AttributeError) as e:
        return CredentialCheck(
            status=CredentialStatus.TRANSPORT_ERROR,
            detail=f"Unexpected location payload: {e}",
        )
    return CredentialCheck(status=CredentialStatus.OK, account=account)
