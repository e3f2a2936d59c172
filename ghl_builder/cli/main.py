"""Main CLI entry point for the GHL Builder."""

import argparse
import logging
import sys

from ghl_builder.core import (
    BuildStatus,
    Credentials,
    ConfigError,
    CredentialsNotFoundError,
    load_client_settings,
    load_credentials,
    save_credentials,
    load_config_spec,
    save_build_report,
    load_build_report,
)
from ghl_builder.ghl import GHLClient, CredentialStatus, validate_credential
from ghl_builder.build import run_build

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )
    # Suppress httpx INFO logs for cleaner output
    logging.getLogger("httpx").setLevel(logging.WARNING)


REPORT_SUMMARY_LISTS = (
    "tags_created",
    "custom_fields_created",
    "templates_created",
    "calendars_created",
    "error_log",
)


def _is_valid_report(data) -> bool:
    """Check a loaded build report has the shape _print_summary reads."""
    if not isinstance(data, dict):
        return False
    summary = data.get("summary")
    if not isinstance(summary, dict):
        return False
    if "status" not in summary or "customization_status" not in summary:
        return False
    if not all(isinstance(summary.get(key), list) for key in REPORT_SUMMARY_LISTS):
        return False
    return all(
        isinstance(entry, dict) and "step" in entry and "error" in entry
        for entry in summary["error_log"]
    )


def _print_summary(summary: dict) -> None:
    print(f"Build status:         {summary['status']}")
    print(f"Customization status: {summary['customization_status']}")
    print()
    print(f"  Tags created:          {len(summary['tags_created'])}")
    print(f"  Custom fields created: {len(summary['custom_fields_created'])}")
    print(f"  Templates created:     {len(summary['templates_created'])}")
    print(f"  Calendars created:     {len(summary['calendars_created'])}")

    if summary["error_log"]:
        print()
        print(f"Errors ({len(summary['error_log'])}):")
        for entry in summary["error_log"]:
            print(f"  ✗ {entry['step']}")
            print(f"    {entry['error']}")


def cmd_connect(args):
    """Handle the connect command - validate and store an API key."""
    try:
        settings = load_client_settings()
        with GHLClient.from_settings(settings) as client:
            print("Validating API key...")
            check = validate_credential(client, args.api_key)

        if check.status == CredentialStatus.NOT_FOUND:
            print("Error: No locations found. Make sure your API key has location access.", file=sys.stderr)
            sys.exit(1)
        if check.status == CredentialStatus.TRANSPORT_ERROR:
            print(f"Error: Could not validate API key: {check.detail}", file=sys.stderr)
            sys.exit(1)

        account = check.account
        credentials = Credentials(api_key=args.api_key, location_id=account.account_id)
        path = save_credentials(args.customer, credentials)

        print(f"✓ Connected '{args.customer}' to location '{account.name}' ({account.account_id})")
        print(f"Credentials saved to: {path}")

    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)


def cmd_apply(args):
    """Handle the apply command - apply a configuration spec to a location."""
    try:
        credentials = load_credentials(args.customer)
        spec = load_config_spec(args.spec)
        settings = load_client_settings()

        print(f"Applying '{spec.archetype}' configuration for '{args.customer}'...")
        print()

        with GHLClient.from_settings(settings) as client:
            report = run_build(client, credentials, spec)

        data = report.to_dict()
        path = save_build_report(args.customer, data)

        _print_summary(data["summary"])
        print()
        print(f"Report saved to: {path}")

        if report.summary.status == BuildStatus.FAILED:
            sys.exit(1)

    except CredentialsNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error during build: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


def cmd_report(args):
    """Handle the report command - show the last saved build report."""
    try:
        data = load_build_report(args.customer)
    except ConfigError:
        print(f"Error: No build report found for '{args.customer}'.", file=sys.stderr)
        print(f"Run 'ghl-builder apply --customer {args.customer}' first.", file=sys.stderr)
        sys.exit(1)

    if not _is_valid_report(data):
        print(f"Error: Build report for '{args.customer}' is invalid.", file=sys.stderr)
        print(f"Run 'ghl-builder apply --customer {args.customer}' again.", file=sys.stderr)
        sys.exit(1)

    print(f"Archetype: {data.get('archetype', 'unknown')}")
    print(f"Started:   {data.get('started_at', '')}")
    print(f"Finished:  {data.get('finished_at', '')}")
    print()
    _print_summary(data["summary"])


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="ghl-builder",
        description="Apply generated CRM configurations to GHL locations",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Connect command
    connect_parser = subparsers.add_parser("connect", help="Validate and store a customer's GHL API key")
    connect_parser.add_argument("--customer", required=True, help="Customer ID")
    connect_parser.add_argument("--api-key", required=True, help="GHL private integration API key")
    connect_parser.set_defaults(func=cmd_connect)

    # Apply command
    apply_parser = subparsers.add_parser("apply", help="Apply a configuration spec to the customer's location")
    apply_parser.add_argument("--customer", required=True, help="Customer ID")
    apply_parser.add_argument("--spec", required=True, help="Path to the configuration spec JSON file")
    apply_parser.set_defaults(func=cmd_apply)

    # Report command
    report_parser = subparsers.add_parser("report", help="Show the last build report for a customer")
    report_parser.add_argument("--customer", required=True, help="Customer ID")
    report_parser.set_defaults(func=cmd_report)

    args = parser.parse_args()

    setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
