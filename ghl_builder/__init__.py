"""GHL Builder: applies generated CRM configurations to GHL locations."""

__version__ = "0.1.0"
