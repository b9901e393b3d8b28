"""Connector-specific exceptions."""

from __future__ import annotations

from typing import Any


class ConnectorError(Exception):
    """Base exception for connector errors."""


class DuplicateConnectorError(ConnectorError):
    """Raised when a connector id is registered twice."""

    def __init__(self, connector_id: str) -> None:
        super().__init__(f"A connector with id '{connector_id}' is already registered.")
        self.connector_id = connector_id


class UnknownConnectorError(ConnectorError):
    """Raised when a requested connector is not registered."""

    def __init__(self, connector_id: str, available: list[str] | None = None) -> None:
        message = f"Connector '{connector_id}' not found."
        if available is not None:
            message += f" Available connectors: {available}"
        super().__init__(message)
        self.connector_id = connector_id
        self.available = available or []


class InvalidConfigError(ConnectorError):
    """Raised when a connector configuration fails schema validation.

    Attributes:
        connector_id: The connector whose schema rejected the config.
        fields: Offending field names, in the order they were reported.
        errors: Per-field error messages keyed by field name.
    """

    def __init__(self, connector_id: str, errors: dict[str, str]) -> None:
        self.connector_id = connector_id
        self.errors = errors
        self.fields = list(errors)
        details = "; ".join(f"{field}: {msg}" for field, msg in errors.items())
        super().__init__(f"Invalid configuration for connector '{connector_id}': {details}")

    def to_dict(self) -> dict[str, Any]:
        return {"connector": self.connector_id, "fields": self.fields, "errors": self.errors}


class ConnectionError(ConnectorError):
    """Raised when a client to the search cluster cannot be obtained or used."""


class RegistryFrozenError(ConnectorError):
    """Raised when registering a connector after the registry was frozen."""
