"""Connector Registry: registration of connector types and client construction.

The registry maps a connector id to its descriptor and factory. Registration
happens during a single-threaded setup phase; afterwards ``list()``,
``validate()`` and ``build()`` may be called from any number of threads or
tasks. Writes replace the internal mapping under a lock instead of mutating
it, so readers always see a complete snapshot.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from osconnect.connectors.base.connector import ClientFactory, Connector, ConnectorDescriptor
from osconnect.connectors.base.exceptions import (
    ConnectionError,
    DuplicateConnectorError,
    InvalidConfigError,
    RegistryFrozenError,
    UnknownConnectorError,
)

logger = logging.getLogger(__name__)


class ConnectorRegistry:
    """Registry of connector types.

    Example:
        >>> registry = ConnectorRegistry()
        >>> registry.register_connector(StandardConnector)
        >>> registry.freeze()
        >>> client = registry.build("standard", {"hosts": ["http://localhost:9200"]})
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[ConnectorDescriptor, ClientFactory]] = {}
        self._frozen = False

    def register(self, descriptor: ConnectorDescriptor, factory: ClientFactory) -> None:
        """Register a connector type.

        Args:
            descriptor: The connector's metadata and config schema.
            factory: Callable building a client from a validated config.

        Raises:
            DuplicateConnectorError: If the id is already registered.
            RegistryFrozenError: If ``freeze()`` has been called.
        """
        with self._lock:
            if descriptor.id in self._entries:
                raise DuplicateConnectorError(descriptor.id)
            if self._frozen:
                raise RegistryFrozenError(f"Cannot register connector '{descriptor.id}': registry is frozen.")
            entries = dict(self._entries)
            entries[descriptor.id] = (descriptor, factory)
            self._entries = entries
        logger.info("Registered connector: %s", descriptor.id)

    def register_connector(self, connector_class: type[Connector]) -> None:
        """Register a ``Connector`` subclass under its own id."""
        connector = connector_class()
        self.register(connector_class.descriptor(), connector.create_client)

    def freeze(self) -> None:
        """End the setup phase; further registrations are rejected."""
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def list(self) -> list[ConnectorDescriptor]:
        """Return registered descriptors in registration order."""
        return [descriptor for descriptor, _ in self._entries.values()]

    def get(self, connector_id: str) -> ConnectorDescriptor:
        """Return the descriptor registered under ``connector_id``.

        Raises:
            UnknownConnectorError: If no connector has this id.
        """
        entries = self._entries
        if connector_id not in entries:
            raise UnknownConnectorError(connector_id, list(entries))
        return entries[connector_id][0]

    def validate(self, connector_id: str, config: Mapping[str, Any] | None) -> BaseModel:
        """Validate ``config`` against the connector's schema.

        Returns:
            The validated config model.

        Raises:
            UnknownConnectorError: If no connector has this id.
            InvalidConfigError: If the config fails validation.
        """
        descriptor = self.get(connector_id)
        try:
            return descriptor.config_schema.model_validate(dict(config or {}))
        except ValidationError as e:
            raise InvalidConfigError(connector_id, _field_errors(e)) from e

    def build(self, connector_id: str, config: Mapping[str, Any] | None) -> Any:
        """Build a client for ``connector_id`` from ``config``.

        Returns:
            The client handle produced by the connector's factory.

        Raises:
            UnknownConnectorError: If no connector has this id.
            InvalidConfigError: If the config fails validation.
            ConnectionError: If the factory fails or returns no client.
        """
        entries = self._entries
        if connector_id not in entries:
            raise UnknownConnectorError(connector_id, list(entries))
        _, factory = entries[connector_id]

        validated = self.validate(connector_id, config)
        try:
            client = factory(validated)
        except Exception as e:
            raise ConnectionError(f"Failed to create client with connector '{connector_id}': {e}") from e
        if client is None:
            raise ConnectionError(f"Connector '{connector_id}' did not return a client.")

        logger.debug("Built client with connector: %s", connector_id)
        return client

    def __contains__(self, connector_id: object) -> bool:
        return connector_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _field_errors(error: ValidationError) -> dict[str, str]:
    """Collapse a pydantic ``ValidationError`` into ``{field: message}``.

    Errors inside a field (e.g. one bad list item) are reported against the
    top-level field; the first message per field wins.
    """
    errors: dict[str, str] = {}
    for item in error.errors():
        field = str(item["loc"][0]) if item["loc"] else "__root__"
        errors.setdefault(field, item["msg"])
    return errors
