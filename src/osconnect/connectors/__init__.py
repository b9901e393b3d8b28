"""Connector layer: pluggable strategies for obtaining OpenSearch clients.

Built-in connectors:
  - standard: no authentication
  - basicauth: HTTP basic auth

Subclass ``Connector`` and register it on a ``ConnectorRegistry`` to add
your own.
"""

from osconnect.connectors.base import Connector, ConnectorDescriptor, ConnectorRegistry
from osconnect.connectors.basicauth.connector import BasicAuthConnector
from osconnect.connectors.standard.connector import StandardConnector

BUILTIN_CONNECTORS: tuple[type[Connector], ...] = (StandardConnector, BasicAuthConnector)


def default_registry(*extra: type[Connector], freeze: bool = True) -> ConnectorRegistry:
    """Create a registry holding the built-in connectors followed by ``extra``.

    Args:
        *extra: Additional connector classes, registered after the built-ins.
        freeze: Whether to close the registry to further registrations.
    """
    registry = ConnectorRegistry()
    for connector_class in (*BUILTIN_CONNECTORS, *extra):
        registry.register_connector(connector_class)
    if freeze:
        registry.freeze()
    return registry


__all__ = [
    "BUILTIN_CONNECTORS",
    "BasicAuthConnector",
    "Connector",
    "ConnectorDescriptor",
    "ConnectorRegistry",
    "StandardConnector",
    "default_registry",
]
