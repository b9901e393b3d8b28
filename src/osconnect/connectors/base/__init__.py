"""Base connector interface and registry."""

from osconnect.connectors.base.connector import ConfigField, Connector, ConnectorDescriptor
from osconnect.connectors.base.registry import ConnectorRegistry

__all__ = ["ConfigField", "Connector", "ConnectorDescriptor", "ConnectorRegistry"]
