"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from osconnect.config.settings import Settings
from osconnect.connectors import default_registry
from osconnect.connectors.base.connector import ConnectorDescriptor
from osconnect.connectors.base.registry import ConnectorRegistry
from osconnect.connectors.standard.connector import StandardConnectorConfig
from osconnect.models.index import FieldDefinition, IndexDefinition


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance pointing at a local cluster."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        backend={
            "connector": "standard",
            "connector_config": {"hosts": ["http://localhost:9200"]},
            "advanced": {"prefix": "test_"},
        },
    )


@pytest.fixture
def registry() -> ConnectorRegistry:
    """Registry with the built-in connectors."""
    return default_registry()


@pytest.fixture
def mock_client() -> AsyncMock:
    """An ``AsyncOpenSearch`` stand-in with sensible defaults."""
    client = AsyncMock()
    client.ping.return_value = True
    client.indices.exists.return_value = False
    client.bulk.return_value = {"errors": False, "items": []}
    client.search.return_value = {"took": 1, "hits": {"total": {"value": 0}, "hits": []}}
    return client


@pytest.fixture
def client_factory(mock_client: AsyncMock) -> MagicMock:
    """Factory handing out ``mock_client``; records the configs it was given."""
    return MagicMock(return_value=mock_client)


@pytest.fixture
def fake_registry(client_factory: MagicMock) -> ConnectorRegistry:
    """Registry whose ``standard`` connector builds ``mock_client`` instead of a real client."""
    registry = ConnectorRegistry()
    registry.register(
        ConnectorDescriptor(
            id="standard",
            label="Standard",
            description="A standard connector without authentication",
            config_schema=StandardConnectorConfig,
        ),
        client_factory,
    )
    registry.freeze()
    return registry


@pytest.fixture
def article_index() -> IndexDefinition:
    """A small index with fulltext, keyword and date fields."""
    return IndexDefinition(
        id="articles",
        fields={
            "title": FieldDefinition(type="text", boost=2.0),
            "body": FieldDefinition(type="text"),
            "status": FieldDefinition(type="string"),
            "created": FieldDefinition(type="date"),
            "views": FieldDefinition(type="integer"),
        },
        datasources=["entity:node"],
    )


@pytest.fixture
def article_items() -> dict[str, dict[str, Any]]:
    return {
        "entity:node/1:en": {
            "title": ["Solar Nowcasting with Deep Learning"],
            "body": ["We propose a novel approach to solar irradiance nowcasting."],
            "status": ["published"],
            "views": [12],
        },
        "entity:node/2:en": {
            "title": ["Turbulence Modeling Survey"],
            "body": ["A survey of detached-eddy simulation methods."],
            "status": ["draft"],
            "views": [3],
        },
    }
