"""Tests for the connector endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from osconnect.api.app import create_app
from osconnect.api.deps import set_backend
from osconnect.backend.backend import OpenSearchBackend
from osconnect.config.settings import Settings
from osconnect.connectors.base.registry import ConnectorRegistry


@pytest.fixture
def client(settings: Settings, registry: ConnectorRegistry) -> TestClient:
    app = create_app(settings, registry)
    set_backend(OpenSearchBackend(settings.backend, registry))
    yield TestClient(app)
    set_backend(None)


class TestListConnectors:
    def test_list_in_registration_order(self, client: TestClient) -> None:
        response = client.get("/v1/connectors")
        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == ["standard", "basicauth"]

    def test_connector_fields(self, client: TestClient) -> None:
        response = client.get("/v1/connectors/basicauth")
        assert response.status_code == 200
        data = response.json()
        assert data["label"] == "HTTP Basic Auth"
        fields = {f["name"]: f for f in data["fields"]}
        assert fields["hosts"]["required"] is True
        assert fields["password"]["secret"] is True

    def test_unknown_connector(self, client: TestClient) -> None:
        response = client.get("/v1/connectors/solr")
        assert response.status_code == 404
        data = response.json()
        assert "solr" in data["detail"]
        assert data["available"] == ["standard", "basicauth"]


class TestValidateConfig:
    def test_valid_config(self, client: TestClient) -> None:
        response = client.post(
            "/v1/connectors/standard/validate",
            json={"hosts": "http://node-1:9200/, http://node-2:9200"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["config"]["hosts"] == ["http://node-1:9200", "http://node-2:9200"]
        assert data["config"]["timeout"] == 10.0

    def test_password_masked(self, client: TestClient) -> None:
        response = client.post(
            "/v1/connectors/basicauth/validate",
            json={"hosts": ["https://localhost:9200"], "username": "admin", "password": "s3cret"},
        )
        assert response.status_code == 200
        assert "s3cret" not in response.text
        assert response.json()["config"]["password"] == "**********"

    def test_invalid_config_names_fields(self, client: TestClient) -> None:
        response = client.post("/v1/connectors/basicauth/validate", json={"hosts": ["ftp://x"]})
        assert response.status_code == 422
        data = response.json()
        assert data["fields"] == ["hosts", "username", "password"]
        assert set(data["errors"]) == {"hosts", "username", "password"}

    def test_empty_body(self, client: TestClient) -> None:
        response = client.post("/v1/connectors/standard/validate")
        assert response.status_code == 422
        assert response.json()["fields"] == ["hosts"]

    def test_validate_unknown_connector(self, client: TestClient) -> None:
        response = client.post("/v1/connectors/solr/validate", json={})
        assert response.status_code == 404
