"""Basic auth connector: the standard connector plus HTTP basic credentials."""

from __future__ import annotations

from typing import Any

from pydantic import Field, SecretStr

from osconnect.connectors.standard.connector import StandardConnector, StandardConnectorConfig


class BasicAuthConnectorConfig(StandardConnectorConfig):
    """Configuration for the basic auth connector."""

    username: str = Field(min_length=1, description="HTTP basic auth username")
    password: SecretStr = Field(description="HTTP basic auth password")


class BasicAuthConnector(StandardConnector):
    """OpenSearch connector with HTTP Basic Auth."""

    id = "basicauth"
    label = "HTTP Basic Auth"
    description = "OpenSearch connector with HTTP Basic Auth."
    config_model = BasicAuthConnectorConfig

    def client_kwargs(self, config: BasicAuthConnectorConfig) -> dict[str, Any]:  # type: ignore[override]
        kwargs = super().client_kwargs(config)
        kwargs["http_auth"] = (config.username, config.password.get_secret_value())
        return kwargs
