"""Standard connector: an OpenSearch client without authentication.

Builds an ``AsyncOpenSearch`` client from a list of node URLs and TLS
settings. Client construction performs no network I/O; the first request
opens the connection pool.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import urlparse

from opensearchpy import AsyncOpenSearch
from pydantic import BaseModel, ConfigDict, Field, field_validator

from osconnect.connectors.base.connector import Connector

logger = logging.getLogger(__name__)


class StandardConnectorConfig(BaseModel):
    """Configuration for the standard connector."""

    model_config = ConfigDict(extra="forbid")

    hosts: list[str] = Field(min_length=1, description="OpenSearch node URLs (http or https)")
    ssl_verification: bool = Field(default=True, description="Verify the cluster's TLS certificate")
    ca_certs: str | None = Field(default=None, description="Path to a CA bundle used to verify TLS certificates")
    timeout: float = Field(default=10.0, gt=0, description="Request timeout in seconds")

    @field_validator("hosts", mode="before")
    @classmethod
    def _parse_hosts(cls, v: Any) -> Any:
        """Accept a JSON list or a comma separated string as well as a list."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(h) for h in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            return [h.strip() for h in v.split(",") if h.strip()]
        return v

    @field_validator("hosts")
    @classmethod
    def _check_hosts(cls, v: list[str]) -> list[str]:
        hosts = []
        for host in v:
            parsed = urlparse(host)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError(f"'{host}' is not an http(s) URL")
            hosts.append(host.rstrip("/"))
        return hosts


class StandardConnector(Connector):
    """A standard connector without authentication."""

    id = "standard"
    label = "Standard"
    description = "A standard connector without authentication"
    config_model = StandardConnectorConfig

    def create_client(self, config: StandardConnectorConfig) -> AsyncOpenSearch:
        client = AsyncOpenSearch(**self.client_kwargs(config))
        logger.debug("Created OpenSearch client for %s", ", ".join(config.hosts))
        return client

    def client_kwargs(self, config: StandardConnectorConfig) -> dict[str, Any]:
        """Keyword arguments passed to ``AsyncOpenSearch``."""
        kwargs: dict[str, Any] = {
            "hosts": list(config.hosts),
            "verify_certs": config.ssl_verification,
            "ssl_show_warn": False,
            "timeout": config.timeout,
        }
        if config.ca_certs:
            kwargs["ca_certs"] = config.ca_certs
        return kwargs
