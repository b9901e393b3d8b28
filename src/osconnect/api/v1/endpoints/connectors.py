"""Connector endpoints: list connectors and validate connector configurations.

These back a configuration UI: ``GET /connectors`` populates the connector
choice, each connector's ``fields`` describe its configuration form, and
``POST /connectors/{id}/validate`` reports field-level errors.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, Field

from osconnect.api.deps import get_registry
from osconnect.connectors.base.connector import ConfigField, ConnectorDescriptor
from osconnect.connectors.base.registry import ConnectorRegistry

router = APIRouter()


class ConnectorResponse(BaseModel):
    """A registered connector and its configuration fields."""

    id: str = Field(description="Connector id")
    label: str = Field(description="Human-readable connector name")
    description: str = Field(description="What the connector does")
    fields: list[ConfigField] = Field(description="Configuration fields in declaration order")

    @classmethod
    def from_descriptor(cls, descriptor: ConnectorDescriptor) -> ConnectorResponse:
        return cls(
            id=descriptor.id,
            label=descriptor.label,
            description=descriptor.description,
            fields=descriptor.config_fields,
        )


class ValidationResponse(BaseModel):
    """Result of a successful configuration validation."""

    connector: str = Field(description="Connector id")
    valid: bool = Field(default=True, description="Always true; invalid configs return 422")
    config: dict[str, Any] = Field(description="Normalised configuration with secrets masked")


@router.get(
    "/connectors",
    response_model=list[ConnectorResponse],
    summary="List Connectors",
    description="Registered connectors in registration order.",
)
async def list_connectors(
    registry: ConnectorRegistry = Depends(get_registry),
) -> list[ConnectorResponse]:
    return [ConnectorResponse.from_descriptor(d) for d in registry.list()]


@router.get(
    "/connectors/{connector_id}",
    response_model=ConnectorResponse,
    summary="Get Connector",
)
async def get_connector(
    connector_id: str,
    registry: ConnectorRegistry = Depends(get_registry),
) -> ConnectorResponse:
    return ConnectorResponse.from_descriptor(registry.get(connector_id))


@router.post(
    "/connectors/{connector_id}/validate",
    response_model=ValidationResponse,
    summary="Validate Connector Configuration",
    description=(
        "Validate a configuration against the connector's schema without building a client. "
        "Returns 422 with the offending field names when validation fails."
    ),
)
async def validate_connector_config(
    connector_id: str,
    config: dict[str, Any] = Body(default={}),
    registry: ConnectorRegistry = Depends(get_registry),
) -> ValidationResponse:
    validated = registry.validate(connector_id, config)
    return ValidationResponse(connector=connector_id, config=validated.model_dump(mode="json"))
