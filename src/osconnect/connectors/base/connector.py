"""Base connector: abstract interface for strategies that build cluster clients.

A connector is a named way of obtaining a configured OpenSearch client
(no authentication, HTTP basic auth, ...). Each connector declares:
  1. An id, label and description shown in selection UIs
  2. A pydantic model that validates its configuration
  3. A factory that turns a validated configuration into a client

The registry only ever hands a connector a configuration that has already
been validated against its model.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

ClientFactory = Callable[[Any], Any]


class ConfigField(BaseModel):
    """A single configuration field of a connector, as seen by a UI."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Field name as used in the configuration mapping")
    type: str = Field(default="string", description="JSON schema type of the field")
    required: bool = Field(default=False, description="Whether the field has no default")
    default: Any = Field(default=None, description="Default value when not required")
    secret: bool = Field(default=False, description="Whether the value must be masked when displayed")
    description: str | None = Field(default=None, description="Help text for the field")


class ConnectorDescriptor(BaseModel):
    """Registered metadata for a connector type."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Unique connector id")
    label: str = Field(description="Human-readable connector name")
    description: str = Field(default="", description="What the connector does")
    config_schema: type[BaseModel] = Field(description="Pydantic model validating the connector config")

    @property
    def config_fields(self) -> list[ConfigField]:
        """Describe the config schema field by field, in declaration order."""
        schema = self.config_schema.model_json_schema()
        properties: dict[str, Any] = schema.get("properties", {})
        required = set(schema.get("required", []))

        fields: list[ConfigField] = []
        for name, prop in properties.items():
            fields.append(
                ConfigField(
                    name=name,
                    type=_json_type(prop),
                    required=name in required,
                    default=prop.get("default"),
                    secret=prop.get("format") == "password",
                    description=prop.get("description"),
                )
            )
        return fields


def _json_type(prop: dict[str, Any]) -> str:
    """Pick the JSON type of a schema property, ignoring the ``null`` arm of optionals."""
    if "type" in prop:
        return str(prop["type"])
    for option in prop.get("anyOf", []):
        if option.get("type") not in (None, "null"):
            return str(option["type"])
    return "string"


class Connector(ABC):
    """Abstract base class for connectors.

    Subclasses set the class attributes and implement ``create_client()``.
    Connectors are stateless; one instance may build any number of clients.
    """

    id: ClassVar[str]
    label: ClassVar[str]
    description: ClassVar[str] = ""
    config_model: ClassVar[type[BaseModel]]

    @classmethod
    def descriptor(cls) -> ConnectorDescriptor:
        return ConnectorDescriptor(
            id=cls.id,
            label=cls.label,
            description=cls.description,
            config_schema=cls.config_model,
        )

    @abstractmethod
    def create_client(self, config: Any) -> Any:
        """Build a client from a validated configuration.

        Must not perform network I/O; connectivity is verified lazily on
        first use.

        Args:
            config: An instance of ``config_model``.

        Returns:
            A ready-to-use client handle.
        """
