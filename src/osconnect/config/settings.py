"""Application settings: Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (OSCONNECT_ prefix)
  3. Default values
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

FUZZINESS_AUTO = "auto"
FUZZINESS_CHOICES = ("0", FUZZINESS_AUTO, "1", "2", "3", "4", "5")


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=8080, description="Server port")
    workers: int = Field(default=1, description="Number of worker processes")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class AdvancedSettings(BaseModel):
    """Index and query tuning for the search backend."""

    fuzziness: str = Field(
        default=FUZZINESS_AUTO,
        description="Fuzzy matching: 'auto', '0' (disabled) or an edit distance from 1 to 5",
    )
    prefix: str = Field(default="", description="Prefix prepended to every index name")
    synonyms: list[str] = Field(default_factory=list, description="Synonym rules in Solr synonyms.txt format")
    max_ngram_diff: int = Field(default=1, ge=1, description="Maximum difference between min_gram and max_gram")

    @field_validator("fuzziness", mode="before")
    @classmethod
    def _check_fuzziness(cls, v: Any) -> str:
        value = str(v).strip().lower()
        if value not in FUZZINESS_CHOICES:
            raise ValueError(f"must be one of {list(FUZZINESS_CHOICES)}")
        return value

    @field_validator("prefix", mode="before")
    @classmethod
    def _none_prefix(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("synonyms", mode="before")
    @classmethod
    def _split_synonyms(cls, v: Any) -> list[str]:
        """Accept one rule per line as well as a list; blank lines are dropped."""
        if v is None:
            return []
        lines = v.splitlines() if isinstance(v, str) else list(v)
        return [str(line).strip() for line in lines if str(line).strip()]


class BackendSettings(BaseModel):
    """Search backend configuration.

    ``connector`` selects a registered connector; ``connector_config`` is
    validated against that connector's schema when the client is built.
    """

    connector: str = Field(default="standard", description="Connector id")
    connector_config: dict[str, Any] = Field(default_factory=dict, description="Connector-specific configuration")
    advanced: AdvancedSettings = Field(default_factory=AdvancedSettings)

    @field_validator("connector_config", mode="before")
    @classmethod
    def _parse_connector_config(cls, v: Any) -> Any:
        """Parse the connector config from a JSON string (env var) or mapping."""
        if isinstance(v, str):
            return json.loads(v) if v.strip() else {}
        return v


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the OSCONNECT_ prefix.
    Nested settings use double underscores: OSCONNECT_SERVER__PORT=9090

    Example:
        OSCONNECT_BACKEND__CONNECTOR=basicauth
        OSCONNECT_BACKEND__CONNECTOR_CONFIG='{"hosts": ["https://localhost:9200"], "username": "admin", "password": "..."}'
        OSCONNECT_BACKEND__ADVANCED__PREFIX=staging_
    """

    model_config = {
        "env_prefix": "OSCONNECT_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="osconnect", description="Application name")

    server: ServerSettings = Field(default_factory=ServerSettings)
    backend: BackendSettings = Field(default_factory=BackendSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are passed as init arguments, so they
        override environment variables for the keys they set.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
