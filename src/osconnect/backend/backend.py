"""OpenSearch search backend: connector selection, client lifecycle and extension points.

The backend owns the client built by the configured connector. The client is
built lazily on first use and kept until the configuration changes; it is
never mutated in place.

Extension points are explicit, ordered callback lists:
  - data type hooks: ``(type) -> bool``, consulted in order
  - index create hooks: alter settings before an index is created
  - value alter hooks: alter field values before they are indexed
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from osconnect.backend.client import BackendClient, IndexCreateHook, ValueAlterHook
from osconnect.config.settings import BackendSettings
from osconnect.connectors.base.registry import ConnectorRegistry
from osconnect.models.index import IndexDefinition
from osconnect.models.search import SearchQuery, SearchResults

logger = logging.getLogger(__name__)

DATA_TYPE_PREFIX = "osconnect_"

DataTypeHook = Callable[[str], bool]


class OpenSearchBackend:
    """Search backend backed by an OpenSearch cluster.

    Attributes:
        settings: Connector selection and advanced settings.
        registry: Registry used to build the client.
    """

    def __init__(
        self,
        settings: BackendSettings,
        registry: ConnectorRegistry,
        *,
        data_type_hooks: Sequence[DataTypeHook] = (),
        index_create_hooks: Sequence[IndexCreateHook] = (),
        value_alter_hooks: Sequence[ValueAlterHook] = (),
    ) -> None:
        self.settings = settings
        self.registry = registry
        self._data_type_hooks = list(data_type_hooks)
        self._index_create_hooks = list(index_create_hooks)
        self._value_alter_hooks = list(value_alter_hooks)
        self._client: Any = None
        self._backend_client: BackendClient | None = None

    # ── Extension points ─────────────────────────────────────────────────

    def add_data_type_hook(self, hook: DataTypeHook) -> None:
        self._data_type_hooks.append(hook)
        self._backend_client = None

    def add_index_create_hook(self, hook: IndexCreateHook) -> None:
        self._index_create_hooks.append(hook)
        self._backend_client = None

    def add_value_alter_hook(self, hook: ValueAlterHook) -> None:
        self._value_alter_hooks.append(hook)
        self._backend_client = None

    def supports_data_type(self, data_type: str) -> bool:
        """Whether fields of ``data_type`` can be indexed by this backend."""
        if data_type.startswith(DATA_TYPE_PREFIX):
            return True
        return any(hook(data_type) for hook in self._data_type_hooks)

    # ── Client lifecycle ─────────────────────────────────────────────────

    @property
    def client(self) -> Any:
        """The cluster client, built by the configured connector on first use.

        Raises:
            UnknownConnectorError: If the configured connector is not registered.
            InvalidConfigError: If the connector config fails validation.
            ConnectionError: If the client cannot be constructed.
        """
        if self._client is None:
            self._client = self.registry.build(self.settings.connector, self.settings.connector_config)
            logger.info("Built OpenSearch client using connector '%s'", self.settings.connector)
        return self._client

    @property
    def backend_client(self) -> BackendClient:
        if self._backend_client is None:
            self._backend_client = BackendClient(
                self.client,
                advanced=self.settings.advanced,
                supports_data_type=self.supports_data_type,
                index_create_hooks=self._index_create_hooks,
                value_alter_hooks=self._value_alter_hooks,
            )
        return self._backend_client

    async def reconfigure(self, settings: BackendSettings) -> None:
        """Apply new settings, discarding the client if the connection changed."""
        connection_changed = (settings.connector, settings.connector_config) != (
            self.settings.connector,
            self.settings.connector_config,
        )
        self.settings = settings
        self._backend_client = None
        if connection_changed:
            await self.close()
            logger.info("Connector configuration changed; client will be rebuilt")

    async def close(self) -> None:
        """Close and discard the current client."""
        client, self._client = self._client, None
        self._backend_client = None
        if client is not None:
            await client.close()

    # ── Status ───────────────────────────────────────────────────────────

    def cluster_url(self) -> str:
        """First configured host of the connector, or an empty string."""
        config = self.registry.validate(self.settings.connector, self.settings.connector_config)
        hosts = getattr(config, "hosts", None) or []
        return hosts[0] if hosts else ""

    async def is_available(self) -> bool:
        """Probe the cluster.

        Configuration errors propagate; only an unreachable cluster yields ``False``.
        """
        return await self.backend_client.is_available()

    async def view_settings(self, probe: bool = True) -> list[dict[str, Any]]:
        """Summarise the backend for display."""
        info: list[dict[str, Any]] = [
            {"label": "OpenSearch cluster URL", "info": self.cluster_url()},
        ]
        if probe:
            available = await self.is_available()
            if available:
                msg = "The OpenSearch cluster was reached successfully"
            else:
                msg = "The OpenSearch cluster could not be reached. Further data is therefore unavailable."
            info.append({"label": "Connection", "info": msg, "status": "ok" if available else "error"})
        return info

    # ── Index and item operations ────────────────────────────────────────

    async def add_index(self, index: IndexDefinition) -> None:
        await self.backend_client.add_index(index)

    async def update_index(self, index: IndexDefinition) -> None:
        await self.backend_client.update_index(index)

    async def remove_index(self, index: IndexDefinition | str) -> None:
        index_id = index if isinstance(index, str) else index.id
        await self.backend_client.remove_index(index_id)

    async def index_items(self, index: IndexDefinition, items: Mapping[str, Mapping[str, Any]]) -> list[str]:
        return await self.backend_client.index_items(index, items)

    async def delete_items(self, index: IndexDefinition, item_ids: Sequence[str]) -> None:
        await self.backend_client.delete_items(index, item_ids)

    async def delete_all_index_items(self, index: IndexDefinition, datasource_id: str | None = None) -> None:
        await self.backend_client.clear_index(index, datasource_id)

    async def search(self, index: IndexDefinition, query: SearchQuery) -> SearchResults:
        return await self.backend_client.search(index, query)
