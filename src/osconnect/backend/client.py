"""Backend client: index and search operations against one OpenSearch cluster.

Wraps the ``AsyncOpenSearch`` client produced by a connector and applies the
backend's index prefix, fuzziness, synonyms and n-gram settings. Transport
failures are translated into ``osconnect`` exceptions; only
``is_available()`` turns them into a result.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from opensearchpy.exceptions import ConnectionError as TransportConnectionError
from opensearchpy.exceptions import TransportError

from osconnect.backend.exceptions import BackendError, IndexingError, QueryError
from osconnect.config.settings import AdvancedSettings
from osconnect.connectors.base.exceptions import ConnectionError
from osconnect.models.index import FieldDefinition, IndexDefinition
from osconnect.models.search import ResultItem, SearchQuery, SearchResults

logger = logging.getLogger(__name__)

# Alter the settings of an index about to be created; return replacement settings or None.
IndexCreateHook = Callable[[dict[str, Any], IndexDefinition], dict[str, Any] | None]
# Alter one field's values before indexing; return replacement values or None.
ValueAlterHook = Callable[[str, list[Any], dict[str, Any]], list[Any] | None]

NGRAM_MIN_GRAM = 2
EDGE_NGRAM_MAX_GRAM = 20

_TYPE_MAPPINGS: dict[str, dict[str, Any]] = {
    "text": {"type": "text"},
    "string": {"type": "keyword"},
    "integer": {"type": "long"},
    "decimal": {"type": "float"},
    "date": {"type": "date"},
    "boolean": {"type": "boolean"},
    "osconnect_text_ngram": {"type": "text", "analyzer": "ngram"},
    "osconnect_text_edge_ngram": {"type": "text", "analyzer": "edge_ngram"},
}


@contextmanager
def _translate_errors(action: str, error_class: type[BackendError]) -> Iterator[None]:
    try:
        yield
    except TransportConnectionError as e:
        raise ConnectionError(f"Could not connect to OpenSearch while trying to {action}: {e}") from e
    except TransportError as e:
        raise error_class(f"Failed to {action}: {e}") from e


class BackendClient:
    """Index and search operations for a configured OpenSearch client.

    Args:
        client: The ``AsyncOpenSearch`` client built by a connector.
        advanced: Prefix, fuzziness, synonyms and n-gram settings.
        supports_data_type: Predicate deciding whether an unknown field type
            may be indexed (as a keyword).
        index_create_hooks: Called in order before an index is created.
        value_alter_hooks: Called in order for every field value list indexed.
    """

    def __init__(
        self,
        client: Any,
        advanced: AdvancedSettings | None = None,
        supports_data_type: Callable[[str], bool] | None = None,
        index_create_hooks: Sequence[IndexCreateHook] = (),
        value_alter_hooks: Sequence[ValueAlterHook] = (),
    ) -> None:
        self._client = client
        self._advanced = advanced or AdvancedSettings()
        self._supports_data_type = supports_data_type or (lambda _type: False)
        self._index_create_hooks = list(index_create_hooks)
        self._value_alter_hooks = list(value_alter_hooks)

    @property
    def client(self) -> Any:
        return self._client

    @property
    def fuzziness(self) -> str:
        return self._advanced.fuzziness

    def index_name(self, index_id: str) -> str:
        """Name of the OpenSearch index backing ``index_id``."""
        return f"{self._advanced.prefix}{index_id}"

    # ── Availability ─────────────────────────────────────────────────────

    async def is_available(self) -> bool:
        """Probe the cluster; transport failures are reported as ``False``."""
        try:
            return bool(await self._client.ping())
        except TransportError as e:
            logger.warning("OpenSearch cluster could not be reached: %s", e)
            return False

    # ── Index management ─────────────────────────────────────────────────

    def build_settings(self) -> dict[str, Any]:
        """Index settings: analysis chain and n-gram limits."""
        max_ngram_diff = self._advanced.max_ngram_diff
        analysis: dict[str, Any] = {
            "tokenizer": {
                "ngram_tokenizer": {
                    "type": "ngram",
                    "min_gram": NGRAM_MIN_GRAM,
                    "max_gram": NGRAM_MIN_GRAM + max_ngram_diff,
                    "token_chars": ["letter", "digit"],
                },
                "edge_ngram_tokenizer": {
                    "type": "edge_ngram",
                    "min_gram": 1,
                    "max_gram": EDGE_NGRAM_MAX_GRAM,
                    "token_chars": ["letter", "digit"],
                },
            },
            "analyzer": {
                "ngram": {"type": "custom", "tokenizer": "ngram_tokenizer", "filter": ["lowercase"]},
                "edge_ngram": {"type": "custom", "tokenizer": "edge_ngram_tokenizer", "filter": ["lowercase"]},
            },
        }
        if self._advanced.synonyms:
            analysis["filter"] = {
                "synonyms": {"type": "synonym", "lenient": True, "synonyms": list(self._advanced.synonyms)},
            }
            analysis["analyzer"]["synonyms"] = {
                "type": "custom",
                "tokenizer": "standard",
                "filter": ["lowercase", "synonyms"],
            }
        return {"index": {"max_ngram_diff": max_ngram_diff}, "analysis": analysis}

    def build_mappings(self, index: IndexDefinition) -> dict[str, Any]:
        """Mappings for the index fields plus the item bookkeeping fields."""
        properties: dict[str, Any] = {
            "search_api_id": {"type": "keyword"},
            "search_api_datasource": {"type": "keyword"},
        }
        for name, field in index.fields.items():
            mapping = self._field_mapping(field)
            if mapping is None:
                logger.warning("Skipping field '%s' of index '%s': unsupported type '%s'", name, index.id, field.type)
                continue
            properties[name] = mapping
        return {"properties": properties}

    def _field_mapping(self, field: FieldDefinition) -> dict[str, Any] | None:
        if field.type in _TYPE_MAPPINGS:
            mapping = dict(_TYPE_MAPPINGS[field.type])
        elif self._supports_data_type(field.type):
            mapping = {"type": "keyword"}
        else:
            return None
        if self._advanced.synonyms and mapping["type"] == "text" and "analyzer" not in mapping:
            mapping["search_analyzer"] = "synonyms"
        return mapping

    async def index_exists(self, index_id: str) -> bool:
        with _translate_errors(f"check index '{index_id}'", IndexingError):
            return bool(await self._client.indices.exists(index=self.index_name(index_id)))

    async def add_index(self, index: IndexDefinition) -> None:
        """Create the index with its settings and mappings."""
        settings = self.build_settings()
        for hook in self._index_create_hooks:
            altered = hook(settings, index)
            if altered is not None:
                settings = altered

        name = self.index_name(index.id)
        body = {"settings": settings, "mappings": self.build_mappings(index)}
        with _translate_errors(f"create index '{name}'", IndexingError):
            await self._client.indices.create(index=name, body=body)
        logger.info("Created index: %s", name)

    async def update_index(self, index: IndexDefinition) -> None:
        """Put the current mappings on the index, creating it if missing."""
        if not await self.index_exists(index.id):
            await self.add_index(index)
            return
        name = self.index_name(index.id)
        with _translate_errors(f"update index '{name}'", IndexingError):
            await self._client.indices.put_mapping(index=name, body=self.build_mappings(index))
        logger.info("Updated index mappings: %s", name)

    async def remove_index(self, index_id: str) -> None:
        """Delete the index if it exists."""
        if not await self.index_exists(index_id):
            return
        name = self.index_name(index_id)
        with _translate_errors(f"delete index '{name}'", IndexingError):
            await self._client.indices.delete(index=name)
        logger.info("Deleted index: %s", name)

    async def refresh(self, index_id: str | None = None) -> None:
        """Make recent changes searchable (all indices when ``index_id`` is None)."""
        with _translate_errors("refresh indices", IndexingError):
            if index_id is None:
                await self._client.indices.refresh()
            else:
                await self._client.indices.refresh(index=self.index_name(index_id))

    # ── Items ────────────────────────────────────────────────────────────

    async def index_items(self, index: IndexDefinition, items: Mapping[str, Mapping[str, Any]]) -> list[str]:
        """Index ``{item_id: {field: values}}`` and return the ids that succeeded."""
        if not items:
            return []
        name = self.index_name(index.id)
        body: list[dict[str, Any]] = []
        for item_id, fields in items.items():
            body.append({"index": {"_index": name, "_id": item_id}})
            body.append(self._document(index, item_id, fields))

        with _translate_errors(f"index items into '{name}'", IndexingError):
            response = await self._client.bulk(body=body)

        indexed: list[str] = []
        for entry in response.get("items", []):
            result = entry.get("index", {})
            if result.get("error"):
                logger.warning("Failed to index item '%s': %s", result.get("_id"), result["error"])
                continue
            indexed.append(str(result.get("_id")))
        return indexed

    def _document(self, index: IndexDefinition, item_id: str, fields: Mapping[str, Any]) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "search_api_id": item_id,
            "search_api_datasource": item_id.split("/", 1)[0],
        }
        for name, raw in fields.items():
            field = index.fields.get(name)
            if field is None:
                continue
            values = list(raw) if isinstance(raw, (list, tuple)) else [raw]
            context = {"index": index.id, "field_type": field.type, "item_id": item_id}
            for hook in self._value_alter_hooks:
                altered = hook(name, values, context)
                if altered is not None:
                    values = list(altered)
            if not values:
                continue
            doc[name] = values[0] if len(values) == 1 else values
        return doc

    async def delete_items(self, index: IndexDefinition, item_ids: Sequence[str]) -> None:
        """Delete items by id; ids missing from the index are ignored."""
        if not item_ids:
            return
        name = self.index_name(index.id)
        body = [{"delete": {"_index": name, "_id": item_id}} for item_id in item_ids]
        with _translate_errors(f"delete items from '{name}'", IndexingError):
            response = await self._client.bulk(body=body)
        for entry in response.get("items", []):
            result = entry.get("delete", {})
            if result.get("error") and result.get("status") != 404:
                logger.warning("Failed to delete item '%s': %s", result.get("_id"), result["error"])

    async def clear_index(self, index: IndexDefinition, datasource_id: str | None = None) -> None:
        """Delete all items, or only those of one datasource.

        Raises:
            IndexingError: If the index declares its datasources and
                ``datasource_id`` is not one of them.
        """
        name = self.index_name(index.id)
        if datasource_id is None:
            query: dict[str, Any] = {"match_all": {}}
        else:
            if index.datasources and datasource_id not in index.datasources:
                raise IndexingError(
                    f"Index '{index.id}' has no datasource '{datasource_id}'. Datasources: {index.datasources}"
                )
            query = {"term": {"search_api_datasource": datasource_id}}
        with _translate_errors(f"clear index '{name}'", IndexingError):
            await self._client.delete_by_query(index=name, body={"query": query})

    # ── Search ───────────────────────────────────────────────────────────

    def build_query(self, index: IndexDefinition, query: SearchQuery) -> dict[str, Any]:
        """Translate a ``SearchQuery`` into a request body."""
        if query.keys:
            multi_match: dict[str, Any] = {"query": query.keys}
            fields = self._boosted_fields(index, query.fields or index.fulltext_fields())
            if fields:
                multi_match["fields"] = fields
            if self.fuzziness != "0":
                multi_match["fuzziness"] = self.fuzziness.upper()
            main: dict[str, Any] = {"multi_match": multi_match}
        else:
            main = {"match_all": {}}

        filters = []
        for field, value in query.conditions.items():
            if isinstance(value, (list, tuple, set)):
                filters.append({"terms": {field: list(value)}})
            else:
                filters.append({"term": {field: value}})

        body: dict[str, Any] = {
            "query": {"bool": {"must": [main], "filter": filters}} if filters else main,
            "from": query.offset,
            "size": query.limit,
            "track_total_hits": True,
        }
        if query.sorts:
            body["sort"] = [
                {("_score" if field == "search_api_relevance" else field): {"order": order}}
                for field, order in query.sorts
            ]
        return body

    @staticmethod
    def _boosted_fields(index: IndexDefinition, names: list[str]) -> list[str]:
        fields = []
        for name in names:
            field = index.fields.get(name)
            boost = field.boost if field else 1.0
            fields.append(name if boost == 1.0 else f"{name}^{boost:g}")
        return fields

    async def search(self, index: IndexDefinition, query: SearchQuery) -> SearchResults:
        """Run ``query`` against the index."""
        name = self.index_name(index.id)
        body = self.build_query(index, query)
        with _translate_errors(f"search index '{name}'", QueryError):
            response = await self._client.search(index=name, body=body)

        hits = response.get("hits", {})
        total = hits.get("total", 0)
        if isinstance(total, dict):
            total = total.get("value", 0)

        items = []
        for hit in hits.get("hits", []):
            source = hit.get("_source", {})
            items.append(
                ResultItem(
                    id=str(source.get("search_api_id", hit.get("_id", ""))),
                    score=hit.get("_score") or 0.0,
                    fields={k: v for k, v in source.items() if not k.startswith("search_api_")},
                )
            )
        return SearchResults(result_count=total, items=items, took_ms=response.get("took", 0))
