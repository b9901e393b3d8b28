"""Index definition models: what the backend needs to know about a search index."""

from __future__ import annotations

from pydantic import BaseModel, Field


class FieldDefinition(BaseModel):
    """A single indexed field."""

    type: str = Field(default="text", description="Data type (text, string, integer, decimal, date, boolean, ...)")
    boost: float = Field(default=1.0, gt=0, description="Fulltext boost applied at query time")


class IndexDefinition(BaseModel):
    """A search index and its fields.

    Item ids follow the ``<datasource>/<raw id>`` convention, e.g.
    ``entity:node/12:en``; the datasource part is stored alongside each
    document so a single datasource can be cleared.
    """

    id: str = Field(min_length=1, description="Index machine name (without prefix)")
    fields: dict[str, FieldDefinition] = Field(default_factory=dict, description="Indexed fields by name")
    datasources: list[str] = Field(default_factory=list, description="Datasource ids feeding this index (empty = any)")

    def fulltext_fields(self) -> list[str]:
        """Names of fields searched by fulltext keys."""
        return [name for name, f in self.fields.items() if f.type in FULLTEXT_TYPES]


FULLTEXT_TYPES = frozenset({"text", "osconnect_text_ngram", "osconnect_text_edge_ngram"})
