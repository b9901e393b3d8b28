"""Integration test fixtures: a real OpenSearch node and sample items.

Expects OpenSearch with the security plugin disabled on localhost:9201, e.g.:
    docker run -d -p 9201:9200 -e discovery.type=single-node \
        -e DISABLE_SECURITY_PLUGIN=true opensearchproject/opensearch:2

Tests are skipped when the node is not reachable.
"""

from __future__ import annotations

import time
from typing import Any

import httpx
import pytest

from osconnect.backend.backend import OpenSearchBackend
from osconnect.config.settings import BackendSettings
from osconnect.connectors import default_registry
from osconnect.models.index import FieldDefinition, IndexDefinition

OPENSEARCH_HOST = "http://localhost:9201"

SAMPLE_ITEMS: dict[str, dict[str, Any]] = {
    "entity:node/1:en": {
        "title": ["Advances in Solar Nowcasting Using Deep Learning"],
        "body": [
            "A convolutional neural network processes satellite imagery to predict "
            "solar irradiance up to 4 hours ahead."
        ],
        "status": ["published"],
        "views": [120],
    },
    "entity:node/2:en": {
        "title": ["Transformer Models for Natural Language Understanding"],
        "body": ["This study surveys transformer-based models on GLUE, SuperGLUE and SQuAD benchmarks."],
        "status": ["published"],
        "views": [45],
    },
    "entity:node/3:en": {
        "title": ["Federated Learning for Privacy-Preserving Medical Imaging"],
        "body": ["Federated averaging across 12 hospital sites preserves patient privacy."],
        "status": ["draft"],
        "views": [3],
    },
    "entity:user/7": {
        "title": ["Graph Neural Networks for Drug Discovery"],
        "body": ["A message-passing architecture for molecular property prediction."],
        "status": ["published"],
        "views": [88],
    },
}


@pytest.fixture
def sample_items() -> dict[str, dict[str, Any]]:
    return SAMPLE_ITEMS


def _wait_for_service(url: str, timeout: float = 60.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=10)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


@pytest.fixture(scope="session")
def opensearch_ready() -> str:
    """Ensure OpenSearch is running."""
    if not _wait_for_service(OPENSEARCH_HOST):
        pytest.skip(f"OpenSearch not available at {OPENSEARCH_HOST}")
    return OPENSEARCH_HOST


@pytest.fixture
def index() -> IndexDefinition:
    return IndexDefinition(
        id="articles",
        fields={
            "title": FieldDefinition(type="text", boost=2.0),
            "body": FieldDefinition(type="text"),
            "status": FieldDefinition(type="string"),
            "views": FieldDefinition(type="integer"),
        },
        datasources=["entity:node", "entity:user"],
    )


@pytest.fixture
async def backend(opensearch_ready: str, index: IndexDefinition):
    settings = BackendSettings(
        connector="standard",
        connector_config={"hosts": [opensearch_ready]},
        advanced={"prefix": "osconnect_test_", "synonyms": "paper, article, study"},
    )
    b = OpenSearchBackend(settings, default_registry())
    await b.remove_index(index)
    await b.add_index(index)
    yield b
    await b.remove_index(index)
    await b.close()
