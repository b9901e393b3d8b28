"""Search backend: index management and search through a connector-built client."""

from osconnect.backend.backend import OpenSearchBackend
from osconnect.backend.client import BackendClient

__all__ = ["BackendClient", "OpenSearchBackend"]
