"""API dependencies: dependency injection for FastAPI endpoints."""

from __future__ import annotations

from osconnect.backend.backend import OpenSearchBackend
from osconnect.connectors.base.registry import ConnectorRegistry

# Global backend instance (set during application lifespan)
_backend: OpenSearchBackend | None = None


def set_backend(backend: OpenSearchBackend | None) -> None:
    """Set the global backend instance (called during app lifespan)."""
    global _backend
    _backend = backend


def get_backend() -> OpenSearchBackend:
    """Get the global search backend.

    Raises:
        RuntimeError: If the backend is not initialized.
    """
    if _backend is None:
        raise RuntimeError("osconnect backend not initialized. Is the server running?")
    return _backend


def get_registry() -> ConnectorRegistry:
    """Get the connector registry the backend builds its client with."""
    return get_backend().registry
