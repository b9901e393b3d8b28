"""osconnect: pluggable connectors and a search backend for OpenSearch."""

__version__ = "0.1.0"
