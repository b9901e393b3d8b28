"""CLI entry point for osconnect."""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from pathlib import Path

from osconnect import __version__
from osconnect.config.settings import Settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="osconnect",
        description="osconnect: OpenSearch connectors and search backend",
    )
    parser.add_argument("--config", "-c", type=str, default=None, help="Path to YAML configuration file")
    parser.add_argument("--host", type=str, default=None, help="Server bind address (overrides config)")
    parser.add_argument("--port", "-p", type=int, default=None, help="Server port (overrides config)")
    parser.add_argument("--workers", "-w", type=int, default=None, help="Number of worker processes")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument("--list-connectors", action="store_true", help="Print the available connectors and exit")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Build the configured client, ping the cluster and exit (status 1 if unreachable)",
    )
    parser.add_argument("--version", action="version", version=f"osconnect {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    if args.host:
        settings.server.host = args.host
    if args.port:
        settings.server.port = args.port
    if args.workers:
        settings.server.workers = args.workers
    if args.log_level:
        settings.observability.log_level = args.log_level

    from osconnect.observability.logging import setup_logging

    setup_logging(settings.observability)

    if args.list_connectors:
        _list_connectors()
        return
    if args.check:
        sys.exit(0 if asyncio.run(_check_connection(settings)) else 1)

    import uvicorn

    from osconnect.api.app import CONFIG_FILE_ENV

    if args.config:
        os.environ[CONFIG_FILE_ENV] = str(Path(args.config).resolve())

    uvicorn.run(
        "osconnect.api.app:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        workers=settings.server.workers if not args.reload else 1,
        reload=args.reload,
        log_level=settings.observability.log_level.lower(),
    )


def _list_connectors() -> None:
    from osconnect.connectors import default_registry

    for descriptor in default_registry().list():
        print(f"{descriptor.id:<12} {descriptor.label}: {descriptor.description}")


async def _check_connection(settings: Settings) -> bool:
    """Ping the configured cluster; configuration errors are reported, not raised."""
    from osconnect.backend.backend import OpenSearchBackend
    from osconnect.connectors import default_registry
    from osconnect.connectors.base.exceptions import ConnectorError

    backend = OpenSearchBackend(settings.backend, default_registry())
    try:
        entries = await backend.view_settings(probe=True)
        for entry in entries:
            print(f"{entry['label']}: {entry['info']}")
        return any(entry.get("status") == "ok" for entry in entries)
    except ConnectorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return False
    finally:
        await backend.close()


if __name__ == "__main__":
    main()
