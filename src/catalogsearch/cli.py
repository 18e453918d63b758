"""CLI entry point for the catalog search server."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from catalogsearch import __version__


def main() -> None:
    """Parse arguments, resolve settings, and run the server under uvicorn."""
    parser = argparse.ArgumentParser(
        prog="catalogsearch",
        description="Catalog Search — fuzzy search over albums, songs, and artists",
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
    parser.add_argument("--version", action="version", version=f"catalogsearch {__version__}")

    args = parser.parse_args()

    from catalogsearch.config.settings import Settings

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

    import uvicorn

    from catalogsearch.api.app import create_app

    if args.reload or settings.server.workers > 1:
        # Reload and multi-worker modes re-import the app factory in each
        # process, so settings must come from the environment or the default
        # config file there.
        uvicorn.run(
            "catalogsearch.api.app:create_app",
            factory=True,
            host=settings.server.host,
            port=settings.server.port,
            workers=1 if args.reload else settings.server.workers,
            reload=args.reload,
            log_level=settings.observability.log_level,
        )
    else:
        uvicorn.run(
            create_app(settings),
            host=settings.server.host,
            port=settings.server.port,
            log_level=settings.observability.log_level,
        )


if __name__ == "__main__":
    main()
