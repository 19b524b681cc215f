from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich import print as rprint
from rich.logging import RichHandler

from .config import Settings, load_settings
from .sample_data import SAMPLE_PRODUCTS
from .service import create_app, endpoint_summary
from .storage import JsonFileStorage, parse_products


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


def seed_catalog(data_file: Path, force: bool = False) -> bool:
    """Write the sample catalog; returns False if the file exists and force is off."""
    if data_file.exists() and not force:
        return False
    JsonFileStorage(data_file).save(parse_products(SAMPLE_PRODUCTS))
    return True


def _settings_from_args(args: argparse.Namespace) -> Settings:
    return load_settings(
        args.config,
        host=getattr(args, "host", None),
        port=getattr(args, "port", None),
        data_file=args.data_file,
    )


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = _settings_from_args(args)
    configure_logging(settings.log_level)

    base_url = f"http://localhost:{settings.port}"
    rprint(f"[bold green]{settings.server_name}[/bold green]")
    for label, url in endpoint_summary(base_url).items():
        rprint(f"  [cyan]{label}:[/cyan] {url}")

    if not settings.data_file.exists():
        rprint(f"[yellow]Warning: {settings.data_file} not found. Run `retail-api seed` first.[/yellow]")

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def cmd_seed(args: argparse.Namespace) -> int:
    settings = _settings_from_args(args)
    if not seed_catalog(settings.data_file, force=args.force):
        rprint(f"[red]{settings.data_file} already exists. Use --force to overwrite.[/red]")
        return 1
    rprint(f"[green]Wrote {len(SAMPLE_PRODUCTS)} products to {settings.data_file}[/green]")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="retail-api",
        description="Product catalog API backed by a JSON file.",
    )
    parser.add_argument(
        "--config",
        default="config/server.yaml",
        help="Path to YAML settings file (default: config/server.yaml, skipped if missing)",
    )
    parser.add_argument("--data-file", type=Path, default=None, help="Products JSON document")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.set_defaults(func=cmd_serve)

    seed = sub.add_parser("seed", help="Write the sample product catalog")
    seed.add_argument("--force", action="store_true", help="Overwrite an existing file")
    seed.set_defaults(func=cmd_seed)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
