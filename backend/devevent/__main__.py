"""DevEvent CLI entry point."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

env_file = Path(__file__).parent.parent / ".env"
load_dotenv(env_file)

from devevent import __version__
from devevent.config import get_settings
from devevent.observability import configure_logging

logger = logging.getLogger(__name__)

CONFIG_TEMPLATE = """# DevEvent Configuration
# Secrets (MONGODB_URI, CLOUDINARY_*) belong in .env, not here.

uploads:
  folder: DevEvent
  max_bytes: 5242880
  allowed_types:
    - image/jpeg
    - image/png
    - image/jpg
    - image/gif
    - image/webp
"""


def cmd_init(args: argparse.Namespace) -> int:
    """Create the data directory and a config template."""
    data_dir = Path("data").resolve()
    data_dir.mkdir(exist_ok=True)

    config_path = data_dir / "config.yaml"
    if config_path.exists():
        logger.info(f"Config file already exists: {config_path}")
        return 0

    config_path.write_text(CONFIG_TEMPLATE)
    logger.info(f"Created config template: {config_path}")
    return 0


def cmd_check_db(args: argparse.Namespace) -> int:
    """Connect once, ensure indexes and report."""
    from devevent.api.server import build_connection_manager

    connections = build_connection_manager(get_settings())

    async def run() -> bool:
        try:
            return await connections.ping()
        finally:
            connections.close()

    ok = asyncio.run(run())
    info = connections.info()
    if ok:
        logger.info(f"MongoDB reachable: {info['url']} (database={info['database']})")
        return 0
    logger.error(f"MongoDB unreachable: {info['url']}")
    return 1


def cmd_page(args: argparse.Namespace) -> int:
    """Assemble an event page through the public API and print it."""
    from devevent.services.pages import EventPageClient

    settings = get_settings()

    async def run():
        async with EventPageClient(settings.public_base_url) as client:
            return await client.get_event_page(args.slug)

    page = asyncio.run(run())
    if page is None:
        logger.error(f"Event '{args.slug}' not found or not displayable")
        return 1

    print(page.model_dump_json(indent=2))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the API with uvicorn."""
    import uvicorn

    from devevent.api.server import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(prog="devevent", description="DevEvent API")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init", help="Create data/config.yaml").set_defaults(func=cmd_init)
    subparsers.add_parser("check-db", help="Verify the MongoDB connection").set_defaults(
        func=cmd_check_db
    )

    page = subparsers.add_parser("page", help="Print the detail page data for an event")
    page.add_argument("slug")
    page.set_defaults(func=cmd_page)

    serve = subparsers.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.set_defaults(func=cmd_serve)

    args = parser.parse_args()

    try:
        configure_logging(get_settings().log_level if args.command != "init" else "INFO")
    except ValidationError as e:
        configure_logging()
        logger.error(f"Invalid configuration: {e}")
        return 2

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
