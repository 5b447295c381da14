"""trexport CLI entry point."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

load_dotenv(Path.cwd() / ".env")

from trexport import __version__
from trexport.config import get_settings
from trexport.pipeline import run_timeline
from trexport.timeline import ProcessingError
from trexport.validation import InputValidationError, parse_since

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

CONFIG_TEMPLATE = """# trexport Configuration
# Session tokens and other secrets belong in .env, not here.

timeline:
  since_timestamp: 0          # epoch seconds, 0 loads the full history
  include_pending: false
  detail_timeout_seconds: 60
  max_concurrent_details: null

api:
  base_url: https://api.traderepublic.com/api/v1
  timeout_seconds: 30
  max_retries: 3
  max_connections: 100
  max_keepalive_connections: 20
"""


def _init_logfire() -> None:
    """Initialize Logfire if available, without failing commands."""
    try:
        from trexport.observability import initialize_logfire

        initialize_logfire(get_settings())
    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")


def cmd_init(args: argparse.Namespace) -> int:
    """Create the data directory and a configuration template."""
    data_dir = Path("data").resolve()

    try:
        data_dir.mkdir(exist_ok=True)
        logger.info(f"Created data directory: {data_dir}")

        config_path = data_dir / "config.yaml"
        if not config_path.exists():
            config_path.write_text(CONFIG_TEMPLATE)
            logger.info(f"Created config template: {config_path}")
        else:
            logger.info(f"Config file already exists: {config_path}")

        print(f"\n✓ Data directory initialized at {data_dir}")
        print("\nNext steps:")
        print("1. Put TR_SESSION_TOKEN into .env")
        print("2. Review data/config.yaml")
        print("3. Run 'python -m trexport timeline --since 2025-01-01'\n")
        return 0

    except OSError as e:
        logger.error(f"Failed to initialize: {e}")
        print(f"\n❌ Initialization failed: {e}\n")
        return 1


def cmd_config(args: argparse.Namespace) -> int:
    """Display merged configuration."""
    try:
        settings = get_settings()

        print("\n=== trexport Configuration ===\n")
        print(f"Data Directory: {settings.data_dir}\n")

        print("Timeline:")
        print(f"  Since Timestamp: {settings.timeline.since_timestamp}")
        print(f"  Include Pending: {settings.timeline.include_pending}")
        print(f"  Detail Timeout: {settings.timeline.detail_timeout_seconds}s")
        print(f"  Max Concurrent Details: {settings.timeline.max_concurrent_details or 'unlimited'}\n")

        print("API:")
        print(f"  Base URL: {settings.api.base_url}")
        print(f"  Timeout: {settings.api.timeout_seconds}s")
        print(f"  Max Retries: {settings.api.max_retries}")
        print(f"  Max Connections: {settings.api.max_connections}\n")

        print("Secrets:")
        print(f"  Session Token: {'✓ Set' if settings.tr_session_token else '✗ Not set'}")
        print(f"  Logfire: {'✓ Set' if settings.logfire_token else '✗ Not set'}\n")

        return 0

    except ValidationError as e:
        print("\n❌ Configuration Error:\n")
        for error in e.errors():
            print(f"  • {'.'.join(str(x) for x in error['loc'])}: {error['msg']}")
        print()
        return 1


def cmd_timeline(args: argparse.Namespace) -> int:
    """Fetch the timeline and print the collected events."""
    _init_logfire()

    try:
        settings = get_settings()
        updates: dict = {}
        if args.since is not None:
            updates["since_timestamp"] = parse_since(args.since)
        if args.include_pending:
            updates["include_pending"] = True
        if updates:
            settings = settings.model_copy(
                update={"timeline": settings.timeline.model_copy(update=updates)}
            )

        print("\n=== Timeline ===\n")

        result = asyncio.run(run_timeline(settings))

        events = result.events if args.limit is None else result.events[: args.limit]
        for event in events:
            amount = str(event.amount) if event.amount else "-"
            details = "✓" if event.details is not None else " "
            print(f"  {event.timestamp or '?':<30} {amount:>16}  [{details}] {event.title or event.id}")
        if args.limit is not None and len(result.events) > args.limit:
            print(f"  ... and {len(result.events) - args.limit} more")

        print(f"\n✓ {result.stats}\n")
        return 0

    except InputValidationError as e:
        print(f"\n❌ {e}\n")
        return 1
    except ValidationError as e:
        print("\n❌ Configuration Error:\n")
        for error in e.errors():
            print(f"  • {'.'.join(str(x) for x in error['loc'])}: {error['msg']}")
        print()
        return 1
    except ProcessingError as e:
        logger.error(f"Timeline processing failed: {e}", exc_info=True)
        print(f"\n❌ Timeline processing failed: {e}\n")
        return 1


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="trexport - Trade Republic timeline retrieval",
        prog="python -m trexport",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(title="commands")

    parser_init = subparsers.add_parser(
        "init",
        help="Create data directory and configuration template",
    )
    parser_init.set_defaults(func=cmd_init)

    parser_config = subparsers.add_parser(
        "config",
        help="Display merged configuration",
    )
    parser_config.set_defaults(func=cmd_config)

    parser_timeline = subparsers.add_parser(
        "timeline",
        help="Fetch timeline and activity log, enriched with details",
    )
    parser_timeline.add_argument(
        "--since",
        help="Only events at or after this point (epoch seconds, YYYY-MM-DD or ISO-8601)",
    )
    parser_timeline.add_argument(
        "--include-pending",
        action="store_true",
        help="Keep pending transactions",
    )
    parser_timeline.add_argument(
        "--limit",
        type=int,
        help="Print at most this many events",
    )
    parser_timeline.set_defaults(func=cmd_timeline)

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
