"""
CLI commands for transient row retention.

Usage:
    python -m tvprovider.cli.retention status
    python -m tvprovider.cli.retention purge
    python -m tvprovider.cli.retention init-db
"""

import argparse
import sys
from datetime import UTC, datetime

from dotenv import load_dotenv
from sqlalchemy import inspect

load_dotenv()


def _format_millis(millis: int) -> str:
    if not millis:
        return "never"
    return f"{millis} ({datetime.fromtimestamp(millis / 1000, tz=UTC).isoformat()})"


def get_context():
    """Build the provider context from the environment."""
    from tvprovider.config import get_settings
    from tvprovider.factory import build_provider
    from tvprovider.logging_config import configure_logging

    settings = get_settings()
    configure_logging(json_format=settings.LOG_FORMAT == "json", level=settings.LOG_LEVEL)
    return build_provider(settings)


def cmd_status(args):
    """Show the purge watermark, boot time and pending transient rows."""
    from tvprovider.services.retention import is_purge_owed

    ctx = get_context()
    try:
        watermark = ctx.timekeeper.last_purge_time_millis()
        boot_epoch = ctx.timekeeper.boot_completed_time_millis()
        counts = ctx.row_store.count_transient()

        print("\n=== Transient Retention Status ===\n")
        print(f"Last purge: {_format_millis(watermark)}")
        print(f"Boot completed: {_format_millis(boot_epoch)}")
        print(f"Purge owed: {'yes' if is_purge_owed(watermark, boot_epoch) else 'no'}")

        print("\nTransient rows:")
        print(f"  channels: {counts['channels']}")
        print(f"  programs: {counts['programs']}")
        print()
    finally:
        ctx.close()


def cmd_purge(args):
    """Run the once-per-boot purge decision."""
    from tvprovider.services.retention import RetentionError

    ctx = get_context()
    try:
        try:
            result = ctx.guard.ensure_purged()
        except RetentionError as e:
            print(f"Error: {e}")
            sys.exit(1)

        if result.performed:
            print("\nTransient rows purged:")
            print(f"  programs: {result.programs_deleted}")
            print(f"  channels: {result.channels_deleted}")
            print(f"  watermark: {_format_millis(result.watermark_ms)}")
        else:
            print(f"\nNo purge needed ({result.skipped_reason})")
            print(f"  last purge: {_format_millis(result.watermark_ms or 0)}")
            print(f"  boot completed: {_format_millis(result.boot_epoch_ms or 0)}")
        print()
    finally:
        ctx.close()


def cmd_init_db(args):
    """Create missing tables."""
    ctx = get_context()
    try:
        tables = sorted(inspect(ctx.engine).get_table_names())
        print(f"Tables ready: {', '.join(tables)}")
    finally:
        ctx.close()


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="TV provider transient retention CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check whether a purge is owed for this boot
  python -m tvprovider.cli.retention status

  # Purge transient rows left from a previous boot
  python -m tvprovider.cli.retention purge
        """,
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # status command
    status_parser = subparsers.add_parser("status", help="Show retention status")
    status_parser.set_defaults(func=cmd_status)

    # purge command
    purge_parser = subparsers.add_parser("purge", help="Purge transient rows if owed for this boot")
    purge_parser.set_defaults(func=cmd_purge)

    # init-db command
    init_parser = subparsers.add_parser("init-db", help="Create database tables")
    init_parser.set_defaults(func=cmd_init_db)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
