"""
Command-line entry point for managing branch reservation settings.

Commands:
    list          Print every branch with its sections and tables
    disable-all   Stop every branch from accepting reservations
    set-table     Toggle reservation acceptance on one table
"""
import argparse
import asyncio
import sys
from typing import List, Optional

from loguru import logger
from pydantic import ValidationError

from .config import Settings, get_settings
from .error_handling import (
    ConfigurationError,
    ReservationSystemError,
    classify,
    init_logging,
)
from .models import Branch, find_table
from .services import ApiClient, disable_all_branches, fetch_hierarchy, update_table


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2
EXIT_USAGE = 3


def _flag(value: bool) -> str:
    return "on" if value else "off"


def format_hierarchy(branches: List[Branch]) -> str:
    """Render the hierarchy as an indented text tree."""
    lines = []
    for branch in branches:
        lines.append(
            f"{branch.name} [{branch.reference}] id={branch.id} "
            f"reservations={_flag(branch.accepts_reservations)} "
            f"duration={branch.reservation_duration}min"
        )
        for day, windows in branch.reservation_times.items():
            spans = ", ".join(f"{start}-{end}" for start, end in windows)
            lines.append(f"    {day}: {spans}")
        for section in branch.sections:
            lines.append(f"  {section.name} id={section.id}")
            for table in section.tables:
                lines.append(
                    f"    {table.name} id={table.id} "
                    f"reservations={_flag(table.accepts_reservations)}"
                )
    return "\n".join(lines)


async def cmd_list(client: ApiClient, args: argparse.Namespace) -> int:
    branches = await fetch_hierarchy(client)
    print(format_hierarchy(branches))
    return EXIT_OK


async def cmd_disable_all(client: ApiClient, args: argparse.Namespace) -> int:
    branches = await fetch_hierarchy(client)
    outcome = await disable_all_branches(client, branches)

    for result in outcome.results:
        if result.succeeded:
            print(f"OK      {result.branch_name} ({result.branch_id})")
        else:
            print(f"FAILED  {result.branch_name} ({result.branch_id}): {result.message}")

    if outcome.succeeded:
        print(f"Reservations disabled on {outcome.total} branches.")
        return EXIT_OK
    print(f"{len(outcome.failed_ids)} of {outcome.total} branches could not be updated.")
    return EXIT_FAILED


async def cmd_set_table(client: ApiClient, args: argparse.Namespace) -> int:
    # The lookup only names the table in the output
    table = find_table(await fetch_hierarchy(client), args.table_id)
    label = f"{table.name} ({args.table_id})" if table and table.name else args.table_id

    await update_table(client, args.table_id, {"accepts_reservations": args.accepts})
    print(f"Table {label} reservations={_flag(args.accepts)}")
    return EXIT_OK


COMMANDS = {
    "list": cmd_list,
    "disable-all": cmd_disable_all,
    "set-table": cmd_set_table,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="branch-reservations",
        description="Inspect and change reservation acceptance for branches and tables."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="Print branches, sections and tables.")
    subparsers.add_parser("disable-all", help="Stop every branch from accepting reservations.")

    set_table = subparsers.add_parser("set-table", help="Toggle reservations on one table.")
    set_table.add_argument("table_id", help="Identifier of the table.")
    toggle = set_table.add_mutually_exclusive_group(required=True)
    toggle.add_argument("--on", dest="accepts", action="store_true", help="Accept reservations.")
    toggle.add_argument("--off", dest="accepts", action="store_false", help="Refuse reservations.")

    return parser


async def run(args: argparse.Namespace, settings: Settings, transport=None) -> int:
    """
    Execute one command against the API.

    Args:
        args: Parsed command-line arguments
        settings: Explicit configuration
        transport: Optional httpx transport (tests)

    Returns:
        Process exit code
    """
    try:
        client = ApiClient(settings, transport=transport)
    except ConfigurationError as e:
        logger.error(str(e))
        return EXIT_CONFIG

    async with client:
        try:
            return await COMMANDS[args.command](client, args)
        except ReservationSystemError as e:
            logger.error(f"{args.command} failed: {e}")
            print(f"Error: {classify(e)}", file=sys.stderr)
            return EXIT_FAILED
        except ValueError as e:
            logger.error(f"{args.command} rejected its input: {e}")
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_USAGE


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the command-line tool.
    """
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_CONFIG

    init_logging(settings.environment, settings.log_level)

    try:
        return asyncio.run(run(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
