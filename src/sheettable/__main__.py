"""CLI entry point for sheettable.

Usage:
    python -m sheettable table <spreadsheet_id_or_url> <range>... [--columns]
    python -m sheettable sheets <spreadsheet_id_or_url>
    python -m sheettable updated <spreadsheet_id_or_url>

Credentials come from --api-key / --service-account, or from the
SHEETTABLE_API_KEY / SHEETTABLE_SERVICE_ACCOUNT_PATH environment variables.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import re
import sys
from datetime import datetime
from typing import Any

from loguru import logger

from sheettable.client import SpreadsheetClient
from sheettable.config import get_settings
from sheettable.exceptions import MissingCredentialError, SheetTableError
from sheettable.logging import setup_logging
from sheettable.transport import TransportError


def parse_spreadsheet_id(id_or_url: str) -> str:
    """Extract spreadsheet ID from a URL or return as-is if already an ID."""
    # https://docs.google.com/spreadsheets/d/SPREADSHEET_ID/edit...
    url_pattern = r"docs\.google\.com/spreadsheets/d/([a-zA-Z0-9_-]+)"
    match = re.search(url_pattern, id_or_url)
    if match:
        return match.group(1)
    return id_or_url


def _json_default(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _dump(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=_json_default))


async def _authorize(client: SpreadsheetClient, args: argparse.Namespace) -> None:
    settings = get_settings()
    service_account = args.service_account or settings.service_account_path
    api_key = args.api_key or settings.api_key

    if service_account:
        await client.authorize_service_account(service_account)
    elif api_key:
        await client.authorize_api_key(api_key)
    else:
        raise MissingCredentialError("apikey")


async def cmd_table(client: SpreadsheetClient, args: argparse.Namespace) -> int:
    """Print one or more ranges as JSON tables."""
    if args.columns:
        for range_spec in args.ranges:
            columns = await client.table_columns(range_spec)
            _dump([column.to_dict() for column in columns])
        return 0

    specs = args.ranges[0] if len(args.ranges) == 1 else args.ranges
    result = await client.tables(specs)
    if isinstance(result, list):
        _dump([table.to_dict() for table in result])
    else:
        _dump(result.to_dict())
    return 0


async def cmd_sheets(client: SpreadsheetClient, args: argparse.Namespace) -> int:
    """Print sheet names, one per line."""
    for name in await client.list_sheet_names():
        print(name)
    return 0


async def cmd_updated(client: SpreadsheetClient, args: argparse.Namespace) -> int:
    """Print the last modification time."""
    print(await client.get_last_update_timestamp())
    return 0


COMMANDS = {
    "table": cmd_table,
    "sheets": cmd_sheets,
    "updated": cmd_updated,
}


async def run(args: argparse.Namespace) -> int:
    client = SpreadsheetClient(parse_spreadsheet_id(args.spreadsheet))
    try:
        await _authorize(client, args)
        return await COMMANDS[args.command](client, args)
    except (SheetTableError, TransportError, FileNotFoundError) as e:
        logger.debug("Command failed: {!r}", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await client.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sheettable",
        description="Read Google Sheets ranges as tables",
    )
    parser.add_argument("--api-key", help="Google API key (read-only access)")
    parser.add_argument(
        "--service-account", help="Path to a service account JSON key file"
    )
    parser.add_argument("--log-level", help="Log level (e.g. DEBUG)")
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit logs as JSON lines"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    table_parser = subparsers.add_parser("table", help="Print ranges as tables")
    table_parser.add_argument("spreadsheet", help="Spreadsheet ID or URL")
    table_parser.add_argument(
        "ranges", nargs="+", help='Sheet names or A1 ranges (e.g. "Formats!A1:E3")'
    )
    table_parser.add_argument(
        "--columns", action="store_true", help="Print column-oriented output"
    )

    sheets_parser = subparsers.add_parser("sheets", help="List sheet names")
    sheets_parser.add_argument("spreadsheet", help="Spreadsheet ID or URL")

    updated_parser = subparsers.add_parser(
        "updated", help="Print last modification time"
    )
    updated_parser.add_argument("spreadsheet", help="Spreadsheet ID or URL")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(
        json_logs=args.json_logs or settings.json_logs,
        log_level=args.log_level or settings.log_level,
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
