#!/usr/bin/env python3
"""
Command-line access to CSV export/import, revenue series and renames.

Usage:
    python -m stash.cli export --owner alice                  # all collections to stdout
    python -m stash.cli export --owner alice --id 3 --id 7 -o stash.csv
    python -m stash.cli import --owner alice stash.csv
    python -m stash.cli revenue --collection 3 --granularity week
    python -m stash.cli rename --owner alice --collection 3 "Pokemon cards"
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

from stash.config import config
from stash.exceptions import StashError, ValidationError
from stash.export_service import export_collections
from stash.import_service import import_collections
from stash.observability import correlation_context, get_logger, setup_logging
from stash.store import DuckDBStore
from stash.validators import validate_collection_ids, validate_granularity, validate_owner_id

logger = get_logger(__name__)


async def run_export(store: DuckDBStore, args) -> int:
    owner_id = validate_owner_id(args.owner)
    result = await export_collections(store, owner_id, validate_collection_ids(args.ids))
    if args.output:
        Path(args.output).write_text(result.document, encoding="utf-8")
        print(f"Exported {result.row_count} rows to {args.output}")
    else:
        sys.stdout.write(result.document)
    return 0


async def run_import(store: DuckDBStore, args) -> int:
    owner_id = validate_owner_id(args.owner)
    document = Path(args.file).read_text(encoding="utf-8")
    summary = await import_collections(store, owner_id, document)
    print(summary.message)
    return 0


async def run_revenue(store: DuckDBStore, args) -> int:
    granularity = validate_granularity(args.granularity)
    points = await store.get_revenue_series(args.collection, granularity)
    print(json.dumps([point.to_dict() for point in points], indent=2))
    return 0


async def run_rename(store: DuckDBStore, args) -> int:
    owner_id = validate_owner_id(args.owner)
    collection = await store.rename_collection(args.collection, owner_id, args.name)
    print(f"Renamed collection {collection.id} to '{collection.name}'")
    return 0


COMMANDS = {
    "export": run_export,
    "import": run_import,
    "revenue": run_revenue,
    "rename": run_rename,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stash", description="Stash collection inventory tools")
    parser.add_argument(
        "--db",
        default=None,
        help=f"DuckDB file (default: {config.store.db_path})"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Export collections as CSV")
    export_parser.add_argument("--owner", required=True, help="Owner id")
    export_parser.add_argument(
        "--id",
        dest="ids",
        type=int,
        action="append",
        help="Collection id to export (repeatable; default: all)"
    )
    export_parser.add_argument("-o", "--output", help="Write to file instead of stdout")

    import_parser = subparsers.add_parser("import", help="Import collections from CSV")
    import_parser.add_argument("--owner", required=True, help="Owner id")
    import_parser.add_argument("file", help="CSV file in export layout")

    revenue_parser = subparsers.add_parser("revenue", help="Revenue series of a collection")
    revenue_parser.add_argument("--collection", type=int, required=True, help="Collection id")
    revenue_parser.add_argument(
        "--granularity",
        default="day",
        help="Bucket width: day, week or month (default: day)"
    )

    rename_parser = subparsers.add_parser("rename", help="Rename a collection")
    rename_parser.add_argument("--owner", required=True, help="Owner id")
    rename_parser.add_argument("--collection", type=int, required=True, help="Collection id")
    rename_parser.add_argument("name", help="New collection name")
    return parser


async def main(args) -> int:
    """Run one command against the store and map errors to an exit code."""
    store = DuckDBStore(db_path=args.db)
    try:
        with correlation_context():
            return await COMMANDS[args.command](store, args)
    except (StashError, ValidationError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(json.dumps(e.to_dict()), file=sys.stderr)
        return 1
    finally:
        await store.close()


def run(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=config.logging.level, json_format=config.logging.json_format)
    return asyncio.run(main(args))


if __name__ == "__main__":
    sys.exit(run())
