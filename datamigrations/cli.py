"""
Command line interface for the migration state table.

Usage:
    python -m datamigrations show
    python -m datamigrations init-table --endpoint http://localhost:8000
    python -m datamigrations plan migrations.yaml
    python -m datamigrations save migrations.yaml --last-run 1700000000000
    python -m datamigrations seed fixtures.yaml --chunk-size 25

Files are YAML (or JSON, which YAML accepts). ``plan``/``save`` expect a
list of migrations, or a mapping with a ``migrations`` key. ``seed``
expects a list of ``{table, data}`` entries.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

import yaml

from datamigrations.config.loader import ConfigLoader, StoreConfig
from datamigrations.exceptions import ConfigurationError
from datamigrations.observability.logging import setup_logging
from datamigrations.reconcile import reconcile, serialize_migrations
from datamigrations.storage.batch import DEFAULT_CHUNK_SIZE, TableWrite, batch_write
from datamigrations.storage.dynamodb import DynamoDBTableClient
from datamigrations.store import MigrationStore
from datamigrations.types import MigrationSet

logger = logging.getLogger(__name__)


def _read_file(path: str) -> Any:
    with open(Path(path), "r") as f:
        return yaml.safe_load(f)


def _read_migration_set(path: str, last_run: Optional[int]) -> MigrationSet:
    data = _read_file(path) or []
    if isinstance(data, dict):
        migration_set = MigrationSet.from_dict(data)
    else:
        migration_set = MigrationSet(migrations=list(data))
    if last_run is not None:
        migration_set.last_run = last_run
    return migration_set


def _resolve_config(args: argparse.Namespace) -> StoreConfig:
    config = ConfigLoader.load_store_config(args.config)
    if args.table:
        config.table_name = args.table
    if args.region:
        config.region = args.region
    if args.endpoint:
        config.endpoint_url = args.endpoint
    return config


def _dynamodb_client(config: StoreConfig) -> DynamoDBTableClient:
    if config.backend != "dynamodb":
        raise ConfigurationError(
            f"This command needs the dynamodb backend, configured: {config.backend}"
        )
    return DynamoDBTableClient.from_config(config)


def _print_records(migration_set: MigrationSet) -> None:
    for record in migration_set.migrations:
        timestamp = "pending" if record.timestamp is None else record.timestamp
        print(f"{timestamp:>15}  {record.title}  (createdAt={record.created_at})")
    print(f"lastRun: {migration_set.last_run}")


async def _show(store: MigrationStore) -> int:
    _print_records(await store.load())
    return 0


async def _plan(store: MigrationStore, migration_set: MigrationSet) -> int:
    state = await store.load()
    plan = reconcile(state.migrations, serialize_migrations(migration_set.migrations))
    for migration in plan.to_create:
        print(f"create     {migration.title} @ {migration.timestamp}")
    for record in plan.to_update:
        print(f"update     {record.title} @ {record.timestamp} (id={record.id})")
    for record in plan.unchanged:
        print(f"unchanged  {record.title} @ {record.timestamp}")
    if not plan.has_changes:
        print("Nothing to write.")
    return 0


async def _save(store: MigrationStore, migration_set: MigrationSet) -> int:
    _print_records(await store.save(migration_set))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="datamigrations",
        description="Inspect and update the data-migration state table",
    )
    parser.add_argument("--config", type=str, help="Path to config.yaml")
    parser.add_argument("--table", type=str, help="Table name override")
    parser.add_argument("--region", type=str, help="AWS region override")
    parser.add_argument(
        "--endpoint", type=str, help="DynamoDB endpoint (local instances)"
    )
    parser.add_argument("--log-level", type=str, default="INFO")
    parser.add_argument("--log-format", choices=["text", "json"], default="text")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("show", help="List stored migrations and the last run")
    subparsers.add_parser("init-table", help="Create the table if it is missing")

    for name, help_text in (
        ("plan", "Show what saving a migration file would write"),
        ("save", "Save a migration file to the table"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("file", type=str, help="YAML/JSON migration list")
        sub.add_argument("--last-run", type=int, help="lastRun to record")

    seed = subparsers.add_parser("seed", help="Bulk write {table, data} entries")
    seed.add_argument("file", type=str, help="YAML/JSON list of {table, data}")
    seed.add_argument(
        "--chunk-size",
        type=int,
        default=DEFAULT_CHUNK_SIZE,
        help=f"Items per batch request (default: {DEFAULT_CHUNK_SIZE})",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=args.log_level, format_type=args.log_format)

    try:
        config = _resolve_config(args)

        if args.command == "init-table":
            _dynamodb_client(config).create_table_if_not_exists(config.table_name)
            return 0

        if args.command == "seed":
            records = [TableWrite.from_dict(e) for e in (_read_file(args.file) or [])]
            batch_write(_dynamodb_client(config).client, records, args.chunk_size)
            print(f"Wrote {len(records)} items")
            return 0

        store = MigrationStore.from_config(config)
        if args.command == "show":
            return asyncio.run(_show(store))
        migration_set = _read_migration_set(args.file, args.last_run)
        if args.command == "plan":
            return asyncio.run(_plan(store, migration_set))
        return asyncio.run(_save(store, migration_set))

    except Exception as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
