"""
datamigrations Store.

Persists migration runner state into a key-value table.

``load`` reads every record and reports the last run; ``save`` re-reads
the table, diffs it against the proposed migrations and writes only the
differences. No state is kept between calls.

Blocking table client calls run in worker threads via asyncio.to_thread(),
so creates and updates of one save are issued concurrently.
"""

import asyncio
import logging
from typing import Any, List, Mapping, Optional, Union

from datamigrations.config.loader import DEFAULT_TABLE_NAME, StoreConfig
from datamigrations.reconcile import (
    compute_last_run,
    parse_created_at,
    reconcile,
    serialize_migrations,
)
from datamigrations.storage.base import TableClient
from datamigrations.types import MigrationRecord, MigrationSet, SerializedMigration

logger = logging.getLogger(__name__)


class MigrationStore:
    """
    Migration state store backed by a TableClient.

    Example:
        >>> from datamigrations.testing import InMemoryTableClient
        >>> store = MigrationStore(InMemoryTableClient())
        >>> state = asyncio.run(store.load())
        >>> assert state.migrations == [] and state.last_run is None
    """

    def __init__(self, client: TableClient, table_name: str = DEFAULT_TABLE_NAME):
        """
        Initialize the store.

        Args:
            client: Table client used for every read and write
            table_name: Table holding migration records
        """
        self.client = client
        self.table_name = table_name

    @classmethod
    def from_config(cls, config: Optional[StoreConfig] = None) -> "MigrationStore":
        """Create a store and its table client from configuration."""
        from datamigrations.storage.factory import TableClientFactory

        config = config or StoreConfig.from_env()
        return cls(TableClientFactory.create(config), table_name=config.table_name)

    async def _list_records(self) -> List[MigrationRecord]:
        items = await asyncio.to_thread(self.client.list_items, self.table_name)
        if not items:
            logger.info(
                "Cannot read migrations from database. If this is the first "
                "time you run migrations, then this is normal."
            )
            return []
        records = [MigrationRecord.from_item(item) for item in items]
        # Ascending so the most recently run migration is last; pending first
        records.sort(key=lambda r: (r.timestamp is not None, r.timestamp or 0))
        return records

    async def load(self) -> MigrationSet:
        """
        Load every stored migration.

        Returns:
            MigrationSet sorted by timestamp, with last_run set to the
            highest timestamp (None for an empty table)
        """
        records = await self._list_records()
        return MigrationSet(migrations=records, last_run=compute_last_run(records))

    async def _create(self, migration: SerializedMigration) -> MigrationRecord:
        item = migration.to_item()
        created_at = parse_created_at(migration.title)
        if created_at is not None:
            item["createdAt"] = created_at
        stored = await asyncio.to_thread(self.client.create_item, self.table_name, item)
        return MigrationRecord.from_item(stored)

    async def _update(self, record: MigrationRecord) -> MigrationRecord:
        stored = await asyncio.to_thread(
            self.client.update_item, self.table_name, record.to_item()
        )
        return MigrationRecord.from_item(stored)

    async def save(
        self, migration_set: Union[MigrationSet, Mapping[str, Any]]
    ) -> MigrationSet:
        """
        Persist a proposed migration set.

        Stored records whose title is not in the proposed set are left in
        the table untouched and are not part of the returned migrations.

        Args:
            migration_set: MigrationSet, or the runner's
                ``{"migrations": [...], "lastRun": n}`` mapping

        Returns:
            MigrationSet of unchanged records followed by every written
            record; last_run is passed through from the input

        Raises:
            Whatever the table client raises. The first failed write is
            propagated; writes already applied are not rolled back.
        """
        if not isinstance(migration_set, MigrationSet):
            migration_set = MigrationSet.from_dict(migration_set)

        existing = await self._list_records()
        proposed = serialize_migrations(migration_set.migrations)
        plan = reconcile(existing, proposed)

        logger.debug(
            f"Reconciled {len(proposed)} migrations: {len(plan.to_create)} to create, "
            f"{len(plan.to_update)} to update, {len(plan.unchanged)} unchanged"
        )

        writes = [self._create(m) for m in plan.to_create]
        writes.extend(self._update(r) for r in plan.to_update)
        results = await asyncio.gather(*writes)

        return MigrationSet(
            migrations=plan.unchanged + list(results),
            last_run=migration_set.last_run,
        )
