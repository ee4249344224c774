"""
datamigrations - DynamoDB state store for data-migration runners

Keeps the list of applied migrations in a key-value table. On every save
the proposed migration set is diffed against the stored records:

    - new titles are created
    - known titles with a new timestamp are updated
    - everything else is left alone

Records are never deleted.

Testing Support:
    For testing code that uses the store, use the `datamigrations.testing`
    module:

        from datamigrations import MigrationStore
        from datamigrations.testing import InMemoryTableClient

        store = MigrationStore(InMemoryTableClient())
"""

__version__ = "0.1.0"

from datamigrations.config import ConfigLoader, StoreConfig
from datamigrations.exceptions import (
    ConfigurationError,
    DataMigrationsError,
    MigrationSerializationError,
    StorageError,
)
from datamigrations.reconcile import (
    ReconcilePlan,
    compute_last_run,
    diff_for_create,
    diff_for_update,
    parse_created_at,
    reconcile,
    serialize_migrations,
)
from datamigrations.storage import (
    DynamoDBTableClient,
    TableClient,
    TableClientFactory,
    TableWrite,
    batch_write,
)
from datamigrations.store import MigrationStore
from datamigrations.types import MigrationRecord, MigrationSet, SerializedMigration

__all__ = [
    # Store
    "MigrationStore",
    # Types
    "MigrationRecord",
    "MigrationSet",
    "SerializedMigration",
    # Reconciler
    "ReconcilePlan",
    "reconcile",
    "serialize_migrations",
    "diff_for_update",
    "diff_for_create",
    "compute_last_run",
    "parse_created_at",
    # Storage
    "TableClient",
    "DynamoDBTableClient",
    "TableClientFactory",
    "TableWrite",
    "batch_write",
    # Configuration
    "ConfigLoader",
    "StoreConfig",
    # Exceptions
    "DataMigrationsError",
    "ConfigurationError",
    "MigrationSerializationError",
    "StorageError",
]
