"""
datamigrations Testing Module.

Provides reusable test utilities for code that uses the migration store:

- InMemoryTableClient: Dict-backed table client recording every write
- Factory functions: Create records and proposed migrations with defaults

Example usage:
    >>> import asyncio
    >>> from datamigrations import MigrationStore
    >>> from datamigrations.testing import InMemoryTableClient, create_test_migration
    >>>
    >>> client = InMemoryTableClient()
    >>> store = MigrationStore(client)
    >>> result = asyncio.run(store.save({"migrations": [create_test_migration()]}))
    >>> assert len(client.create_calls) == 1
"""

from datamigrations.testing.factories import (
    create_test_migration,
    create_test_record,
)
from datamigrations.testing.mocks import InMemoryTableClient

__all__ = [
    # Mocks
    "InMemoryTableClient",
    # Factories
    "create_test_record",
    "create_test_migration",
]
