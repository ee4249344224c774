"""
datamigrations Shared Test Fixtures.

The fixtures follow a layered approach:
1. Table client fixtures (in-memory table, table name)
2. Store fixtures built on top of them
3. Pre-seeded record fixtures
"""

from typing import Any, Dict, List

import pytest

from datamigrations.store import MigrationStore
from datamigrations.testing import InMemoryTableClient

TEST_TABLE = "datamigrations-test"


# =============================================================================
# Base Fixtures - Table client
# =============================================================================


@pytest.fixture
def table_name() -> str:
    return TEST_TABLE


@pytest.fixture
def table_client() -> InMemoryTableClient:
    """Empty in-memory table client."""
    return InMemoryTableClient()


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def store(table_client: InMemoryTableClient, table_name: str) -> MigrationStore:
    return MigrationStore(table_client, table_name=table_name)


# =============================================================================
# Record Fixtures
# =============================================================================


@pytest.fixture
def stored_items() -> List[Dict[str, Any]]:
    """Three stored migrations, deliberately out of timestamp order."""
    return [
        {
            "id": "id-2",
            "title": "1700000000002-add-index",
            "description": "add index",
            "timestamp": 20,
            "createdAt": 1700000000002,
        },
        {
            "id": "id-1",
            "title": "1700000000001-init",
            "description": "initial data",
            "timestamp": 10,
            "createdAt": 1700000000001,
        },
        {
            "id": "id-3",
            "title": "1700000000003-backfill",
            "description": "backfill users",
            "timestamp": 30,
            "createdAt": 1700000000003,
        },
    ]


@pytest.fixture
def seeded_client(
    table_client: InMemoryTableClient,
    table_name: str,
    stored_items: List[Dict[str, Any]],
) -> InMemoryTableClient:
    table_client.seed(table_name, stored_items)
    return table_client
