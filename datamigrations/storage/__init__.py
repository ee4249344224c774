"""datamigrations storage layer."""

from datamigrations.storage.base import TableClient
from datamigrations.storage.batch import (
    DEFAULT_CHUNK_SIZE,
    TableWrite,
    batch_write,
    build_bulk_put_input,
    group_chunk,
)
from datamigrations.storage.dynamodb import DynamoDBTableClient
from datamigrations.storage.factory import TableClientFactory

__all__ = [
    "TableClient",
    "DynamoDBTableClient",
    "TableClientFactory",
    "TableWrite",
    "DEFAULT_CHUNK_SIZE",
    "batch_write",
    "build_bulk_put_input",
    "group_chunk",
]
