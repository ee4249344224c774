"""
datamigrations Bulk Writes.

Seeds tables with large numbers of items using DynamoDB BatchWriteItem.
Independent of the migration store's load/save cycle.
"""

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Sequence

from boto3.dynamodb.types import TypeSerializer

logger = logging.getLogger(__name__)

# BatchWriteItem accepts at most 25 put/delete requests per call
DEFAULT_CHUNK_SIZE = 25

_serializer = TypeSerializer()


def _to_dynamo_value(value: Any) -> Any:
    """Convert floats, which TypeSerializer rejects, to Decimal at any depth."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_dynamo_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_dynamo_value(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return {_to_dynamo_value(v) for v in value}
    return value


@dataclass
class TableWrite:
    """One item destined for ``table``."""

    table: str
    data: Dict[str, Any]

    @classmethod
    def from_dict(cls, entry: Dict[str, Any]) -> "TableWrite":
        return cls(table=entry["table"], data=dict(entry["data"]))


def build_bulk_put_input(data: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap an item in a PutRequest with DynamoDB-typed attribute values."""
    return {
        "PutRequest": {
            "Item": {
                key: _serializer.serialize(_to_dynamo_value(value))
                for key, value in data.items()
            }
        }
    }


def group_chunk(chunk: Iterable[TableWrite]) -> Dict[str, List[Dict[str, Any]]]:
    """Group a chunk of writes into BatchWriteItem ``RequestItems`` by table."""
    request_items: Dict[str, List[Dict[str, Any]]] = {}
    for write in chunk:
        request_items.setdefault(write.table, []).append(
            build_bulk_put_input(write.data)
        )
    return request_items


def chunked(records: Sequence[TableWrite], size: int) -> List[Sequence[TableWrite]]:
    """Split records into consecutive chunks of at most ``size`` items."""
    if size < 1:
        raise ValueError(f"chunk size must be positive, got {size}")
    return [records[i : i + size] for i in range(0, len(records), size)]


def batch_write(
    client: Any,
    records: Sequence[TableWrite],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> List[Dict[str, Any]]:
    """
    Write records in sequential BatchWriteItem calls.

    Each chunk completes before the next is sent. Unprocessed items
    reported by DynamoDB are not retried; they remain visible in the
    returned responses.

    Args:
        client: Low-level boto3 DynamoDB client
        records: Items to write
        chunk_size: Items per BatchWriteItem call

    Returns:
        Raw response of every call, in order
    """
    responses = []
    for chunk in chunked(list(records), chunk_size):
        response = client.batch_write_item(RequestItems=group_chunk(chunk))
        logger.info(json.dumps(response, indent=2, default=str))
        responses.append(response)
    return responses
