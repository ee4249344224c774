"""
datamigrations DynamoDB Table Client.

Production table client backed by AWS DynamoDB through boto3.

Configuration (config.yaml):
    datamigrations:
      backend: dynamodb
      table_name: ${DATA_MIGRATIONS_TABLE_NAME}
      region: us-east-1
      endpoint_url: http://localhost:8000   # local DynamoDB only
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import ClientError

from datamigrations.config.loader import StoreConfig
from datamigrations.storage.base import TableClient

logger = logging.getLogger(__name__)


class DynamoDBTableClient(TableClient):
    """
    DynamoDB table client.

    Table layout:
    - Partition key: ``id`` (string, assigned on create)
    - Attributes: title, description, timestamp, createdAt

    The boto3 resource is created once and shared by every call; boto3
    manages its own connection pool.
    """

    def __init__(
        self,
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        resource: Any = None,
    ):
        """
        Initialize the DynamoDB client.

        Args:
            region: AWS region name
            endpoint_url: Optional endpoint for a local DynamoDB instance
            resource: Pre-built boto3 DynamoDB service resource
        """
        self.region = region
        self.endpoint_url = endpoint_url

        if resource is None:
            kwargs: Dict[str, Any] = {"region_name": region}
            if endpoint_url:
                kwargs["endpoint_url"] = endpoint_url
            resource = boto3.resource("dynamodb", **kwargs)
        self.resource = resource

        logger.debug(
            f"DynamoDB client ready (region={region}, endpoint={endpoint_url or 'aws'})"
        )

    @classmethod
    def from_config(cls, config: StoreConfig) -> "DynamoDBTableClient":
        """Create instance from configuration."""
        return cls(region=config.region, endpoint_url=config.endpoint_url)

    @property
    def client(self) -> Any:
        """Low-level boto3 client sharing the resource's session."""
        return self.resource.meta.client

    def _table(self, table_name: str) -> Any:
        return self.resource.Table(table_name)

    def list_items(self, table_name: str) -> List[Dict[str, Any]]:
        """Scan the table. Only the first page is returned."""
        response = self._table(table_name).scan()
        if "LastEvaluatedKey" in response:
            logger.warning(
                f"Scan of {table_name} returned a partial page; "
                "remaining items were not read"
            )
        return response.get("Items", [])

    def create_item(self, table_name: str, item: Dict[str, Any]) -> Dict[str, Any]:
        """Put a new item, assigning a uuid4 ``id`` when absent."""
        stored = dict(item)
        stored.setdefault("id", str(uuid.uuid4()))
        self._table(table_name).put_item(Item=stored)
        return stored

    def update_item(self, table_name: str, item: Dict[str, Any]) -> Dict[str, Any]:
        """Replace an existing item; fails if no row with that ``id`` exists."""
        if not item.get("id"):
            raise ValueError(f"Cannot update an item without an id: {item!r}")
        stored = dict(item)
        self._table(table_name).put_item(
            Item=stored,
            ConditionExpression="attribute_exists(id)",
        )
        return stored

    def create_table_if_not_exists(self, table_name: str) -> bool:
        """
        Create the migrations table for local or fresh environments.

        Returns:
            True if the table was created, False if it already existed
        """
        try:
            table = self.resource.create_table(
                TableName=table_name,
                KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
                AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
                BillingMode="PAY_PER_REQUEST",
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ResourceInUseException":
                logger.debug(f"Table already exists: {table_name}")
                return False
            raise

        table.wait_until_exists()
        logger.info(f"Created DynamoDB table: {table_name}")
        return True
