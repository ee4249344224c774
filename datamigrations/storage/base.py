"""
datamigrations Table Client Interface.

Abstract base class for the key-value table service the store persists to.

Implementations:
- DynamoDBTableClient: Production AWS DynamoDB (boto3)
- InMemoryTableClient: Dict-backed fake (datamigrations.testing)
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class TableClient(ABC):
    """
    Abstract base class for table clients.

    Methods are blocking; the async store runs them in worker threads.
    Errors from the underlying service propagate unchanged.
    """

    @abstractmethod
    def list_items(self, table_name: str) -> List[Dict[str, Any]]:
        """Return every item in the table (full scan, no filtering)."""
        pass

    @abstractmethod
    def create_item(self, table_name: str, item: Dict[str, Any]) -> Dict[str, Any]:
        """Store a new item, assigning an ``id`` if absent. Returns the stored item."""
        pass

    @abstractmethod
    def update_item(self, table_name: str, item: Dict[str, Any]) -> Dict[str, Any]:
        """
        Replace an existing item.

        Raises:
            ValueError: If the item carries no ``id``
        """
        pass
