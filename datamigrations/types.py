"""
datamigrations Record Types

Defines the data structures persisted to, and returned from, the
migrations table.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional


def _to_int(value: Any) -> Optional[int]:
    """Coerce a table number (DynamoDB returns Decimal) to int."""
    if value is None:
        return None
    if isinstance(value, (Decimal, float, str)):
        return int(value)
    return value


@dataclass(frozen=True)
class SerializedMigration:
    """
    Canonical projection of a proposed migration.

    Only these three fields are ever compared or persisted for a
    proposed migration; anything else the caller's objects carry
    (running state, callables, ...) is dropped during serialization.
    """

    title: str
    description: str
    timestamp: Optional[int]

    def to_item(self) -> Dict[str, Any]:
        """Convert to a table item with exactly three keys."""
        return {
            "title": self.title,
            "description": self.description,
            "timestamp": self.timestamp,
        }


@dataclass
class MigrationRecord:
    """
    A migration as stored in the table.

    Attributes:
        title: Unique name; its leading digits encode the creation time
        description: Free text, informational only
        timestamp: When the migration was last applied, None while pending
        created_at: Parsed from the title on creation, never recomputed
        id: Identifier assigned by the storage layer on creation
    """

    title: str
    description: str = ""
    timestamp: Optional[int] = None
    created_at: Optional[int] = None
    id: Optional[str] = None

    def to_item(self) -> Dict[str, Any]:
        """Convert to the table item shape, omitting unset fields."""
        item: Dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "timestamp": self.timestamp,
        }
        if self.created_at is not None:
            item["createdAt"] = self.created_at
        if self.id is not None:
            item["id"] = self.id
        return item

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "MigrationRecord":
        """Build a record from a table item."""
        return cls(
            title=item["title"],
            description=item.get("description") or "",
            timestamp=_to_int(item.get("timestamp")),
            created_at=_to_int(item.get("createdAt")),
            id=item.get("id"),
        )


@dataclass
class MigrationSet:
    """
    The state exchanged with the migration runner.

    ``migrations`` holds MigrationRecord instances when produced by the
    store; callers may hand arbitrary migration objects to ``save``.
    """

    migrations: List[Any] = field(default_factory=list)
    last_run: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MigrationSet":
        """Build from the runner's ``{"migrations": [...], "lastRun": n}`` shape."""
        last_run = data.get("lastRun", data.get("last_run"))
        return cls(
            migrations=list(data.get("migrations") or []),
            last_run=last_run,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the runner's dict shape."""
        return {
            "migrations": [
                m.to_item() if isinstance(m, MigrationRecord) else m
                for m in self.migrations
            ],
            "lastRun": self.last_run,
        }
