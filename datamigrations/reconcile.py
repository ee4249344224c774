"""
datamigrations Reconciler.

Pure, in-memory diffing of a proposed migration set against the records
already stored in the table. Nothing here performs I/O.

Given existing records and proposed migrations, every proposed title ends
up in exactly one bucket:
- unchanged: title and timestamp both match a stored record
- update: title matches but the timestamp differs
- create: title is not stored yet
"""

import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from datamigrations.exceptions import MigrationSerializationError
from datamigrations.types import MigrationRecord, SerializedMigration

_LEADING_DIGITS = re.compile(r"^\d+")


@dataclass
class ReconcilePlan:
    """Outcome of diffing existing records against a proposed set."""

    relevant: List[MigrationRecord] = field(default_factory=list)
    to_update: List[MigrationRecord] = field(default_factory=list)
    to_create: List[SerializedMigration] = field(default_factory=list)
    unchanged: List[MigrationRecord] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.to_update or self.to_create)


def _field(migration: Any, name: str, default: Any = None) -> Any:
    if isinstance(migration, Mapping):
        return migration.get(name, default)
    return getattr(migration, name, default)


def serialize_migration(migration: Any) -> SerializedMigration:
    """
    Project one proposed migration to ``{title, description, timestamp}``.

    Accepts mappings or attribute objects (including MigrationRecord).

    Raises:
        MigrationSerializationError: If the migration has no title
    """
    title = _field(migration, "title")
    if not title:
        raise MigrationSerializationError(
            f"Cannot serialize migration without a title: {migration!r}"
        )
    timestamp = _field(migration, "timestamp")
    return SerializedMigration(
        title=str(title),
        description=_field(migration, "description") or "",
        timestamp=int(timestamp) if timestamp is not None else None,
    )


def serialize_migrations(migrations: Iterable[Any]) -> List[SerializedMigration]:
    """Project every proposed migration to its canonical three-field shape."""
    return [serialize_migration(m) for m in migrations]


def parse_created_at(title: str) -> Optional[int]:
    """Return the integer value of the title's leading digits, if any."""
    match = _LEADING_DIGITS.match(title)
    if match is None:
        return None
    return int(match.group(0))


def _timestamps_by_title(
    proposed: Sequence[SerializedMigration],
) -> Dict[str, Optional[int]]:
    timestamps: Dict[str, Optional[int]] = {}
    for migration in proposed:
        # First occurrence of a repeated title wins
        timestamps.setdefault(migration.title, migration.timestamp)
    return timestamps


def diff_for_update(
    existing: Sequence[MigrationRecord],
    proposed: Sequence[SerializedMigration],
) -> List[MigrationRecord]:
    """
    Existing records whose proposed counterpart carries a new timestamp.

    Each returned record is a copy of the stored one (id, description and
    created_at untouched) with its timestamp replaced.

    Args:
        existing: Records currently stored
        proposed: Serialized proposed migrations

    Returns:
        One updated copy per matching existing record, in existing order
    """
    timestamps = _timestamps_by_title(proposed)
    updates = []
    for record in existing:
        if record.title not in timestamps:
            continue
        new_timestamp = timestamps[record.title]
        if new_timestamp != record.timestamp:
            updates.append(replace(record, timestamp=new_timestamp))
    return updates


def diff_for_create(
    existing: Sequence[MigrationRecord],
    proposed: Sequence[SerializedMigration],
) -> List[SerializedMigration]:
    """
    Proposed migrations whose title is not stored yet.

    Args:
        existing: Records currently stored
        proposed: Serialized proposed migrations

    Returns:
        Creation candidates in proposed order, one per title
    """
    seen = {record.title for record in existing}
    creates = []
    for migration in proposed:
        if migration.title in seen:
            continue
        seen.add(migration.title)
        creates.append(migration)
    return creates


def compute_last_run(records: Iterable[MigrationRecord]) -> Optional[int]:
    """
    Timestamp of the most recently run record, or None if nothing has run.

    Pending records (timestamp None) are skipped. When several records
    share the maximum timestamp the first one encountered is picked.
    """
    latest: Optional[MigrationRecord] = None
    for record in records:
        if record.timestamp is None:
            continue
        if latest is None or record.timestamp > latest.timestamp:
            latest = record
    return latest.timestamp if latest is not None else None


def reconcile(
    existing: Sequence[MigrationRecord],
    proposed: Sequence[SerializedMigration],
) -> ReconcilePlan:
    """
    Build the full plan for a save.

    Existing records whose title is not part of ``proposed`` are left out of
    the plan entirely; they stay in the table but are not diffed.
    """
    titles = {migration.title for migration in proposed}
    relevant = [record for record in existing if record.title in titles]
    to_update = diff_for_update(relevant, proposed)
    to_create = diff_for_create(relevant, proposed)
    updated_titles = {record.title for record in to_update}
    unchanged = [record for record in relevant if record.title not in updated_titles]
    return ReconcilePlan(
        relevant=relevant,
        to_update=to_update,
        to_create=to_create,
        unchanged=unchanged,
    )
