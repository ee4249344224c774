"""
datamigrations Exception Hierarchy

Custom exceptions for the migration state store, covering configuration,
serialization of proposed migrations, and in-process storage failures.

Errors raised by the table service itself (botocore ``ClientError`` and
friends) are never wrapped in these types; they reach the caller as-is.
"""


class DataMigrationsError(Exception):
    """Base exception for all datamigrations errors."""

    pass


class ConfigurationError(DataMigrationsError):
    """Raised when configuration is invalid or missing."""

    pass


class MigrationSerializationError(DataMigrationsError):
    """Raised when a proposed migration cannot be projected to a record."""

    pass


class StorageError(DataMigrationsError):
    """Raised when a storage operation fails outside the table service."""

    pass
