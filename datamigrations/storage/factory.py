"""
Table Client Factory - Decouples client selection from implementation.

The store never builds its own table client; it is handed one, either
directly or through this factory from a StoreConfig. Tests register or
pass in-memory clients without touching process-wide state.
"""

import logging
from typing import Callable, Dict, List

from datamigrations.config.loader import StoreConfig
from datamigrations.exceptions import ConfigurationError
from datamigrations.storage.base import TableClient

logger = logging.getLogger(__name__)

ClientBuilder = Callable[[StoreConfig], TableClient]


class TableClientFactory:
    """Factory for creating table client instances."""

    _builders: Dict[str, ClientBuilder] = {}

    @classmethod
    def register(cls, name: str, builder: ClientBuilder) -> None:
        """Register a table client type."""
        cls._builders[name] = builder
        logger.debug(f"Registered table client: {name}")

    @classmethod
    def create(cls, config: StoreConfig) -> TableClient:
        """
        Create a table client for ``config.backend``.

        Raises:
            ConfigurationError: If the backend type is not registered
        """
        if config.backend not in cls._builders:
            available = list(cls._builders.keys())
            raise ConfigurationError(
                f"Unknown table backend: {config.backend}. Available: {available}"
            )
        return cls._builders[config.backend](config)

    @classmethod
    def get_available_backends(cls) -> List[str]:
        """Get list of registered client types."""
        return list(cls._builders.keys())


def _register_builtin_clients() -> None:
    from datamigrations.storage.dynamodb import DynamoDBTableClient
    from datamigrations.testing.mocks import InMemoryTableClient

    TableClientFactory.register("dynamodb", DynamoDBTableClient.from_config)
    TableClientFactory.register("memory", lambda config: InMemoryTableClient())


# Auto-register on import
_register_builtin_clients()
