"""
datamigrations Configuration Loader.

Handles loading store configuration from YAML files and environment
variables.
"""

import logging
import os
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "datamigrations"
DEFAULT_REGION = "us-east-1"
DEFAULT_BACKEND = "dynamodb"

TABLE_NAME_ENV = "DATA_MIGRATIONS_TABLE_NAME"
REGION_ENV = "AWS_REGION"
ENDPOINT_ENV = "AWS_ENDPOINT"


@dataclass
class StoreConfig:
    """
    Settings for the migrations table.

    Attributes:
        table_name: Table holding migration records
        region: AWS region of the table
        endpoint_url: Optional endpoint for a local DynamoDB instance
        backend: Table client type registered with TableClientFactory
    """

    table_name: str = DEFAULT_TABLE_NAME
    region: str = DEFAULT_REGION
    endpoint_url: Optional[str] = None
    backend: str = DEFAULT_BACKEND

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "StoreConfig":
        """Build configuration from environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            table_name=env.get(TABLE_NAME_ENV) or DEFAULT_TABLE_NAME,
            region=env.get(REGION_ENV) or DEFAULT_REGION,
            endpoint_url=env.get(ENDPOINT_ENV) or None,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StoreConfig":
        """Build configuration from a loaded config dict."""
        return cls(
            table_name=data.get("table_name") or DEFAULT_TABLE_NAME,
            region=data.get("region") or DEFAULT_REGION,
            endpoint_url=data.get("endpoint_url") or None,
            backend=data.get("backend") or DEFAULT_BACKEND,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ConfigLoader:
    """
    Loads store configuration from YAML files with environment variable expansion.

    Supports ${ENV_VAR} syntax in any string value.
    """

    SECTION = "datamigrations"

    @classmethod
    def load(cls, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to config.yaml

        Returns:
            Parsed and expanded configuration dict
        """
        config = cls._read_section(config_path)
        if config is None:
            return cls._get_defaults()
        return config

    @classmethod
    def _read_section(cls, config_path: str) -> Optional[Dict[str, Any]]:
        """Read and expand the config section, or None if there is nothing to read."""
        path = Path(config_path)
        if not path.exists():
            logger.warning(f"Config not found at {config_path}, using defaults")
            return None

        with open(path, "r") as f:
            raw_config = yaml.safe_load(f)

        if raw_config is None:
            logger.warning(f"Config file {config_path} is empty, using defaults")
            return None

        # Get the 'datamigrations' section or use whole file
        config = raw_config.get(cls.SECTION, raw_config)

        return cls._expand_config(config)

    @classmethod
    def load_store_config(cls, config_path: Optional[str] = None) -> StoreConfig:
        """
        Resolve a StoreConfig.

        Environment variables provide the base; values from the YAML file,
        when given, take precedence.
        """
        base = StoreConfig.from_env().to_dict()
        if config_path:
            section = cls._read_section(config_path) or {}
            base.update({k: v for k, v in section.items() if v})
        return StoreConfig.from_dict(base)

    @classmethod
    def _expand_config(cls, config: Any) -> Any:
        """Recursively expand environment variables in config."""
        if isinstance(config, dict):
            return {k: cls._expand_config(v) for k, v in config.items()}
        elif isinstance(config, list):
            return [cls._expand_config(item) for item in config]
        elif isinstance(config, str):
            return cls._expand_value(config)
        return config

    @classmethod
    def _expand_value(cls, value: str) -> str:
        """Expand ${ENV_VAR} references in a single value."""
        if "${" not in value:
            return value

        def replace(match):
            ref = match.group(1)
            env_value = os.environ.get(ref)
            if env_value is None:
                logger.warning(f"Environment variable {ref} not set")
                return match.group(0)
            return env_value

        return re.sub(r"\$\{([^}]+)\}", replace, value)

    @staticmethod
    def _get_defaults() -> Dict[str, Any]:
        """Return default configuration."""
        return {
            "table_name": DEFAULT_TABLE_NAME,
            "region": DEFAULT_REGION,
            "endpoint_url": None,
            "backend": DEFAULT_BACKEND,
        }

    @classmethod
    def save(cls, config: Dict[str, Any], config_path: str):
        """Save configuration to YAML file."""
        path = Path(config_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump({cls.SECTION: config}, f, default_flow_style=False)
