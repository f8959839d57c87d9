"""
Runtime Configuration

Central configuration for the hash backend, tree snapshots and the HTTP API.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from mmr_core.crypto.field import BN254_SCALAR_FIELD, DEFAULT_HASHER, FieldHasher, get_hasher

load_dotenv()


@dataclass
class HasherConfig:
    """Configuration for the field hash backend."""
    backend: str = DEFAULT_HASHER
    modulus: int = BN254_SCALAR_FIELD


@dataclass
class StoreConfig:
    """Configuration for tree snapshots."""
    snapshot_path: str = "mmr_state.json"
    autosave: bool = False


@dataclass
class ApiConfig:
    """Configuration for the HTTP API."""
    host: str = "0.0.0.0"
    port: int = 8000


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    hasher: HasherConfig = field(default_factory=HasherConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    log_level: str = "INFO"

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - MMR_HASHER: Hash backend name (sha256, blake2b)
        - MMR_FIELD_MODULUS: Field prime as a decimal integer
        - MMR_SNAPSHOT_PATH: Snapshot file used by the API and CLI
        - MMR_AUTOSAVE: Save a snapshot after every append (true/false)
        - MMR_API_HOST / MMR_API_PORT: API bind address
        - MMR_LOG_LEVEL: Log level
        """
        overrides: dict[str, Any] = {}

        if os.getenv("MMR_HASHER"):
            overrides.setdefault("hasher", {})["backend"] = os.getenv("MMR_HASHER")
        if os.getenv("MMR_FIELD_MODULUS"):
            overrides.setdefault("hasher", {})["modulus"] = int(os.getenv("MMR_FIELD_MODULUS"))

        if os.getenv("MMR_SNAPSHOT_PATH"):
            overrides.setdefault("store", {})["snapshot_path"] = os.getenv("MMR_SNAPSHOT_PATH")
        if os.getenv("MMR_AUTOSAVE"):
            overrides.setdefault("store", {})["autosave"] = (
                os.getenv("MMR_AUTOSAVE", "false").lower() == "true"
            )

        if os.getenv("MMR_API_HOST"):
            overrides.setdefault("api", {})["host"] = os.getenv("MMR_API_HOST")
        if os.getenv("MMR_API_PORT"):
            overrides.setdefault("api", {})["port"] = int(os.getenv("MMR_API_PORT"))

        if os.getenv("MMR_LOG_LEVEL"):
            overrides["log_level"] = os.getenv("MMR_LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        hasher_data = dict(data.get("hasher", {}))
        store_data = data.get("store", {})
        api_data = data.get("api", {})

        # YAML/JSON files may carry the modulus as a string
        if "modulus" in hasher_data:
            hasher_data["modulus"] = int(hasher_data["modulus"])

        return cls(
            hasher=HasherConfig(**hasher_data) if hasher_data else HasherConfig(),
            store=StoreConfig(**store_data) if store_data else StoreConfig(),
            api=ApiConfig(**api_data) if api_data else ApiConfig(),
            log_level=data.get("log_level", "INFO"),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section in ("hasher", "store", "api"):
            for key, value in overrides.get(section, {}).items():
                setattr(getattr(new_config, section), key, value)
        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]

        return new_config

    def build_hasher(self) -> FieldHasher:
        """Instantiate the configured hash backend."""
        return get_hasher(self.hasher.backend, self.hasher.modulus)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "hasher": {
                "backend": self.hasher.backend,
                "modulus": str(self.hasher.modulus),
            },
            "store": {
                "snapshot_path": self.store.snapshot_path,
                "autosave": self.store.autosave,
            },
            "api": {
                "host": self.api.host,
                "port": self.api.port,
            },
            "log_level": self.log_level,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig | None) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
