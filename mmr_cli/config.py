"""
Module 09C - CLI Configuration

Configuration for the mmr CLI.
Supports environment variables and configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from mmr_core.crypto.field import BN254_SCALAR_FIELD, DEFAULT_HASHER, FieldHasher, get_hasher


# Environment variable prefix
ENV_PREFIX = "MMR_"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Tree storage
    state_path: str = "mmr_state.json"

    # Hashing (used when creating a tree and when verifying proofs)
    hasher: str = DEFAULT_HASHER
    modulus: int = BN254_SCALAR_FIELD

    # Logging
    log_level: str = "WARNING"
    log_file: str | None = None

    def build_hasher(self) -> FieldHasher:
        return get_hasher(self.hasher, self.modulus)

    def to_dict(self) -> dict:
        return {
            "state_path": self.state_path,
            "hasher": self.hasher,
            "modulus": str(self.modulus),
            "log_level": self.log_level,
            "log_file": self.log_file,
        }


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    config = CLIConfig()
    # mmr.json is shared with the API, which nests these under "store"/"hasher"
    store = data.get("store", {})
    hasher = data.get("hasher", {})

    config.state_path = data.get("state_path", store.get("snapshot_path", config.state_path))
    if isinstance(hasher, dict):
        config.hasher = hasher.get("backend", config.hasher)
        config.modulus = int(hasher.get("modulus", config.modulus))
    else:
        config.hasher = hasher
    if "modulus" in data:
        config.modulus = int(data["modulus"])

    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)

    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / "mmr.json",
            Path.home() / ".config" / "mmr" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    # Environment takes precedence
    if os.getenv(f"{ENV_PREFIX}SNAPSHOT_PATH"):
        config.state_path = os.getenv(f"{ENV_PREFIX}SNAPSHOT_PATH")
    if os.getenv(f"{ENV_PREFIX}HASHER"):
        config.hasher = os.getenv(f"{ENV_PREFIX}HASHER")
    if os.getenv(f"{ENV_PREFIX}FIELD_MODULUS"):
        config.modulus = int(os.getenv(f"{ENV_PREFIX}FIELD_MODULUS"))
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "state_path": "mmr_state.json",
  "hasher": "sha256",
  "log_level": "WARNING",
  "log_file": null
}
"""
