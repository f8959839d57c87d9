"""
Module 09D - API Dependencies

Dependency injection for the API.
Provides the process-wide tree and the runtime configuration.

The API serves exactly one tree. It is created lazily on first use, from the
configured snapshot file when one exists, and every mutation goes through
the tree's own lock.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from mmr_core.config.runtime import RuntimeConfig
from mmr_core.merkle.mountain_range import MerkleMountainRange
from mmr_core.merkle.snapshot import load_snapshot, save_snapshot

logger = logging.getLogger(__name__)


_tree: MerkleMountainRange | None = None
_config: RuntimeConfig | None = None
_init_lock = threading.Lock()
_persist_lock = threading.Lock()


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from config file, then overlay environment variables.

    Search order for config file:
      1. ./mmr.json
      2. ./.mmr.json
      3. ~/.config/mmr/config.json

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by mmr_core.config.runtime on import.
    """
    search_paths = [
        Path.cwd() / "mmr.json",
        Path.cwd() / ".mmr.json",
        Path.home() / ".config" / "mmr" / "config.json",
    ]

    config: RuntimeConfig | None = None

    for path in search_paths:
        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)
                logger.info(f"Loaded config from {path}")
                config = RuntimeConfig.from_dict(data)
                break
            except Exception as e:
                logger.warning(f"Failed to parse {path}: {e}")

    if config is None:
        config = RuntimeConfig()

    return config.with_env_overrides()


def get_config() -> RuntimeConfig:
    """Return the API's runtime configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = _load_runtime_config()
    return _config


def get_tree() -> MerkleMountainRange:
    """Return the process-wide tree, creating or loading it on first use."""
    global _tree
    if _tree is None:
        with _init_lock:
            if _tree is None:
                config = get_config()
                hasher = config.build_hasher()
                snapshot_path = Path(config.store.snapshot_path)
                if config.store.autosave and snapshot_path.exists():
                    _tree = load_snapshot(snapshot_path, hasher)
                else:
                    _tree = MerkleMountainRange(hasher)
                logger.info(f"Serving tree with width {_tree.width} ({hasher.name} hasher)")
    return _tree


def persist_tree(tree: MerkleMountainRange) -> None:
    """Write a snapshot when autosave is enabled."""
    config = get_config()
    if config.store.autosave:
        # export and write together so the file never goes back to an older state
        with _persist_lock:
            save_snapshot(tree, config.store.snapshot_path)


def reset_state(
    tree: MerkleMountainRange | None = None,
    config: RuntimeConfig | None = None,
) -> None:
    """Replace (or with None, drop) the served tree and config."""
    global _tree, _config
    with _init_lock:
        _tree = tree
        _config = config
