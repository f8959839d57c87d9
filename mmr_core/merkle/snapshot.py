"""
Module 02 - Tree Snapshots
Save and load a tree's node store as JSON.

Snapshot format (format_version 1):
    {
      "format_version": 1,
      "hasher": "sha256",
      "modulus": "<decimal>",
      "width": 10,
      "root": "0x...",
      "nodes": {"1": "0x...", "2": "0x...", ...}
    }

Loading never rehashes the nodes; it re-bags the stored peaks and rejects the
snapshot unless that reproduces the recorded root and the node count matches
the index space of the recorded width.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from mmr_core.crypto.field import FieldHasher, get_hasher
from mmr_core.crypto.hashing import digest_from_hex, to_hex
from mmr_core.merkle.indexing import get_size
from mmr_core.merkle.mountain_range import MerkleMountainRange
from mmr_core.schemas.errors import MMRException, SnapshotException


logger = logging.getLogger(__name__)


FORMAT_VERSION = 1


class TreeSnapshot(BaseModel):
    """Serialized form of a MerkleMountainRange."""

    model_config = ConfigDict(extra="forbid")

    format_version: int = Field(default=FORMAT_VERSION)
    hasher: str = Field(..., min_length=1)
    modulus: str = Field(..., description="Field modulus as a decimal string")
    width: int = Field(..., ge=0)
    root: str = Field(..., pattern=r"^0x[0-9a-f]{64}$")
    nodes: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_tree(cls, tree: MerkleMountainRange) -> "TreeSnapshot":
        state, nodes = tree.export()
        return cls(
            hasher=tree.hasher.name,
            modulus=str(tree.hasher.modulus),
            width=state.width,
            root=to_hex(state.root),
            nodes={str(i): to_hex(h) for i, h in sorted(nodes.items())},
        )

    def to_tree(self, hasher: FieldHasher | None = None) -> MerkleMountainRange:
        """
        Rebuild the tree this snapshot describes.

        Raises:
            SnapshotException: If the snapshot is inconsistent or was written
                with a different hash backend
        """
        if self.format_version != FORMAT_VERSION:
            raise SnapshotException(
                f"Unsupported snapshot format version: {self.format_version}",
                details={"format_version": self.format_version},
            )
        if hasher is None:
            if not self.modulus.isdigit():
                raise SnapshotException(f"Invalid field modulus: {self.modulus!r}")
            hasher = get_hasher(self.hasher, int(self.modulus))
        elif hasher.name != self.hasher or str(hasher.modulus) != self.modulus:
            raise SnapshotException(
                "Snapshot was written with a different hasher",
                details={"snapshot": self.hasher, "hasher": hasher.name},
            )

        try:
            nodes = {int(i): digest_from_hex(h) for i, h in self.nodes.items()}
        except (ValueError, MMRException) as e:
            raise SnapshotException(f"Malformed snapshot nodes: {e}") from e

        # "1" and "01" both parse to index 1
        size = get_size(self.width)
        if len(nodes) != len(self.nodes) or set(nodes) != set(range(1, size + 1)):
            raise SnapshotException(
                f"Snapshot nodes do not cover indexes 1..{size} of width {self.width}",
                details={"nodes": len(self.nodes), "distinct": len(nodes), "size": size},
            )

        try:
            tree = MerkleMountainRange.from_nodes(self.width, nodes, hasher)
        except (KeyError, ValueError, MMRException) as e:
            raise SnapshotException(f"Malformed snapshot nodes: {e}") from e

        if to_hex(tree.root) != self.root:
            raise SnapshotException(
                "Stored peaks do not bag to the recorded root",
                details={"expected": self.root, "actual": to_hex(tree.root)},
            )
        return tree


def save_snapshot(tree: MerkleMountainRange, path: str | Path) -> Path:
    """
    Write ``tree`` to ``path`` as JSON.

    The file is written to a temporary sibling and renamed into place, so a
    crash mid-write leaves the previous snapshot intact.
    """
    path = Path(path)
    snapshot = TreeSnapshot.from_tree(tree)
    content = json.dumps(snapshot.model_dump(mode="json"), indent=2, sort_keys=True)

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=path.name, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info(f"Saved snapshot of width {snapshot.width} to {path}")
    return path


def load_snapshot(path: str | Path, hasher: FieldHasher | None = None) -> MerkleMountainRange:
    """
    Load a tree from a snapshot file written by ``save_snapshot``.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        SnapshotException: If the file is not a valid, self-consistent snapshot
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot not found: {path}")

    try:
        snapshot = TreeSnapshot.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise SnapshotException(
            f"Invalid snapshot file: {path}",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e

    tree = snapshot.to_tree(hasher)
    logger.info(f"Loaded snapshot of width {tree.width} from {path}")
    return tree


__all__ = [
    "FORMAT_VERSION",
    "TreeSnapshot",
    "save_snapshot",
    "load_snapshot",
]
