# MIT License
# Copyright (c) 2025 Hashborn

"""
Ledger Snapshot System

Persists the in-memory ledger as compressed, hash-verified JSON snapshots.
"""

from .snapshot_manager import SnapshotManager
from .types import Snapshot, SnapshotMetadata

__all__ = ["SnapshotManager", "Snapshot", "SnapshotMetadata"]
