# MIT License
# Copyright (c) 2025 Hashborn

"""
Snapshot Manager

Durable sink for the ledger: every successful mutation writes a new
compressed snapshot, and the node restores from the latest one on start.
"""

import gzip
import logging
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

from .types import Snapshot, SnapshotMetadata
from ..core.store import StoreState
from ...protocol.config.params import CURRENT_DEPLOYMENT

logger = logging.getLogger(__name__)


class SnapshotManager:
    """
    Manages ledger snapshots.

    Snapshots are saved as compressed JSON files:
    - snapshots/snapshot_<sequence>.json.gz (full snapshot)
    - snapshots/snapshot_<sequence>_meta.json (metadata for quick queries)
    """

    def __init__(self, snapshots_dir: str = "snapshots", deployment_id: Optional[str] = None):
        """
        Initialize snapshot manager.

        Args:
            snapshots_dir: Directory to store snapshots (default: "snapshots")
            deployment_id: Recorded in every snapshot (default: CURRENT_DEPLOYMENT)
        """
        self.snapshots_dir = Path(snapshots_dir)
        self.snapshots_dir.mkdir(parents=True, exist_ok=True)
        self.deployment_id = deployment_id or CURRENT_DEPLOYMENT.deployment_id
        self._sequence = self.get_latest_sequence() or 0

    def create_snapshot(self, state: StoreState) -> SnapshotMetadata:
        """
        Write a snapshot of the given ledger state.

        Args:
            state: Exported store state

        Returns:
            SnapshotMetadata for the created snapshot
        """
        self._sequence += 1
        sequence = self._sequence

        snapshot = Snapshot(
            deployment_id=self.deployment_id,
            sequence=sequence,
            timestamp=datetime.now(timezone.utc).isoformat(),
            state=state,
        )
        snapshot.hash = snapshot.calculate_hash()

        # Save to disk (compressed); write to a temp file first so a crash
        # never leaves a truncated snapshot under the final name
        snapshot_path = self._get_snapshot_path(sequence)
        tmp_path = snapshot_path.with_suffix(".tmp")
        uncompressed_data = snapshot.model_dump_json().encode()
        uncompressed_size = len(uncompressed_data)

        with gzip.open(tmp_path, 'wb', compresslevel=6) as f:
            f.write(uncompressed_data)
        tmp_path.replace(snapshot_path)

        compressed_size = snapshot_path.stat().st_size

        metadata = SnapshotMetadata(
            version=snapshot.version,
            deployment_id=snapshot.deployment_id,
            sequence=sequence,
            timestamp=snapshot.timestamp,
            users_count=len(state.users),
            transactions_count=len(state.transactions),
            pending_withdrawals_count=sum(1 for w in state.pending_withdrawals if w.is_pending),
            total_staked=str(sum((u.staked_amount for u in state.users), Decimal("0"))),
            hash=snapshot.hash,
            compressed_size=compressed_size,
            uncompressed_size=uncompressed_size
        )

        meta_path = self._get_metadata_path(sequence)
        with open(meta_path, 'w') as f:
            f.write(metadata.model_dump_json(indent=2))

        logger.debug(
            f"Snapshot {sequence} written: {metadata.users_count} users, "
            f"{metadata.transactions_count} transactions, {compressed_size / 1024:.2f} KB compressed"
        )

        return metadata

    def load_snapshot(self, sequence: int) -> Snapshot:
        """
        Load a snapshot from disk.

        Raises:
            FileNotFoundError: If snapshot doesn't exist
            ValueError: If snapshot hash verification fails
        """
        snapshot_path = self._get_snapshot_path(sequence)

        if not snapshot_path.exists():
            raise FileNotFoundError(f"Snapshot {sequence} not found")

        with gzip.open(snapshot_path, 'rb') as f:
            data = f.read()

        snapshot = Snapshot.model_validate_json(data)

        if not snapshot.verify_hash():
            raise ValueError(f"Snapshot {sequence} failed hash verification!")

        logger.info(
            f"Snapshot {sequence} loaded: {len(snapshot.state.users)} users, "
            f"{len(snapshot.state.transactions)} transactions"
        )

        return snapshot

    def load_latest(self) -> Snapshot:
        """
        Load the most recent snapshot.

        Raises:
            FileNotFoundError: If no snapshot exists
        """
        sequence = self.get_latest_sequence()
        if sequence is None:
            raise FileNotFoundError(f"No snapshots in {self.snapshots_dir}")
        return self.load_snapshot(sequence)

    def get_latest_sequence(self) -> Optional[int]:
        snapshots = self.list_snapshots()
        if not snapshots:
            return None

        return max(snap.sequence for snap in snapshots)

    def list_snapshots(self) -> List[SnapshotMetadata]:
        """
        List all available snapshots, newest first.
        """
        snapshots = []

        for meta_path in self.snapshots_dir.glob("snapshot_*_meta.json"):
            try:
                with open(meta_path, 'r') as f:
                    snapshots.append(SnapshotMetadata.model_validate_json(f.read()))
            except Exception as e:
                logger.warning(f"Failed to load metadata from {meta_path}: {e}")

        snapshots.sort(key=lambda s: s.sequence, reverse=True)

        return snapshots

    def delete_snapshot(self, sequence: int):
        snapshot_path = self._get_snapshot_path(sequence)
        meta_path = self._get_metadata_path(sequence)

        if snapshot_path.exists():
            snapshot_path.unlink()
        if meta_path.exists():
            meta_path.unlink()

    def cleanup_old_snapshots(self, keep_count: int = 10):
        """
        Delete old snapshots, keeping only the N most recent.
        """
        snapshots = self.list_snapshots()

        if len(snapshots) <= keep_count:
            return

        to_delete = snapshots[keep_count:]
        for snap in to_delete:
            self.delete_snapshot(snap.sequence)

        logger.debug(f"Cleaned up {len(to_delete)} old snapshots")

    def _get_snapshot_path(self, sequence: int) -> Path:
        return self.snapshots_dir / f"snapshot_{sequence}.json.gz"

    def _get_metadata_path(self, sequence: int) -> Path:
        return self.snapshots_dir / f"snapshot_{sequence}_meta.json"
