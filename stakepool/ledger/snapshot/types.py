# MIT License
# Copyright (c) 2025 Hashborn

"""
Snapshot Data Structures
"""

import hashlib
import json
from typing import Optional

from pydantic import BaseModel, Field

from ..core.store import StoreState


class SnapshotMetadata(BaseModel):
    """
    Snapshot metadata (stored separately for quick querying).
    """
    version: str = Field(default="1.0.0", description="Snapshot format version")
    deployment_id: str = Field(..., description="Deployment ID (devnet/production)")
    sequence: int = Field(..., description="Monotonic snapshot number")
    timestamp: str = Field(..., description="ISO 8601 timestamp")
    users_count: int = Field(..., description="Number of users")
    transactions_count: int = Field(..., description="Number of transactions")
    pending_withdrawals_count: int = Field(..., description="Withdrawals awaiting settlement")
    total_staked: str = Field(..., description="Sum of staked amounts")
    hash: str = Field(..., description="SHA256 hash of snapshot data")
    compressed_size: int = Field(..., description="Compressed file size (bytes)")
    uncompressed_size: int = Field(..., description="Uncompressed data size (bytes)")


class Snapshot(BaseModel):
    """
    Complete ledger snapshot (saved to disk, compressed).
    """
    version: str = Field(default="1.0.0", description="Snapshot format version")
    deployment_id: str = Field(..., description="Deployment ID")
    sequence: int = Field(..., description="Monotonic snapshot number")
    timestamp: str = Field(..., description="ISO 8601 timestamp")

    state: StoreState = Field(default_factory=StoreState, description="Full ledger state")

    # Verification
    hash: Optional[str] = Field(default=None, description="SHA256 hash of snapshot (excluding this field)")

    def calculate_hash(self) -> str:
        """
        Calculate SHA256 hash of snapshot data (excluding hash field).
        """
        data = self.model_dump(mode="json", exclude={"hash"})

        # Sort keys for deterministic hashing
        canonical_json = json.dumps(data, sort_keys=True, separators=(',', ':'))

        return hashlib.sha256(canonical_json.encode()).hexdigest()

    def verify_hash(self) -> bool:
        """
        Verify snapshot hash matches computed hash.
        """
        if not self.hash:
            return False

        return self.calculate_hash() == self.hash
