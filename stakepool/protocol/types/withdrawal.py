# MIT License
# Copyright (c) 2025 Hashborn

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from .common import WithdrawalStatus


class PendingWithdrawal(BaseModel):
    """A request to cash out claimable rewards, settled by an admin."""
    id: int
    user_id: int
    wallet_address: str
    amount: Decimal           # Requested amount, deducted from claimable on approval
    fee: Decimal              # Platform fee kept on approval
    net_amount: Decimal       # amount - fee, paid out to the wallet
    status: str = WithdrawalStatus.PENDING.value

    requested_at: datetime
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == WithdrawalStatus.PENDING.value
