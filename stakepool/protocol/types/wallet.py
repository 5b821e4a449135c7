# MIT License
# Copyright (c) 2025 Hashborn

from datetime import datetime

from pydantic import BaseModel

from .common import WalletRequestStatus


class WalletRequest(BaseModel):
    """A wallet asking to be admitted to the platform."""
    id: int
    wallet_address: str
    ip_address: str = "Unknown"
    user_agent: str = "Unknown"
    timestamp: datetime
    status: str = WalletRequestStatus.PENDING.value


class ReportedBalance(BaseModel):
    """On-chain balances as reported by the user's own wallet."""
    eth: str = "0.0000"
    usdt: str = "0.00"
    timestamp: float          # Unix seconds
