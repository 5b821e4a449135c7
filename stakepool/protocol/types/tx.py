# MIT License
# Copyright (c) 2025 Hashborn

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from .common import TxStatus


class Transaction(BaseModel):
    id: int                   # Sequential per store
    wallet_address: str
    tx_type: str              # TxType value, or a free-form type for admin inserts
    amount: Decimal
    date: dt.date
    status: str = TxStatus.COMPLETED.value

    # Links a withdraw transaction to its PendingWithdrawal
    withdrawal_id: Optional[int] = None
    note: Optional[str] = None

    def belongs_to(self, wallet_address: str) -> bool:
        return self.wallet_address.lower() == wallet_address.lower()
