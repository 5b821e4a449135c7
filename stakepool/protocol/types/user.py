# MIT License
# Copyright (c) 2025 Hashborn

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from .common import UserStatus


class User(BaseModel):
    id: int
    wallet_address: str             # As first supplied; identity is case-insensitive
    email: str = ""

    # Balances (stablecoin units)
    staked_amount: Decimal = Decimal("0")
    total_earned: Decimal = Decimal("0")
    claimable_rewards: Decimal = Decimal("0")

    # Derived from staked_amount on every stake/unstake/balance override
    vip_level: int = 0

    status: str = UserStatus.ACTIVE.value
    join_date: Optional[dt.date] = None
    last_active: Optional[dt.date] = None

    @property
    def wallet_key(self) -> str:
        return self.wallet_address.lower()

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value
