# MIT License
# Copyright (c) 2025 Hashborn

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class PlatformSettings(BaseModel):
    """
    Global admin-writable platform parameters, read by every financial operation.

    The APY and VIP bonus values are informational (shown on the dashboard);
    interest accrual uses the fixed daily rate table in config/tiers.py.
    """
    model_config = ConfigDict(extra="forbid")

    base_apy: float = 12.5
    vip1_bonus: float = 0.25
    vip2_bonus: float = 0.5
    vip3_bonus: float = 1.0

    min_stake: Decimal = Field(default=Decimal("100"), ge=0)
    max_stake: Decimal = Field(default=Decimal("1000000"), ge=0)

    withdrawal_fee: float = 0.5
    maintenance_mode: bool = False

    def public_view(self) -> dict:
        """Subset exposed to unauthenticated dashboard clients."""
        return self.model_dump(
            mode="json",
            include={"base_apy", "vip1_bonus", "vip2_bonus", "vip3_bonus", "min_stake", "max_stake"},
        )
