# MIT License
# Copyright (c) 2025 Hashborn

"""
StakePool Tier Policy
Single source of truth for VIP tiers and daily interest rates.

Tier thresholds are a fixed step function of the staked amount. The VIP bonus
values in PlatformSettings are informational and do not feed this table.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Tuple


@dataclass(frozen=True)
class TierPolicy:
    """Maps staked amount -> VIP level and VIP level -> daily rate (percent)."""

    # (level, minimum staked amount), highest tier first
    thresholds: Tuple[Tuple[int, Decimal], ...]

    # Daily interest rate in percent per VIP level
    daily_rates: Dict[int, Decimal] = field(default_factory=dict)

    # Rate applied to levels missing from daily_rates
    default_daily_rate: Decimal = Decimal("1")

    hours_per_day: int = 24

    def vip_level_for(self, staked_amount: Decimal) -> int:
        for level, minimum in self.thresholds:
            if staked_amount >= minimum:
                return level
        return 0

    def daily_rate_for(self, vip_level: int) -> Decimal:
        return self.daily_rates.get(vip_level, self.default_daily_rate)

    def hourly_interest(self, staked_amount: Decimal, vip_level: int) -> Decimal:
        """Interest earned by one hourly accrual tick."""
        return staked_amount * self.daily_rate_for(vip_level) / 100 / self.hours_per_day


TIER_POLICY = TierPolicy(
    thresholds=(
        (3, Decimal("100000")),
        (2, Decimal("50000")),
        (1, Decimal("10000")),
    ),
    daily_rates={
        0: Decimal("1"),      # Standard: 1% daily
        1: Decimal("1.5"),    # VIP 1: 1.5% daily
        2: Decimal("2"),      # VIP 2: 2% daily
        3: Decimal("2.5"),    # VIP 3: 2.5% daily
    },
)


def vip_level_for(staked_amount: Decimal) -> int:
    return TIER_POLICY.vip_level_for(staked_amount)


def daily_rate_for(vip_level: int) -> Decimal:
    return TIER_POLICY.daily_rate_for(vip_level)
