# MIT License
# Copyright (c) 2025 Hashborn

import logging
from dataclasses import dataclass
from decimal import Decimal

from ...protocol.config.tiers import TIER_POLICY, TierPolicy
from .store import LedgerStore

logger = logging.getLogger(__name__)


@dataclass
class AccrualReport:
    users_credited: int = 0
    total_credited: Decimal = Decimal("0")


def apply_accrual(store: LedgerStore, policy: TierPolicy = TIER_POLICY) -> AccrualReport:
    """
    Credits one hour of interest to every active user with a positive stake.

    hourly_interest = staked_amount * daily_rate(vip_level) / 100 / 24, added to
    both claimable_rewards and total_earned. No transaction is recorded.

    The credit assumes exactly one hour passed since the previous tick; calling
    this twice in a row credits two hours.
    """
    report = AccrualReport()
    for user in store.all_users():
        if user.staked_amount <= 0 or not user.is_active:
            continue

        interest = policy.hourly_interest(user.staked_amount, user.vip_level)
        user.claimable_rewards += interest
        user.total_earned += interest

        report.users_credited += 1
        report.total_credited += interest

    logger.info(f"Interest calculated: {report.users_credited} users credited {report.total_credited} USDT")
    return report
