# MIT License
# Copyright (c) 2025 Hashborn

"""
Staking Engine

Validates and applies stake/unstake requests against a user and the
platform settings. Every successful call appends one completed transaction.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from ...protocol.amounts import parse_positive_amount
from ...protocol.config.tiers import vip_level_for
from ...protocol.types.common import (
    AboveMaximum,
    BelowMinimum,
    InsufficientStake,
    InvalidInput,
    MaintenanceUnavailable,
    TxStatus,
    TxType,
)
from ...protocol.types.tx import Transaction
from .store import LedgerStore

logger = logging.getLogger(__name__)

STAKE_KINDS = (TxType.STAKE.value, TxType.UNSTAKE.value)


@dataclass
class StakeResult:
    staked_amount: Decimal
    transaction: Transaction


def apply_stake(store: LedgerStore, wallet_address: Optional[str], amount: Any, kind: Optional[str]) -> StakeResult:
    """
    Applies a stake or unstake request (in-memory). Raises LedgerError on failure.

    Args:
        store: Ledger store to mutate
        wallet_address: Staker's wallet (case-insensitive)
        amount: Requested amount, parsed as a finite positive decimal
        kind: "stake" or "unstake"

    Returns:
        StakeResult with the new staked total and the created transaction
    """
    if not wallet_address or amount is None or not kind:
        raise InvalidInput("Missing required fields")

    parsed_amount = parse_positive_amount(amount)

    if kind not in STAKE_KINDS:
        raise InvalidInput('Invalid type. Use "stake" or "unstake"')

    settings = store.settings
    if settings.maintenance_mode:
        raise MaintenanceUnavailable()

    # Lazily created users are only registered once the request succeeds
    user = store.get_user_by_wallet(wallet_address)
    is_new = user is None
    if is_new:
        user = store.new_user(wallet_address)

    if kind == TxType.STAKE.value:
        if parsed_amount < settings.min_stake:
            raise BelowMinimum(f"Minimum stake is {settings.min_stake} USDT")
        if user.staked_amount + parsed_amount > settings.max_stake:
            raise AboveMaximum(f"Maximum stake is {settings.max_stake} USDT")
        user.staked_amount += parsed_amount
    else:
        if parsed_amount > user.staked_amount:
            raise InsufficientStake()
        user.staked_amount -= parsed_amount

    user.vip_level = vip_level_for(user.staked_amount)
    user.last_active = store.clock.today()
    if is_new:
        store.add_user(user)

    tx = store.add_transaction(wallet_address, kind, parsed_amount, TxStatus.COMPLETED.value)

    logger.info(f"{kind.capitalize()}: {wallet_address} {kind}d {parsed_amount} USDT (total {user.staked_amount}, VIP {user.vip_level})")
    return StakeResult(staked_amount=user.staked_amount, transaction=tx)
