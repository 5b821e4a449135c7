# MIT License
# Copyright (c) 2025 Hashborn

"""
Claim & Withdrawal Engine

Moves value out of claimable rewards, either into realized earnings (claim)
or into a withdrawal request that an admin later approves or rejects.

Claimable rewards are checked when a withdrawal is requested but only
deducted on approval, so several pending requests may cover the same
balance. Approval re-checks the balance and refuses to drive it negative.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from ...protocol.amounts import parse_amount
from ...protocol.config.params import DEFAULT_REJECTION_REASON, WITHDRAWAL_FEE_RATE
from ...protocol.types.common import (
    InsufficientWithdrawable,
    InvalidInput,
    MaintenanceUnavailable,
    NoRewardsAvailable,
    TxStatus,
    TxType,
    UserNotFound,
    WithdrawalNotFound,
    WithdrawalNotPending,
    WithdrawalStatus,
)
from ...protocol.types.tx import Transaction
from ...protocol.types.withdrawal import PendingWithdrawal
from .store import LedgerStore

logger = logging.getLogger(__name__)


@dataclass
class ClaimResult:
    amount: Decimal
    transaction: Transaction


def withdrawal_fee(amount: Decimal) -> Decimal:
    return amount * WITHDRAWAL_FEE_RATE


def apply_claim(store: LedgerStore, wallet_address: Optional[str]) -> ClaimResult:
    """Moves the whole claimable balance into total_earned."""
    if not wallet_address:
        raise InvalidInput("Wallet address required")

    if store.settings.maintenance_mode:
        raise MaintenanceUnavailable()

    user = store.get_user_by_wallet(wallet_address)
    if not user:
        raise UserNotFound()

    if user.claimable_rewards <= 0:
        raise NoRewardsAvailable()

    claimed = user.claimable_rewards
    user.total_earned += claimed
    user.claimable_rewards = Decimal("0")
    user.last_active = store.clock.today()

    tx = store.add_transaction(wallet_address, TxType.CLAIM.value, claimed, TxStatus.COMPLETED.value)

    logger.info(f"Claim: {wallet_address} claimed {claimed} USDT")
    return ClaimResult(amount=claimed, transaction=tx)


def apply_withdrawal_request(store: LedgerStore, wallet_address: Optional[str], amount: Any) -> PendingWithdrawal:
    """
    Opens a pending withdrawal of claimable rewards.

    Returns:
        The created PendingWithdrawal (a pending withdraw transaction is linked by id)
    """
    if not wallet_address or amount is None:
        raise InvalidInput("Missing required fields")

    parsed_amount = parse_amount(amount)

    user = store.get_user_by_wallet(wallet_address)
    if not user:
        raise UserNotFound()

    if parsed_amount <= 0:
        raise InvalidInput("Invalid amount")

    if parsed_amount > user.claimable_rewards:
        raise InsufficientWithdrawable()

    fee = withdrawal_fee(parsed_amount)
    withdrawal = store.add_withdrawal(PendingWithdrawal(
        id=store.next_withdrawal_id(),
        user_id=user.id,
        wallet_address=wallet_address,
        amount=parsed_amount,
        fee=fee,
        net_amount=parsed_amount - fee,
        requested_at=store.clock.now(),
    ))

    store.add_transaction(
        wallet_address,
        TxType.WITHDRAW.value,
        parsed_amount,
        TxStatus.PENDING.value,
        withdrawal_id=withdrawal.id,
    )

    logger.info(f"Withdrawal requested: {wallet_address} - {parsed_amount} USDT (id {withdrawal.id})")
    return withdrawal


def _get_pending_withdrawal(store: LedgerStore, withdrawal_id: int) -> PendingWithdrawal:
    withdrawal = store.get_withdrawal(withdrawal_id)
    if not withdrawal:
        raise WithdrawalNotFound()
    if not withdrawal.is_pending:
        raise WithdrawalNotPending(f"Withdrawal {withdrawal_id} is already {withdrawal.status}")
    return withdrawal


def _settle_transaction(store: LedgerStore, withdrawal: PendingWithdrawal, status: TxStatus):
    tx = store.find_withdraw_transaction(withdrawal.id)
    if tx and tx.status == TxStatus.PENDING.value:
        tx.status = status.value
    elif not tx:
        logger.warning(f"No withdraw transaction recorded for withdrawal {withdrawal.id}")


def apply_withdrawal_approval(store: LedgerStore, withdrawal_id: int) -> PendingWithdrawal:
    """Deducts the withdrawal amount from claimable rewards and marks it approved."""
    withdrawal = _get_pending_withdrawal(store, withdrawal_id)

    user = store.get_user_by_wallet(withdrawal.wallet_address)
    if not user:
        raise UserNotFound()

    if user.claimable_rewards < withdrawal.amount:
        raise InsufficientWithdrawable(
            f"Insufficient withdrawable balance: have {user.claimable_rewards}, need {withdrawal.amount}"
        )

    user.claimable_rewards -= withdrawal.amount
    withdrawal.status = WithdrawalStatus.APPROVED.value
    withdrawal.approved_at = store.clock.now()
    _settle_transaction(store, withdrawal, TxStatus.COMPLETED)

    logger.info(f"Withdrawal approved: {withdrawal.wallet_address} - {withdrawal.amount} USDT (id {withdrawal.id})")
    return withdrawal


def apply_withdrawal_rejection(store: LedgerStore, withdrawal_id: int, reason: Optional[str] = None) -> PendingWithdrawal:
    """Marks a withdrawal rejected. Nothing is re-credited: approval never happened."""
    withdrawal = _get_pending_withdrawal(store, withdrawal_id)

    withdrawal.status = WithdrawalStatus.REJECTED.value
    withdrawal.rejected_at = store.clock.now()
    withdrawal.rejection_reason = reason or DEFAULT_REJECTION_REASON
    _settle_transaction(store, withdrawal, TxStatus.REJECTED)

    logger.info(f"Withdrawal rejected: {withdrawal.wallet_address} - {withdrawal.amount} USDT ({withdrawal.rejection_reason})")
    return withdrawal
