# MIT License
# Copyright (c) 2025 Hashborn

"""
Administrative overrides: reward grants, balance and profile edits,
manual transaction inserts and dashboard statistics.

These paths bypass the maintenance flag.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from ...protocol.amounts import parse_amount, parse_positive_amount
from ...protocol.config.tiers import vip_level_for
from ...protocol.types.common import (
    InvalidInput,
    TxStatus,
    UserNotFound,
    UserStatus,
    WalletRequestStatus,
)
from ...protocol.types.tx import Transaction
from ...protocol.types.user import User
from .store import LedgerStore

logger = logging.getLogger(__name__)

# Profile fields an admin may edit directly; balances go through set_user_balance
EDITABLE_USER_FIELDS = {"email", "status", "last_active"}


def _get_user(store: LedgerStore, user_id: int) -> User:
    user = store.get_user(user_id)
    if not user:
        raise UserNotFound()
    return user


def add_rewards(store: LedgerStore, user_id: int, amount: Any) -> User:
    """Adds amount to the user's claimable rewards unconditionally."""
    user = _get_user(store, user_id)
    parsed_amount = parse_positive_amount(amount)

    user.claimable_rewards += parsed_amount
    logger.info(f"Admin added {parsed_amount} USDT rewards to user {user.wallet_address}")
    return user


def _parse_balance(value: Any, field: str) -> Decimal:
    parsed = parse_amount(value, field)
    if parsed < 0:
        raise InvalidInput(f"Invalid {field}: must not be negative")
    return parsed


def set_user_balance(store: LedgerStore,
                     user_id: int,
                     staked_amount: Optional[Any] = None,
                     total_earned: Optional[Any] = None) -> User:
    """Overrides stake and/or total earned, then recomputes the VIP level."""
    user = _get_user(store, user_id)

    # Parse both before touching the user so a bad value changes nothing
    new_staked = _parse_balance(staked_amount, "staked_amount") if staked_amount is not None else None
    new_earned = _parse_balance(total_earned, "total_earned") if total_earned is not None else None

    if new_staked is not None:
        user.staked_amount = new_staked
    if new_earned is not None:
        user.total_earned = new_earned

    user.vip_level = vip_level_for(user.staked_amount)
    logger.info(f"Admin set balance of user {user.id}: staked={user.staked_amount} earned={user.total_earned}")
    return user


def set_user_status(store: LedgerStore, user_id: int, status: Optional[str]) -> User:
    user = _get_user(store, user_id)
    if not status:
        raise InvalidInput("Missing required field: status")

    user.status = status
    logger.info(f"Admin set status of user {user.id} to {status}")
    return user


def update_user(store: LedgerStore, user_id: int, patch: Dict[str, Any]) -> User:
    """Applies a profile patch (email, status, last_active)."""
    user = _get_user(store, user_id)

    unknown = set(patch) - EDITABLE_USER_FIELDS
    if unknown:
        raise InvalidInput(f"Fields not editable: {', '.join(sorted(unknown))}")

    try:
        updated = User.model_validate({**user.model_dump(), **patch})
    except ValueError as e:
        raise InvalidInput(f"Invalid user update: {e}")

    for field in patch:
        setattr(user, field, getattr(updated, field))
    return user


def record_admin_transaction(store: LedgerStore,
                             wallet_address: Optional[str],
                             tx_type: Optional[str],
                             amount: Any,
                             status: Optional[str] = None,
                             note: Optional[str] = None) -> Transaction:
    """Inserts a manual transaction record. Balances are not touched."""
    if not wallet_address or not tx_type:
        raise InvalidInput("Missing required fields")

    parsed_amount = parse_amount(amount)
    tx = store.add_transaction(
        wallet_address,
        tx_type,
        parsed_amount,
        status or TxStatus.COMPLETED.value,
        note=note,
    )
    logger.info(f"Admin inserted {tx_type} transaction {tx.id} for {wallet_address}")
    return tx


def platform_stats(store: LedgerStore) -> Dict[str, Any]:
    users = store.all_users()
    today = store.clock.today()
    return {
        "total_users": len(users),
        "active_users": sum(1 for u in users if u.status == UserStatus.ACTIVE.value),
        "total_staked": sum((u.staked_amount for u in users), Decimal("0")),
        "total_earnings": sum((u.total_earned for u in users), Decimal("0")),
        "pending_approvals": sum(1 for r in store.wallet_requests if r.status == WalletRequestStatus.PENDING.value),
        "pending_withdrawals": len(store.pending_withdrawals()),
        "today_transactions": sum(1 for t in store.transactions if t.date == today),
        "platform_apy": store.settings.base_apy,
    }
