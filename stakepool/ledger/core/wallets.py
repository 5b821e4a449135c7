# MIT License
# Copyright (c) 2025 Hashborn

"""
Wallet admission lists and wallet-reported balances.

Approval is plain list membership: a wallet asks, an admin approves or
rejects, and approval creates the user record if it does not exist yet.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from ...protocol.types.common import InvalidInput, WalletRequestStatus
from ...protocol.types.wallet import ReportedBalance, WalletRequest
from .store import LedgerStore

logger = logging.getLogger(__name__)

ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

APPROVAL_ALREADY_APPROVED = "already_approved"
APPROVAL_REJECTED = "rejected"
APPROVAL_ALREADY_PENDING = "already_pending"
APPROVAL_REQUESTED = "requested"


def is_valid_address(address: str) -> bool:
    return bool(address) and ADDRESS_RE.match(address) is not None


def _in_list(wallets: List[str], wallet_address: str) -> bool:
    key = wallet_address.lower()
    return any(w.lower() == key for w in wallets)


def is_approved(store: LedgerStore, wallet_address: str) -> bool:
    return _in_list(store.approved_wallets, wallet_address)


def request_approval(store: LedgerStore,
                     wallet_address: Optional[str],
                     ip_address: Optional[str] = None,
                     user_agent: Optional[str] = None) -> str:
    """
    Files an approval request for a wallet.

    Returns:
        One of "already_approved", "rejected", "already_pending", "requested"
    """
    if not wallet_address:
        raise InvalidInput("Wallet address required")

    if is_approved(store, wallet_address):
        return APPROVAL_ALREADY_APPROVED
    if _in_list(store.rejected_wallets, wallet_address):
        return APPROVAL_REJECTED
    if store.find_wallet_request(wallet_address):
        return APPROVAL_ALREADY_PENDING

    store.wallet_requests.append(WalletRequest(
        id=store.next_wallet_request_id(),
        wallet_address=wallet_address,
        ip_address=ip_address or "Unknown",
        user_agent=user_agent or "Unknown",
        timestamp=store.clock.now(),
    ))
    logger.info(f"New wallet approval request: {wallet_address}")
    return APPROVAL_REQUESTED


def approve_wallet(store: LedgerStore, wallet_address: Optional[str]) -> bool:
    """Approves a pending wallet and creates its user. Returns False if no request exists."""
    if not wallet_address:
        raise InvalidInput("Wallet address required")

    request = store.find_wallet_request(wallet_address)
    if not request:
        return False

    request.status = WalletRequestStatus.APPROVED.value
    if not is_approved(store, wallet_address):
        store.approved_wallets.append(wallet_address)
    if not store.get_user_by_wallet(wallet_address):
        store.add_user(store.new_user(wallet_address))

    logger.info(f"Wallet approved: {wallet_address}")
    return True


def reject_wallet(store: LedgerStore, wallet_address: Optional[str]) -> bool:
    if not wallet_address:
        raise InvalidInput("Wallet address required")

    request = store.find_wallet_request(wallet_address)
    if not request:
        return False

    request.status = WalletRequestStatus.REJECTED.value
    if not _in_list(store.rejected_wallets, wallet_address):
        store.rejected_wallets.append(wallet_address)

    logger.info(f"Wallet rejected: {wallet_address}")
    return True


def pending_requests(store: LedgerStore) -> List[WalletRequest]:
    return [r for r in store.wallet_requests if r.status == WalletRequestStatus.PENDING.value]


def wallet_lists(store: LedgerStore) -> Dict[str, Any]:
    return {
        "pending": pending_requests(store),
        "approved": list(store.approved_wallets),
        "rejected": list(store.rejected_wallets),
    }


def report_balance(store: LedgerStore, wallet_address: Optional[str], eth: Optional[str] = None, usdt: Optional[str] = None) -> ReportedBalance:
    if not wallet_address:
        raise InvalidInput("Wallet address required")

    reported = ReportedBalance(
        eth=eth or "0.0000",
        usdt=usdt or "0.00",
        timestamp=store.clock.timestamp(),
    )
    store.reported_balances[wallet_address.lower()] = reported
    logger.info(f"Balance reported for {wallet_address[:10]}...: {reported.eth} ETH, {reported.usdt} USDT")
    return reported


def reported_balance(store: LedgerStore, wallet_address: str, ttl_sec: int) -> Dict[str, Any]:
    """
    Returns the wallet-reported balance tagged with its freshness.

    Sources: "user-reported" (younger than ttl_sec), "user-reported-stale",
    or "unavailable" with zero balances when the wallet never reported.
    """
    reported = store.reported_balances.get(wallet_address.lower())
    if not reported:
        return {"address": wallet_address, "eth": "0.0000", "usdt": "0.00", "source": "unavailable"}

    age = store.clock.timestamp() - reported.timestamp
    return {
        "address": wallet_address,
        "eth": reported.eth,
        "usdt": reported.usdt,
        "source": "user-reported" if age < ttl_sec else "user-reported-stale",
    }
