# MIT License
# Copyright (c) 2025 Hashborn

import logging
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ...protocol.types.common import TxType, WithdrawalStatus
from ...protocol.types.settings import PlatformSettings
from ...protocol.types.tx import Transaction
from ...protocol.types.user import User
from ...protocol.types.wallet import ReportedBalance, WalletRequest
from ...protocol.types.withdrawal import PendingWithdrawal
from .clock import Clock

logger = logging.getLogger(__name__)


class StoreState(BaseModel):
    """Serializable image of the whole ledger (what snapshots persist)."""
    users: List[User] = Field(default_factory=list)
    transactions: List[Transaction] = Field(default_factory=list)
    pending_withdrawals: List[PendingWithdrawal] = Field(default_factory=list)
    wallet_requests: List[WalletRequest] = Field(default_factory=list)
    approved_wallets: List[str] = Field(default_factory=list)
    rejected_wallets: List[str] = Field(default_factory=list)
    reported_balances: Dict[str, ReportedBalance] = Field(default_factory=dict)
    settings: PlatformSettings = Field(default_factory=PlatformSettings)


class LedgerStore:
    """
    In-memory container for users, transactions, withdrawals and settings.

    Holds no business rules: the engines in this package enforce invariants,
    and the Ledger facade serializes access with a single writer lock.
    """

    def __init__(self, state: Optional[StoreState] = None, clock: Optional[Clock] = None):
        state = state if state is not None else StoreState()
        self.clock = clock or Clock()
        self.settings: PlatformSettings = state.settings

        # Users indexed by lower-cased wallet and by id
        self._users_by_wallet: Dict[str, User] = {}
        self._users_by_id: Dict[int, User] = {}
        for user in state.users:
            if user.wallet_key in self._users_by_wallet:
                logger.warning(f"Duplicate user for wallet {user.wallet_address}, keeping id {self._users_by_wallet[user.wallet_key].id}")
                continue
            self.add_user(user)

        self.transactions: List[Transaction] = list(state.transactions)
        self._withdrawals: Dict[int, PendingWithdrawal] = {w.id: w for w in state.pending_withdrawals}

        self.wallet_requests: List[WalletRequest] = list(state.wallet_requests)
        self.approved_wallets: List[str] = list(state.approved_wallets)
        self.rejected_wallets: List[str] = list(state.rejected_wallets)
        self.reported_balances: Dict[str, ReportedBalance] = dict(state.reported_balances)

    # --- Users ---
    def get_user_by_wallet(self, wallet_address: str) -> Optional[User]:
        return self._users_by_wallet.get(wallet_address.lower())

    def get_user(self, user_id: int) -> Optional[User]:
        return self._users_by_id.get(user_id)

    def all_users(self) -> List[User]:
        return sorted(self._users_by_id.values(), key=lambda u: u.id)

    def new_user(self, wallet_address: str) -> User:
        """Builds a fresh user record. Not visible until add_user()."""
        today = self.clock.today()
        return User(
            id=max(self._users_by_id, default=0) + 1,
            wallet_address=wallet_address,
            join_date=today,
            last_active=today,
        )

    def add_user(self, user: User) -> User:
        self._users_by_wallet[user.wallet_key] = user
        self._users_by_id[user.id] = user
        return user

    # --- Transactions ---
    def add_transaction(self,
                        wallet_address: str,
                        tx_type: str,
                        amount: Decimal,
                        status: str,
                        withdrawal_id: Optional[int] = None,
                        note: Optional[str] = None) -> Transaction:
        tx = Transaction(
            id=max((t.id for t in self.transactions), default=0) + 1,
            wallet_address=wallet_address,
            tx_type=tx_type,
            amount=amount,
            date=self.clock.today(),
            status=status,
            withdrawal_id=withdrawal_id,
            note=note,
        )
        self.transactions.append(tx)
        return tx

    def transactions_for(self, wallet_address: str) -> List[Transaction]:
        """Transactions of a wallet, newest first."""
        txs = [t for t in self.transactions if t.belongs_to(wallet_address)]
        return sorted(txs, key=lambda t: (t.date, t.id), reverse=True)

    def find_withdraw_transaction(self, withdrawal_id: int) -> Optional[Transaction]:
        for tx in self.transactions:
            if tx.tx_type == TxType.WITHDRAW.value and tx.withdrawal_id == withdrawal_id:
                return tx
        return None

    # --- Withdrawals ---
    def next_withdrawal_id(self) -> int:
        return max(self._withdrawals, default=0) + 1

    def add_withdrawal(self, withdrawal: PendingWithdrawal) -> PendingWithdrawal:
        self._withdrawals[withdrawal.id] = withdrawal
        return withdrawal

    def get_withdrawal(self, withdrawal_id: int) -> Optional[PendingWithdrawal]:
        return self._withdrawals.get(withdrawal_id)

    def all_withdrawals(self) -> List[PendingWithdrawal]:
        return sorted(self._withdrawals.values(), key=lambda w: w.id)

    def pending_withdrawals(self) -> List[PendingWithdrawal]:
        return [w for w in self.all_withdrawals() if w.status == WithdrawalStatus.PENDING.value]

    # --- Wallet approval lists ---
    def find_wallet_request(self, wallet_address: str) -> Optional[WalletRequest]:
        key = wallet_address.lower()
        for request in self.wallet_requests:
            if request.wallet_address.lower() == key:
                return request
        return None

    def next_wallet_request_id(self) -> int:
        return max((r.id for r in self.wallet_requests), default=0) + 1

    # --- Snapshot export ---
    def export_state(self) -> StoreState:
        return StoreState(
            users=self.all_users(),
            transactions=list(self.transactions),
            pending_withdrawals=self.all_withdrawals(),
            wallet_requests=list(self.wallet_requests),
            approved_wallets=list(self.approved_wallets),
            rejected_wallets=list(self.rejected_wallets),
            reported_balances=dict(self.reported_balances),
            settings=self.settings,
        )
