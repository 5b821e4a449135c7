# MIT License
# Copyright (c) 2025 Hashborn

import logging
import threading
import time
from decimal import DecimalException
from typing import Any, Callable, Dict, List, Optional

from ...protocol.config.params import CURRENT_DEPLOYMENT, DeploymentConfig
from ...protocol.types.common import InvalidInput, LedgerError
from ...protocol.types.settings import PlatformSettings
from ...protocol.types.tx import Transaction
from ...protocol.types.user import User
from ...protocol.types.wallet import ReportedBalance, WalletRequest
from ...protocol.types.withdrawal import PendingWithdrawal
from ..observability import metrics
from ..snapshot import SnapshotManager
from . import admin, wallets
from .clock import Clock
from .rewards import AccrualReport, apply_accrual
from .settings import update_settings
from .staking import StakeResult, apply_stake
from .store import LedgerStore
from .withdrawals import (
    ClaimResult,
    apply_claim,
    apply_withdrawal_approval,
    apply_withdrawal_rejection,
    apply_withdrawal_request,
)

logger = logging.getLogger(__name__)


class Ledger:
    """
    Entry point for every financial operation.

    All mutations run under one re-entrant lock, so stake, claim, withdrawal
    settlement and the accrual tick never interleave. After each successful
    mutation the state is handed to the snapshot manager; a failed write is
    logged and the in-memory change stands.
    """

    def __init__(self,
                 store: Optional[LedgerStore] = None,
                 snapshot_manager: Optional[SnapshotManager] = None,
                 config: DeploymentConfig = CURRENT_DEPLOYMENT):
        self.store = store if store is not None else LedgerStore()
        self.snapshot_manager = snapshot_manager
        self.config = config
        self._lock = threading.RLock()

    @classmethod
    def open(cls, data_dir: str, config: DeploymentConfig = CURRENT_DEPLOYMENT, clock: Optional[Clock] = None) -> 'Ledger':
        """Opens a ledger persisted under data_dir, restoring the latest snapshot if any."""
        manager = SnapshotManager(snapshots_dir=f"{data_dir}/snapshots", deployment_id=config.deployment_id)
        try:
            snapshot = manager.load_latest()
            store = LedgerStore(snapshot.state, clock=clock)
            logger.info(f"Loaded ledger snapshot {snapshot.sequence} ({len(snapshot.state.users)} users)")
        except FileNotFoundError:
            store = LedgerStore(clock=clock)
            logger.info("No snapshot found. Starting with an empty ledger.")
        return cls(store=store, snapshot_manager=manager, config=config)

    # --- Persistence ---
    def persist(self):
        if not self.snapshot_manager:
            return
        with self._lock:
            try:
                self.snapshot_manager.create_snapshot(self.store.export_state())
                self.snapshot_manager.cleanup_old_snapshots(self.config.snapshot_keep_count)
            except Exception as e:
                logger.error(f"Error saving ledger snapshot: {e}")

    def _mutate(self, operation: str, apply: Callable, *args, **kwargs):
        with self._lock:
            try:
                result = apply(self.store, *args, **kwargs)
            except LedgerError as e:
                metrics.record_operation(operation, type(e).__name__)
                logger.debug(f"{operation} rejected: {e}")
                raise
            except DecimalException as e:
                metrics.record_operation(operation, InvalidInput.__name__)
                logger.warning(f"{operation} rejected: arithmetic error {e!r}")
                raise InvalidInput(f"Amount out of range: {e!r}") from e
            metrics.record_operation(operation)
            self.persist()
            return result

    # --- Thread-safe wrappers: staking ---
    def stake(self, wallet_address: Optional[str], amount: Any, kind: Optional[str]) -> StakeResult:
        result = self._mutate("stake", apply_stake, wallet_address, amount, kind)
        metrics.record_stake(kind, result.transaction.amount)
        return result

    # --- Claim & withdrawal ---
    def claim(self, wallet_address: Optional[str]) -> ClaimResult:
        result = self._mutate("claim", apply_claim, wallet_address)
        metrics.record_claim(result.amount)
        return result

    def request_withdrawal(self, wallet_address: Optional[str], amount: Any) -> PendingWithdrawal:
        return self._mutate("withdraw_request", apply_withdrawal_request, wallet_address, amount)

    def approve_withdrawal(self, withdrawal_id: int) -> PendingWithdrawal:
        return self._mutate("withdraw_approve", apply_withdrawal_approval, withdrawal_id)

    def reject_withdrawal(self, withdrawal_id: int, reason: Optional[str] = None) -> PendingWithdrawal:
        return self._mutate("withdraw_reject", apply_withdrawal_rejection, withdrawal_id, reason)

    # --- Reward accrual ---
    def run_accrual_tick(self) -> AccrualReport:
        started = time.monotonic()
        report = self._mutate("accrual", apply_accrual)
        metrics.record_accrual(report, time.monotonic() - started)
        return report

    # --- Admin overrides ---
    def add_rewards(self, user_id: int, amount: Any) -> User:
        return self._mutate("add_rewards", admin.add_rewards, user_id, amount)

    def set_user_balance(self, user_id: int, staked_amount: Any = None, total_earned: Any = None) -> User:
        return self._mutate("set_balance", admin.set_user_balance, user_id, staked_amount, total_earned)

    def set_user_status(self, user_id: int, status: Optional[str]) -> User:
        return self._mutate("set_status", admin.set_user_status, user_id, status)

    def update_user(self, user_id: int, patch: Dict[str, Any]) -> User:
        return self._mutate("update_user", admin.update_user, user_id, patch)

    def record_admin_transaction(self, wallet_address: Optional[str], tx_type: Optional[str], amount: Any,
                                 status: Optional[str] = None, note: Optional[str] = None) -> Transaction:
        return self._mutate("admin_transaction", admin.record_admin_transaction,
                            wallet_address, tx_type, amount, status, note)

    # --- Settings gate ---
    def update_settings(self, patch: Dict[str, Any]) -> PlatformSettings:
        return self._mutate("update_settings", update_settings, patch)

    def get_settings(self) -> PlatformSettings:
        with self._lock:
            return self.store.settings.model_copy()

    def public_settings(self) -> Dict[str, Any]:
        with self._lock:
            return self.store.settings.public_view()

    # --- Wallet approval ---
    def request_approval(self, wallet_address: Optional[str], ip_address: Optional[str] = None,
                         user_agent: Optional[str] = None) -> str:
        return self._mutate("wallet_request", wallets.request_approval, wallet_address, ip_address, user_agent)

    def approve_wallet(self, wallet_address: Optional[str]) -> bool:
        return self._mutate("wallet_approve", wallets.approve_wallet, wallet_address)

    def reject_wallet(self, wallet_address: Optional[str]) -> bool:
        return self._mutate("wallet_reject", wallets.reject_wallet, wallet_address)

    def is_wallet_approved(self, wallet_address: str) -> bool:
        with self._lock:
            return wallets.is_approved(self.store, wallet_address)

    def pending_wallet_requests(self) -> List[WalletRequest]:
        with self._lock:
            return [r.model_copy() for r in wallets.pending_requests(self.store)]

    def wallet_lists(self) -> Dict[str, Any]:
        with self._lock:
            lists = wallets.wallet_lists(self.store)
            lists["pending"] = [r.model_copy() for r in lists["pending"]]
            return lists

    def report_balance(self, wallet_address: Optional[str], eth: Optional[str] = None,
                       usdt: Optional[str] = None) -> ReportedBalance:
        return self._mutate("report_balance", wallets.report_balance, wallet_address, eth, usdt)

    def reported_balance(self, wallet_address: str) -> Dict[str, Any]:
        with self._lock:
            return wallets.reported_balance(self.store, wallet_address, self.config.reported_balance_ttl_sec)

    # --- Read accessors (copies; the store owns the live records) ---
    def get_user_by_wallet(self, wallet_address: str) -> Optional[User]:
        with self._lock:
            user = self.store.get_user_by_wallet(wallet_address)
            return user.model_copy() if user else None

    def get_user(self, user_id: int) -> Optional[User]:
        with self._lock:
            user = self.store.get_user(user_id)
            return user.model_copy() if user else None

    def list_users(self) -> List[User]:
        with self._lock:
            return [u.model_copy() for u in self.store.all_users()]

    def transactions_for(self, wallet_address: str) -> List[Transaction]:
        with self._lock:
            return [tx.model_copy() for tx in self.store.transactions_for(wallet_address)]

    def all_transactions(self) -> List[Transaction]:
        with self._lock:
            return [tx.model_copy() for tx in self.store.transactions]

    def pending_withdrawals(self) -> List[PendingWithdrawal]:
        with self._lock:
            return [w.model_copy() for w in self.store.pending_withdrawals()]

    def get_withdrawal(self, withdrawal_id: int) -> Optional[PendingWithdrawal]:
        with self._lock:
            withdrawal = self.store.get_withdrawal(withdrawal_id)
            return withdrawal.model_copy() if withdrawal else None

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return admin.platform_stats(self.store)

    def refresh_metrics(self):
        with self._lock:
            metrics.update_metrics(self.store)
