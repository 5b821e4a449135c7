# MIT License
# Copyright (c) 2025 Hashborn

from enum import Enum


class TxType(str, Enum):
    STAKE = "stake"
    UNSTAKE = "unstake"
    CLAIM = "claim"
    WITHDRAW = "withdraw"


class TxStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    REJECTED = "rejected"


class WithdrawalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class WalletRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UserStatus(str, Enum):
    # Admins may also set arbitrary status strings; only "active" accrues interest.
    ACTIVE = "active"
    BANNED = "banned"


class LedgerError(Exception):
    """Base class for recoverable, caller-visible ledger failures."""
    http_status = 400


class InvalidInput(LedgerError):
    pass


class MaintenanceUnavailable(LedgerError):
    http_status = 503

    def __init__(self, message: str = "Platform is under maintenance"):
        super().__init__(message)


class UserNotFound(LedgerError):
    http_status = 404

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class WithdrawalNotFound(LedgerError):
    http_status = 404

    def __init__(self, message: str = "Withdrawal not found"):
        super().__init__(message)


class WithdrawalNotPending(LedgerError):
    http_status = 409


class BelowMinimum(LedgerError):
    pass


class AboveMaximum(LedgerError):
    pass


class InsufficientStake(LedgerError):
    def __init__(self, message: str = "Insufficient staked balance"):
        super().__init__(message)


class InsufficientWithdrawable(LedgerError):
    def __init__(self, message: str = "Insufficient withdrawable balance"):
        super().__init__(message)


class NoRewardsAvailable(LedgerError):
    def __init__(self, message: str = "No rewards to claim"):
        super().__init__(message)
