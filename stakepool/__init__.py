# MIT License
# Copyright (c) 2025 Hashborn

"""
StakePool: stablecoin staking ledger with hourly interest accrual,
reward claims and admin-settled withdrawals.
"""

__version__ = "1.0.0"
