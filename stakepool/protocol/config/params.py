# MIT License
# Copyright (c) 2025 Hashborn

import os
from decimal import Decimal
from typing import Dict

# Global Constants
DENOM = "USDT"

# User-supplied amounts: 6 decimal places, at most one trillion units
AMOUNT_UNIT = Decimal("0.000001")
MAX_AMOUNT = Decimal("1000000000000")

# Withdrawals: fixed 2% platform fee, 98% paid out
WITHDRAWAL_FEE_RATE = Decimal("0.02")
DEFAULT_REJECTION_REASON = "Rejected by admin"


class DeploymentConfig:
    def __init__(self,
                 deployment_id: str,
                 # Reward accrual
                 accrual_interval_sec: int = 3600,
                 # Persistence
                 snapshot_keep_count: int = 10,
                 # Wallet-reported balances older than this are served as stale
                 reported_balance_ttl_sec: int = 300,
                 # Admin credentials (opaque bearer tokens, no real crypto)
                 admin_username: str = "admin",
                 admin_password: str = "admin123",
                 # HTTP
                 cors_origin: str = "*",
                 default_port: int = 3001):
        self.deployment_id = deployment_id
        self.accrual_interval_sec = accrual_interval_sec
        self.snapshot_keep_count = snapshot_keep_count
        self.reported_balance_ttl_sec = reported_balance_ttl_sec
        self.admin_username = admin_username
        self.admin_password = admin_password
        self.cors_origin = cors_origin
        self.default_port = default_port


DEPLOYMENTS: Dict[str, DeploymentConfig] = {
    "devnet": DeploymentConfig(
        deployment_id="devnet",
        accrual_interval_sec=60,
        snapshot_keep_count=3,
    ),
    "production": DeploymentConfig(
        deployment_id="production",
        accrual_interval_sec=3600,
        snapshot_keep_count=24,
        admin_username=os.environ.get("STAKEPOOL_ADMIN_USERNAME", "admin"),
        admin_password=os.environ.get("STAKEPOOL_ADMIN_PASSWORD", "admin123"),
        cors_origin=os.environ.get("FRONTEND_URL", "*"),
        default_port=int(os.environ.get("PORT", "3001")),
    ),
}

CURRENT_DEPLOYMENT = DEPLOYMENTS[os.environ.get("STAKEPOOL_ENV", "production")]
