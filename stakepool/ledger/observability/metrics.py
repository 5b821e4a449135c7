# MIT License
# Copyright (c) 2025 Hashborn

"""
Prometheus Metrics Exporter

Exports ledger metrics in Prometheus format.

Metrics:
- Engine operations by outcome
- Stake/unstake volume
- Reward accrual runs and credited interest
- Users, total staked, outstanding claimable rewards
- Pending withdrawals and wallet approvals
"""

from prometheus_client import Counter, Gauge, Histogram, CollectorRegistry

# Create registry for metrics
metrics_registry = CollectorRegistry()

# ═══════════════════════════════════════════════════════════════════
# OPERATION METRICS
# ═══════════════════════════════════════════════════════════════════

operations_total = Counter(
    'stakepool_operations_total',
    'Ledger operations processed',
    ['operation', 'outcome'],
    registry=metrics_registry
)

stake_volume_total = Counter(
    'stakepool_stake_volume_total',
    'Total amount staked or unstaked',
    ['kind'],
    registry=metrics_registry
)

claimed_total = Counter(
    'stakepool_claimed_total',
    'Total rewards claimed',
    registry=metrics_registry
)

# ═══════════════════════════════════════════════════════════════════
# ACCRUAL METRICS
# ═══════════════════════════════════════════════════════════════════

accrual_runs_total = Counter(
    'stakepool_accrual_runs_total',
    'Number of reward accrual ticks',
    registry=metrics_registry
)

interest_credited_total = Counter(
    'stakepool_interest_credited_total',
    'Total interest credited by accrual',
    registry=metrics_registry
)

accrual_duration_seconds = Histogram(
    'stakepool_accrual_duration_seconds',
    'Time spent in one accrual tick',
    buckets=[0.001, 0.01, 0.05, 0.1, 0.5, 1, 5],
    registry=metrics_registry
)

# ═══════════════════════════════════════════════════════════════════
# STATE METRICS
# ═══════════════════════════════════════════════════════════════════

users_total = Gauge(
    'stakepool_users_total',
    'Number of users',
    registry=metrics_registry
)

users_active = Gauge(
    'stakepool_users_active',
    'Number of users with active status',
    registry=metrics_registry
)

total_staked = Gauge(
    'stakepool_total_staked',
    'Sum of all staked amounts',
    registry=metrics_registry
)

claimable_rewards = Gauge(
    'stakepool_claimable_rewards',
    'Sum of all unclaimed rewards',
    registry=metrics_registry
)

pending_withdrawals = Gauge(
    'stakepool_pending_withdrawals',
    'Withdrawals awaiting admin settlement',
    registry=metrics_registry
)

pending_wallet_approvals = Gauge(
    'stakepool_pending_wallet_approvals',
    'Wallet approval requests awaiting admin review',
    registry=metrics_registry
)

maintenance_mode = Gauge(
    'stakepool_maintenance_mode',
    '1 while the platform is in maintenance mode',
    registry=metrics_registry
)


# ═══════════════════════════════════════════════════════════════════
# HELPER FUNCTIONS
# ═══════════════════════════════════════════════════════════════════

def record_operation(operation: str, outcome: str = "ok"):
    """
    Count an engine operation.

    Args:
        operation: Operation name (e.g. 'stake', 'claim')
        outcome: 'ok' or the error class name
    """
    operations_total.labels(operation=operation, outcome=outcome).inc()


def record_stake(kind: str, amount):
    stake_volume_total.labels(kind=kind).inc(float(amount))


def record_claim(amount):
    claimed_total.inc(float(amount))


def record_accrual(report, duration_sec: float):
    accrual_runs_total.inc()
    interest_credited_total.inc(float(report.total_credited))
    accrual_duration_seconds.observe(duration_sec)


def update_metrics(store):
    """
    Refresh gauges from the ledger store.
    Called when metrics are scraped; only updates Gauges.

    Args:
        store: LedgerStore instance
    """
    users = store.all_users()
    users_total.set(len(users))
    users_active.set(sum(1 for u in users if u.is_active))
    total_staked.set(float(sum(u.staked_amount for u in users)))
    claimable_rewards.set(float(sum(u.claimable_rewards for u in users)))

    pending_withdrawals.set(len(store.pending_withdrawals()))
    pending_wallet_approvals.set(sum(1 for r in store.wallet_requests if r.status == "pending"))
    maintenance_mode.set(1 if store.settings.maintenance_mode else 0)
