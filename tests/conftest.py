# MIT License
# Copyright (c) 2025 Hashborn

import datetime as dt

import pytest

from stakepool.ledger.core.clock import Clock
from stakepool.ledger.core.ledger import Ledger
from stakepool.ledger.core.store import LedgerStore
from stakepool.protocol.config.params import DeploymentConfig


class FixedClock(Clock):
    """Clock that only moves when a test advances it."""

    def __init__(self, start: dt.datetime = dt.datetime(2025, 6, 1, 12, 0, tzinfo=dt.timezone.utc)):
        self.current = start

    def now(self) -> dt.datetime:
        return self.current

    def advance(self, **kwargs):
        self.current += dt.timedelta(**kwargs)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def store(clock):
    return LedgerStore(clock=clock)


@pytest.fixture
def test_config():
    return DeploymentConfig(
        deployment_id="test",
        accrual_interval_sec=1,
        snapshot_keep_count=3,
        admin_username="admin",
        admin_password="secret",
    )


@pytest.fixture
def ledger(store, test_config):
    """Ledger without a snapshot manager (nothing touches disk)."""
    return Ledger(store=store, config=test_config)
