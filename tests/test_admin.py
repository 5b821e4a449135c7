# MIT License
# Copyright (c) 2025 Hashborn

from decimal import Decimal

import pytest

from stakepool.ledger.core import admin
from stakepool.ledger.core.rewards import apply_accrual
from stakepool.ledger.core.staking import apply_stake
from stakepool.protocol.types.common import InvalidInput, UserNotFound
from stakepool.protocol.types.settings import PlatformSettings

WALLET = "0xAbC0000000000000000000000000000000000001"


@pytest.fixture
def user(store):
    apply_stake(store, WALLET, "500", "stake")
    return store.get_user_by_wallet(WALLET)


def test_add_rewards(store, user):
    tx_count = len(store.transactions)

    admin.add_rewards(store, user.id, "25.5")
    admin.add_rewards(store, user.id, 4.5)

    assert user.claimable_rewards == Decimal("30.0")
    assert len(store.transactions) == tx_count


def test_add_rewards_bypasses_maintenance(store, user):
    store.settings = PlatformSettings(maintenance_mode=True)
    admin.add_rewards(store, user.id, "10")
    assert user.claimable_rewards == Decimal("10")


@pytest.mark.parametrize("amount", ["0", "-3", "abc", None, "Infinity"])
def test_add_rewards_invalid_amount(store, user, amount):
    with pytest.raises(InvalidInput):
        admin.add_rewards(store, user.id, amount)
    assert user.claimable_rewards == 0


def test_add_rewards_unknown_user(store):
    with pytest.raises(UserNotFound):
        admin.add_rewards(store, 99, "10")


def test_set_user_balance_recomputes_vip(store, user):
    admin.set_user_balance(store, user.id, staked_amount="60000")
    assert user.staked_amount == Decimal("60000")
    assert user.vip_level == 2
    assert user.total_earned == 0

    admin.set_user_balance(store, user.id, total_earned="12.5")
    assert user.staked_amount == Decimal("60000")
    assert user.total_earned == Decimal("12.5")


def test_set_user_balance_rejects_negative(store, user):
    with pytest.raises(InvalidInput, match="must not be negative"):
        admin.set_user_balance(store, user.id, staked_amount="100", total_earned="-1")

    # Nothing applied when one value is bad
    assert user.staked_amount == Decimal("500")
    assert user.total_earned == 0


def test_set_user_balance_zero_is_allowed(store, user):
    admin.set_user_balance(store, user.id, staked_amount=0)
    assert user.staked_amount == 0
    assert user.vip_level == 0


def test_set_user_status_stops_accrual(store, user):
    admin.set_user_status(store, user.id, "banned")
    apply_accrual(store)
    assert user.claimable_rewards == 0

    admin.set_user_status(store, user.id, "active")
    apply_accrual(store)
    assert user.claimable_rewards > 0


def test_set_user_status_requires_value(store, user):
    with pytest.raises(InvalidInput):
        admin.set_user_status(store, user.id, "")


def test_update_user_profile(store, user):
    admin.update_user(store, user.id, {"email": "alice@example.com", "last_active": "2025-05-30"})
    assert user.email == "alice@example.com"
    assert str(user.last_active) == "2025-05-30"


def test_update_user_rejects_balance_fields(store, user):
    with pytest.raises(InvalidInput, match="not editable"):
        admin.update_user(store, user.id, {"staked_amount": "1000000"})
    assert user.staked_amount == Decimal("500")


def test_update_user_rejects_bad_values(store, user):
    with pytest.raises(InvalidInput):
        admin.update_user(store, user.id, {"last_active": "not-a-date"})


def test_record_admin_transaction(store, user):
    tx = admin.record_admin_transaction(store, WALLET, "bonus", "15", note="Launch promo")

    assert tx.tx_type == "bonus"
    assert tx.status == "completed"
    assert tx.note == "Launch promo"
    assert tx.amount == Decimal("15")
    # Manual records never move balances
    assert user.claimable_rewards == 0
    assert store.transactions_for(WALLET)[0].id == tx.id


def test_record_admin_transaction_missing_fields(store):
    with pytest.raises(InvalidInput):
        admin.record_admin_transaction(store, WALLET, None, "15")


def test_platform_stats(store, user):
    apply_stake(store, "0x2222222222222222222222222222222222222222", "1000", "stake")
    admin.set_user_status(store, user.id, "banned")

    stats = admin.platform_stats(store)

    assert stats["total_users"] == 2
    assert stats["active_users"] == 1
    assert stats["total_staked"] == Decimal("1500")
    assert stats["total_earnings"] == 0
    assert stats["pending_withdrawals"] == 0
    assert stats["today_transactions"] == 2
    assert stats["platform_apy"] == 12.5


@pytest.mark.parametrize("field", ["staked_amount", "total_earned"])
def test_set_user_balance_rejects_oversized(store, user, field):
    with pytest.raises(InvalidInput, match="exceeds"):
        admin.set_user_balance(store, user.id, **{field: "1e999999999"})
    assert user.staked_amount == Decimal("500")
    assert user.total_earned == 0


def test_oversized_rewards_cannot_break_accrual(store, user):
    with pytest.raises(InvalidInput):
        admin.add_rewards(store, user.id, "1e999999999")

    apply_accrual(store)
    assert user.claimable_rewards > 0
