# MIT License
# Copyright (c) 2025 Hashborn

from decimal import Decimal

import pytest

from stakepool.ledger.core.settings import update_settings
from stakepool.protocol.types.common import BelowMinimum, InvalidInput, MaintenanceUnavailable
from stakepool.protocol.types.settings import PlatformSettings

WALLET = "0xAbC0000000000000000000000000000000000001"


def test_defaults():
    settings = PlatformSettings()
    assert settings.base_apy == 12.5
    assert settings.min_stake == Decimal("100")
    assert settings.max_stake == Decimal("1000000")
    assert settings.maintenance_mode is False


def test_partial_update_merges(store):
    settings = update_settings(store, {"base_apy": 15, "min_stake": "50"})

    assert settings.base_apy == 15
    assert settings.min_stake == Decimal("50")
    assert settings.max_stake == Decimal("1000000")
    assert store.settings is settings


@pytest.mark.parametrize("patch", [
    {"unknown_key": 1},
    {"base_apy": "lots"},
    {"min_stake": "-1"},
    {"min_stake": "2000000"},
    {"maintenance_mode": "sometimes"},
])
def test_invalid_updates_keep_current_settings(store, patch):
    before = store.settings
    with pytest.raises(InvalidInput):
        update_settings(store, patch)
    assert store.settings is before


def test_update_requires_object(store):
    with pytest.raises(InvalidInput):
        update_settings(store, ["base_apy", 15])


def test_public_view_hides_operational_fields():
    view = PlatformSettings().public_view()
    assert set(view) == {"base_apy", "vip1_bonus", "vip2_bonus", "vip3_bonus", "min_stake", "max_stake"}
    assert view["min_stake"] == "100"


def test_new_limits_apply_to_next_stake(ledger):
    ledger.update_settings({"min_stake": "1000"})
    with pytest.raises(BelowMinimum, match="Minimum stake is 1000"):
        ledger.stake(WALLET, "500", "stake")

    ledger.update_settings({"maintenance_mode": True})
    with pytest.raises(MaintenanceUnavailable):
        ledger.stake(WALLET, "5000", "stake")

    ledger.update_settings({"maintenance_mode": False})
    assert ledger.stake(WALLET, "5000", "stake").staked_amount == Decimal("5000")
