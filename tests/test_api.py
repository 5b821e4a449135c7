# MIT License
# Copyright (c) 2025 Hashborn

"""
HTTP API tests (FastAPI TestClient against an in-memory ledger).
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from stakepool.ledger.rpc import api
from stakepool.ledger.rpc.auth import AdminSessions

WALLET = "0xAbC0000000000000000000000000000000000001"


@pytest.fixture
def client(ledger, monkeypatch):
    # Inject deps the way the node CLI does
    monkeypatch.setattr(api, "ledger", ledger)
    monkeypatch.setattr(api, "sessions", AdminSessions("admin", "secret"))
    return TestClient(api.app)


@pytest.fixture
def admin_headers(client):
    resp = client.post("/api/admin/login", json={"username": "admin", "password": "secret"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def test_uninitialized_node(monkeypatch):
    monkeypatch.setattr(api, "ledger", None)
    resp = TestClient(api.app).get("/api/settings")
    assert resp.status_code == 503
    assert resp.json()["detail"] == "Node not initialized"


def test_public_settings(client):
    data = client.get("/api/settings").json()
    assert data["base_apy"] == 12.5
    assert data["min_stake"] == "100"
    assert "maintenance_mode" not in data


def test_unknown_user_gets_empty_dashboard(client):
    data = client.get(f"/api/user/{WALLET}").json()
    assert Decimal(data["staked_amount"]) == 0
    assert data["vip_level"] == 0


def test_stake_and_read_back(client):
    resp = client.post("/api/stake", json={"wallet_address": WALLET, "amount": "10100", "type": "stake"})
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert Decimal(resp.json()["staked_amount"]) == Decimal("10100")

    user = client.get(f"/api/user/{WALLET.lower()}").json()
    assert user["vip_level"] == 1
    assert Decimal(user["staked_amount"]) == Decimal("10100")

    txs = client.get(f"/api/user/{WALLET}/transactions").json()
    assert len(txs) == 1
    assert txs[0]["tx_type"] == "stake"


@pytest.mark.parametrize("body, status, error", [
    ({"wallet_address": WALLET, "amount": "50", "type": "stake"}, 400, "BelowMinimum"),
    ({"wallet_address": WALLET, "amount": "abc", "type": "stake"}, 400, "InvalidInput"),
    ({"wallet_address": WALLET, "amount": "1e999999999", "type": "stake"}, 400, "InvalidInput"),
    ({"wallet_address": WALLET, "amount": "100.0000001", "type": "stake"}, 400, "InvalidInput"),
    ({"wallet_address": WALLET, "amount": "50", "type": "flip"}, 400, "InvalidInput"),
    ({"amount": "500", "type": "stake"}, 400, "InvalidInput"),
    ({"wallet_address": WALLET, "amount": "10", "type": "unstake"}, 400, "InsufficientStake"),
])
def test_stake_errors(client, body, status, error):
    resp = client.post("/api/stake", json=body)
    assert resp.status_code == status
    assert resp.json()["error"] == error
    assert resp.json()["success"] is False


def test_claim_without_user(client):
    resp = client.post("/api/claim", json={"wallet_address": WALLET})
    assert resp.status_code == 404
    assert resp.json()["error"] == "UserNotFound"


def test_admin_routes_require_token(client):
    assert client.get("/api/admin/stats").status_code == 401
    assert client.get("/api/admin/stats", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_login_logout(client):
    resp = client.post("/api/admin/login", json={"username": "admin", "password": "wrong"})
    assert resp.status_code == 401

    token = client.post("/api/admin/login", json={"username": "admin", "password": "secret"}).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}
    assert client.get("/api/admin/verify", headers=headers).json() == {"valid": True}

    client.post("/api/admin/logout", headers=headers)
    assert client.get("/api/admin/verify", headers=headers).status_code == 401
    assert client.get("/api/admin/users", headers=headers).status_code == 401


def test_withdrawal_flow(client, admin_headers):
    client.post("/api/stake", json={"wallet_address": WALLET, "amount": "500", "type": "stake"})

    resp = client.post("/api/admin/users/1/rewards", json={"amount": "100"}, headers=admin_headers)
    assert Decimal(resp.json()["user"]["claimable_rewards"]) == Decimal("100")

    resp = client.post("/api/withdraw/request", json={"wallet_address": WALLET, "amount": "100"})
    withdrawal = resp.json()["withdrawal"]
    assert Decimal(withdrawal["fee"]) == Decimal("2")
    assert Decimal(withdrawal["net_amount"]) == Decimal("98")

    pending = client.get("/api/admin/withdrawals/pending", headers=admin_headers).json()
    assert [w["id"] for w in pending] == [withdrawal["id"]]

    resp = client.post("/api/admin/withdraw/approve", json={"withdrawal_id": withdrawal["id"]}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["withdrawal"]["status"] == "approved"

    user = client.get(f"/api/user/{WALLET}").json()
    assert Decimal(user["claimable_rewards"]) == 0

    # Already settled
    resp = client.post("/api/admin/withdraw/reject", json={"withdrawal_id": withdrawal["id"]}, headers=admin_headers)
    assert resp.status_code == 409

    resp = client.post("/api/admin/withdraw/approve", json={"withdrawal_id": 99}, headers=admin_headers)
    assert resp.status_code == 404


def test_admin_user_management(client, admin_headers):
    client.post("/api/stake", json={"wallet_address": WALLET, "amount": "500", "type": "stake"})

    resp = client.post("/api/admin/users/1/balance", json={"staked_amount": "120000"}, headers=admin_headers)
    assert resp.json()["user"]["vip_level"] == 3

    resp = client.put("/api/admin/users/1", json={"email": "bob@example.com"}, headers=admin_headers)
    assert resp.json()["user"]["email"] == "bob@example.com"

    resp = client.put("/api/admin/users/1", json={"vip_level": 3}, headers=admin_headers)
    assert resp.status_code == 400

    resp = client.post("/api/admin/users/1/status", json={"status": "banned"}, headers=admin_headers)
    assert resp.json()["user"]["status"] == "banned"

    assert client.get("/api/admin/users/7", headers=admin_headers).status_code == 404

    stats = client.get("/api/admin/stats", headers=admin_headers).json()
    assert stats["total_users"] == 1
    assert stats["active_users"] == 0
    assert Decimal(stats["total_staked"]) == Decimal("120000")


def test_admin_transactions(client, admin_headers):
    resp = client.post(
        "/api/admin/transactions",
        json={"wallet_address": WALLET, "type": "bonus", "amount": "5", "note": "manual"},
        headers=admin_headers,
    )
    assert resp.status_code == 200

    txs = client.get("/api/admin/transactions", headers=admin_headers).json()
    assert txs[0]["tx_type"] == "bonus"
    assert txs[0]["status"] == "completed"


def test_maintenance_mode_via_settings(client, admin_headers):
    resp = client.put("/api/admin/settings", json={"maintenance_mode": True}, headers=admin_headers)
    assert resp.json()["settings"]["maintenance_mode"] is True

    resp = client.post("/api/stake", json={"wallet_address": WALLET, "amount": "500", "type": "stake"})
    assert resp.status_code == 503
    assert resp.json()["error"] == "MaintenanceUnavailable"

    resp = client.put("/api/admin/settings", json={"min_stake": "-5"}, headers=admin_headers)
    assert resp.status_code == 400
    assert client.get("/api/admin/settings", headers=admin_headers).json()["min_stake"] == "100"


def test_wallet_approval_flow(client, admin_headers):
    resp = client.post("/api/request-approval", json={"wallet_address": WALLET})
    assert resp.json()["message"] == "Approval requested"
    assert client.post("/api/request-approval", json={"wallet_address": WALLET}).json()["message"] == "Request already pending"
    assert client.get(f"/api/check-approval/{WALLET}").json() == {"approved": False}

    pending = client.get("/api/admin/pending", headers=admin_headers).json()
    assert pending[0]["wallet_address"] == WALLET

    assert client.post("/api/admin/approve", json={"wallet_address": WALLET}, headers=admin_headers).json()["approved"] is True
    assert client.get(f"/api/check-approval/{WALLET.lower()}").json() == {"approved": True}

    wallets = client.get("/api/admin/wallets", headers=admin_headers).json()
    assert wallets["approved"] == [WALLET]
    assert wallets["pending"] == []


def test_wallet_balance(client):
    assert client.get("/api/wallet-balance/0x123").status_code == 400

    data = client.get(f"/api/wallet-balance/{WALLET}").json()
    assert data["source"] == "unavailable"

    client.post("/api/report-balance", json={"wallet_address": WALLET, "eth": "0.5000", "usdt": "42.00"})
    data = client.get(f"/api/wallet-balance/{WALLET}").json()
    assert data["source"] == "user-reported"
    assert data["usdt"] == "42.00"


def test_metrics_endpoint(client):
    client.post("/api/stake", json={"wallet_address": WALLET, "amount": "500", "type": "stake"})

    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "stakepool_users_total 1.0" in resp.text
    assert "stakepool_operations_total" in resp.text
