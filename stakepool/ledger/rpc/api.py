# MIT License
# Copyright (c) 2025 Hashborn

from fastapi import APIRouter, Body, Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from typing import Any, Dict, Optional
import logging

from ...protocol.config.params import CURRENT_DEPLOYMENT
from ...protocol.types.common import LedgerError, UserStatus
from ..core.ledger import Ledger
from ..core.wallets import (
    APPROVAL_ALREADY_APPROVED,
    APPROVAL_ALREADY_PENDING,
    APPROVAL_REJECTED,
    is_valid_address,
)
from .auth import AdminSessions, bearer_token

logger = logging.getLogger(__name__)

app = FastAPI(title="StakePool Ledger API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[CURRENT_DEPLOYMENT.cors_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
ledger: Optional[Ledger] = None
sessions = AdminSessions(CURRENT_DEPLOYMENT.admin_username, CURRENT_DEPLOYMENT.admin_password)


# --- Request bodies (amounts stay untyped; the ledger parses and validates them) ---
class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

class StakeRequest(BaseModel):
    wallet_address: Optional[str] = None
    amount: Any = None
    type: Optional[str] = None

class ClaimRequest(BaseModel):
    wallet_address: Optional[str] = None

class WithdrawRequest(BaseModel):
    wallet_address: Optional[str] = None
    amount: Any = None

class ApprovalRequest(BaseModel):
    wallet_address: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

class WalletAction(BaseModel):
    wallet_address: Optional[str] = None

class ReportBalanceRequest(BaseModel):
    wallet_address: Optional[str] = None
    eth: Optional[str] = None
    usdt: Optional[str] = None

class WithdrawalAction(BaseModel):
    withdrawal_id: int
    reason: Optional[str] = None

class BalanceUpdate(BaseModel):
    staked_amount: Any = None
    total_earned: Any = None

class StatusUpdate(BaseModel):
    status: Optional[str] = None

class RewardGrant(BaseModel):
    amount: Any = None

class AdminTransactionRequest(BaseModel):
    wallet_address: Optional[str] = None
    type: Optional[str] = None
    amount: Any = None
    status: Optional[str] = None
    note: Optional[str] = None


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    return JSONResponse(
        status_code=exc.http_status,
        content={"success": False, "error": type(exc).__name__, "detail": str(exc)},
    )


def _ledger() -> Ledger:
    if not ledger:
        raise HTTPException(status_code=503, detail="Node not initialized")
    return ledger


def require_admin(authorization: Optional[str] = Header(default=None)):
    if not sessions.is_valid(bearer_token(authorization)):
        raise HTTPException(status_code=401, detail="Unauthorized")


def _dump(model: BaseModel) -> dict:
    return model.model_dump(mode="json")


# ═══════════════════════════════════════════════════════════════════
# ADMIN SESSION
# ═══════════════════════════════════════════════════════════════════

@app.post("/api/admin/login")
async def admin_login(body: LoginRequest):
    token = sessions.login(body.username, body.password)
    if not token:
        return JSONResponse(status_code=401, content={"success": False, "error": "Invalid credentials"})
    return {"success": True, "token": token}

@app.post("/api/admin/logout")
async def admin_logout(authorization: Optional[str] = Header(default=None)):
    sessions.logout(bearer_token(authorization))
    return {"success": True}

@app.get("/api/admin/verify")
async def admin_verify(authorization: Optional[str] = Header(default=None)):
    if sessions.is_valid(bearer_token(authorization)):
        return {"valid": True}
    return JSONResponse(status_code=401, content={"valid": False})


# ═══════════════════════════════════════════════════════════════════
# PUBLIC USER ENDPOINTS
# ═══════════════════════════════════════════════════════════════════

@app.get("/api/settings")
async def get_public_settings():
    return _ledger().public_settings()

@app.get("/api/user/{wallet_address}")
async def get_user_data(wallet_address: str):
    user = _ledger().get_user_by_wallet(wallet_address)
    if not user:
        # Unknown wallets see an empty dashboard
        return {
            "staked_amount": "0",
            "total_earned": "0",
            "claimable_rewards": "0",
            "vip_level": 0,
            "status": UserStatus.ACTIVE.value,
        }
    return _dump(user)

@app.get("/api/user/{wallet_address}/transactions")
async def get_user_transactions(wallet_address: str):
    return [_dump(tx) for tx in _ledger().transactions_for(wallet_address)]

@app.post("/api/stake")
async def stake(body: StakeRequest):
    result = _ledger().stake(body.wallet_address, body.amount, body.type)
    return {
        "success": True,
        "staked_amount": str(result.staked_amount),
        "transaction": _dump(result.transaction),
    }

@app.post("/api/claim")
async def claim(body: ClaimRequest):
    result = _ledger().claim(body.wallet_address)
    return {"success": True, "amount": str(result.amount), "transaction": _dump(result.transaction)}

@app.post("/api/withdraw/request")
async def request_withdrawal(body: WithdrawRequest):
    withdrawal = _ledger().request_withdrawal(body.wallet_address, body.amount)
    return {"success": True, "withdrawal": _dump(withdrawal)}


# ═══════════════════════════════════════════════════════════════════
# WALLET APPROVAL & BALANCES
# ═══════════════════════════════════════════════════════════════════

@app.post("/api/request-approval")
async def request_approval(body: ApprovalRequest):
    outcome = _ledger().request_approval(body.wallet_address, body.ip_address, body.user_agent)
    if outcome == APPROVAL_ALREADY_APPROVED:
        return {"success": True, "message": "Already approved", "approved": True}
    if outcome == APPROVAL_REJECTED:
        return {"success": False, "message": "Wallet was rejected"}
    if outcome == APPROVAL_ALREADY_PENDING:
        return {"success": True, "message": "Request already pending"}
    return {"success": True, "message": "Approval requested"}

@app.get("/api/check-approval/{address}")
async def check_approval(address: str):
    return {"approved": _ledger().is_wallet_approved(address)}

@app.post("/api/report-balance")
async def report_balance(body: ReportBalanceRequest):
    _ledger().report_balance(body.wallet_address, body.eth, body.usdt)
    return {"success": True}

@app.get("/api/wallet-balance/{address}")
async def get_wallet_balance(address: str):
    if not is_valid_address(address):
        raise HTTPException(status_code=400, detail="Invalid wallet address")
    return _ledger().reported_balance(address)


@app.get("/metrics")
async def get_metrics():
    """
    Prometheus metrics endpoint.
    """
    from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
    from ..observability.metrics import metrics_registry

    _ledger().refresh_metrics()
    return Response(content=generate_latest(metrics_registry), media_type=CONTENT_TYPE_LATEST)


# ═══════════════════════════════════════════════════════════════════
# ADMIN ENDPOINTS (bearer token required)
# ═══════════════════════════════════════════════════════════════════

admin = APIRouter(prefix="/api/admin", dependencies=[Depends(require_admin)])

@admin.get("/stats")
async def get_stats():
    stats = _ledger().stats()
    stats["total_staked"] = str(stats["total_staked"])
    stats["total_earnings"] = str(stats["total_earnings"])
    return stats

@admin.get("/users")
async def list_users():
    return [_dump(u) for u in _ledger().list_users()]

@admin.get("/users/{user_id}")
async def get_user(user_id: int):
    user = _ledger().get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return _dump(user)

@admin.put("/users/{user_id}")
async def update_user(user_id: int, patch: Dict[str, Any] = Body(...)):
    user = _ledger().update_user(user_id, patch)
    return {"success": True, "user": _dump(user)}

@admin.post("/users/{user_id}/balance")
async def set_user_balance(user_id: int, body: BalanceUpdate):
    user = _ledger().set_user_balance(user_id, body.staked_amount, body.total_earned)
    return {"success": True, "user": _dump(user)}

@admin.post("/users/{user_id}/status")
async def set_user_status(user_id: int, body: StatusUpdate):
    user = _ledger().set_user_status(user_id, body.status)
    return {"success": True, "user": _dump(user)}

@admin.post("/users/{user_id}/rewards")
async def add_user_rewards(user_id: int, body: RewardGrant):
    user = _ledger().add_rewards(user_id, body.amount)
    return {"success": True, "user": _dump(user)}

@admin.get("/pending")
async def get_pending_wallets():
    return [_dump(r) for r in _ledger().pending_wallet_requests()]

@admin.get("/wallets")
async def get_wallets():
    lists = _ledger().wallet_lists()
    return {
        "pending": [_dump(r) for r in lists["pending"]],
        "approved": lists["approved"],
        "rejected": lists["rejected"],
    }

@admin.post("/approve")
async def approve_wallet(body: WalletAction):
    return {"success": True, "approved": _ledger().approve_wallet(body.wallet_address)}

@admin.post("/reject")
async def reject_wallet(body: WalletAction):
    return {"success": True, "rejected": _ledger().reject_wallet(body.wallet_address)}

@admin.get("/withdrawals/pending")
async def get_pending_withdrawals():
    return [_dump(w) for w in _ledger().pending_withdrawals()]

@admin.post("/withdraw/approve")
async def approve_withdrawal(body: WithdrawalAction):
    withdrawal = _ledger().approve_withdrawal(body.withdrawal_id)
    return {"success": True, "withdrawal": _dump(withdrawal)}

@admin.post("/withdraw/reject")
async def reject_withdrawal(body: WithdrawalAction):
    withdrawal = _ledger().reject_withdrawal(body.withdrawal_id, body.reason)
    return {"success": True, "withdrawal": _dump(withdrawal)}

@admin.get("/transactions")
async def list_transactions():
    return [_dump(tx) for tx in _ledger().all_transactions()]

@admin.post("/transactions")
async def insert_transaction(body: AdminTransactionRequest):
    tx = _ledger().record_admin_transaction(body.wallet_address, body.type, body.amount, body.status, body.note)
    return {"success": True, "transaction": _dump(tx)}

@admin.get("/settings")
async def get_settings():
    return _dump(_ledger().get_settings())

@admin.put("/settings")
async def update_settings(patch: Dict[str, Any] = Body(...)):
    settings = _ledger().update_settings(patch)
    return {"success": True, "settings": _dump(settings)}

app.include_router(admin)
