"""
API routes for the password gate.

Unlocking returns a bearer token that mutating routes require while
password protection is enabled.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from ...core import crypto
from ...core.security import PasswordGate
from ...schemas.auth import (
    GateStatus,
    PasswordClearRequest,
    PasswordSetRequest,
    PasswordStrengthRequest,
    PasswordStrengthResponse,
    TokenResponse,
    UnlockRequest,
)
from ..deps import get_gate

router = APIRouter()

GateDep = Annotated[PasswordGate, Depends(get_gate)]


def _status(gate: PasswordGate) -> GateStatus:
    return GateStatus(
        enabled=gate.enabled,
        locked=gate.is_locked,
        failed_attempts=gate.failed_attempts,
        max_attempts=gate.settings.MAX_PASSWORD_ATTEMPTS,
    )


@router.get("/status", response_model=GateStatus)
async def gate_status(gate: GateDep) -> GateStatus:
    return _status(gate)


@router.post("/password", response_model=GateStatus)
async def set_password(request: PasswordSetRequest, gate: GateDep) -> GateStatus:
    """Enable password protection or change the password (current password required)."""
    await gate.set_password(request.password, current_password=request.current_password)
    return _status(gate)


@router.delete("/password", response_model=GateStatus)
async def clear_password(request: PasswordClearRequest, gate: GateDep) -> GateStatus:
    """Disable password protection."""
    await gate.clear_password(request.current_password)
    return _status(gate)


@router.post("/unlock", response_model=TokenResponse)
async def unlock(request: UnlockRequest, gate: GateDep) -> TokenResponse:
    access_token = await gate.unlock(request.password)
    return TokenResponse(access_token=access_token)


@router.post("/lock", response_model=GateStatus)
async def lock(gate: GateDep) -> GateStatus:
    gate.lock()
    return _status(gate)


@router.post("/password-strength", response_model=PasswordStrengthResponse)
async def password_strength(request: PasswordStrengthRequest) -> PasswordStrengthResponse:
    return PasswordStrengthResponse(**crypto.validate_password_strength(request.password))
