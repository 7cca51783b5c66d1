"""
Password gate request/response schemas.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class PasswordSetRequest(BaseModel):
    password: str = Field(..., min_length=1)
    current_password: Optional[str] = None


class PasswordClearRequest(BaseModel):
    current_password: str = Field(..., min_length=1)


class UnlockRequest(BaseModel):
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class PasswordStrengthRequest(BaseModel):
    password: str


class PasswordStrengthResponse(BaseModel):
    score: int
    strength: str
    checks: Dict[str, bool]
    is_valid: bool


class GateStatus(BaseModel):
    enabled: bool
    locked: bool
    failed_attempts: int
    max_attempts: int
