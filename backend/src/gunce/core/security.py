"""
Password gate and access tokens.

The gate holds the desktop lock state and counts failed unlock attempts.
HTTP sessions unlock once and then present a signed bearer token on
mutating calls.
"""

import asyncio
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from pydantic import BaseModel

from . import crypto
from .config import BaseConfig, config as default_config
from .exceptions import AppLockedError, ValidationError
from .logging import get_logger
from .settings_store import SettingsStore

logger = get_logger(__name__)

TOKEN_SUBJECT = "diary"


class TokenData(BaseModel):
    subject: Optional[str] = None
    session_id: Optional[str] = None
    expires_at: Optional[datetime] = None


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
    settings: Optional[BaseConfig] = None,
) -> str:
    settings = settings or default_config
    to_encode: Dict[str, Any] = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(
    token: str,
    settings: Optional[BaseConfig] = None,
    session_id: Optional[str] = None,
) -> TokenData:
    """
    Decode and check an access token.

    When session_id is given the token must have been issued for that gate
    session; tokens from before a lock or a password change are refused.
    """
    settings = settings or default_config
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        raise AppLockedError("Access token is invalid or expired") from e

    subject: Optional[str] = payload.get("sub")
    if subject != TOKEN_SUBJECT:
        raise AppLockedError("Access token is invalid or expired")
    token_session: Optional[str] = payload.get("sid")
    if session_id is not None and token_session != session_id:
        raise AppLockedError("Access token is no longer valid")
    exp = payload.get("exp")
    expires_at = datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None
    return TokenData(subject=subject, session_id=token_session, expires_at=expires_at)


class PasswordGate:
    """Lock state, attempt counting and password management for the diary."""

    def __init__(self, store: SettingsStore, settings: Optional[BaseConfig] = None):
        self.store = store
        self.settings = settings or default_config
        self.failed_attempts = 0
        self._locked = store.password_protection
        # Tokens carry the session they were issued in
        self._session_id = secrets.token_urlsafe(16)

    @property
    def enabled(self) -> bool:
        return self.store.password_protection

    @property
    def is_locked(self) -> bool:
        return self.enabled and self._locked

    @property
    def attempts_exhausted(self) -> bool:
        return self.failed_attempts >= self.settings.MAX_PASSWORD_ATTEMPTS

    def _new_session(self) -> None:
        self._session_id = secrets.token_urlsafe(16)

    def lock(self) -> None:
        if self.enabled:
            self._locked = True
            self._new_session()
            logger.info("Diary locked")

    async def set_password(self, password: str, current_password: Optional[str] = None) -> None:
        """
        Set or replace the login password.

        Replacing an existing password requires the current one.
        """
        strength = crypto.validate_password_strength(password)
        if not strength["is_valid"]:
            raise ValidationError("password", f"Password is too weak ({strength['strength']})")

        if self.store.password_hash is not None:
            if current_password is None or not await self.verify(current_password):
                raise ValidationError("current_password", "Current password is incorrect")

        password_hash = await asyncio.to_thread(
            crypto.hash_password,
            password,
            memory_cost=self.settings.ARGON2_MEMORY_COST,
            time_cost=self.settings.ARGON2_TIME_COST,
            parallelism=self.settings.ARGON2_PARALLELISM,
        )
        self.store.set_password_hash(password_hash)
        self._new_session()
        self._locked = False
        self.failed_attempts = 0
        logger.info("Password protection enabled")

    async def clear_password(self, current_password: str) -> None:
        if not await self.verify(current_password):
            raise ValidationError("current_password", "Current password is incorrect")
        self.store.set_password_hash(None)
        self._new_session()
        self._locked = False
        logger.info("Password protection disabled")

    async def verify(self, password: str) -> bool:
        password_hash = self.store.password_hash
        if password_hash is None:
            return False
        return await asyncio.to_thread(crypto.verify_password, password, password_hash)

    async def unlock(self, password: str) -> str:
        """
        Verify the password, unlock the gate and issue an access token.

        Raises:
            AppLockedError: Wrong password, no password set, or too many attempts
        """
        if not self.enabled:
            raise AppLockedError("Password protection is not enabled")
        if self.attempts_exhausted:
            logger.warning("Unlock refused: maximum password attempts reached")
            raise AppLockedError("Too many failed attempts")

        if not await self.verify(password):
            self.failed_attempts += 1
            logger.warning(
                f"Wrong password - attempt {self.failed_attempts}/{self.settings.MAX_PASSWORD_ATTEMPTS}"
            )
            raise AppLockedError(
                f"Wrong password ({self.failed_attempts}/{self.settings.MAX_PASSWORD_ATTEMPTS})"
            )

        self.failed_attempts = 0
        self._locked = False
        logger.info("Diary unlocked")
        return create_access_token({"sub": TOKEN_SUBJECT, "sid": self._session_id}, settings=self.settings)

    def ensure_unlocked(self, access_token: Optional[str] = None, *, require_token: bool = False) -> None:
        """
        Raise AppLockedError unless mutations are currently allowed.

        A valid access token from the current gate session grants access;
        locking or changing the password starts a new session. Without a token
        the in-process lock state decides, unless the caller (an HTTP session)
        must present one.
        """
        if not self.enabled:
            return
        if access_token:
            verify_token(access_token, self.settings, session_id=self._session_id)
            return
        if require_token or self._locked:
            raise AppLockedError()
