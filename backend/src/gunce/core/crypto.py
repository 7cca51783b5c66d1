"""
Crypto primitives for the diary.

Password hashing uses Argon2id through argon2-cffi; entry content is sealed
with AES-256-GCM from the cryptography package, keyed by an Argon2id raw hash
of the entry password and a per-package salt.

The encryption package is a JSON object with exactly four base64 fields:
``salt``, ``nonce``, ``tag`` and ``ciphertext``. The package KDF parameters are
fixed module constants: changing them would make stored packages undecryptable.
"""

import base64
import binascii
import json
import os
import re
import secrets
from typing import Any, Dict, Optional

from argon2 import PasswordHasher
from argon2.exceptions import HashingError as Argon2HashingError
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from argon2.low_level import Type, hash_secret_raw
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .config import config
from .exceptions import DecryptionError, HashingError
from .logging import get_logger

logger = get_logger(__name__)

SALT_BYTES = 16
NONCE_BYTES = 12
TAG_BYTES = 16
KEY_BYTES = 32

# Package key derivation (Argon2id); part of the stored format
PACKAGE_KDF_TIME_COST = 3
PACKAGE_KDF_MEMORY_COST = 65536  # KiB
PACKAGE_KDF_PARALLELISM = 1

PACKAGE_FIELDS = ("salt", "nonce", "tag", "ciphertext")

_SPECIAL_CHARS = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


def _password_hasher(
    memory_cost: Optional[int] = None,
    time_cost: Optional[int] = None,
    parallelism: Optional[int] = None,
) -> PasswordHasher:
    return PasswordHasher(
        time_cost=time_cost or config.ARGON2_TIME_COST,
        memory_cost=memory_cost or config.ARGON2_MEMORY_COST,
        parallelism=parallelism or config.ARGON2_PARALLELISM,
    )


def hash_password(
    password: str,
    *,
    memory_cost: Optional[int] = None,
    time_cost: Optional[int] = None,
    parallelism: Optional[int] = None,
) -> str:
    """
    Hash a login password with Argon2id.

    The returned PHC string embeds salt and parameters, so verification needs
    nothing else.

    Raises:
        HashingError: If the KDF fails internally
    """
    hasher = _password_hasher(memory_cost, time_cost, parallelism)
    try:
        return hasher.hash(password)
    except Argon2HashingError as e:
        logger.error(f"Password hashing failed: {e}")
        raise HashingError() from e


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a password against a stored Argon2 hash.

    Returns False on mismatch and on malformed hashes.
    """
    if not password_hash:
        return False
    try:
        # Parameters come from the hash itself.
        return PasswordHasher().verify(password_hash, password)
    except VerifyMismatchError:
        return False
    except (InvalidHashError, VerificationError) as e:
        logger.warning(f"Stored password hash could not be verified: {type(e).__name__}")
        return False


def _derive_key(password: str, salt: bytes) -> bytes:
    return hash_secret_raw(
        secret=password.encode("utf-8"),
        salt=salt,
        time_cost=PACKAGE_KDF_TIME_COST,
        memory_cost=PACKAGE_KDF_MEMORY_COST,
        parallelism=PACKAGE_KDF_PARALLELISM,
        hash_len=KEY_BYTES,
        type=Type.ID,
    )


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def encrypt_text(plaintext: str, password: str) -> str:
    """
    Encrypt text under a password.

    A fresh salt and a fresh nonce are drawn for every call, so encrypting the
    same text twice never yields the same package.

    Returns:
        JSON string with base64 ``salt``, ``nonce``, ``tag`` and ``ciphertext``
    """
    salt = os.urandom(SALT_BYTES)
    nonce = os.urandom(NONCE_BYTES)
    key = _derive_key(password, salt)

    sealed = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
    ciphertext, tag = sealed[:-TAG_BYTES], sealed[-TAG_BYTES:]

    package = {
        "salt": _b64(salt),
        "nonce": _b64(nonce),
        "tag": _b64(tag),
        "ciphertext": _b64(ciphertext),
    }
    return json.dumps(package)


def parse_package(package: str | Dict[str, Any]) -> Dict[str, bytes]:
    """Decode an encryption package into raw bytes per field."""
    try:
        data = json.loads(package) if isinstance(package, str) else dict(package)
        decoded = {name: base64.b64decode(data[name], validate=True) for name in PACKAGE_FIELDS}
    except (ValueError, KeyError, TypeError, binascii.Error) as e:
        raise DecryptionError() from e

    if len(decoded["salt"]) != SALT_BYTES or len(decoded["nonce"]) != NONCE_BYTES or len(decoded["tag"]) != TAG_BYTES:
        raise DecryptionError()
    return decoded


def decrypt_text(package: str | Dict[str, Any], password: str) -> str:
    """
    Open an encryption package.

    Raises:
        DecryptionError: Wrong password, tampered or malformed package.
    """
    parts = parse_package(package)
    key = _derive_key(password, parts["salt"])
    try:
        plaintext = AESGCM(key).decrypt(parts["nonce"], parts["ciphertext"] + parts["tag"], None)
    except InvalidTag as e:
        logger.warning("Entry decryption failed: authentication tag mismatch")
        raise DecryptionError() from e
    return plaintext.decode("utf-8")


def validate_password_strength(password: str) -> Dict[str, Any]:
    """Score a password on length and character classes."""
    checks = {
        "length": len(password) >= 8,
        "has_lower": bool(re.search(r"[a-z]", password)),
        "has_upper": bool(re.search(r"[A-Z]", password)),
        "has_number": bool(re.search(r"\d", password)),
        "has_special": bool(_SPECIAL_CHARS.search(password)),
    }
    score = sum(checks.values())
    if score < 3:
        strength = "weak"
    elif score < 5:
        strength = "medium"
    else:
        strength = "strong"

    return {"score": score, "strength": strength, "checks": checks, "is_valid": score >= 3}


def generate_secure_token(nbytes: int = 32) -> str:
    """Random URL-safe token, e.g. for an initial password or a secret key."""
    return secrets.token_urlsafe(nbytes)
