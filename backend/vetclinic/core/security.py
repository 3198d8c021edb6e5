"""Module: security."""

import hashlib
import hmac
import os
import threading
from secrets import token_urlsafe
from typing import Dict

# Shared password hashing format/version marker.
PASSWORD_SCHEME = "pbkdf2_sha256"
PASSWORD_ITERATIONS = 390000

# Opaque bearer tokens issued at login, mapped to user ids.
# Lives in process memory; a restart logs everyone out.
TOKENS: Dict[str, int] = {}
# Sync routes run in a threadpool; every access to TOKENS holds this lock.
_TOKENS_LOCK = threading.Lock()


def hash_password(password: str) -> str:
    """
    Create a PBKDF2-SHA256 password hash string.

    Stored format:
      pbkdf2_sha256$<iterations>$<salt_hex>$<hash_hex>
    """
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        PASSWORD_ITERATIONS,
    )
    return f"{PASSWORD_SCHEME}${PASSWORD_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str | None) -> bool:
    if not stored or not stored.startswith(f"{PASSWORD_SCHEME}$"):
        return False

    try:
        _, iterations_raw, salt_hex, hash_hex = stored.split("$", 3)
        iterations = int(iterations_raw)
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(hash_hex)
    except ValueError:
        return False

    computed = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        iterations,
    )
    return hmac.compare_digest(computed, expected)


def issue_token(user_id: int) -> str:
    token = token_urlsafe(32)
    with _TOKENS_LOCK:
        TOKENS[token] = user_id
    return token


def resolve_token(token: str) -> int | None:
    with _TOKENS_LOCK:
        return TOKENS.get(token)


def revoke_token(token: str) -> None:
    with _TOKENS_LOCK:
        TOKENS.pop(token, None)


def revoke_tokens_for(user_id: int) -> None:
    with _TOKENS_LOCK:
        for token in [t for t, uid in TOKENS.items() if uid == user_id]:
            del TOKENS[token]
