"""Password hashing and signed session cookies."""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import time

PASSWORD_HASH_ALGO = "pbkdf2_sha256"
PASSWORD_HASH_ITERATIONS = 200_000


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password cannot be empty")
    salt = secrets.token_hex(16)
    dk = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        PASSWORD_HASH_ITERATIONS,
    )
    digest = base64.urlsafe_b64encode(dk).decode("utf-8")
    return f"{PASSWORD_HASH_ALGO}${PASSWORD_HASH_ITERATIONS}${salt}${digest}"


def verify_password(password: str, stored_hash: str | None) -> bool:
    if not stored_hash:
        return False
    try:
        algo, iterations_str, salt, digest = stored_hash.split("$", 3)
        iterations = int(iterations_str)
    except ValueError:
        return False
    if algo != PASSWORD_HASH_ALGO:
        return False
    dk = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations,
    )
    computed = base64.urlsafe_b64encode(dk).decode("utf-8")
    return hmac.compare_digest(computed, digest)


def _sign(secret: str, payload: str) -> str:
    return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def create_session_cookie(user_id: str, secret: str, duration_minutes: int) -> str:
    """Return ``<user_id>:<expires_at>:<signature>``."""
    expires_at = int(time.time()) + int(duration_minutes) * 60
    payload = f"{user_id}:{expires_at}"
    return f"{payload}:{_sign(secret, payload)}"


def read_session_cookie(cookie_value: str | None, secret: str) -> str | None:
    """Return the user id from a valid, unexpired cookie, else None."""
    if not cookie_value:
        return None
    try:
        user_id, expires_str, signature = cookie_value.rsplit(":", 2)
        expires_at = int(expires_str)
    except ValueError:
        return None
    if not hmac.compare_digest(signature, _sign(secret, f"{user_id}:{expires_str}")):
        return None
    if expires_at < int(time.time()):
        return None
    return user_id or None
