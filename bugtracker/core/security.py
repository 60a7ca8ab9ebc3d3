"""Password hashing and verification (salted bcrypt-pbkdf digests stored as ``salt:digest``)."""

import hmac
import os

import bcrypt

from bugtracker.core.config import settings

# Salt and digest sizes in bytes; both are stored hex-encoded.
SALT_BYTES = 16
DIGEST_BYTES = 32

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 50
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128


def _digest(plain_password: str, salt: bytes, rounds: int) -> bytes:
    return bcrypt.kdf(
        password=plain_password.encode("utf-8"),
        salt=salt,
        desired_key_bytes=DIGEST_BYTES,
        rounds=rounds,
        ignore_few_rounds=True,
    )


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords.

    The password must be non-empty (ValueError otherwise); request schemas
    enforce a minimum length before it gets here.

    A fresh random salt is drawn on every call, so hashing the same password
    twice yields two different strings that both verify.
    """
    if not plain_password:
        raise ValueError("password must be non-empty")
    salt = os.urandom(SALT_BYTES)
    digest = _digest(plain_password, salt, rounds or settings.PASSWORD_HASH_ROUNDS)
    return f"{salt.hex()}:{digest.hex()}"


def verify_password(plain_password: str, stored: str, rounds: int | None = None) -> bool:
    """Verify a plain password against a stored ``salt:digest`` value.

    Malformed stored values return False instead of raising.
    """
    if not plain_password or not stored:
        return False
    salt_hex, sep, digest_hex = stored.partition(":")
    if not sep or not salt_hex or not digest_hex:
        return False
    try:
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
        actual = _digest(plain_password, salt, rounds or settings.PASSWORD_HASH_ROUNDS)
    except (ValueError, TypeError):
        return False
    return hmac.compare_digest(actual, expected)
