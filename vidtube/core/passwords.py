"""Password Hashing — bcrypt hash and verify.

Invariants:
    - Plaintext never persisted or logged; only the bcrypt hash is stored
    - Passwords longer than 72 bytes are rejected (bcrypt truncation boundary)

Design Decisions:
    - Synchronous functions: callers run them via run_in_threadpool so the event loop
      is not blocked by key stretching
"""

import bcrypt

from vidtube.core.errors import InputValidationError

BCRYPT_MAX_BYTES = 72


def hash_password(password: str, rounds: int = 10) -> str:
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise InputValidationError(
            "Password must be at most 72 bytes", fields=["password"],
        )
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
