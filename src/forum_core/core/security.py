"""Password hashing and avatar key helpers."""
from __future__ import annotations

import hashlib

import bcrypt


def hash_password(password: str, rounds: int) -> str:
    """Return a salted bcrypt hash of ``password`` using ``rounds`` as cost factor."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored bcrypt hash.

    Malformed stored hashes count as a mismatch.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("ascii"))
    except ValueError:
        return False


def email_hash(email: str) -> str:
    """Return the avatar lookup key for an email address.

    This is the Gravatar convention: MD5 of the trimmed, lower-cased address.
    """
    normalized = email.strip().lower()
    return hashlib.md5(normalized.encode("utf-8")).hexdigest()
