"""Security utilities - password hashing, token digests, origin checks"""

import hashlib
import hmac
import uuid
from typing import Optional
from urllib.parse import urlsplit

import bcrypt


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password

    Returns:
        bool: True if password matches
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt

    Args:
        password: Plain text password

    Returns:
        str: Hashed password
    """
    return bcrypt.hashpw(
        password.encode('utf-8'),
        bcrypt.gensalt()
    ).decode('utf-8')


def hash_token(token: str) -> str:
    """One-way digest of a full token string, as stored in the session ledger."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def token_hash_matches(token: str, stored_hash: str) -> bool:
    return hmac.compare_digest(hash_token(token), stored_hash or "")


def new_jti() -> str:
    """Fresh refresh-session identifier"""
    return str(uuid.uuid4())


def is_same_origin(origin: Optional[str], host: Optional[str]) -> bool:
    """
    Compare a request's declared Origin against its Host header.

    Requests that omit either header are treated as same-origin; an Origin
    that cannot be parsed is not.
    """
    if not origin or not host:
        return True
    try:
        parsed = urlsplit(origin)
    except ValueError:
        return False
    if not parsed.scheme or not parsed.netloc:
        return False
    scheme = parsed.scheme.lower()
    return _without_default_port(parsed.netloc, scheme) == _without_default_port(host.strip(), scheme)


_DEFAULT_PORTS = {"http": ":80", "https": ":443"}


def _without_default_port(netloc: str, scheme: str) -> str:
    netloc = netloc.lower()
    suffix = _DEFAULT_PORTS.get(scheme)
    if suffix and netloc.endswith(suffix):
        return netloc[: -len(suffix)]
    return netloc
