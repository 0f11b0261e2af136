"""Request authentication: bearer extraction and access-token verification"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from fastapi.responses import JSONResponse
from starlette.requests import HTTPConnection

from spark_rentals.config import Settings, settings
from spark_rentals.core.exceptions import AuthenticationError, BaseAPIException, InvalidTokenError
from spark_rentals.core.responses import exception_response
from spark_rentals.core.roles import Role
from spark_rentals.core.tokens import Principal, TokenCodec, token_codec

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"
LEGACY_TOKEN_COOKIE = "token"


class AuthBackend(ABC):
    """Turns a presented bearer token into a Principal."""

    name = "abstract"

    @abstractmethod
    def authenticate(self, token: str) -> Principal:
        """Raises InvalidTokenError when the token is not accepted."""


class ProductionBackend(AuthBackend):
    """Accepts only cryptographically valid access tokens."""

    name = "jwt"

    def __init__(self, codec: TokenCodec) -> None:
        self.codec = codec

    def authenticate(self, token: str) -> Principal:
        return Principal.from_claims(self.codec.verify_access(token))


class DemoBackend(ProductionBackend):
    """
    Local demo escape hatch: a fixed sentinel token maps to a fixed,
    least-privileged principal. Never selected in production.
    """

    name = "demo"

    def __init__(self, codec: TokenCodec, sentinel: str, principal: Principal) -> None:
        super().__init__(codec)
        self.sentinel = sentinel
        self.principal = principal

    def authenticate(self, token: str) -> Principal:
        if self.sentinel and token == self.sentinel:
            return self.principal
        return super().authenticate(token)


def get_auth_backend(config: Settings, codec: Optional[TokenCodec] = None) -> AuthBackend:
    """Pick the backend once at startup from configuration."""
    codec = codec or TokenCodec.from_settings(config)
    if config.AUTH_BACKEND.strip().lower() == "demo":
        if config.is_production:
            logger.error("AUTH_BACKEND=demo ignored: demo tokens are never accepted in production")
            return ProductionBackend(codec)
        logger.warning("Demo auth backend enabled; the demo sentinel token is accepted")
        return DemoBackend(
            codec,
            sentinel=config.DEMO_TOKEN,
            principal=Principal(id=0, email=config.DEMO_USER_EMAIL, role=Role.CUSTOMER),
        )
    return ProductionBackend(codec)


auth_backend: AuthBackend = get_auth_backend(settings, token_codec)


@dataclass
class AuthResult:
    """Outcome of the authentication gate."""

    ok: bool
    principal: Optional[Principal] = None
    error: Optional[BaseAPIException] = None

    @property
    def response(self) -> Optional[JSONResponse]:
        return exception_response(self.error) if self.error else None


def get_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def get_cookie_token(conn: HTTPConnection) -> Optional[str]:
    """Access cookie, falling back to the legacy cookie name."""
    return conn.cookies.get(ACCESS_TOKEN_COOKIE) or conn.cookies.get(LEGACY_TOKEN_COOKIE) or None


def extract_token(conn: HTTPConnection) -> Optional[str]:
    """Authorization header first, then cookies."""
    return get_bearer_token(conn.headers.get("authorization")) or get_cookie_token(conn)


def verify_token(token: Optional[str], backend: Optional[AuthBackend] = None) -> AuthResult:
    if not token:
        return AuthResult(ok=False, error=AuthenticationError("Token missing"))
    backend = backend or auth_backend
    try:
        principal = backend.authenticate(token)
    except InvalidTokenError as exc:
        logger.debug("Access token rejected: %s", exc)
        return AuthResult(ok=False, error=AuthenticationError("Invalid or expired token"))
    return AuthResult(ok=True, principal=principal)


def require_auth(conn: HTTPConnection, backend: Optional[AuthBackend] = None) -> AuthResult:
    """
    Authenticate a request from its bearer credential.

    Args:
        conn: Incoming request
        backend: Override for the startup-selected backend

    Returns:
        AuthResult with the principal, or a 401 denial
    """
    return verify_token(extract_token(conn), backend)
