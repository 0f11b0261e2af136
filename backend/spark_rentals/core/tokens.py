"""Signed access/refresh tokens"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from spark_rentals.config import Settings, settings
from spark_rentals.core.exceptions import InvalidTokenError
from spark_rentals.core.roles import Role, parse_role

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True)
class Principal:
    """Identity derived from a verified token; lives for one request."""

    id: int
    email: str
    role: Optional[Role] = None

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "Principal":
        return cls(id=claims["id"], email=claims["email"], role=parse_role(claims.get("role")))

    def to_claims(self) -> Dict[str, Any]:
        claims: Dict[str, Any] = {"id": self.id, "email": self.email}
        if self.role is not None:
            claims["role"] = self.role.value
        return claims


class TokenCodec:
    """
    Sign and verify the two bearer token kinds.

    Each kind has its own secret and carries a ``tokenType`` claim, so a
    token of one kind never verifies as the other.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
    ) -> None:
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    @classmethod
    def from_settings(cls, config: Settings) -> "TokenCodec":
        return cls(
            access_secret=config.access_secret,
            refresh_secret=config.refresh_secret,
            algorithm=config.JWT_ALGORITHM,
            access_ttl=timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_ttl=timedelta(days=config.REFRESH_TOKEN_EXPIRE_DAYS),
        )

    def _encode(self, claims: Dict[str, Any], secret: str, ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        to_encode = dict(claims)
        to_encode.update({
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
        })
        return jwt.encode(to_encode, secret, algorithm=self.algorithm)

    def _decode(self, token: str, secret: str, expected_type: str) -> Dict[str, Any]:
        if not token or not isinstance(token, str):
            raise InvalidTokenError("Token missing")
        try:
            payload = jwt.decode(token, secret, algorithms=[self.algorithm])
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        if not isinstance(payload, dict):
            raise InvalidTokenError("Malformed payload")
        if payload.get("tokenType") != expected_type:
            raise InvalidTokenError("Unexpected token type")

        user_id = payload.get("id")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise InvalidTokenError("Malformed subject")
        if not isinstance(payload.get("email"), str):
            raise InvalidTokenError("Malformed subject")
        return payload

    def sign_access(self, principal: Principal, expires_delta: Optional[timedelta] = None) -> str:
        claims = principal.to_claims()
        claims["tokenType"] = ACCESS_TOKEN_TYPE
        return self._encode(claims, self.access_secret, expires_delta or self.access_ttl)

    def sign_refresh(
        self,
        principal: Principal,
        jti: str,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        if not jti:
            raise ValueError("Refresh tokens require a jti")
        claims = principal.to_claims()
        claims.update({"tokenType": REFRESH_TOKEN_TYPE, "jti": jti})
        return self._encode(claims, self.refresh_secret, expires_delta or self.refresh_ttl)

    def verify_access(self, token: str) -> Dict[str, Any]:
        """
        Decode and verify an access token

        Raises:
            InvalidTokenError: bad signature, expired, malformed, or not an access token
        """
        return self._decode(token, self.access_secret, ACCESS_TOKEN_TYPE)

    def verify_refresh(self, token: str) -> Dict[str, Any]:
        payload = self._decode(token, self.refresh_secret, REFRESH_TOKEN_TYPE)
        jti = payload.get("jti")
        if not isinstance(jti, str) or not jti:
            raise InvalidTokenError("Missing jti")
        return payload


token_codec = TokenCodec.from_settings(settings)
