"""Login, refresh-token rotation and logout."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from prometheus_client import Counter
from sqlalchemy.orm import Session

from spark_rentals.core.exceptions import AuthenticationError, InvalidTokenError
from spark_rentals.core.roles import parse_role
from spark_rentals.core.security import hash_token, new_jti, token_hash_matches
from spark_rentals.core.tokens import Principal, TokenCodec, token_codec
from spark_rentals.models.session import RefreshSession
from spark_rentals.models.user import User
from spark_rentals.services.session_ledger import SessionLedger, as_utc, session_ledger, utcnow
from spark_rentals.services.user_service import user_service

logger = logging.getLogger(__name__)

SESSION_EVENTS = Counter(
    "spark_session_events_total",
    "Session lifecycle outcomes",
    ["event", "outcome"],
)


@dataclass
class IssuedTokens:
    """A freshly minted access/refresh pair and its ledger row."""

    principal: Principal
    access_token: str
    refresh_token: str
    session: RefreshSession


class SessionService:
    """
    Refresh session state machine: absent -> active -> revoked.

    Every refresh token is single use. Rotation revokes the presented row
    with a conditional update and creates its successor in the same
    transaction, so two callers holding the same token cannot both win.
    """

    def __init__(self, codec: TokenCodec, ledger: SessionLedger) -> None:
        self.codec = codec
        self.ledger = ledger

    def _issue(self, db: Session, principal: Principal) -> IssuedTokens:
        jti = new_jti()
        refresh_token = self.codec.sign_refresh(principal, jti)
        access_token = self.codec.sign_access(principal)
        record = self.ledger.create(
            db,
            user_id=principal.id,
            jti=jti,
            token_hash=hash_token(refresh_token),
            expires_at=utcnow() + self.codec.refresh_ttl,
        )
        return IssuedTokens(
            principal=principal,
            access_token=access_token,
            refresh_token=refresh_token,
            session=record,
        )

    def login(self, db: Session, email: str, password: str) -> Tuple[User, IssuedTokens]:
        """
        Authenticate credentials and open a new refresh session

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
        """
        try:
            user = user_service.authenticate_user(db, email, password)
        except AuthenticationError:
            SESSION_EVENTS.labels("login", "denied").inc()
            raise

        principal = Principal(id=user.id, email=user.email, role=parse_role(user.role))
        issued = self._issue(db, principal)
        db.commit()

        SESSION_EVENTS.labels("login", "ok").inc()
        logger.info(f"Session opened for user id={user.id}")
        return user, issued

    def refresh(self, db: Session, refresh_token: Optional[str]) -> IssuedTokens:
        """
        Rotate a refresh token

        Args:
            db: Database session
            refresh_token: Raw token from the refresh cookie

        Returns:
            New token pair

        Raises:
            AuthenticationError: For every failure; the message never says
                more than which generic check failed

        Token and ledger row share the same expiry, so a token that has
        simply aged out fails the signature check first and reports
        "Invalid or expired refresh token". "Refresh token expired" is only
        reached when the ledger row's expiry is earlier than the token's.
        """
        if not refresh_token:
            raise self._deny("Refresh token missing")

        try:
            payload = self.codec.verify_refresh(refresh_token)
        except InvalidTokenError:
            raise self._deny("Invalid or expired refresh token")

        stored = self.ledger.find_by_jti(db, payload["jti"])
        if stored is None or stored.revoked_at is not None:
            raise self._deny("Refresh token revoked")

        if as_utc(stored.expires_at) <= utcnow():
            raise self._deny("Refresh token expired")

        if not token_hash_matches(refresh_token, stored.token_hash):
            # Same jti, different token: treat as replay and kill the session.
            self.ledger.revoke(db, stored.id)
            db.commit()
            logger.warning(f"Refresh token hash mismatch; session id={stored.id} revoked")
            raise self._deny("Refresh token mismatch", outcome="replay")

        if not self.ledger.revoke(db, stored.id):
            # Lost the race against a concurrent rotation of the same token.
            db.rollback()
            raise self._deny("Refresh token revoked")

        try:
            issued = self._issue(db, Principal.from_claims(payload))
            db.commit()
        except Exception:
            db.rollback()
            raise

        SESSION_EVENTS.labels("refresh", "ok").inc()
        logger.info(f"Refresh session id={stored.id} rotated to id={issued.session.id}")
        return issued

    def logout(self, db: Session, refresh_token: Optional[str]) -> bool:
        """
        Revoke the caller's refresh session if the token verifies.

        Returns:
            True if a live ledger row was revoked
        """
        if not refresh_token:
            return False
        try:
            payload = self.codec.verify_refresh(refresh_token)
        except InvalidTokenError:
            logger.debug("Ignoring unverifiable refresh token on logout")
            return False

        revoked = self.ledger.revoke_by_jti(db, payload["jti"])
        db.commit()
        SESSION_EVENTS.labels("logout", "revoked" if revoked else "noop").inc()
        return revoked > 0

    @staticmethod
    def _deny(message: str, outcome: str = "denied") -> AuthenticationError:
        SESSION_EVENTS.labels("refresh", outcome).inc()
        return AuthenticationError(message)


session_service = SessionService(token_codec, session_ledger)
