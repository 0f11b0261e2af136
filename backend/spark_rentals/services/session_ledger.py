"""Persistent ledger of issued refresh sessions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from spark_rentals.models.session import RefreshSession


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if dt is None:
        return None
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt


class SessionLedger:
    """
    CRUD over refresh_sessions.

    Methods flush but never commit; the caller owns the transaction.
    Revocation is a conditional update so concurrent callers cannot both
    revoke the same live row.
    """

    @staticmethod
    def create(
        db: Session,
        *,
        user_id: int,
        jti: str,
        token_hash: str,
        expires_at: datetime,
    ) -> RefreshSession:
        record = RefreshSession(
            user_id=user_id,
            jti=jti,
            token_hash=token_hash,
            expires_at=expires_at,
            revoked_at=None,
        )
        db.add(record)
        db.flush()
        return record

    @staticmethod
    def find_by_jti(db: Session, jti: str) -> Optional[RefreshSession]:
        return db.query(RefreshSession).filter(RefreshSession.jti == jti).first()

    @staticmethod
    def revoke(db: Session, session_id: int) -> bool:
        """
        Mark a row revoked if it is still live.

        Returns:
            True when this call revoked the row, False when it was already
            revoked (or does not exist).
        """
        result = db.execute(
            update(RefreshSession)
            .where(RefreshSession.id == session_id, RefreshSession.revoked_at.is_(None))
            .values(revoked_at=utcnow())
        )
        return result.rowcount == 1

    @staticmethod
    def revoke_by_jti(db: Session, jti: str) -> int:
        result = db.execute(
            update(RefreshSession)
            .where(RefreshSession.jti == jti, RefreshSession.revoked_at.is_(None))
            .values(revoked_at=utcnow())
        )
        return result.rowcount

    @staticmethod
    def active_for_user(db: Session, user_id: int) -> List[RefreshSession]:
        now = utcnow()
        rows = (
            db.query(RefreshSession)
            .filter(RefreshSession.user_id == user_id, RefreshSession.revoked_at.is_(None))
            .order_by(RefreshSession.created_at.desc(), RefreshSession.id.desc())
            .all()
        )
        return [row for row in rows if as_utc(row.expires_at) > now]


session_ledger = SessionLedger()
