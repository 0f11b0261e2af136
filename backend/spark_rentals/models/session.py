"""Refresh session ledger model."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from spark_rentals.core.database import Base


class RefreshSession(Base):
    """One row per issued refresh token; revoked rows are kept for audit."""

    __tablename__ = "refresh_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    jti = Column(String(64), unique=True, nullable=False, index=True)
    token_hash = Column(String(64), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="refresh_sessions")

    __table_args__ = (
        Index("idx_refresh_sessions_user", "user_id"),
    )

    def __repr__(self):
        return f"<RefreshSession(id={self.id}, user_id={self.user_id}, jti='{self.jti}', revoked={self.revoked_at is not None})>"
