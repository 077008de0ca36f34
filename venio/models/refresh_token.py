"""ORM model for issued refresh tokens (stored as SHA-256 digests only)."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from venio.models.base import Base


class RefreshToken(Base):
    """
    One issued refresh token.

    The opaque token is never stored; token_hash is its SHA-256 hex digest.
    A token is usable while revoked_at is NULL and expires_at is in the future.
    """

    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token_hash = Column(String(64), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
