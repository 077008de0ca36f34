"""Data access for stored refresh tokens."""

from datetime import datetime

from sqlalchemy.orm import Session

from venio.core.clock import utcnow
from venio.models import RefreshToken


class RefreshTokenRepository:

    def create(
        self,
        db: Session,
        user_id: int,
        token_hash: str,
        expires_at: datetime,
    ) -> RefreshToken:
        row = RefreshToken(user_id=user_id, token_hash=token_hash, expires_at=expires_at)
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    def get_by_hash(
        self, db: Session, token_hash: str, for_update: bool = False
    ) -> RefreshToken | None:
        """Look up a token by digest; for_update locks the row until commit."""
        query = db.query(RefreshToken).filter(RefreshToken.token_hash == token_hash)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def revoke(self, db: Session, row: RefreshToken) -> None:
        if row.revoked_at is None:
            row.revoked_at = utcnow()
            db.commit()

    def revoke_all_for_user(self, db: Session, user_id: int) -> int:
        count = (
            db.query(RefreshToken)
            .filter(RefreshToken.user_id == user_id, RefreshToken.revoked_at.is_(None))
            .update({RefreshToken.revoked_at: utcnow()}, synchronize_session=False)
        )
        db.commit()
        return count

    def delete_expired(self, db: Session, now: datetime | None = None) -> int:
        cutoff = now or utcnow()
        count = (
            db.query(RefreshToken)
            .filter(RefreshToken.expires_at < cutoff)
            .delete(synchronize_session=False)
        )
        db.commit()
        return count
