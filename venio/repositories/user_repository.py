"""Data access for users."""

from __future__ import annotations

from sqlalchemy.orm import Session

from venio.models import RefreshToken, User, UserRole


class UserRepository:

    def get_by_id(self, db: Session, user_id: int) -> User | None:
        return db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, db: Session, email: str) -> User | None:
        return db.query(User).filter(User.email == email).first()

    def get_by_verification_token(self, db: Session, token: str) -> User | None:
        return db.query(User).filter(User.email_verification_token == token).first()

    def email_exists(self, db: Session, email: str) -> bool:
        return db.query(User.id).filter(User.email == email).first() is not None

    def username_exists(self, db: Session, username: str) -> bool:
        return db.query(User.id).filter(User.username == username).first() is not None

    def create(self, db: Session, user: User) -> User:
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    def update(self, db: Session, user: User) -> User:
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    def delete(self, db: Session, user: User) -> None:
        # Join rows go explicitly so deletion does not depend on FK cascades being enforced.
        db.query(UserRole).filter(UserRole.user_id == user.id).delete(synchronize_session=False)
        db.query(RefreshToken).filter(RefreshToken.user_id == user.id).delete(
            synchronize_session=False
        )
        db.delete(user)
        db.commit()

    def list(self, db: Session, limit: int, offset: int) -> list[User]:
        return db.query(User).order_by(User.id).offset(offset).limit(limit).all()

    def count(self, db: Session) -> int:
        return db.query(User).count()
