"""Data access for user-role assignments and the role/permission membership checks."""

from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from venio.core.errors import NotFoundError
from venio.models import Permission, Role, RolePermission, User, UserRole


class UserRoleRepository:

    def get_user_roles(self, db: Session, user_id: int) -> list[Role]:
        return (
            db.query(Role)
            .join(UserRole, UserRole.role_id == Role.id)
            .filter(UserRole.user_id == user_id)
            .order_by(Role.name)
            .all()
        )

    def assign_role(self, db: Session, user_id: int, role_id: int) -> bool:
        """
        Assign a role to a user. Returns False if it was already assigned.

        Raises NotFoundError if the user or the role does not exist.
        """
        if db.query(User.id).filter(User.id == user_id).first() is None:
            raise NotFoundError("User not found.")
        if db.query(Role.id).filter(Role.id == role_id).first() is None:
            raise NotFoundError("Role not found.")

        if db.get(UserRole, (user_id, role_id)) is not None:
            return False
        db.add(UserRole(user_id=user_id, role_id=role_id))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            return False
        return True

    def remove_role(self, db: Session, user_id: int, role_id: int) -> None:
        deleted = (
            db.query(UserRole)
            .filter(UserRole.user_id == user_id, UserRole.role_id == role_id)
            .delete(synchronize_session=False)
        )
        if deleted == 0:
            db.rollback()
            raise NotFoundError("Role not assigned to user.")
        db.commit()

    def has_role(self, db: Session, user_id: int, role_name: str) -> bool:
        row = (
            db.query(UserRole.role_id)
            .join(Role, Role.id == UserRole.role_id)
            .filter(UserRole.user_id == user_id, Role.name == role_name)
            .first()
        )
        return row is not None

    def has_permission(self, db: Session, user_id: int, permission_name: str) -> bool:
        """Join user_roles -> role_permissions -> permissions for the acting user."""
        row = (
            db.query(Permission.id)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(UserRole, UserRole.role_id == RolePermission.role_id)
            .filter(UserRole.user_id == user_id, Permission.name == permission_name)
            .first()
        )
        return row is not None

    def list_assignments(self, db: Session) -> list[tuple[int, str, int, str, datetime]]:
        """All assignments as (user_id, user_email, role_id, role_name, assigned_at)."""
        rows = (
            db.query(User.id, User.email, Role.id, Role.name, UserRole.assigned_at)
            .join(UserRole, UserRole.user_id == User.id)
            .join(Role, Role.id == UserRole.role_id)
            .order_by(User.id, Role.name)
            .all()
        )
        return [tuple(row) for row in rows]
