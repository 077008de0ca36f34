"""Data access for permissions and role-permission grants."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from venio.core.errors import ConflictError, NotFoundError
from venio.models import Permission, RolePermission, UserRole


class PermissionRepository:

    def get_by_id(self, db: Session, permission_id: int) -> Permission | None:
        return db.query(Permission).filter(Permission.id == permission_id).first()

    def get_by_name(self, db: Session, name: str) -> Permission | None:
        return db.query(Permission).filter(Permission.name == name).first()

    def get_by_ids(self, db: Session, permission_ids: list[int]) -> list[Permission]:
        if not permission_ids:
            return []
        return db.query(Permission).filter(Permission.id.in_(permission_ids)).all()

    def create(self, db: Session, name: str, description: str = "") -> Permission:
        permission = Permission(name=name, description=description)
        db.add(permission)
        db.commit()
        db.refresh(permission)
        return permission

    def update(
        self,
        db: Session,
        permission: Permission,
        name: str | None = None,
        description: str | None = None,
    ) -> Permission:
        if name is not None:
            permission.name = name
        if description is not None:
            permission.description = description
        db.commit()
        db.refresh(permission)
        return permission

    def count_roles(self, db: Session, permission_id: int) -> int:
        return (
            db.query(RolePermission)
            .filter(RolePermission.permission_id == permission_id)
            .count()
        )

    def delete(self, db: Session, permission: Permission) -> None:
        """
        Delete a permission.

        Raises ConflictError while any role still grants it; the check runs here
        rather than relying on the foreign key, which cascades.
        """
        if self.count_roles(db, permission.id) > 0:
            raise ConflictError("Cannot delete permission that is assigned to roles.")
        db.delete(permission)
        db.commit()

    def list(self, db: Session, limit: int, offset: int) -> tuple[list[Permission], int]:
        total = db.query(Permission).count()
        permissions = (
            db.query(Permission)
            .order_by(Permission.name)
            .offset(offset)
            .limit(limit)
            .all()
        )
        return permissions, total

    def get_by_user_id(self, db: Session, user_id: int) -> list[Permission]:
        """Effective permissions: union over all of the user's roles, deduplicated."""
        return (
            db.query(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(UserRole, UserRole.role_id == RolePermission.role_id)
            .filter(UserRole.user_id == user_id)
            .distinct()
            .order_by(Permission.name)
            .all()
        )

    def assign_to_role(self, db: Session, role_id: int, permission_id: int) -> bool:
        """Grant a permission to a role. Returns False if it was already granted."""
        existing = db.get(RolePermission, (role_id, permission_id))
        if existing is not None:
            return False
        db.add(RolePermission(role_id=role_id, permission_id=permission_id))
        try:
            db.commit()
        except IntegrityError:
            # Concurrent grant of the same pair; the row exists either way.
            db.rollback()
            return False
        return True

    def remove_from_role(self, db: Session, role_id: int, permission_id: int) -> None:
        deleted = (
            db.query(RolePermission)
            .filter(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id,
            )
            .delete(synchronize_session=False)
        )
        if deleted == 0:
            db.rollback()
            raise NotFoundError("Permission not assigned to role.")
        db.commit()
