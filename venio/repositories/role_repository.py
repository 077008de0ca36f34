"""Data access for roles and the permissions granted to them."""

from __future__ import annotations

from sqlalchemy.orm import Session

from venio.core.errors import ConflictError
from venio.models import Permission, Role, RolePermission, UserRole


class RoleRepository:

    def get_by_id(self, db: Session, role_id: int) -> Role | None:
        return db.query(Role).filter(Role.id == role_id).first()

    def get_by_name(self, db: Session, name: str) -> Role | None:
        return db.query(Role).filter(Role.name == name).first()

    def get_by_ids(self, db: Session, role_ids: list[int]) -> list[Role]:
        if not role_ids:
            return []
        return db.query(Role).filter(Role.id.in_(role_ids)).all()

    def create(self, db: Session, name: str, description: str = "") -> Role:
        role = Role(name=name, description=description)
        db.add(role)
        db.commit()
        db.refresh(role)
        return role

    def update(
        self,
        db: Session,
        role: Role,
        name: str | None = None,
        description: str | None = None,
    ) -> Role:
        if name is not None:
            role.name = name
        if description is not None:
            role.description = description
        db.commit()
        db.refresh(role)
        return role

    def delete(self, db: Session, role: Role) -> None:
        """Delete a role. Raises ConflictError while the role is assigned to any user."""
        if self.count_users(db, role.id) > 0:
            raise ConflictError("Cannot delete role that is assigned to users.")
        db.query(RolePermission).filter(RolePermission.role_id == role.id).delete(
            synchronize_session=False
        )
        db.delete(role)
        db.commit()

    def list(self, db: Session, limit: int, offset: int) -> tuple[list[Role], int]:
        total = db.query(Role).count()
        roles = db.query(Role).order_by(Role.name).offset(offset).limit(limit).all()
        return roles, total

    def get_permissions(self, db: Session, role_id: int) -> list[Permission]:
        return (
            db.query(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .filter(RolePermission.role_id == role_id)
            .order_by(Permission.name)
            .all()
        )

    def count_users(self, db: Session, role_id: int) -> int:
        return db.query(UserRole).filter(UserRole.role_id == role_id).count()
