"""Built-in roles, permissions and grants, plus an idempotent loader."""

from sqlalchemy.orm import Session

from venio.models.permission import Permission, RolePermission
from venio.models.role import Role

SEED_ROLES: tuple[tuple[str, str], ...] = (
    ("admin", "Administrator with full access"),
    ("moderator", "Moderator with moderation capabilities"),
    ("user", "Regular user with basic access"),
    ("guest", "Guest with read-only access"),
)

SEED_PERMISSIONS: tuple[tuple[str, str], ...] = (
    ("users:read", "Read user information"),
    ("users:write", "Create and edit users"),
    ("users:delete", "Delete users"),
    ("roles:read", "Read roles"),
    ("roles:write", "Create and edit roles"),
    ("roles:delete", "Delete roles"),
    ("permissions:read", "Read permissions"),
    ("permissions:write", "Create and edit permissions"),
    ("permissions:delete", "Delete permissions"),
    ("content:read", "Read content"),
    ("content:write", "Create and edit content"),
    ("content:delete", "Delete content"),
    ("content:moderate", "Moderate content"),
    ("settings:read", "Read application settings"),
    ("settings:write", "Modify application settings"),
    ("audit:read", "Read audit logs"),
)

# admin gets every permission
SEED_GRANTS: dict[str, tuple[str, ...]] = {
    "admin": tuple(name for name, _ in SEED_PERMISSIONS),
    "moderator": ("users:read", "content:read", "content:moderate", "audit:read"),
    "user": ("users:read", "content:read", "content:write"),
    "guest": ("users:read", "content:read", "settings:read"),
}


def seed_rbac(db: Session) -> None:
    """Insert missing built-in roles, permissions and grants. Existing rows are kept."""
    roles = {r.name: r for r in db.query(Role).all()}
    for name, description in SEED_ROLES:
        if name not in roles:
            roles[name] = Role(name=name, description=description)
            db.add(roles[name])

    permissions = {p.name: p for p in db.query(Permission).all()}
    for name, description in SEED_PERMISSIONS:
        if name not in permissions:
            permissions[name] = Permission(name=name, description=description)
            db.add(permissions[name])
    db.flush()

    for role_name, permission_names in SEED_GRANTS.items():
        role_id = roles[role_name].id
        for permission_name in permission_names:
            permission_id = permissions[permission_name].id
            if db.get(RolePermission, (role_id, permission_id)) is None:
                db.add(RolePermission(role_id=role_id, permission_id=permission_id))
    db.commit()
