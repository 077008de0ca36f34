"""Seed built-in roles, permissions and role grants.

Revision ID: 20260105100000
Revises: 20260105000000
Create Date: 2026-01-05

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20260105100000"
down_revision: Union[str, None] = "20260105000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Frozen copy of the seed data as of this revision.
ROLES = [
    ("admin", "Administrator with full access"),
    ("moderator", "Moderator with moderation capabilities"),
    ("user", "Regular user with basic access"),
    ("guest", "Guest with read-only access"),
]

PERMISSIONS = [
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
]

GRANTS = {
    "moderator": ["users:read", "content:read", "content:moderate", "audit:read"],
    "user": ["users:read", "content:read", "content:write"],
    "guest": ["users:read", "content:read", "settings:read"],
}


def upgrade() -> None:
    conn = op.get_bind()
    for name, description in ROLES:
        conn.execute(
            sa.text(
                "INSERT INTO roles (name, description) VALUES (:name, :description) "
                "ON CONFLICT (name) DO NOTHING"
            ),
            {"name": name, "description": description},
        )
    for name, description in PERMISSIONS:
        conn.execute(
            sa.text(
                "INSERT INTO permissions (name, description) VALUES (:name, :description) "
                "ON CONFLICT (name) DO NOTHING"
            ),
            {"name": name, "description": description},
        )

    conn.execute(
        sa.text(
            "INSERT INTO role_permissions (role_id, permission_id) "
            "SELECT r.id, p.id FROM roles r CROSS JOIN permissions p "
            "WHERE r.name = 'admin' "
            "ON CONFLICT (role_id, permission_id) DO NOTHING"
        )
    )
    for role_name, permission_names in GRANTS.items():
        conn.execute(
            sa.text(
                "INSERT INTO role_permissions (role_id, permission_id) "
                "SELECT r.id, p.id FROM roles r CROSS JOIN permissions p "
                "WHERE r.name = :role_name AND p.name IN :permission_names "
                "ON CONFLICT (role_id, permission_id) DO NOTHING"
            ).bindparams(sa.bindparam("permission_names", expanding=True)),
            {"role_name": role_name, "permission_names": permission_names},
        )


def downgrade() -> None:
    conn = op.get_bind()
    role_names = [name for name, _ in ROLES]
    permission_names = [name for name, _ in PERMISSIONS]
    conn.execute(
        sa.text(
            "DELETE FROM role_permissions WHERE role_id IN "
            "(SELECT id FROM roles WHERE name IN :role_names)"
        ).bindparams(sa.bindparam("role_names", expanding=True)),
        {"role_names": role_names},
    )
    conn.execute(
        sa.text("DELETE FROM permissions WHERE name IN :names").bindparams(
            sa.bindparam("names", expanding=True)
        ),
        {"names": permission_names},
    )
    conn.execute(
        sa.text("DELETE FROM roles WHERE name IN :names").bindparams(
            sa.bindparam("names", expanding=True)
        ),
        {"names": role_names},
    )
