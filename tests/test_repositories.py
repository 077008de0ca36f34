"""Repository tests against an in-memory SQLite database."""

import unittest
from datetime import timedelta
from typing import get_type_hints
from unittest.mock import MagicMock

from venio.core.clock import utcnow
from venio.core.errors import ConflictError, NotFoundError
from venio.models import Permission, RefreshToken, User, UserRole
from venio.repositories import (
    PermissionRepository,
    RefreshTokenRepository,
    RoleRepository,
    UserRepository,
    UserRoleRepository,
)

from tests.helpers import create_user, make_session_factory, role_id


class RepositoryTestCase(unittest.TestCase):

    def setUp(self) -> None:
        self.db = make_session_factory()()

    def tearDown(self) -> None:
        self.db.close()


class TestPermissionRepository(RepositoryTestCase):

    def test_delete_blocked_while_granted_to_role(self) -> None:
        repo = PermissionRepository()
        permission = repo.get_by_name(self.db, "content:read")
        with self.assertRaises(ConflictError):
            repo.delete(self.db, permission)
        self.assertIsNotNone(repo.get_by_name(self.db, "content:read"))

    def test_delete_unreferenced_permission(self) -> None:
        repo = PermissionRepository()
        permission = repo.create(self.db, "reports:export", "Export reports")
        repo.delete(self.db, permission)
        self.assertIsNone(repo.get_by_name(self.db, "reports:export"))

    def test_assign_to_role_is_idempotent(self) -> None:
        repo = PermissionRepository()
        permission = repo.create(self.db, "reports:export")
        guest = role_id(self.db, "guest")
        self.assertTrue(repo.assign_to_role(self.db, guest, permission.id))
        self.assertFalse(repo.assign_to_role(self.db, guest, permission.id))
        self.assertEqual(repo.count_roles(self.db, permission.id), 1)

    def test_remove_from_role_missing_raises(self) -> None:
        repo = PermissionRepository()
        permission = repo.get_by_name(self.db, "settings:write")
        with self.assertRaises(NotFoundError):
            repo.remove_from_role(self.db, role_id(self.db, "guest"), permission.id)

    def test_effective_permissions_are_deduplicated(self) -> None:
        # user and guest both grant users:read and content:read
        user = create_user(self.db, "dana", roles=["user", "guest"])
        names = [p.name for p in PermissionRepository().get_by_user_id(self.db, user.id)]
        self.assertEqual(
            names,
            ["content:read", "content:write", "settings:read", "users:read"],
        )

    def test_list_returns_total_and_page(self) -> None:
        permissions, total = PermissionRepository().list(self.db, limit=5, offset=0)
        self.assertEqual(total, 16)
        self.assertEqual(len(permissions), 5)
        self.assertEqual(permissions[0].name, "audit:read")


class TestRoleRepository(RepositoryTestCase):

    def test_delete_blocked_while_assigned(self) -> None:
        create_user(self.db, "erin", roles=["moderator"])
        repo = RoleRepository()
        with self.assertRaises(ConflictError):
            repo.delete(self.db, repo.get_by_name(self.db, "moderator"))

    def test_delete_unassigned_role_drops_grants(self) -> None:
        repo = RoleRepository()
        role = repo.create(self.db, "editor", "Edits content")
        content_write = PermissionRepository().get_by_name(self.db, "content:write")
        PermissionRepository().assign_to_role(self.db, role.id, content_write.id)
        repo.delete(self.db, role)
        self.assertIsNone(repo.get_by_name(self.db, "editor"))
        self.assertEqual(PermissionRepository().count_roles(self.db, content_write.id), 2)

    def test_get_permissions_for_role(self) -> None:
        names = [p.name for p in RoleRepository().get_permissions(self.db, role_id(self.db, "guest"))]
        self.assertEqual(names, ["content:read", "settings:read", "users:read"])

    def test_count_users(self) -> None:
        create_user(self.db, "fred", roles=["user"])
        create_user(self.db, "gina", roles=["user", "admin"])
        repo = RoleRepository()
        self.assertEqual(repo.count_users(self.db, role_id(self.db, "user")), 2)
        self.assertEqual(repo.count_users(self.db, role_id(self.db, "guest")), 0)


class TestUserRoleRepository(RepositoryTestCase):

    def test_assign_is_idempotent(self) -> None:
        user = create_user(self.db, "hank")
        repo = UserRoleRepository()
        admin = role_id(self.db, "admin")
        self.assertTrue(repo.assign_role(self.db, user.id, admin))
        self.assertFalse(repo.assign_role(self.db, user.id, admin))
        self.assertEqual([r.name for r in repo.get_user_roles(self.db, user.id)], ["admin"])

    def test_assign_unknown_user_or_role_raises(self) -> None:
        user = create_user(self.db, "iris")
        repo = UserRoleRepository()
        with self.assertRaises(NotFoundError):
            repo.assign_role(self.db, 9999, role_id(self.db, "user"))
        with self.assertRaises(NotFoundError):
            repo.assign_role(self.db, user.id, 9999)

    def test_remove_missing_assignment_raises(self) -> None:
        user = create_user(self.db, "jack")
        with self.assertRaises(NotFoundError):
            UserRoleRepository().remove_role(self.db, user.id, role_id(self.db, "admin"))

    def test_has_role_and_permission(self) -> None:
        user = create_user(self.db, "kate", roles=["moderator"])
        repo = UserRoleRepository()
        self.assertTrue(repo.has_role(self.db, user.id, "moderator"))
        self.assertFalse(repo.has_role(self.db, user.id, "admin"))
        self.assertTrue(repo.has_permission(self.db, user.id, "content:moderate"))
        self.assertFalse(repo.has_permission(self.db, user.id, "users:delete"))

    def test_list_assignments(self) -> None:
        user = create_user(self.db, "liam", roles=["guest", "user"])
        rows = UserRoleRepository().list_assignments(self.db)
        self.assertEqual(
            [(r[0], r[1], r[3]) for r in rows],
            [(user.id, "liam@example.com", "guest"), (user.id, "liam@example.com", "user")],
        )


class TestUserRepository(RepositoryTestCase):

    def test_delete_removes_join_rows_and_tokens(self) -> None:
        user = create_user(self.db, "mona", roles=["user"])
        RefreshTokenRepository().create(
            self.db, user.id, "a" * 64, utcnow() + timedelta(days=1)
        )
        UserRepository().delete(self.db, user)
        self.assertEqual(self.db.query(UserRole).count(), 0)
        self.assertEqual(self.db.query(RefreshToken).count(), 0)
        # roles and permissions are untouched
        self.assertEqual(self.db.query(Permission).count(), 16)

    def test_list_orders_by_id(self) -> None:
        first = create_user(self.db, "nick")
        second = create_user(self.db, "olga")
        repo = UserRepository()
        self.assertEqual([u.id for u in repo.list(self.db, 10, 0)], [first.id, second.id])
        self.assertEqual([u.id for u in repo.list(self.db, 1, 1)], [second.id])
        self.assertEqual(repo.count(self.db), 2)


class TestRefreshTokenRepository(RepositoryTestCase):

    def test_revoke_all_and_delete_expired(self) -> None:
        user = create_user(self.db, "pete")
        repo = RefreshTokenRepository()
        now = utcnow()
        repo.create(self.db, user.id, "1" * 64, now + timedelta(days=1))
        repo.create(self.db, user.id, "2" * 64, now - timedelta(days=1))

        self.assertEqual(repo.revoke_all_for_user(self.db, user.id), 2)
        self.assertEqual(repo.revoke_all_for_user(self.db, user.id), 0)

        self.assertEqual(repo.delete_expired(self.db, now=now), 1)
        self.assertIsNotNone(repo.get_by_hash(self.db, "1" * 64))
        self.assertIsNone(repo.get_by_hash(self.db, "2" * 64))

    def test_get_by_hash_for_update_locks_row(self) -> None:
        db = MagicMock()
        query = db.query.return_value.filter.return_value
        RefreshTokenRepository().get_by_hash(db, "1" * 64, for_update=True)
        query.with_for_update.assert_called_once_with()
        query.with_for_update.return_value.first.assert_called_once_with()

        db.reset_mock()
        RefreshTokenRepository().get_by_hash(db, "1" * 64)
        query.with_for_update.assert_not_called()


class TestRepositoryAnnotations(unittest.TestCase):
    """Repositories define a list() method; later annotations still mean builtins.list."""

    def test_return_annotations_resolve(self) -> None:
        self.assertEqual(
            get_type_hints(PermissionRepository.get_by_user_id)["return"], list[Permission]
        )
        self.assertEqual(
            get_type_hints(RoleRepository.get_permissions)["return"], list[Permission]
        )
        self.assertEqual(get_type_hints(UserRepository.list)["return"], list[User])
