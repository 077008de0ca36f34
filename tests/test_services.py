"""Unit tests for the user, role, permission and user-role services with mocked repositories."""

import unittest
from unittest.mock import MagicMock, patch

from venio.core.errors import ConflictError, NotFoundError, ValidationError
from venio.schemas.permission import PermissionCreate
from venio.schemas.role import AdminRoleCreate, RoleUpdate
from venio.schemas.user import UserCreate, UserUpdate
from venio.services import permission_service, role_service, user_role_service, user_service


def _user_create(**overrides) -> UserCreate:
    data = {
        "email": "Quinn@Example.com",
        "username": "quinn",
        "first_name": "Quinn",
        "last_name": "Tester",
        "password": "CorrectHorse42!",
    }
    data.update(overrides)
    return UserCreate(**data)


def _settings(default_role: str = "user") -> MagicMock:
    settings = MagicMock()
    settings.DEFAULT_USER_ROLE = default_role
    return settings


class TestRegister(unittest.TestCase):
    """user_service.register."""

    @patch("venio.services.user_service.user_role_repo")
    @patch("venio.services.user_service.role_repo")
    @patch("venio.services.user_service.user_repo")
    def test_duplicate_email_rejected(
        self, user_repo: MagicMock, role_repo: MagicMock, user_role_repo: MagicMock
    ) -> None:
        user_repo.email_exists.return_value = True
        with self.assertRaises(ConflictError):
            user_service.register(MagicMock(), _user_create(), _settings())
        user_repo.create.assert_not_called()

    @patch("venio.services.user_service.user_role_repo")
    @patch("venio.services.user_service.role_repo")
    @patch("venio.services.user_service.user_repo")
    def test_duplicate_username_rejected(
        self, user_repo: MagicMock, role_repo: MagicMock, user_role_repo: MagicMock
    ) -> None:
        user_repo.email_exists.return_value = False
        user_repo.username_exists.return_value = True
        with self.assertRaises(ConflictError):
            user_service.register(MagicMock(), _user_create(), _settings())

    @patch("venio.services.user_service.hash_password", return_value="hashed")
    @patch("venio.services.user_service.user_role_repo")
    @patch("venio.services.user_service.role_repo")
    @patch("venio.services.user_service.user_repo")
    def test_creates_active_user_with_default_role(
        self,
        user_repo: MagicMock,
        role_repo: MagicMock,
        user_role_repo: MagicMock,
        _hash: MagicMock,
    ) -> None:
        db = MagicMock()
        user_repo.email_exists.return_value = False
        user_repo.username_exists.return_value = False
        user_repo.create.side_effect = lambda _db, user: user
        role_repo.get_by_name.return_value = MagicMock(id=3)

        user = user_service.register(db, _user_create(), _settings())

        self.assertEqual(user.email, "quinn@example.com")
        self.assertEqual(user.password_hash, "hashed")
        self.assertTrue(user.is_active)
        self.assertFalse(user.is_email_verified)
        role_repo.get_by_name.assert_called_once_with(db, "user")
        user_role_repo.assign_role.assert_called_once_with(db, user.id, 3)

    @patch("venio.services.user_service.hash_password", return_value="hashed")
    @patch("venio.services.user_service.user_role_repo")
    @patch("venio.services.user_service.role_repo")
    @patch("venio.services.user_service.user_repo")
    def test_empty_default_role_skips_assignment(
        self,
        user_repo: MagicMock,
        role_repo: MagicMock,
        user_role_repo: MagicMock,
        _hash: MagicMock,
    ) -> None:
        user_repo.email_exists.return_value = False
        user_repo.username_exists.return_value = False
        user_repo.create.side_effect = lambda _db, user: user
        user_service.register(MagicMock(), _user_create(), _settings(default_role=""))
        role_repo.get_by_name.assert_not_called()
        user_role_repo.assign_role.assert_not_called()


class TestCreateUserWithRoles(unittest.TestCase):

    @patch("venio.services.user_service.user_repo")
    @patch("venio.services.user_service.role_repo")
    def test_unknown_role_rejected_before_user_is_created(
        self, role_repo: MagicMock, user_repo: MagicMock
    ) -> None:
        role_repo.get_by_ids.return_value = [MagicMock(id=1)]
        with self.assertRaises(NotFoundError) as ctx:
            user_service.create_user_with_roles(MagicMock(), _user_create(), [1, 42], _settings())
        self.assertIn("42", ctx.exception.message)
        user_repo.create.assert_not_called()


class TestUserUpdatesAndListing(unittest.TestCase):

    @patch("venio.services.user_service.user_repo")
    def test_list_users_clamps_limit_and_offset(self, user_repo: MagicMock) -> None:
        db = MagicMock()
        user_repo.list.return_value = []
        user_repo.count.return_value = 0
        user_service.list_users(db, limit=500, offset=-5)
        user_repo.list.assert_called_once_with(db, 10, 0)

    @patch("venio.services.user_service.user_repo")
    def test_get_user_rejects_non_positive_id(self, user_repo: MagicMock) -> None:
        with self.assertRaises(ValidationError):
            user_service.get_user(MagicMock(), 0)
        user_repo.get_by_id.assert_not_called()

    @patch("venio.services.user_service.user_repo")
    def test_email_change_resets_verification(self, user_repo: MagicMock) -> None:
        user = MagicMock(email="old@example.com", username="quinn", is_email_verified=True)
        user_repo.get_by_id.return_value = user
        user_repo.email_exists.return_value = False
        user_repo.update.side_effect = lambda _db, u: u

        updated = user_service.update_user(MagicMock(), 1, UserUpdate(email="new@example.com"))

        self.assertEqual(updated.email, "new@example.com")
        self.assertFalse(updated.is_email_verified)
        self.assertIsNone(updated.email_verified_at)

    @patch("venio.services.user_service.user_repo")
    def test_username_taken_on_update(self, user_repo: MagicMock) -> None:
        user_repo.get_by_id.return_value = MagicMock(email="a@example.com", username="quinn")
        user_repo.username_exists.return_value = True
        with self.assertRaises(ConflictError):
            user_service.update_user(MagicMock(), 1, UserUpdate(username="taken"))
        user_repo.update.assert_not_called()


class TestChangePassword(unittest.TestCase):

    @patch("venio.services.user_service.refresh_repo")
    @patch("venio.services.user_service.verify_password", return_value=False)
    @patch("venio.services.user_service.user_repo")
    def test_wrong_current_password(
        self, user_repo: MagicMock, _verify: MagicMock, refresh_repo: MagicMock
    ) -> None:
        user_repo.get_by_id.return_value = MagicMock(id=1, password_hash="h")
        with self.assertRaises(ValidationError):
            user_service.change_password(MagicMock(), 1, "wrong", "NewPassword1!")
        refresh_repo.revoke_all_for_user.assert_not_called()

    @patch("venio.services.user_service.hash_password", return_value="new-hash")
    @patch("venio.services.user_service.refresh_repo")
    @patch("venio.services.user_service.verify_password", return_value=True)
    @patch("venio.services.user_service.user_repo")
    def test_success_revokes_refresh_tokens(
        self,
        user_repo: MagicMock,
        _verify: MagicMock,
        refresh_repo: MagicMock,
        _hash: MagicMock,
    ) -> None:
        db = MagicMock()
        user = MagicMock(id=1, password_hash="old-hash")
        user_repo.get_by_id.return_value = user
        refresh_repo.revoke_all_for_user.return_value = 2

        user_service.change_password(db, 1, "OldPassword1!", "NewPassword1!")

        self.assertEqual(user.password_hash, "new-hash")
        refresh_repo.revoke_all_for_user.assert_called_once_with(db, 1)

    @patch("venio.services.user_service.verify_password", return_value=True)
    @patch("venio.services.user_service.user_repo")
    def test_same_password_rejected(self, user_repo: MagicMock, _verify: MagicMock) -> None:
        user_repo.get_by_id.return_value = MagicMock(id=1, password_hash="h")
        with self.assertRaises(ValidationError):
            user_service.change_password(MagicMock(), 1, "SamePassword1!", "SamePassword1!")


class TestRoleService(unittest.TestCase):

    @patch("venio.services.role_service.role_repo")
    def test_list_roles_clamps_limit(self, role_repo: MagicMock) -> None:
        db = MagicMock()
        role_repo.list.return_value = ([], 0)
        role_service.list_roles(db, limit=1000, offset=0)
        role_repo.list.assert_called_with(db, 100, 0)
        role_service.list_roles(db, limit=0, offset=-1)
        role_repo.list.assert_called_with(db, 10, 0)

    @patch("venio.services.role_service.role_repo")
    def test_builtin_role_cannot_be_renamed(self, role_repo: MagicMock) -> None:
        role = MagicMock(id=1)
        role.name = "admin"
        role_repo.get_by_id.return_value = role
        with self.assertRaises(ConflictError):
            role_service.update_role(MagicMock(), 1, RoleUpdate(name="superuser"))
        role_repo.update.assert_not_called()

    @patch("venio.services.role_service.role_repo")
    def test_builtin_role_description_can_change(self, role_repo: MagicMock) -> None:
        db = MagicMock()
        role = MagicMock(id=1)
        role.name = "admin"
        role_repo.get_by_id.return_value = role
        role_service.update_role(db, 1, RoleUpdate(name="admin", description="Everything"))
        role_repo.update.assert_called_once_with(db, role, name="admin", description="Everything")

    @patch("venio.services.role_service.permission_repo")
    @patch("venio.services.role_service.role_repo")
    def test_assign_unknown_permission(self, role_repo: MagicMock, permission_repo: MagicMock) -> None:
        role_repo.get_by_id.return_value = MagicMock(id=1)
        permission_repo.get_by_id.return_value = None
        with self.assertRaises(NotFoundError):
            role_service.assign_permission_to_role(MagicMock(), 1, 99)
        permission_repo.assign_to_role.assert_not_called()

    @patch("venio.services.role_service.permission_repo")
    @patch("venio.services.role_service.role_repo")
    def test_create_with_permissions_checks_ids_first(
        self, role_repo: MagicMock, permission_repo: MagicMock
    ) -> None:
        permission_repo.get_by_ids.return_value = []
        with self.assertRaises(NotFoundError):
            role_service.create_role_with_permissions(
                MagicMock(), AdminRoleCreate(name="editor", permissions=[5])
            )
        role_repo.create.assert_not_called()

    @patch("venio.services.role_service.role_repo")
    def test_create_duplicate_role(self, role_repo: MagicMock) -> None:
        role_repo.get_by_name.return_value = MagicMock()
        with self.assertRaises(ConflictError):
            role_service.create_role(MagicMock(), AdminRoleCreate(name="Editor"))


class TestPermissionService(unittest.TestCase):

    @patch("venio.services.permission_service.permission_repo")
    def test_duplicate_name(self, permission_repo: MagicMock) -> None:
        permission_repo.get_by_name.return_value = MagicMock()
        with self.assertRaises(ConflictError):
            permission_service.create_permission(
                MagicMock(), PermissionCreate(name="users:read")
            )

    def test_name_must_be_resource_action(self) -> None:
        from pydantic import ValidationError as PydanticValidationError

        for bad in ("users", "users:", ":read", "Users read", "users:read:all"):
            with self.assertRaises(PydanticValidationError, msg=bad):
                PermissionCreate(name=bad)
        self.assertEqual(PermissionCreate(name="Reports:Export").name, "reports:export")

    @patch("venio.services.permission_service.permission_repo")
    def test_get_missing_permission(self, permission_repo: MagicMock) -> None:
        permission_repo.get_by_id.return_value = None
        with self.assertRaises(NotFoundError):
            permission_service.get_permission(MagicMock(), 3)


class TestUserRoleService(unittest.TestCase):

    @patch("venio.services.user_role_service.user_role_repo")
    def test_has_any_permission_short_circuits(self, user_role_repo: MagicMock) -> None:
        db = MagicMock()
        user_role_repo.has_permission.side_effect = [False, True, True]
        self.assertTrue(
            user_role_service.has_any_permission(
                db, 1, ["users:delete", "users:write", "users:read"]
            )
        )
        self.assertEqual(user_role_repo.has_permission.call_count, 2)

    @patch("venio.services.user_role_service.user_role_repo")
    def test_invalid_ids_rejected(self, user_role_repo: MagicMock) -> None:
        with self.assertRaises(ValidationError):
            user_role_service.assign_role(MagicMock(), 0, 1)
        with self.assertRaises(ValidationError):
            user_role_service.remove_role(MagicMock(), 1, -1)
        user_role_repo.assign_role.assert_not_called()
        user_role_repo.remove_role.assert_not_called()

    @patch("venio.services.user_role_service.user_role_repo")
    def test_role_names(self, user_role_repo: MagicMock) -> None:
        admin, user = MagicMock(), MagicMock()
        admin.name, user.name = "admin", "user"
        user_role_repo.get_user_roles.return_value = [admin, user]
        self.assertEqual(user_role_service.get_user_role_names(MagicMock(), 1), ["admin", "user"])

    @patch("venio.services.user_role_service.user_role_repo")
    def test_has_any_role(self, user_role_repo: MagicMock) -> None:
        db = MagicMock()
        user_role_repo.has_role.side_effect = lambda _db, _uid, name: name == "moderator"
        self.assertTrue(user_role_service.has_any_role(db, 1, ["admin", "moderator"]))
        self.assertFalse(user_role_service.has_any_role(db, 1, ["admin", "guest"]))
        with self.assertRaises(ValidationError):
            user_role_service.has_role(db, 1, "")


class TestLookupsByName(unittest.TestCase):

    @patch("venio.services.user_service.user_repo")
    def test_user_by_email_is_case_insensitive(self, user_repo: MagicMock) -> None:
        db = MagicMock()
        user_repo.get_by_email.return_value = MagicMock(id=4)
        self.assertEqual(user_service.get_user_by_email(db, " Quinn@Example.COM ").id, 4)
        user_repo.get_by_email.assert_called_once_with(db, "quinn@example.com")

    @patch("venio.services.user_service.user_repo")
    def test_user_by_email_missing(self, user_repo: MagicMock) -> None:
        user_repo.get_by_email.return_value = None
        with self.assertRaises(NotFoundError):
            user_service.get_user_by_email(MagicMock(), "ghost@example.com")

    @patch("venio.services.permission_service.permission_repo")
    def test_permission_by_name(self, permission_repo: MagicMock) -> None:
        db = MagicMock()
        permission_repo.get_by_name.return_value = None
        with self.assertRaises(NotFoundError):
            permission_service.get_permission_by_name(db, "reports:export")
        with self.assertRaises(ValidationError):
            permission_service.get_permission_by_name(db, "  ")

    @patch("venio.services.role_service.role_repo")
    def test_role_by_name_strips(self, role_repo: MagicMock) -> None:
        db = MagicMock()
        role_service.get_role_by_name(db, " editor ")
        role_repo.get_by_name.assert_called_once_with(db, "editor")
