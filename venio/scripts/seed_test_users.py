"""
Seed one account per built-in role for local testing. Safe to run repeatedly;
existing accounts are left as they are.

  python -m venio.scripts.seed_test_users
"""

import logging
import sys

from sqlalchemy.orm import Session

from venio.core.config import Settings, get_settings
from venio.core.database import SessionLocal
from venio.core.errors import ServiceError
from venio.core.logging_config import configure_logging
from venio.models.seed import seed_rbac
from venio.repositories import UserRepository
from venio.schemas.user import UserCreate
from venio.services import role_service, user_service

logger = logging.getLogger(__name__)

TEST_USERS = (
    ("admin", "admin@example.com", "AdminPassword123!", "Admin", "User"),
    ("moderator", "moderator@example.com", "ModeratorPassword123!", "Moderator", "User"),
    ("user", "user@example.com", "UserPassword123!", "Regular", "User"),
    ("guest", "guest@example.com", "GuestPassword123!", "Guest", "User"),
)


def seed(db: Session, settings: Settings) -> int:
    """Create missing test users; returns how many were created."""
    seed_rbac(db)
    users = UserRepository()
    created = 0
    for role_name, email, password, first_name, last_name in TEST_USERS:
        if users.email_exists(db, email):
            logger.info("Test user already exists: %s", email)
            continue
        role = role_service.get_role_by_name(db, role_name)
        data = UserCreate(
            email=email,
            username=f"test_{role_name}",
            password=password,
            first_name=first_name,
            last_name=last_name,
        )
        user = user_service.create_user_with_roles(db, data, [role.id], settings)
        user.is_email_verified = True
        users.update(db, user)
        logger.info("Created test user %s with role %s", email, role_name)
        created += 1
    return created


def main() -> int:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    if settings.APP_ENV == "prod":
        logger.error("Refusing to seed test users with APP_ENV=prod")
        return 1
    db = SessionLocal()
    try:
        created = seed(db, settings)
        logger.info("Seeding completed: created=%s", created)
        return 0
    except ServiceError as e:
        logger.error("Seeding failed: %s", e.message)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
