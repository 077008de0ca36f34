"""
Create a user (e.g. the first admin). Run from project root:
  python -m venio.scripts.create_user EMAIL USERNAME PASSWORD [--role ROLE]
Example:
  python -m venio.scripts.create_user admin@example.com admin 'your-secure-password' --role admin
"""
import argparse
import sys

from pydantic import ValidationError as PydanticValidationError

from venio.core.config import get_settings
from venio.core.database import SessionLocal
from venio.core.errors import ServiceError
from venio.schemas.user import UserCreate
from venio.services import role_service, user_service


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Venio user from the command line.")
    parser.add_argument("email", help="Email address (login)")
    parser.add_argument("username", help="Username (3-50 chars)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument(
        "--role",
        default=None,
        help="Role name to assign instead of the default role (e.g. admin)",
    )
    parser.add_argument("--first-name", default="Venio")
    parser.add_argument("--last-name", default="User")
    args = parser.parse_args(argv)

    try:
        data = UserCreate(
            email=args.email,
            username=args.username,
            password=args.password,
            first_name=args.first_name,
            last_name=args.last_name,
        )
    except PydanticValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            print(f"{field}: {err['msg']}", file=sys.stderr)
        return 1

    settings = get_settings()
    db = SessionLocal()
    try:
        if args.role:
            role = role_service.get_role_by_name(db, args.role)
            user = user_service.create_user_with_roles(db, data, [role.id], settings)
            role_name = role.name
        else:
            user = user_service.register(db, data, settings)
            role_name = settings.DEFAULT_USER_ROLE or "(none)"
        print(f"Created user '{user.username}' <{user.email}> with role '{role_name}'.")
        return 0
    except ServiceError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
