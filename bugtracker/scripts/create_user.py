"""
Create a user (e.g. first admin). Run from project root:
  python -m bugtracker.scripts.create_user USERNAME PASSWORD FULL_NAME EMAIL [role]
Example:
  python -m bugtracker.scripts.create_user admin your-secure-password "Site Admin" admin@example.org admin
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from bugtracker.core.database import session_scope
from bugtracker.core.errors import Conflict
from bugtracker.schemas.user import UserCreate
from bugtracker.services.users import create_user

logger = logging.getLogger(__name__)


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    parser = argparse.ArgumentParser(description="Create a bug tracker user (no registration UI).")
    parser.add_argument("username", help="Username (3-50 chars)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("full_name", help="Display name")
    parser.add_argument("email", help="Email address")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args()

    try:
        data = UserCreate(
            username=args.username.strip(),
            password=args.password,
            full_name=args.full_name.strip(),
            email=args.email.strip(),
            role=args.role,
        )
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            print(f"{field}: {err['msg']}", file=sys.stderr)
        return 1

    with session_scope() as db:
        try:
            user = create_user(db, data)
        except Conflict as e:
            print(e.message, file=sys.stderr)
            return 1
    logger.info("Created user %s with role %s", user.username, user.role)
    return 0


if __name__ == "__main__":
    sys.exit(main())
