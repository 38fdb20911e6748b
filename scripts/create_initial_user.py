"""Create the first administrator account."""

from __future__ import annotations

import argparse
from getpass import getpass

from sqlalchemy.exc import SQLAlchemyError

from notifyhub.application.use_cases.users import create_user, ensure_admin_role
from notifyhub.domain.result import Err
from notifyhub.infrastructure.database import SessionLocal, initialize_database


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create an administrator for NotifyHub.")
    parser.add_argument("--name", default="Administrator", help="Full name of the user")
    parser.add_argument("--email", default="admin@example.com", help="Sign-in email")
    parser.add_argument(
        "--password",
        default=None,
        help="Password; prompted interactively when omitted",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    password = args.password or getpass("Password: ")
    if not password:
        raise SystemExit("A password is required.")

    initialize_database()

    with SessionLocal() as session:
        try:
            role = ensure_admin_role(session)
            result = create_user(
                session, name=args.name, email=args.email, password=password, role_name=role.name
            )
        except SQLAlchemyError as exc:
            session.rollback()
            raise SystemExit(f"Could not store the user: {exc}") from exc

    if isinstance(result, Err):
        raise SystemExit(f"Could not create the user: {result.error.message}")
    user = result.value
    print(f"User created:\n  ID: {user.id}\n  Name: {user.name}\n  Email: {user.email}")


if __name__ == "__main__":
    main()
