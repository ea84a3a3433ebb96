# barbershop/admin.py
"""Provision admin accounts; the API itself has no sign-up."""

import argparse
import logging

from sqlmodel import Session, select

from .auth import hash_password
from .config import get_settings
from .db import engine, init_db
from .logging_utils import configure_logging
from .models import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 72  # bcrypt ignores anything longer


def create_admin(session: Session, email: str, password: str) -> User:
    """Create the admin, or reset the password of an existing account."""
    email = email.strip().lower()
    if not email:
        raise ValueError("email is required")
    if not MIN_PASSWORD_LENGTH <= len(password) <= MAX_PASSWORD_LENGTH:
        raise ValueError(
            f"password must be {MIN_PASSWORD_LENGTH}-{MAX_PASSWORD_LENGTH} characters"
        )

    user = session.exec(select(User).where(User.email == email)).first()
    if user is None:
        user = User(email=email, password_hash=hash_password(password), role="admin")
        logger.info("created admin %s", email)
    else:
        user.password_hash = hash_password(password)
        user.role = "admin"
        logger.info("updated admin %s", email)

    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create or update a barbershop admin.")
    parser.add_argument("email")
    parser.add_argument("password")
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level)
    init_db()
    with Session(engine) as session:
        try:
            create_admin(session, args.email, args.password)
        except ValueError as exc:
            parser.error(str(exc))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
