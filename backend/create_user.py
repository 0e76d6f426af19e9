#!/usr/bin/env python
"""Create a standalone operator account (admin or cashier).

    python create_user.py till1@cornershop.com --role cashier

Every account is its own owner scope: a cashier does not share another
account's catalog, and without the admin role it cannot add products to its
own. Self-registration through /auth/register always yields an admin. The
password is prompted for.
"""
import argparse
import getpass
import logging
import sys

from voicepos.core.config import settings
from voicepos.core.logging import setup_logging
from voicepos.core.security import get_password_hash
from voicepos.db.init_db import init_db
from voicepos.db.session import SessionLocal
from voicepos.models.user import ROLE_ADMIN, ROLE_CASHIER, User

logger = logging.getLogger("create_user")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("email")
    parser.add_argument("--role", choices=(ROLE_ADMIN, ROLE_CASHIER), default=ROLE_CASHIER)
    parser.add_argument("--name", default=None)
    args = parser.parse_args(argv)

    password = getpass.getpass("Password: ")
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        logger.error(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters")
        return 1

    init_db()
    db = SessionLocal()
    try:
        email = args.email.lower()
        if db.query(User).filter(User.email == email).first():
            logger.error(f"{email} already exists")
            return 1

        user = User(
            email=email,
            hashed_password=get_password_hash(password),
            name=args.name,
            role=args.role,
        )
        db.add(user)
        db.commit()
        logger.info(f"Created {user.role} account {user.email} (id={user.id})")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    sys.exit(main())
