"""
Create an admin account in the configured database.

Usage:
    python scripts/create_admin.py --username admin --email admin@example.com
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portfolio_backend.auth import hash_password
from portfolio_backend.config import get_settings
from portfolio_backend.db import DuplicateRecordError
from portfolio_backend.dependencies import get_db_client
from portfolio_backend.records import AdminRecord, new_id

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a portfolio admin account")
    parser.add_argument("--username", required=True, help="Unique admin username")
    parser.add_argument("--email", required=True, help="Login email (stored lower-cased)")
    parser.add_argument(
        "--password",
        help="Password; prompted for when omitted so it stays out of shell history",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    settings = get_settings()
    if not settings.database_url or settings.use_in_memory_backends:
        logger.error("No persistent database configured; set DATABASE_URL and disable in-memory backends")
        return 2

    username = args.username.strip()
    email = args.email.strip().lower()
    password = args.password if args.password is not None else getpass.getpass("Password: ")
    if not username or not email:
        logger.error("Username and email must not be empty")
        return 2
    if len(password) < MIN_PASSWORD_LENGTH:
        logger.error("Password must be at least %d characters", MIN_PASSWORD_LENGTH)
        return 2

    db = get_db_client()
    if db.find_admin(username, email):
        logger.error("An admin with that username or email already exists")
        return 1
    try:
        admin = db.create_admin(
            AdminRecord(
                id=new_id(),
                username=username,
                email=email,
                password_hash=hash_password(password),
            )
        )
    except DuplicateRecordError:
        logger.error("An admin with that username or email already exists")
        return 1

    logger.info("Created admin %s (%s)", admin.username, admin.id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
