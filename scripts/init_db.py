#!/usr/bin/env python3
"""
Create the database tables and optionally the first admin account.

    python scripts/init_db.py --admin-email admin@example.com --admin-name "Admin" --admin-password secret123
"""
import argparse
import asyncio
import logging

from dotenv import load_dotenv

load_dotenv()

from backoffice.core.config import settings
from backoffice.core.database import Database
from backoffice.db.init_db import init_db
from backoffice.schemas.user import UserCreate

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)


async def main(args: argparse.Namespace) -> None:
    admin = None
    if args.admin_email:
        admin = UserCreate(
            name=args.admin_name,
            email=args.admin_email,
            password=args.admin_password,
        )

    database = Database.from_settings(settings)
    try:
        await database.connect()
        await init_db(database, admin)
    finally:
        await database.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create tables and the first admin user")
    parser.add_argument("--admin-email", help="Email of the admin to create")
    parser.add_argument("--admin-name", default="Administrator", help="Name of the admin (default: Administrator)")
    parser.add_argument("--admin-password", help="Password of the admin")
    args = parser.parse_args()

    if args.admin_email and not args.admin_password:
        parser.error("--admin-password is required with --admin-email")

    asyncio.run(main(args))
