#!/usr/bin/env python3
"""
Database management commands.
Creates or drops tables, bootstraps the admin account and seeds the category tree.
"""

import asyncio
import argparse
import logging
import sys

from marketplace.config import settings
from marketplace.database import AsyncSessionLocal, create_tables, drop_tables, close_db_connection
from marketplace.models.user import UserType
from marketplace.repositories.user import UserRepository
from marketplace.services.category import CategoryService

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def seed_admin() -> None:
    """Create the configured admin account if it does not exist."""
    async with AsyncSessionLocal() as session:
        users = UserRepository(session)
        if await users.get_by_email(settings.admin_email):
            logger.info(f"Admin {settings.admin_email} already exists")
            return

        await users.create_user({
            "name": "Administrator",
            "email": settings.admin_email,
            "password": settings.admin_password,
            "user_type": UserType.ADMIN,
            "is_verified": True,
        })
        logger.info(f"Created admin {settings.admin_email}")


async def seed_categories(force: bool) -> None:
    async with AsyncSessionLocal() as session:
        result = await CategoryService(session).initialize(force=force)
        if result.skipped:
            logger.info("Categories already present, use --force to reseed")
        else:
            logger.info(
                f"Seeded {result.categories} categories, {result.subcategories} subcategories, "
                f"{result.mini_subcategories} mini-subcategories and {result.banners} banners"
            )


async def run(args: argparse.Namespace) -> None:
    try:
        if args.command == "create-tables":
            await create_tables()
        elif args.command == "drop-tables":
            if not args.confirm:
                logger.error("Refusing to drop tables without --confirm")
                sys.exit(1)
            await drop_tables()
        elif args.command == "seed-admin":
            await seed_admin()
        elif args.command == "seed-categories":
            await seed_categories(args.force)
    finally:
        await close_db_connection()


def main():
    """Main CLI interface for database management."""
    parser = argparse.ArgumentParser(description="Marketplace database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create-tables", help="Create all tables")

    drop_parser = subparsers.add_parser("drop-tables", help="Drop all tables (not in production)")
    drop_parser.add_argument("--confirm", action="store_true", help="Confirm dropping every table")

    subparsers.add_parser("seed-admin", help="Create the admin account from ADMIN_EMAIL/ADMIN_PASSWORD")

    seed_parser = subparsers.add_parser("seed-categories", help="Load the default category tree")
    seed_parser.add_argument("--force", action="store_true", help="Replace existing categories")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        asyncio.run(run(args))
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
