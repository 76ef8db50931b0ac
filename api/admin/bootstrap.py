"""
Provision the default admin account.

Run once against a fresh database:

    python -m admin.bootstrap

Credentials come from ADMIN_USERNAME / ADMIN_PASSWORD (defaults: admin / admin123).
"""

from __future__ import annotations

import asyncio
import logging
import os

from auth import security
from core import db

from . import repository

DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "admin123"

logger = logging.getLogger(__name__)


async def create_default_admin() -> bool:
    """
    Create the admin if missing. Returns True when a row was inserted.
    """
    username = os.environ.get("ADMIN_USERNAME", DEFAULT_USERNAME).strip() or DEFAULT_USERNAME
    password = os.environ.get("ADMIN_PASSWORD", DEFAULT_PASSWORD).strip() or DEFAULT_PASSWORD

    if await repository.get_admin_by_username(username) is not None:
        logger.info("admin_exists username=%s", username)
        return False

    await repository.create_admin(username=username, password_hash=security.hash_password(password))
    logger.info("admin_created username=%s", username)
    if password == DEFAULT_PASSWORD:
        logger.warning("admin_default_password username=%s: change it after first login", username)
    return True


async def main() -> None:
    await db.init_pool()
    try:
        await create_default_admin()
    finally:
        await db.close_pool()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    asyncio.run(main())
