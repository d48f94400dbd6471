"""
Idempotent admin bootstrap script.
Creates an admin identity, or resets the password, role and active flag of the
existing identity with the same username or email. Never prints the password.

Usage (from backend/):
  python -m scripts.create_admin --username admin --email admin@college.edu --full-name "Site Admin"
The password is read from --password or ADMIN_BOOTSTRAP_PASSWORD.
"""
import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

# Ensure backend root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from auth import hash_password, validate_password_strength
from database import get_db_context
from models.admin import new_admin_document
from models.enums import AdminRole

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create or reset a College CMS admin")
    parser.add_argument("--username", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--full-name", required=True)
    parser.add_argument("--password", default=os.getenv("ADMIN_BOOTSTRAP_PASSWORD"))
    parser.add_argument(
        "--role",
        default=AdminRole.SUPER_ADMIN.value,
        choices=[role.value for role in AdminRole],
    )
    return parser.parse_args(argv)


async def upsert_admin(db, username: str, email: str, password: str, full_name: str, role: str) -> str:
    """Returns "created" or "updated"."""
    now = datetime.now(timezone.utc)
    existing = await db.admins.find_one({"$or": [{"username": username}, {"email": email.lower()}]})
    if existing:
        await db.admins.update_one(
            {"_id": existing["_id"]},
            {"$set": {
                "password": hash_password(password),
                "fullName": full_name,
                "role": role,
                "isActive": True,
                "updatedAt": now,
            }},
        )
        return "updated"

    await db.admins.insert_one(
        new_admin_document(username, email, hash_password(password), full_name, AdminRole(role), now)
    )
    return "created"


async def main(argv=None) -> int:
    args = parse_args(argv)
    if not args.password:
        print("A password is required (--password or ADMIN_BOOTSTRAP_PASSWORD)")
        return 1

    is_valid, message = validate_password_strength(args.password)
    if not is_valid:
        print(message)
        return 1

    async with get_db_context() as db:
        action = await upsert_admin(db, args.username, args.email, args.password, args.full_name, args.role)
    print(f"Admin {args.username}: {action}")
    return 0


def run() -> None:
    logging.basicConfig(level=logging.INFO)
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
