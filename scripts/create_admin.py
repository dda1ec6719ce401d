#!/usr/bin/env python3
"""
Create the first admin account so someone can log in and add residents.

Usage:
  python scripts/create_admin.py admin@society.pk "Society Admin" <password>
  # Requires DATABASE_URL and SECRET_KEY in .env (or export)
"""
import argparse
import asyncio
import os
import sys

from dotenv import load_dotenv

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
load_dotenv(os.path.join(_root, ".env"))

# Add project root to path
sys.path.insert(0, _root)

from app.database import close_db, session_scope
from app.models.enums import UserRole
from app.schemas.user import UserCreate
from app.services.user_service import UserService


async def create_admin(email: str, name: str, password: str) -> None:
    try:
        async with session_scope() as db:
            user = await UserService.create_user(
                db,
                UserCreate(email=email, name=name, password=password, role=UserRole.ADMIN),
            )
        print(f"SUCCESS: admin {user.email} created ({user.id})")
    finally:
        await close_db()


def main():
    parser = argparse.ArgumentParser(description="Bootstrap an admin account")
    parser.add_argument("email")
    parser.add_argument("name")
    parser.add_argument("password")
    args = parser.parse_args()

    try:
        asyncio.run(create_admin(args.email, args.name, args.password))
    except ValueError as e:
        print(f"FAILED: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
