#!/usr/bin/env python3
"""
Seed an admin profile.

Admins cannot register through the API, so the first one is created here.

Usage:
    python -m scripts.create_admin admin@example.com "Admin Name"
    python -m scripts.create_admin admin@example.com "Admin Name" --password 's3cret-pass'

Environment Variables:
    DATABASE_URL: Database to write to
    ADMIN_PASSWORD: Password used when --password is not given
"""

import argparse
import asyncio
import getpass
import os
import sys

import dotenv

dotenv.load_dotenv()

from app.core.security import hash_password  # noqa: E402
from app.database import AsyncSessionLocal, engine  # noqa: E402
from app.schemas.users import UserRole  # noqa: E402
from app.services.user_service import UserService  # noqa: E402


async def create_admin(email: str, full_name: str, password: str) -> dict:
    """Insert the admin profile, or fail if the email is taken."""
    async with AsyncSessionLocal() as db:
        if await UserService.get_user_by_email(db, email):
            print(f"Error: {email} is already registered", file=sys.stderr)
            sys.exit(1)

        user = await UserService.create_user(
            db,
            email=email.lower(),
            password_hash=hash_password(password),
            full_name=full_name,
            role=UserRole.ADMIN.value,
        )

    await engine.dispose()
    return user


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Create an admin profile",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("email", help="Admin email address")
    parser.add_argument("full_name", help="Admin display name")
    parser.add_argument("--password", type=str, help="Password (prompted when omitted)")

    args = parser.parse_args()

    password = args.password or os.getenv("ADMIN_PASSWORD") or getpass.getpass("Password: ")
    if not 8 <= len(password) <= 72:
        print("Error: password must be 8 to 72 characters", file=sys.stderr)
        sys.exit(1)

    user = asyncio.run(create_admin(args.email, args.full_name, password))

    print("✅ Admin created")
    print(f"   ID:    {user['id']}")
    print(f"   Email: {user['email']}")


if __name__ == "__main__":
    main()
