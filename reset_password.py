#!/usr/bin/env python3
"""
Reset a user's password in the users service database.

This script does not read or reveal any existing password.  It stores a
new PBKDF2 hash for the given email in the database configured by
USERS_DATABASE_URL (or the one passed with --db).

Usage:
    python reset_password.py --email admin@example.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import asyncio
import getpass
import os
import sys

from shop_services.core.config import settings
from shop_services.core.db import init_db
from shop_services.core.errors import NotFoundError
from shop_services.services.user_service import UserService


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Reset a user password (users service).")
    ap.add_argument("--db", help="Path to the users SQLite DB file (defaults to USERS_DATABASE_URL)")
    ap.add_argument("--email", required=True, help="User email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args(argv)

    if args.db:
        if not os.path.exists(args.db):
            print(f"[!] DB not found: {args.db}", file=sys.stderr)
            return 1
        settings.users_database_url = os.path.abspath(args.db)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if len(new_password) < 8:
        print("[!] Password must be at least 8 characters.", file=sys.stderr)
        return 1

    init_db("users")
    try:
        asyncio.run(UserService.set_password(args.email, new_password))
    except NotFoundError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 2
    print(f"[+] Password updated for user: {args.email}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
