#!/usr/bin/env python3
"""Create an administrator or reset a user's password from the command line.

Usage:
    # Create a new admin (prompts for the password when omitted)
    python scripts/create_admin.py --username editor --email editor@example.com

    # Set a new password for an existing user (username or email)
    python scripts/create_admin.py --reset --username admin
"""

import argparse
import getpass
import logging
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sitecms.config import get_settings
from sitecms.database import Database
from sitecms.services.bootstrap import create_admin, reset_password
from sitecms.services.errors import ServiceError


def _read_password(provided: str | None) -> str:
    if provided:
        return provided
    password = getpass.getpass("New password: ")
    if password != getpass.getpass("Repeat password: "):
        print("Passwords do not match", file=sys.stderr)
        sys.exit(1)
    return password


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--username", required=True, help="username (or email with --reset)")
    parser.add_argument("--email", help="email for the new admin")
    parser.add_argument("--password", help="password; prompted for when omitted")
    parser.add_argument("--reset", action="store_true", help="reset an existing user's password")
    args = parser.parse_args(argv)

    if not args.reset and not args.email:
        parser.error("--email is required when creating an admin")

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    database = Database(get_settings().database_url)
    try:
        database.migrate()
        password = _read_password(args.password)

        with database.session() as db:
            if args.reset:
                user = reset_password(db, args.username, password)
                if user is None:
                    print(f"No user matches '{args.username}'", file=sys.stderr)
                    return 1
                print(f"Password updated for '{user.username}'")
            else:
                user = create_admin(db, args.username, args.email, password)
                print(f"Created admin '{user.username}' (id {user.id})")
    except ServiceError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        database.dispose()

    return 0


if __name__ == "__main__":
    sys.exit(main())
