#!/usr/bin/env python3
"""
Print a fresh JWT secret and bcrypt password hashes for the .env file.

Usage:
  python scripts/generate_credentials.py [custom_password]

Copy the values into JWT_SECRET and ADMIN_PASSWORD_HASH.
"""

import secrets
import sys

import bcrypt

DEFAULT_PASSWORD = "admin123"
BCRYPT_ROUNDS = 10


def generate_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8")[:72], bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def generate_jwt_secret() -> str:
    return secrets.token_hex(32)


def main(argv: list[str]) -> None:
    print("=== Village records setup ===\n")

    print("JWT secret (JWT_SECRET):")
    print(generate_jwt_secret())
    print()

    print(f'Password hash for "{DEFAULT_PASSWORD}" (ADMIN_PASSWORD_HASH):')
    print(generate_password_hash(DEFAULT_PASSWORD))
    print()

    if argv:
        print(f'Password hash for "{argv[0]}":')
        print(generate_password_hash(argv[0]))
        print()

    print("Usage: python scripts/generate_credentials.py [custom_password]")


if __name__ == "__main__":
    main(sys.argv[1:])
