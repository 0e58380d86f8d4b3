# homefix/cli.py
"""Operator commands for bootstrapping the managed backend.

    homefix-admin tables
    homefix-admin create-profiles
    homefix-admin init-db
    homefix-admin create-admin [--email EMAIL] [--full-name NAME]
    homefix-admin list-users
    homefix-admin test-connection

Every command exits 0 on success and 1 on missing configuration or any
unrecoverable error.
"""
import argparse
import asyncio
import getpass
import logging
import re
import sys
from typing import List, Optional

import asyncpg
from pydantic import ValidationError

from .config import Settings, get_settings
from .database import PostgresBackend, connect
from .errors import BackendError, ConfigurationError
from .models.auth import Role
from .queries.profile_queries import create_profile, get_credentials, list_profiles
from .schema import FULL_SCHEMA, PROFILES_POLICIES, PROFILES_TABLE
from .utils.auth import get_password_hash

logger = logging.getLogger("homefix.cli")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8

def load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as e:
        missing = ", ".join(str(err["loc"][0]).upper() for err in e.errors())
        raise ConfigurationError(f"Missing required configuration: {missing}") from e

async def list_tables(settings: Settings) -> None:
    conn = await connect(settings.backend_url)
    try:
        rows = await conn.fetch(
            "SELECT tablename FROM pg_tables WHERE schemaname = 'public' ORDER BY tablename"
        )
    finally:
        await conn.close()

    if not rows:
        print("No tables in the public schema")
        return
    print("Tables in the public schema:")
    for index, row in enumerate(rows, start=1):
        print(f"{index}. {row['tablename']}")
    print(f"Total: {len(rows)}")

async def apply_statements(settings: Settings, statements: List[str]) -> None:
    conn = await connect(settings.backend_url)
    try:
        async with conn.transaction():
            for statement in statements:
                await conn.execute(statement)
    finally:
        await conn.close()

async def create_profiles_table(settings: Settings) -> None:
    await apply_statements(settings, [PROFILES_TABLE, PROFILES_POLICIES])
    print("Profiles table and policies are in place")

async def init_db(settings: Settings) -> None:
    await apply_statements(settings, FULL_SCHEMA)
    print("Schema applied")

def prompt_admin_details(email: Optional[str], full_name: Optional[str]):
    while not email or not EMAIL_PATTERN.match(email.strip()):
        if email:
            print("Please enter a valid email address")
        email = input("Email: ")

    while True:
        password = getpass.getpass(f"Password (at least {MIN_PASSWORD_LENGTH} characters): ")
        if len(password.strip()) >= MIN_PASSWORD_LENGTH:
            break
        print(f"The password must be at least {MIN_PASSWORD_LENGTH} characters")

    while not full_name or not full_name.strip():
        full_name = input("Full name: ")

    return email.strip(), password.strip(), full_name.strip()

async def create_admin(settings: Settings, email: str, password: str, full_name: str) -> None:
    conn = await connect(settings.backend_url)
    try:
        db = PostgresBackend(conn)
        if await get_credentials(db, email):
            raise BackendError(f"{email} is already registered")
        profile = await create_profile(db, email, full_name, get_password_hash(password), Role.ADMIN)
    finally:
        await conn.close()

    print("Admin account created")
    print(f"Email: {profile.email}")
    print(f"Name: {profile.full_name}")
    print(f"Role: {profile.role.value}")

async def list_users(settings: Settings) -> None:
    conn = await connect(settings.backend_url)
    try:
        profiles = await list_profiles(PostgresBackend(conn))
    finally:
        await conn.close()

    print("Registered users:")
    print("=" * 60)
    for profile in profiles:
        print(f"ID: {profile.id}")
        print(f"Email: {profile.email}")
        print(f"Name: {profile.full_name or 'not set'}")
        print(f"Role: {profile.role.value}")
        print(f"Created: {profile.created_at:%Y-%m-%d %H:%M}")
        print("-" * 60)
    print(f"Total: {len(profiles)}")

async def test_connection(settings: Settings) -> None:
    print("BACKEND_URL: set")
    print("SERVICE_ROLE_KEY: set")
    conn = await connect(settings.backend_url)
    try:
        version = await conn.fetchval("SELECT version()")
    finally:
        await conn.close()
    print("Connected")
    print(f"Backend version: {version}")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="homefix-admin", description="HomeFix backend bootstrap tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("tables", help="List tables in the public schema")
    subparsers.add_parser("create-profiles", help="Create the profiles table and its policies")
    subparsers.add_parser("init-db", help="Create every table, policy and the change-feed trigger")
    admin = subparsers.add_parser("create-admin", help="Create an administrator account")
    admin.add_argument("--email")
    admin.add_argument("--full-name")
    subparsers.add_parser("list-users", help="List every profile")
    subparsers.add_parser("test-connection", help="Check configuration and backend connectivity")
    return parser

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    try:
        settings = load_settings()
        if args.command == "tables":
            asyncio.run(list_tables(settings))
        elif args.command == "create-profiles":
            asyncio.run(create_profiles_table(settings))
        elif args.command == "init-db":
            asyncio.run(init_db(settings))
        elif args.command == "create-admin":
            email, password, full_name = prompt_admin_details(args.email, args.full_name)
            asyncio.run(create_admin(settings, email, password, full_name))
        elif args.command == "list-users":
            asyncio.run(list_users(settings))
        elif args.command == "test-connection":
            asyncio.run(test_connection(settings))
    except ConfigurationError as e:
        logger.error(str(e))
        logger.error("Set BACKEND_URL and SERVICE_ROLE_KEY in the environment or a .env file")
        return 1
    except BackendError as e:
        logger.error(e.detail)
        return 1
    except (asyncpg.PostgresError, OSError) as e:
        logger.error(f"Backend call failed: {str(e)}")
        return 1
    except (KeyboardInterrupt, EOFError):
        logger.error("Aborted")
        return 1
    return 0

def run() -> None:
    sys.exit(main())

if __name__ == "__main__":
    run()
