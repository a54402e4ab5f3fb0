#!/usr/bin/env python3
"""
Setup script for the GamePulse database.
Creates missing tables and the bootstrap accounts (demo user, optional owner).
"""

import argparse
import os
import sys

# Add the script directory to the path so the project modules import
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

import database
from app.credentials import CredentialStore
from app.errors import GamePulseError
from app.logging_utils import setup_logging
from app.seed import DEMO_EMAIL, OWNER_EMAIL, seed_default_accounts
from app.services import UserService


def main(argv=None):
    load_dotenv()
    parser = argparse.ArgumentParser(description='Create GamePulse tables and bootstrap accounts')
    parser.add_argument('--database-url', default=None, help='Override DATABASE_URL')
    parser.add_argument('--log-level', default=os.getenv('GAMEPULSE_LOG_LEVEL', 'INFO'))
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    print("=" * 60)
    print("GamePulse Database Setup")
    print("=" * 60)
    print()

    try:
        engine = database.configure(args.database_url)
    except (SQLAlchemyError, ImportError) as e:
        print(f"✗ Error: Cannot create database engine: {e}")
        print("  Make sure DATABASE_URL is set correctly and its driver is installed")
        return 1

    print(f"Database URL: {engine.url.render_as_string(hide_password=True)}")
    print()

    if not database.init_db():
        print("✗ Error: Failed to create tables")
        print("  Make sure PostgreSQL is running and reachable")
        return 1
    print("✓ Tables are up to date")

    users = UserService(CredentialStore())
    with database.session_scope() as db:
        try:
            created = seed_default_accounts(db, users)
        except GamePulseError as e:
            print(f"✗ Error seeding accounts: {e}")
            return 1

    print(f"✓ Bootstrap accounts created: {created}")
    print(f"  Demo login: {DEMO_EMAIL} / demo123")
    if not os.getenv('GAMEPULSE_OWNER_PASSWORD'):
        print(f"  Owner account {OWNER_EMAIL} skipped (set GAMEPULSE_OWNER_PASSWORD)")

    print()
    print("=" * 60)
    print("Setup Complete!")
    print("=" * 60)
    return 0


if __name__ == '__main__':
    sys.exit(main())
