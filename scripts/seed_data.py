#!/usr/bin/env python3
"""
Seed script to create staff accounts for development and testing.

Creates:
- One store account per configured store (<store>@<domain>)
- A manager account (gerencia@<domain>)

Usage:
    python scripts/seed_data.py [--domain barbour.co] [--password secret123]

The script will output the credentials needed to sign in to the dashboard.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from surveydesk.core.config import settings
from surveydesk.core.exceptions import DuplicateError
from surveydesk.db.mongodb import close_mongodb, connect_mongodb, ensure_indexes, get_mongodb
from surveydesk.domains.staff.repository import MongoStaffRepository
from surveydesk.domains.staff.schemas import StaffCreate
from surveydesk.domains.staff.service import StaffService


async def seed_database(domain: str, password: str) -> None:
    """Create initial staff accounts."""
    await connect_mongodb()
    await ensure_indexes()

    service = StaffService(MongoStaffRepository(get_mongodb()))
    mailboxes = [settings.manager_email_marker, *settings.stores]

    print("Creating staff accounts...")
    print("-" * 50)

    try:
        for mailbox in mailboxes:
            email = f"{mailbox}@{domain}"
            try:
                account = await service.create_account(StaffCreate(email=email, password=password))
            except DuplicateError:
                print(f"  {email:<30} already exists, skipped")
                continue
            scope = account.store or "all stores"
            print(f"  {email:<30} {account.role:<8} {scope}")
    finally:
        await close_mongodb()

    print("-" * 50)
    print(f"Password for new accounts: {password}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed SurveyDesk staff accounts")
    parser.add_argument("--domain", default="barbour.co")
    parser.add_argument("--password", default="cambiar123")
    args = parser.parse_args()
    asyncio.run(seed_database(args.domain, args.password))


if __name__ == "__main__":
    main()
