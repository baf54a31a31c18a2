#!/usr/bin/env python3
"""
Administrative commands for data the API does not expose: tables,
login credentials and classes.

    python -m svalutation.manage create-tables
    python -m svalutation.manage add-credential alice
    python -m svalutation.manage add-class "3B"
"""

import argparse
import asyncio
import getpass
import sys
from sqlalchemy import select
from .core.auth import get_password_hash
from .core.config import settings
from .core.database import Database
from .models import Credential, SchoolClass


parser = argparse.ArgumentParser(prog="svalutation-manage")
parser.add_argument('--database-url', action='store', default=None,
                    help='database to operate on (defaults to DATABASE_URL)')
subparsers = parser.add_subparsers(help='commands', dest='cmd', required=True)

subparsers.add_parser('create-tables', help='create missing tables')

credential_parser = subparsers.add_parser('add-credential', help='add or replace a login')
credential_parser.add_argument('username', action='store')
credential_parser.add_argument('--password', action='store', default=None,
                               help='password to hash (prompted for when omitted)')

class_parser = subparsers.add_parser('add-class', help='add a class')
class_parser.add_argument('name', action='store')


async def create_tables(database: Database):
    await database.create_tables()


async def add_credential(database: Database, username: str, password: str) -> bool:
    """Store a bcrypt hash for username; returns True when an old login was replaced"""
    async with database.session() as session:
        result = await session.execute(select(Credential).filter(Credential.username == username))
        credential = result.scalar_one_or_none()
        replaced = credential is not None

        if credential is None:
            credential = Credential(username=username)
            session.add(credential)
        credential.password = get_password_hash(password)
        await session.commit()
        return replaced


async def add_class(database: Database, name: str) -> int:
    async with database.session() as session:
        school_class = SchoolClass(name=name)
        session.add(school_class)
        await session.commit()
        return school_class.id


async def run(args) -> int:
    database = Database(args.database_url or settings.database_url)
    try:
        if args.cmd == 'create-tables':
            await create_tables(database)
            print("Tables created")
        elif args.cmd == 'add-credential':
            password = args.password or getpass.getpass(f"Password for {args.username}: ")
            if not password:
                print("Empty password refused", file=sys.stderr)
                return 1
            replaced = await add_credential(database, args.username, password)
            print(f"{'Updated' if replaced else 'Added'} credentials for {args.username}")
        elif args.cmd == 'add-class':
            class_id = await add_class(database, args.name)
            print(f"Added class {args.name} with id {class_id}")
        return 0
    finally:
        await database.close()


def main(argv=None):
    args = parser.parse_args(argv)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
