#!/usr/bin/env python3
"""
ZeroDB Table Creation Script

Creates the seven collections used by the DotHack Backend API. Tables that
already exist are skipped, so the script can be re-run safely.

Usage:
    python scripts/setup-zerodb-tables.py --dry-run   # Preview tables
    python scripts/setup-zerodb-tables.py --apply     # Create tables
    python scripts/setup-zerodb-tables.py --apply --reset  # Drop and recreate tables
    python scripts/setup-zerodb-tables.py --purge     # Delete all rows, keep tables
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add python-api to path
sys.path.insert(0, str(Path(__file__).parent.parent / "python-api"))

from integrations.zerodb.client import ZeroDBClient
from integrations.zerodb.dependencies import build_zerodb_client
from integrations.zerodb.exceptions import ZeroDBError


# ANSI color codes
class Colors:
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BLUE = '\033[94m'
    BOLD = '\033[1m'
    END = '\033[0m'


TIMESTAMP = {"type": "text"}  # UTC ISO-8601, compared as strings

TABLE_SCHEMAS = {
    "users": {
        "description": "Registered participants, organizers and judges",
        "schema": {
            "fields": {
                "user_id": {"type": "uuid", "primary_key": True},
                "name": {"type": "text", "required": True},
                "email": {"type": "text", "unique": True, "required": True},
                "password_hash": {"type": "text", "required": True},
                "role": {
                    "type": "text",
                    "check": "role IN ('participant', 'organizer', 'judge')"
                },
                "created_at": TIMESTAMP,
            }
        }
    },

    "events": {
        "description": "Hackathon events with participants, judges and tracks",
        "schema": {
            "fields": {
                "event_id": {"type": "uuid", "primary_key": True},
                "title": {"type": "text", "required": True},
                "description": {"type": "text"},
                "start_date": TIMESTAMP,
                "end_date": TIMESTAMP,
                "submission_deadline": TIMESTAMP,
                "location": {"type": "text"},
                "max_participants": {"type": "integer"},
                "prize_pool": {"type": "text"},
                "status": {
                    "type": "text",
                    "check": "status IN ('upcoming', 'active', 'completed')"
                },
                "participants": {"type": "jsonb"},
                "judges": {"type": "jsonb"},
                "tracks": {"type": "jsonb"},
                "organizer_id": {"type": "uuid"},
                "created_at": TIMESTAMP,
            }
        }
    },

    "projects": {
        "description": "Project submissions, one per participant per event",
        "schema": {
            "fields": {
                "project_id": {"type": "uuid", "primary_key": True},
                "event_id": {"type": "uuid"},
                "submitted_by": {"type": "uuid", "required": True},
                "title": {"type": "text", "required": True},
                "description": {"type": "text"},
                "team_name": {"type": "text"},
                "team_members": {"type": "jsonb"},
                "github_url": {"type": "text"},
                "demo_url": {"type": "text"},
                "video_url": {"type": "text"},
                "document_url": {"type": "text"},
                "technologies": {"type": "jsonb"},
                "track": {"type": "text"},
                "status": {"type": "text"},
                "submission_date": TIMESTAMP,
                "created_at": TIMESTAMP,
            }
        }
    },

    "ratings": {
        "description": "Judge ratings, one per judge per project",
        "schema": {
            "fields": {
                "rating_id": {"type": "uuid", "primary_key": True},
                "project_id": {"type": "uuid", "required": True},
                "judge_id": {"type": "uuid", "required": True},
                "event_id": {"type": "uuid"},
                "scores": {"type": "jsonb", "required": True},
                "overall": {"type": "real"},
                "feedback": {"type": "text"},
                "rated_at": TIMESTAMP,
                "created_at": TIMESTAMP,
                "updated_at": TIMESTAMP,
            }
        }
    },

    "teams": {
        "description": "Teams with members and embedded invites",
        "schema": {
            "fields": {
                "team_id": {"type": "uuid", "primary_key": True},
                "name": {"type": "text", "required": True},
                "description": {"type": "text"},
                "leader_id": {"type": "uuid", "required": True},
                "members": {"type": "jsonb"},
                "invites": {"type": "jsonb"},
                "event_id": {"type": "uuid"},
                "created_at": TIMESTAMP,
            }
        }
    },

    "announcements": {
        "description": "Organizer announcements, global or per event",
        "schema": {
            "fields": {
                "announcement_id": {"type": "uuid", "primary_key": True},
                "event_id": {"type": "uuid"},
                "title": {"type": "text", "required": True},
                "content": {"type": "text", "required": True},
                "priority": {
                    "type": "text",
                    "check": "priority IN ('low', 'medium', 'high')"
                },
                "target_audience": {"type": "text"},
                "action_required": {"type": "boolean"},
                "created_by": {"type": "uuid"},
                "created_at": TIMESTAMP,
            }
        }
    },

    "questions": {
        "description": "Participant questions and their single answer",
        "schema": {
            "fields": {
                "question_id": {"type": "uuid", "primary_key": True},
                "event_id": {"type": "uuid"},
                "title": {"type": "text", "required": True},
                "content": {"type": "text", "required": True},
                "author_id": {"type": "uuid"},
                "author_type": {"type": "text"},
                "target_audience": {"type": "text"},
                "is_public": {"type": "boolean"},
                "answer": {"type": "text"},
                "answered_by": {"type": "uuid"},
                "answered_at": TIMESTAMP,
                "is_answered": {"type": "boolean"},
                "created_at": TIMESTAMP,
            }
        }
    },
}


def print_header(message: str):
    print(f"\n{Colors.BOLD}{Colors.BLUE}{'=' * 70}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.BLUE}{message:^70}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.BLUE}{'=' * 70}{Colors.END}\n")


def print_status(color: str, symbol: str, message: str):
    print(f"{color}{symbol} {message}{Colors.END}")


async def existing_table_names(client: ZeroDBClient) -> set:
    tables = await client.tables.list(limit=1000)
    return {table.get("name") for table in tables}


async def create_table(client: ZeroDBClient, table_name: str, table_config: dict) -> bool:
    """Create one table; report and return False on a store error."""
    try:
        await client.tables.create(
            name=table_name,
            schema=table_config["schema"],
            description=table_config["description"],
        )
    except ZeroDBError as e:
        print_status(Colors.RED, "✗", f"Failed to create table {table_name}: {e.message}")
        return False

    print_status(Colors.GREEN, "✓", f"Created table: {table_name}")
    return True


async def drop_table(client: ZeroDBClient, table_name: str) -> bool:
    """Delete one table; report and return False on a store error."""
    try:
        await client.tables.delete(table_name)
    except ZeroDBError as e:
        print_status(Colors.RED, "✗", f"Failed to drop table {table_name}: {e.message}")
        return False

    print_status(Colors.YELLOW, "⚠", f"Dropped table: {table_name}")
    return True


async def purge_rows(client: ZeroDBClient, existing: set) -> int:
    """Delete every row of the DotHack tables, keeping their schemas."""
    failed = 0
    for table_name in TABLE_SCHEMAS:
        if table_name not in existing:
            print_status(Colors.YELLOW, "⚠", f"Skipped table (does not exist): {table_name}")
            continue
        try:
            result = await client.tables.delete_rows(table_name, filter={})
        except ZeroDBError as e:
            print_status(Colors.RED, "✗", f"Failed to purge {table_name}: {e.message}")
            failed += 1
            continue
        print_status(
            Colors.GREEN, "✓", f"Purged {result.get('deleted_count', 0)} rows from {table_name}"
        )
    return failed


async def main() -> int:
    parser = argparse.ArgumentParser(description="Create ZeroDB tables for DotHack Backend")
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--dry-run", action="store_true", help="Preview tables without creating them")
    mode.add_argument("--apply", action="store_true", help="Create tables in ZeroDB")
    mode.add_argument(
        "--purge", action="store_true", help="Delete all rows from the tables, keep schemas"
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="With --apply, drop existing tables and recreate them from the schemas",
    )
    args = parser.parse_args()

    if args.reset and not args.apply:
        parser.error("--reset requires --apply")

    if args.dry_run:
        label = "DRY RUN MODE"
    elif args.purge:
        label = "PURGE MODE"
    else:
        label = "RESET MODE" if args.reset else "APPLY MODE"
    print_header(f"ZeroDB Table Setup - {label}")

    if args.dry_run:
        for table_name, table_config in TABLE_SCHEMAS.items():
            print_status(Colors.BLUE, "ℹ", f"Would create table: {table_name}")
            print(f"  Description: {table_config['description']}")
            print(f"  Fields: {len(table_config['schema']['fields'])} columns")
        return 0

    try:
        client = build_zerodb_client()
    except ValueError as e:
        print_status(Colors.RED, "✗", str(e))
        print_status(Colors.BLUE, "ℹ", "Set ZERODB_API_KEY and ZERODB_PROJECT_ID (or use .env)")
        return 1

    async with client:
        try:
            existing = await existing_table_names(client)
        except ZeroDBError as e:
            print_status(Colors.RED, "✗", f"Could not list existing tables: {e.message}")
            return 1

        if args.purge:
            failed = await purge_rows(client, existing)
            print_header("Summary")
            if failed:
                print_status(Colors.RED, "✗", f"Failed: {failed} tables")
                return 1
            print_status(Colors.GREEN, "✓", "All existing tables purged")
            return 0

        if args.reset:
            for table_name in TABLE_SCHEMAS:
                if table_name in existing and await drop_table(client, table_name):
                    existing.discard(table_name)

        created = skipped = failed = 0
        for table_name, table_config in TABLE_SCHEMAS.items():
            if table_name in existing:
                print_status(Colors.YELLOW, "⚠", f"Skipped table (already exists): {table_name}")
                skipped += 1
            elif await create_table(client, table_name, table_config):
                created += 1
            else:
                failed += 1

    print_header("Summary")
    print_status(Colors.GREEN, "✓", f"Created: {created} tables")
    if skipped:
        print_status(Colors.YELLOW, "⚠", f"Skipped: {skipped} tables (already exist)")
    if failed:
        print_status(Colors.RED, "✗", f"Failed: {failed} tables")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
