#!/usr/bin/env python3
"""
Verify ZeroDB connection and credentials, and report which of the
DotHack collections exist in the project.
"""
import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Settings are read at import time, so .env has to be loaded first
load_dotenv()

# Add python-api to path
sys.path.insert(0, str(Path(__file__).parent / "python-api"))

from integrations.zerodb.dependencies import build_zerodb_client
from integrations.zerodb.exceptions import ZeroDBError

EXPECTED_TABLES = (
    "users",
    "events",
    "projects",
    "ratings",
    "teams",
    "announcements",
    "questions",
)


async def verify_connection():
    """Probe ZeroDB with credentials from .env"""

    print("=" * 60)
    print("ZeroDB Connection Verification")
    print("=" * 60)

    # Display configuration (masked)
    api_key = os.getenv("ZERODB_API_KEY", "")
    project_id = os.getenv("ZERODB_PROJECT_ID", "")
    base_url = os.getenv("ZERODB_BASE_URL", "")

    print("\nConfiguration:")
    print(f"  Base URL: {base_url or '(default)'}")
    print(f"  Project ID: {project_id}")
    print(f"  API Key: {'*' * 20}{api_key[-8:] if len(api_key) > 8 else '***'}")

    try:
        client = build_zerodb_client()
    except ValueError as e:
        print(f"\n❌ {e}")
        return False

    print("\nTesting connection...")

    async with client:
        try:
            project_info = await client.get_project_info()
            tables = await client.tables.list(limit=1000)
        except ZeroDBError as e:
            print("\n❌ Connection failed!")
            print(f"Error: {type(e).__name__}: {e.message}")
            return False

    print("\n✅ Connection successful!")
    print("\nProject Information:")
    print(f"  Name: {project_info.get('name', 'N/A')}")
    print(f"  ID: {project_info.get('project_id', project_info.get('id', 'N/A'))}")
    print(f"  Status: {project_info.get('status', 'N/A')}")

    existing = {table.get("name") for table in tables}
    missing = [name for name in EXPECTED_TABLES if name not in existing]

    print("\nCollections:")
    for name in EXPECTED_TABLES:
        print(f"  {'✅' if name in existing else '❌'} {name}")

    if missing:
        print("\nRun scripts/setup-zerodb-tables.py --apply to create the missing tables.")
        return False
    return True


if __name__ == "__main__":
    success = asyncio.run(verify_connection())
    sys.exit(0 if success else 1)
