"""
Create missing tables for the admission portal.

Usage: python -m admission_portal.db.schema_check
"""

import asyncio
from typing import List

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine

# Register every model on Base.metadata before create_all.
from admission_portal.core import models  # noqa: F401
from admission_portal.db.session import DATABASE_NOT_CONFIGURED_MESSAGE, Base, engine


REQUIRED_TABLES: List[str] = [
    "schools",
    "admissions",
    "fee_structures",
    "admission_counters",
]


async def ensure_tables(db_engine: AsyncEngine) -> List[str]:
    """Create any required table that does not exist yet. Returns the names created."""
    async with db_engine.begin() as conn:
        existing = set(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))
        missing = [name for name in REQUIRED_TABLES if name not in existing]
        await conn.run_sync(Base.metadata.create_all)

    if missing:
        print("Created missing tables: " + ", ".join(missing))
    else:
        print("All required tables already exist in the database.")
    return missing


async def main() -> None:
    if engine is None:
        raise SystemExit(DATABASE_NOT_CONFIGURED_MESSAGE)
    await ensure_tables(engine)


if __name__ == "__main__":
    asyncio.run(main())
