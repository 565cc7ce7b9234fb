"""Create all tables directly from the table metadata (local setups without Alembic)."""

import asyncio

from sqlalchemy import text

from app.database import engine
from app.models import metadata


async def init_db() -> None:
    """Initialize the database by creating all tables."""
    async with engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            await conn.execute(text('CREATE EXTENSION IF NOT EXISTS "pgcrypto"'))

        await conn.run_sync(metadata.create_all)

    await engine.dispose()
    print(f"✓ Created {len(metadata.tables)} tables")


if __name__ == "__main__":
    asyncio.run(init_db())
