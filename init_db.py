import asyncio
import logging
import sys
import os

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import AsyncEngine
from app.core.database import engine, Base
from app.models import task, user  # noqa: F401  registers the tables
from app.models.task import Task

logger = logging.getLogger("init_db")

# Added after the first deploy; create_all leaves existing tables alone
MARKER_COLUMNS = ("reminded_h1_at", "reminded_h0_at", "reminded_h5h_at")

def _missing_marker_columns(sync_conn):
    existing = {col["name"] for col in inspect(sync_conn).get_columns(Task.__tablename__)}
    return [name for name in MARKER_COLUMNS if name not in existing]

async def init_db(db_engine: AsyncEngine = engine):
    """Create the tables and bring an older tasks table up to date."""
    logger.info("Creating tables...")
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

        missing = await conn.run_sync(_missing_marker_columns)
        for name in missing:
            col_type = Task.__table__.c[name].type.compile(dialect=conn.dialect)
            logger.info(f"Adding column tasks.{name}")
            await conn.execute(text(f"ALTER TABLE {Task.__tablename__} ADD COLUMN {name} {col_type}"))
    logger.info("SUCCESS: users and tasks tables are ready")

async def log_db_version(db_engine: AsyncEngine = engine):
    async with db_engine.connect() as conn:
        result = await conn.execute(text("SELECT version();"))
        logger.info(f"Database version: {result.scalar()}")

async def main():
    await init_db()
    await log_db_version()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    try:
        asyncio.run(main())
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        if "ssl" in str(e).lower():
            logger.error("Hint: Supabase requires SSL, check the connection string.")
        sys.exit(1)
