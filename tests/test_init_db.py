import asyncio
from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from init_db import MARKER_COLUMNS, init_db


def column_names(engine, table):
    async def run():
        async with engine.connect() as conn:
            return await conn.run_sync(lambda c: {col["name"] for col in inspect(c).get_columns(table)})

    return asyncio.run(run())


def test_creates_both_tables(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'fresh.db'}", poolclass=NullPool)

    asyncio.run(init_db(engine))

    assert {"email", "phone_number"} <= column_names(engine, "users")
    assert set(MARKER_COLUMNS) <= column_names(engine, "tasks")


def test_adds_marker_columns_to_an_existing_tasks_table(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'old.db'}", poolclass=NullPool)

    async def create_old_schema():
        async with engine.begin() as conn:
            await conn.execute(text(
                "CREATE TABLE tasks (id INTEGER PRIMARY KEY, user_id INTEGER NOT NULL, title VARCHAR NOT NULL, "
                "description VARCHAR, deadline DATETIME NOT NULL, priority VARCHAR NOT NULL, status VARCHAR NOT NULL, "
                "remind_h1 BOOLEAN NOT NULL, remind_h0 BOOLEAN NOT NULL, remind_h5h BOOLEAN NOT NULL, "
                "created_at DATETIME, updated_at DATETIME)"
            ))
            await conn.execute(text(
                "INSERT INTO tasks (user_id, title, deadline, priority, status, remind_h1, remind_h0, remind_h5h) "
                "VALUES (1, 'Laporan', '2025-06-22 00:00:00', 'medium', 'pending', 1, 0, 0)"
            ))

    asyncio.run(create_old_schema())
    assert not set(MARKER_COLUMNS) & column_names(engine, "tasks")

    asyncio.run(init_db(engine))
    # second run finds nothing to add
    asyncio.run(init_db(engine))

    assert set(MARKER_COLUMNS) <= column_names(engine, "tasks")

    async def read_markers():
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT title, reminded_h1_at FROM tasks"))
            return result.all()

    assert asyncio.run(read_markers()) == [("Laporan", None)]
