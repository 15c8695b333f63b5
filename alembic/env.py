"""Alembic environment — migrates the kv_entries table of the configured store.

The URL comes from Settings (DATABASE_URL / .env), so migrations and the API
always target the same database.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

from ntrl_stats.config import get_settings
from ntrl_stats.db.base import Base
import ntrl_stats.models  # noqa: F401

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _migrate(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=Base.metadata)
    with context.begin_transaction():
        context.run_migrations()


async def _run() -> None:
    engine = create_async_engine(get_settings().database_url, poolclass=pool.NullPool)
    async with engine.connect() as connection:
        await connection.run_sync(_migrate)
    await engine.dispose()


if context.is_offline_mode():
    raise SystemExit("Offline (--sql) migrations are not supported for the stats store")
asyncio.run(_run())
