"""
Alembic Migration Environment
=============================

What:  Runs Alembic against the async SQLAlchemy engine.
How:   The URL comes from DATABASE_URL through marknotes settings (alembic.ini
       carries none), and both models are imported so --autogenerate sees
       the whole schema.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from marknotes.config import settings
from marknotes.database import Base
from marknotes.models.note import Note  # noqa: F401
from marknotes.models.user import User  # noqa: F401

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _configure_and_run(**options) -> None:
    context.configure(target_metadata=Base.metadata, compare_type=True, **options)
    with context.begin_transaction():
        context.run_migrations()


async def _run_online() -> None:
    engine = create_async_engine(settings.database_url, poolclass=pool.NullPool)
    async with engine.connect() as connection:
        await connection.run_sync(lambda conn: _configure_and_run(connection=conn))
    await engine.dispose()


if context.is_offline_mode():
    # alembic upgrade --sql: emit SQL instead of connecting
    _configure_and_run(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
else:
    asyncio.run(_run_online())
