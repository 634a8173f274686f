"""Alembic environment for the mesotracker schema.

Migrations run over the sync (psycopg2) URL from Settings. Pass
`-x db_url=postgresql://...` to migrate another database, e.g. a staging copy.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool
from sqlalchemy.engine import Connection

from mesotracker.core.config import get_settings
from mesotracker.db.base import Base
from mesotracker.models import *  # noqa: F401, F403 - plans, cycles, history and feedback tables

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

settings = get_settings()
db_url = context.get_x_argument(as_dictionary=True).get("db_url") or settings.database_url
config.set_main_option("sqlalchemy.url", db_url)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Write the migration SQL to stdout for review instead of applying it."""
    context.configure(
        url=db_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    # JSON list columns and UUID keys change type easily; let autogenerate notice
    context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(db_url, poolclass=pool.NullPool)
    try:
        with connectable.connect() as connection:
            do_run_migrations(connection)
    finally:
        connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
