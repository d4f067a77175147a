from logging.config import fileConfig

from sqlalchemy import create_engine, pool

from alembic import context

import portal_hub.models  # noqa: F401
from portal_hub.core.database import DATABASE_URL, Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Alembic runs synchronously; drop the async driver from the app URL.
SYNC_URL = DATABASE_URL.replace("+aiosqlite", "").replace("+asyncpg", "")


def run_migrations_offline():
    """Run migrations in 'offline' mode."""
    context.configure(
        url=SYNC_URL, target_metadata=target_metadata, literal_binds=True, dialect_opts={"paramstyle": "named"},
        compare_type=True, compare_server_default=True
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """Run migrations in 'online' mode using a sync engine built
    from the app's DATABASE_URL."""
    connectable = create_engine(SYNC_URL, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
