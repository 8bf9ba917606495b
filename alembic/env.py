"""Alembic environment configuration"""

from sqlalchemy import create_engine, pool
from sqlmodel import SQLModel
from alembic import context

from app.core.config import get_settings
import app.models  # noqa: F401  registers tables on SQLModel.metadata

# this is the Alembic Config object
config = context.config

target_metadata = SQLModel.metadata


def get_url():
    """Get a synchronous database URL for migrations"""
    url = config.get_main_option("sqlalchemy.url") or get_settings().DATABASE_URL
    return url.replace("postgresql+asyncpg://", "postgresql://")


def run_migrations_offline():
    """Run migrations in 'offline' mode"""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """Run migrations in 'online' mode"""
    connectable = create_engine(get_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
