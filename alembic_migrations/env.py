"""
Alembic environment.

Runs migrations with a synchronous driver. apply_db_migration sets
sqlalchemy.url; when alembic is invoked from the command line the URL is
built from the config file selected by ENVIRONMENT.
"""
import logging
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from app.core.config import get_environment_config
from app.database import Base
from app.database.base import get_sync_db_url
from app.database.schemas import *  # noqa: F401,F403  registers all tables on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def get_sync_url() -> str:
    url = config.get_main_option("sqlalchemy.url")
    if url:
        return url
    return get_sync_db_url(get_environment_config()).render_as_string(hide_password=False)


def run_migrations_offline() -> None:
    context.configure(
        url=get_sync_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        {"sqlalchemy.url": get_sync_url()},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()

    logging.getLogger(__name__).info("Migrations applied")


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
