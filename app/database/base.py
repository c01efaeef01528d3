"""
Database base configuration following kkb_fastapi pattern.

Handles async engine creation, database bootstrap and migrations.
"""
import asyncio
import contextlib
import functools
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config as alembic_config
from sqlalchemy import text
from sqlalchemy.engine.url import URL
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from app.core.config import Config

DEFAULT_DRIVERNAME = "postgresql+asyncpg"

# Alembic runs synchronously
SYNC_DRIVERS = {
    "postgresql+asyncpg": "postgresql+psycopg2",
    "sqlite+aiosqlite": "sqlite",
}

PROJECT_ROOT = Path(__file__).resolve().parents[2]

engine_kw = {
    "pool_pre_ping": True,
    # feature will normally emit SQL equivalent to "SELECT 1" each time a connection is checked out from the pool
    "pool_size": 2,  # number of connections to keep open at a time
    "max_overflow": 4,  # number of connections to allow to be opened above pool_size
    "connect_args": {
        "prepared_statement_cache_size": 0,  # disable prepared statement cache
        "statement_cache_size": 0,  # disable statement cache
    },
}


def get_db_url(config: Config) -> URL:
    """
    Construct database URL from config.

    The optional ``drivername`` key selects the backend; PostgreSQL via
    asyncpg is used when it is absent.
    """
    config_db = dict(config.data["db"])
    drivername = config_db.pop("drivername", DEFAULT_DRIVERNAME)
    if "user" in config_db and "username" not in config_db:
        config_db["username"] = config_db.pop("user")
    return URL.create(drivername=drivername, **config_db)


def get_engine_kw(async_db_url: URL) -> dict:
    """Engine keyword arguments suited to the URL's backend."""
    if async_db_url.get_backend_name() == "sqlite":
        return {"pool_pre_ping": True}
    return engine_kw


def get_sync_db_url(config: Config) -> URL:
    """Database URL with the async driver swapped for its sync counterpart (for Alembic)."""
    db_url = get_db_url(config)
    return db_url.set(drivername=SYNC_DRIVERS.get(db_url.drivername, db_url.drivername))


async def create_database(config: Config) -> bool:
    """
    Ensures the PostgreSQL database specified in the config exists.
    Connects to the 'postgres' maintenance database to issue CREATE DATABASE.

    Args:
        config: The application configuration.

    Returns:
        True if the database was newly created by this function.
        False if it already existed or the backend is not PostgreSQL.

    Raises:
        ValueError: If the database name is missing in the configuration.
    """
    target_url = get_db_url(config)
    if target_url.get_backend_name() != "postgresql":
        logging.info(
            f"Skipping database creation for backend '{target_url.get_backend_name()}'"
        )
        return False

    target_database_name = target_url.database
    if not target_database_name:
        logging.error("Database name not found in configuration for creation.")
        raise ValueError("Database name missing in configuration for creation.")

    maintenance_url = target_url.set(database="postgres")
    maintenance_engine = None
    try:
        maintenance_engine = create_async_engine(maintenance_url, poolclass=NullPool)
        logging.info(
            f"Attempting to create database '{target_database_name}' in {target_url.host} if it does not exist."
        )
        async with maintenance_engine.connect() as connection:
            # CREATE DATABASE cannot run inside a transaction block
            autocommit_connection = await connection.execution_options(
                isolation_level="AUTOCOMMIT"
            )
            await autocommit_connection.execute(
                text(f'CREATE DATABASE "{target_database_name}"')
            )
        logging.info(f"Database '{target_database_name}' created successfully.")
        return True
    except DBAPIError as e:
        # 42P04: duplicate_database
        with contextlib.suppress(AttributeError):
            if getattr(e.orig, "pgcode", None) == "42P04" or "already exists" in str(e):
                logging.warning(
                    f"Database '{target_database_name}' already exists. No action taken."
                )
                return False

        logging.error(
            f"A DBAPIError occurred while trying to create database '{target_database_name}': {e}"
        )
        raise
    finally:
        if maintenance_engine:
            await maintenance_engine.dispose()


async def apply_db_migration(config: Config):
    """
    Create the database if needed and upgrade it to the latest Alembic revision.

    Blocks until all migrations are complete so the schema is consistent
    before anything reads from it.

    Args:
        config: The application configuration containing database connection details.
    """
    await create_database(config)

    alembic_cfg = alembic_config(str(PROJECT_ROOT / "alembic.ini"))
    alembic_cfg.set_main_option(
        "script_location", str(PROJECT_ROOT / "alembic_migrations")
    )

    sync_url = get_sync_db_url(config)
    alembic_cfg.set_main_option(
        "sqlalchemy.url", sync_url.render_as_string(hide_password=False)
    )

    logging.info("Starting database migrations...")
    loop = asyncio.get_running_loop()
    await loop.run_in_executor(
        None, functools.partial(command.upgrade, alembic_cfg, "head")
    )
    logging.info("Database migration completed successfully")
