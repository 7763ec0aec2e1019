"""Alembic environment for the proinfer database."""

import os
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import Connection, Engine

from proinfer.db.connect import get_db_path, sqlite_uri
from proinfer.db.models import Base

config = context.config

if config.config_file_name and Path(config.config_file_name).exists():
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _get_database_url() -> str:
    """``PROINFER_DB_PATH``, else the configured URL, else the default database."""

    env_url = os.getenv("PROINFER_DB_PATH")
    if env_url:
        return sqlite_uri(env_url)

    configured_url = config.get_main_option("sqlalchemy.url")
    if configured_url:
        return configured_url

    return get_db_path()


def run_migrations_offline() -> None:
    url = _get_database_url()
    config.set_main_option("sqlalchemy.url", url)

    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    existing = config.attributes.get("connection")

    if isinstance(existing, Engine):
        with existing.connect() as connection:
            _run_with_connection(connection)
            connection.commit()
        return

    if isinstance(existing, Connection):
        _run_with_connection(existing)
        return

    url = _get_database_url()
    config.set_main_option("sqlalchemy.url", url)

    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        future=True,
    )

    with connectable.connect() as connection:
        _run_with_connection(connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
