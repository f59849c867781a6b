"""Alembic migration environment for the caseflow schema.

Migrations run on a synchronous psycopg2 connection derived from DATABASE_URL;
the application itself uses asyncpg.
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context
from caseflow.adapters.persistence.database import Base
from caseflow.adapters.persistence.models import (  # noqa: F401  (registers models)
    AssignmentHistoryModel,
    CustomerModel,
    OfficerModel,
)
from caseflow.config import settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# .env wins over alembic.ini
config.set_main_option("sqlalchemy.url", settings.sync_database_url.replace("%", "%%"))

target_metadata = Base.metadata

# autogenerate should notice type changes on the roster ARRAY column
_CONFIGURE_OPTS = {"compare_type": True}


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout without a database connection."""
    context.configure(
        url=settings.sync_database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_CONFIGURE_OPTS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    try:
        with connectable.connect() as connection:
            context.configure(
                connection=connection, target_metadata=target_metadata, **_CONFIGURE_OPTS
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
