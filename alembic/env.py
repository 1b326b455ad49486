from logging.config import fileConfig

from sqlalchemy import create_engine, pool
from alembic import context

# alembic.ini puts the project root on sys.path (prepend_sys_path)
from paperhub.config import settings
from paperhub.db.session import Base, _connect_args

# Registers comments and likes on Base.metadata
from paperhub.db.models import *  # noqa: F401,F403

config = context.config

if config.config_file_name:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# SQLite cannot ALTER most constraints in place; batch mode rebuilds the table.
IS_SQLITE = settings.DATABASE_URL.startswith("sqlite")


def run_migrations_offline():
    """Emit SQL for DATABASE_URL without connecting."""
    context.configure(
        url=settings.DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=IS_SQLITE,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = create_engine(
        settings.DATABASE_URL,
        connect_args=_connect_args(settings.DATABASE_URL),
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=IS_SQLITE,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
