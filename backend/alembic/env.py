import os
from logging.config import fileConfig
from sqlalchemy import create_engine
from alembic import context

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def database_url() -> str:
    """
    Resolve the SQLite URL to migrate.
    DATABASE_URL (passed by database.init_db) wins, then DATABASE_PATH, then alembic.ini.
    """
    if os.getenv("DATABASE_URL"):
        return os.environ["DATABASE_URL"]
    if os.getenv("DATABASE_PATH"):
        return f"sqlite:///{os.path.abspath(os.environ['DATABASE_PATH'])}"
    return config.get_main_option("sqlalchemy.url")


def run_migrations_offline(url: str) -> None:
    """Emit SQL for the tasks schema without a live connection."""
    context.configure(url=url, target_metadata=None, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online(url: str) -> None:
    # Batch mode: SQLite cannot ALTER most column properties in place
    with create_engine(url).connect() as connection:
        context.configure(connection=connection, target_metadata=None, render_as_batch=True)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline(database_url())
else:
    run_migrations_online(database_url())
