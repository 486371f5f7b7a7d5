import pathlib
import sys
from logging.config import fileConfig

from alembic import context

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import database  # noqa: E402
from app import models  # noqa: E402

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Migrations run against the same URL, driver and timeouts the API uses.
# ConfigParser needs percent signs doubled.
config.set_main_option("sqlalchemy.url", database.DATABASE_URL.replace("%", "%%"))

target_metadata = models.Base.metadata
# SQLite cannot ALTER constraints in place; batch mode rebuilds the table instead.
render_as_batch = database.engine.dialect.name == "sqlite"


def run_migrations_offline() -> None:
    context.configure(
        url=database.DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        render_as_batch=render_as_batch,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    with database.engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=render_as_batch,
        )
        with context.begin_transaction():
            context.run_migrations()
    database.engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
