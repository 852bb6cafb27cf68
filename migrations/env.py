import sys
import os
from logging.config import fileConfig

# Set the correct path for the wildtrack package
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from sqlalchemy import engine_from_config, pool
from alembic import context

# Importing the models registers every table on Base.metadata
from wildtrack.config import settings
from wildtrack.database import Base
from wildtrack import models  # noqa: F401

# Load the Alembic configuration
config = context.config

# DATABASE_URL comes from the same settings the application uses
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

# Setup logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)
target_metadata = Base.metadata

def run_migrations_offline():
    """Run migrations in 'offline' mode."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online():
    """Run migrations in 'online' mode."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
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

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
