from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from fieldops.core.settings import settings
from fieldops.db.base import Base
import fieldops.models  # noqa: F401  (remplit Base.metadata)

"""
Alembic env.

Rôle (fonctionnel) :
- Exécute les migrations avec l’URL synchrone des settings (DATABASE_URL_SYNC, driver psycopg).
- Expose Base.metadata (tous les modèles importés) pour l’autogenerate.
"""

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

config.set_main_option("sqlalchemy.url", settings.DATABASE_URL_SYNC)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Mode offline : génère le SQL sans connexion."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Mode online : connexion directe à la base."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
