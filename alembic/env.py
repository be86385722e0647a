from __future__ import annotations

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

import agendatop.db.base  # noqa: F401  (todas as models no metadata)
from alembic import context
from agendatop.core.settings import settings
from agendatop.db.base_class import Base

config = context.config

# a URL vem sempre do settings (.env.dev / variáveis de ambiente), nunca do .ini
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _options(is_sqlite: bool) -> dict:
    return dict(
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        # SQLite não tem ALTER TABLE completo; o índice parcial dos
        # agendamentos funciona nos dois bancos
        render_as_batch=is_sqlite,
    )


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(url=url, literal_binds=True, **_options(url.startswith("sqlite")))
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection, **_options(connection.dialect.name == "sqlite")
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
