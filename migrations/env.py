from __future__ import annotations

from alembic import context

from app.config import SETTINGS
from app.infra.db import Base, build_engine
from app.infra import models  # noqa: F401

target_metadata = Base.metadata
database_url = context.config.get_main_option("sqlalchemy.url") or SETTINGS.database_url


def run_migrations_offline() -> None:
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = build_engine(database_url)
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
