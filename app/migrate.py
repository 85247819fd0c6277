from __future__ import annotations

import logging
import sys

from alembic import command
from alembic.config import Config

from app.config import PROJECT_ROOT, SETTINGS
from app.infra.logging import setup_logging

logger = logging.getLogger(__name__)


def alembic_config(database_url: str = SETTINGS.database_url) -> Config:
    config = Config(str(PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return config


def upgrade(database_url: str = SETTINGS.database_url) -> None:
    command.upgrade(alembic_config(database_url), "head")


def main() -> None:
    setup_logging()
    try:
        upgrade()
    except Exception:  # noqa: BLE001
        logger.exception("Migration failed")
        sys.exit(1)
    logger.info("Migration completed for %s", SETTINGS.database_url)


if __name__ == "__main__":
    main()
