from __future__ import annotations

import os
import sys

from alembic import command
from alembic.config import Config

from driver_schedule.infra.db import DATABASE_URL

ALEMBIC_CONFIG = os.getenv("ALEMBIC_CONFIG", "alembic.ini")


def load_config(database_url: str | None = None) -> Config:
    config = Config(ALEMBIC_CONFIG)
    config.set_main_option("sqlalchemy.url", database_url or DATABASE_URL)
    return config


def upgrade(revision: str = "head", database_url: str | None = None) -> None:
    command.upgrade(load_config(database_url), revision)


def downgrade(revision: str, database_url: str | None = None) -> None:
    command.downgrade(load_config(database_url), revision)


if __name__ == "__main__":
    args = sys.argv[1:]
    if args and args[0] == "downgrade":
        downgrade(args[1] if len(args) > 1 else "-1")
    else:
        upgrade(args[0] if args else "head")
