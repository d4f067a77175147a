import logging
import sys

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from portal_hub.core.database import DATABASE_URL

logger = logging.getLogger("portal-hub")

PORTAL_TABLES = ("users", "docs", "links", "memos")


def sync_url(url: str) -> str:
    return url.replace("+aiosqlite", "").replace("+asyncpg", "")


def main(config_path: str = "alembic.ini") -> None:
    """Bring the database to the latest revision.

    Databases created by the app's startup ``create_all`` have the tables but
    no ``alembic_version``; those are stamped at head instead of migrated.
    """
    engine = create_engine(sync_url(DATABASE_URL))
    try:
        insp = inspect(engine)
        has_alembic = insp.has_table("alembic_version")
        existing = [t for t in PORTAL_TABLES if insp.has_table(t)]
    finally:
        engine.dispose()

    cfg = Config(config_path)
    if existing and not has_alembic:
        logger.info("[db-migrate] Tables %s exist without alembic_version, stamping head", existing)
        command.stamp(cfg, "head")
    else:
        logger.info("[db-migrate] has_alembic=%s, existing=%s", has_alembic, existing)

    command.upgrade(cfg, "head")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        main()
    except Exception as e:
        logger.error("[db-migrate] Migration failed: %s", e)
        sys.exit(1)
