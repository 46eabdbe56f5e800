import logging
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import text

from churchfinder.core.database import db
from churchfinder.core.logging_config import setup_logging

logger = logging.getLogger(__name__)

ALEMBIC_INI = Path(__file__).resolve().parent.parent.parent / "alembic.ini"


def init_database(revision: str = "head") -> bool:
    """Apply migrations up to ``revision`` and check the connection."""
    alembic_cfg = Config(str(ALEMBIC_INI))
    command.upgrade(alembic_cfg, revision)

    with db.session() as session:
        session.execute(text("SELECT 1"))
    logger.info(f"Database migrated to {revision}")
    return True


def main() -> int:
    setup_logging()
    try:
        init_database()
        return 0
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
