#!/usr/bin/env python3
"""
Standalone database initialization script.
Creates all tables for the configured DATABASE_URL.
"""

import sys
import logging
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("init_db")


def main() -> int:
    import time

    from sqlalchemy import inspect
    from sqlalchemy.exc import SQLAlchemyError

    from app.config import settings
    from domain.models.database import engine, init_database

    logger.info("Initializing database at %s", engine.url.render_as_string(hide_password=True))
    for attempt in range(1, settings.db_init_attempts + 1):
        try:
            init_database()
            break
        except SQLAlchemyError as e:
            logger.warning("Attempt %d/%d failed: %s", attempt, settings.db_init_attempts, e)
            if attempt == settings.db_init_attempts:
                logger.error("Failed to initialize database")
                return 1
            time.sleep(settings.db_init_delay_sec)

    tables = inspect(engine).get_table_names()
    logger.info("Created %d tables: %s", len(tables), ", ".join(sorted(tables)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
