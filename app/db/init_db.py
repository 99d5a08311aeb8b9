import logging
from sqlalchemy import inspect

import app.db.base  # noqa: F401  registers every model on Base.metadata
from app.db.session import engine, Base

logger = logging.getLogger(__name__)


def create_all_tables(bind=None) -> bool:
    bind = bind or engine
    try:
        inspector = inspect(bind)
        existing_tables = inspector.get_table_names()

        Base.metadata.create_all(bind=bind)

        new_tables = set(inspect(bind).get_table_names()) - set(existing_tables)
        if new_tables:
            logger.info(f"Created new tables: {new_tables}")

        return True
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")
        return False


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    logger.info("Creating database tables")
    create_all_tables()
    logger.info("Database tables created")
