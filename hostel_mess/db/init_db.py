"""Database initialization utilities."""
from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from hostel_mess.core.logging import get_logger
from hostel_mess.models import Base

logger = get_logger(__name__)


def _resolve(bind: Engine = None) -> Engine:
    if bind is not None:
        return bind
    from hostel_mess.db.session import engine

    return engine


def init_db(bind: Engine = None) -> None:
    """
    Create all tables that do not exist yet.

    Note: suitable for development and tests; production schemas are
    expected to be managed by migrations.
    """
    bind = _resolve(bind)
    try:
        existing_tables = set(inspect(bind).get_table_names())
        Base.metadata.create_all(bind=bind)
        created = set(Base.metadata.tables) - existing_tables
        if created:
            logger.info("Database tables created", extra={"tables": sorted(created)})
        else:
            logger.info(
                f"Database already initialized with {len(existing_tables)} tables"
            )
    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise


def drop_db(bind: Engine = None) -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data!
    """
    bind = _resolve(bind)
    try:
        Base.metadata.drop_all(bind=bind)
        logger.warning("All database tables dropped")
    except Exception as e:
        logger.error(f"Error dropping database: {e}")
        raise


def reset_db(bind: Engine = None) -> None:
    """Drop and recreate all tables."""
    logger.warning("Resetting database...")
    drop_db(bind)
    init_db(bind)
    logger.info("Database reset complete")
