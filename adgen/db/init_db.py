"""
Database initialization and reset utilities.
"""
import logging

from adgen.db.models import Base
from adgen.db.database import engine, create_database_if_not_exists

logger = logging.getLogger(__name__)

def create_tables(bind=None):
    """Create all tables defined in models."""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=bind or engine)
    logger.info("All tables created successfully")

def drop_all_tables(bind=None):
    """Drop all tables (useful for testing)."""
    logger.info("Dropping all database tables...")
    Base.metadata.drop_all(bind=bind or engine)
    logger.info("All tables dropped successfully")

def reset_database(bind=None):
    """Drop and recreate all tables."""
    logger.info("Resetting database...")
    drop_all_tables(bind)
    create_tables(bind)
    logger.info("Database reset complete")

def init_database():
    """Complete database initialization."""
    logger.info("Initializing database...")
    create_database_if_not_exists()
    create_tables()
    logger.info("Database initialization complete")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_database()
