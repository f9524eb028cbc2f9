from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
import psycopg2
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
import logging

from adgen.config import settings, get_db_components

logger = logging.getLogger(__name__)

def create_database_if_not_exists():
    """Create the PostgreSQL database if it doesn't exist."""
    if make_url(settings.DATABASE_URL).get_backend_name() != "postgresql":
        return

    db_components = get_db_components()
    db_name = db_components["db_name"]

    # Connect to default postgres database to check if our db exists
    conn = psycopg2.connect(db_components["db_url_without_name"])
    conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
    cursor = conn.cursor()

    # Check if database exists
    cursor.execute("SELECT 1 FROM pg_catalog.pg_database WHERE datname = %s", (db_name,))
    exists = cursor.fetchone()

    if not exists:
        logger.info(f"Database '{db_name}' does not exist. Creating...")
        # Note: Database names cannot be parameterized in PostgreSQL CREATE DATABASE
        cursor.execute(f'CREATE DATABASE "{db_name}"')
        logger.info(f"Database '{db_name}' created successfully")
    else:
        logger.info(f"Database '{db_name}' already exists")

    cursor.close()
    conn.close()


def _engine_kwargs(url: str) -> dict:
    if make_url(url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}

# Create SQLAlchemy engine
engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create a database session dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
