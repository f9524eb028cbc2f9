import logging
import uvicorn
from adgen.config import settings
from adgen.db import init_db

if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    # Create the database and tables if needed
    init_db()

    # Start the API server
    logging.getLogger(__name__).info(f"Starting API server on {settings.API_HOST}:{settings.API_PORT}...")
    uvicorn.run(
        "adgen.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_RELOAD
    )
