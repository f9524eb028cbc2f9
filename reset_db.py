import logging
from adgen.config import get_db_components
from adgen.db.init_db import reset_database

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    db_name = get_db_components()["db_name"]
    confirm = input(f"This will DELETE ALL DATA in the database '{db_name}'. Are you sure? (y/n): ")
    if confirm.lower() == 'y':
        reset_database()
        print(f"Database '{db_name}' has been reset successfully!")
    else:
        print("Operation cancelled.")
