"""
Database initialization script.

Run this script to create all required tables in the database.
"""
from technotes_database.db import create_db_engine
from technotes_database.models import Base


# PUBLIC_INTERFACE
def init_db(engine=None):
    """Initializes the database by creating all tables if they do not exist."""
    engine = engine or create_db_engine()
    Base.metadata.create_all(bind=engine)
    return engine


if __name__ == "__main__":
    init_db()
    print("Database tables created successfully.")
