import os

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

DEFAULT_DATABASE_URL = "sqlite:///./technotes.db"


# PUBLIC_INTERFACE
def get_database_url():
    """
    Retrieves the database URL from the environment variable DATABASE_URL,
    falling back to a local SQLite file.
    """
    load_dotenv()
    return os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL


def _is_sqlite_memory(database_url):
    return database_url in ("sqlite://", "sqlite:///:memory:")


# PUBLIC_INTERFACE
def create_db_engine(database_url=None):
    """
    Creates the SQLAlchemy engine for database_url.

    In-memory SQLite shares one connection across threads so every session
    sees the same database.
    """
    database_url = database_url or get_database_url()
    if _is_sqlite_memory(database_url):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(database_url, echo=False)


# PUBLIC_INTERFACE
def create_session_factory(engine):
    """Returns a session factory bound to engine."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
