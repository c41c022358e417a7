import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

DEFAULT_ROLE = "Employee"
ROLES = ("Employee", "Manager", "Admin")
USERNAME_MAX_LENGTH = 64
TITLE_MAX_LENGTH = 128


def _new_id():
    return uuid.uuid4().hex


def _default_roles():
    return [DEFAULT_ROLE]


# PUBLIC_INTERFACE
class User(Base):
    """
    SQLAlchemy model for a user of the technotes app.

    username_key holds the collation key of username and is what
    uniqueness is enforced on.
    """
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=_new_id)
    username = Column(String(USERNAME_MAX_LENGTH), nullable=False)
    # collation keys can be longer than the value they are derived from
    username_key = Column(Text, unique=True, index=True, nullable=False)
    password = Column(String(256), nullable=False)
    roles = Column(JSON, nullable=False, default=_default_roles)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    notes = relationship("Note", back_populates="owner")


# PUBLIC_INTERFACE
class Note(Base):
    """
    SQLAlchemy model for a note.

    The owner reference is checked by the application before writes; the
    foreign key is informational and not relied upon for integrity.
    """
    __tablename__ = "notes"

    id = Column(String(32), primary_key=True, default=_new_id)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    title_key = Column(Text, unique=True, index=True, nullable=False)
    text = Column(Text, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user_id = Column(String(32), ForeignKey("users.id"), index=True, nullable=False)
    owner = relationship("User", back_populates="notes")
