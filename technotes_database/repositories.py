"""
Store access for users and notes.

Each repository is bound to one SQLAlchemy session and commits every write
on its own, so an operation performs at most one persistence write.
"""
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from technotes_database.collation import collation_key
from technotes_database.models import Note, User


class StoreWriteError(Exception):
    """Raised when the database refuses a write."""


class DuplicateKeyError(StoreWriteError):
    """Raised when a write violates a unique collation key."""


def _commit(session, instance, key_column):
    """
    Commits the pending write of instance.

    An integrity failure is only reported as DuplicateKeyError when another
    record really holds the same collation key; anything else (a foreign
    key, a NOT NULL column) is a StoreWriteError.
    """
    model = type(instance)
    key = getattr(instance, key_column.key)
    record_id = instance.id
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        stmt = select(model.id).where(key_column == key)
        if record_id is not None:
            stmt = stmt.where(model.id != record_id)
        if session.scalars(stmt).first() is not None:
            raise DuplicateKeyError(key) from exc
        raise StoreWriteError(str(exc.orig)) from exc
    session.refresh(instance)
    return instance


# PUBLIC_INTERFACE
class UserRepository:
    """Users collection."""

    def __init__(self, session):
        self.session = session

    def find_by_id(self, user_id):
        return self.session.get(User, user_id)

    def find_by_ids(self, user_ids):
        if not user_ids:
            return []
        stmt = select(User).where(User.id.in_(set(user_ids)))
        return list(self.session.scalars(stmt))

    def find_one_by_username(self, username):
        """Collated lookup: matches usernames differing only in case or accents."""
        stmt = select(User).where(User.username_key == collation_key(username))
        return self.session.scalars(stmt).first()

    def find_all(self):
        return list(self.session.scalars(select(User).order_by(User.created_at)))

    def create(self, username, password, roles=None):
        user = User(
            username=username,
            username_key=collation_key(username),
            password=password,
        )
        if roles:
            user.roles = list(roles)
        self.session.add(user)
        return _commit(self.session, user, User.username_key)

    def save(self, user):
        user.username_key = collation_key(user.username)
        return _commit(self.session, user, User.username_key)

    def delete(self, user):
        self.session.delete(user)
        self.session.commit()
        return user


# PUBLIC_INTERFACE
class NoteRepository:
    """Notes collection."""

    def __init__(self, session):
        self.session = session

    def find_by_id(self, note_id):
        return self.session.get(Note, note_id)

    def find_one_by_title(self, title):
        """Collated lookup across all notes, regardless of owner."""
        stmt = select(Note).where(Note.title_key == collation_key(title))
        return self.session.scalars(stmt).first()

    def find_one_by_user(self, user_id):
        stmt = select(Note).where(Note.user_id == user_id)
        return self.session.scalars(stmt).first()

    def find_one_owned(self, note_id, user_id):
        """Returns the note only if both its id and its owner match."""
        stmt = select(Note).where(Note.id == note_id, Note.user_id == user_id)
        return self.session.scalars(stmt).first()

    def find_all(self):
        return list(self.session.scalars(select(Note).order_by(Note.created_at)))

    def create(self, user_id, title, text):
        note = Note(
            user_id=user_id,
            title=title,
            title_key=collation_key(title),
            text=text,
            completed=False,
        )
        self.session.add(note)
        return _commit(self.session, note, Note.title_key)

    def save(self, note):
        note.title_key = collation_key(note.title)
        return _commit(self.session, note, Note.title_key)

    def delete(self, note):
        self.session.delete(note)
        self.session.commit()
        return note
