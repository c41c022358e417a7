"""
In-memory stand-ins for the user and note repositories.

They keep records in dicts and apply the same collation rule as the SQL
repositories, so the directory and ledger can be exercised without a
database. Write counters let tests assert that a rejected operation did
not touch the store.
"""
import itertools
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from technotes_database.collation import collation_key
from technotes_database.models import DEFAULT_ROLE
from technotes_database.repositories import DuplicateKeyError

_ids = itertools.count(1)


def _next_id():
    return f"{next(_ids):024x}"


@dataclass
class FakeUser:
    username: str
    password: str
    roles: List[str] = field(default_factory=lambda: [DEFAULT_ROLE])
    active: bool = True
    id: str = field(default_factory=_next_id)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


@dataclass
class FakeNote:
    user_id: str
    title: str
    text: str
    completed: bool = False
    id: str = field(default_factory=_next_id)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


class _FakeCollection:
    key_attr = None

    def __init__(self):
        self.records = {}
        self.writes = 0

    def _check_unique(self, record):
        key = collation_key(getattr(record, self.key_attr))
        for other in self.records.values():
            if other.id != record.id and collation_key(getattr(other, self.key_attr)) == key:
                raise DuplicateKeyError(key)

    def _store(self, record):
        self._check_unique(record)
        self.writes += 1
        self.records[record.id] = record
        return record

    def find_by_id(self, record_id):
        return self.records.get(record_id)

    def find_all(self):
        return list(self.records.values())

    def save(self, record):
        record.updated_at = datetime.utcnow()
        return self._store(record)

    def delete(self, record):
        self.writes += 1
        return self.records.pop(record.id)


class FakeUserRepository(_FakeCollection):
    key_attr = "username"

    def __init__(self):
        super().__init__()
        self.batch_lookups = 0

    def find_by_ids(self, user_ids):
        self.batch_lookups += 1
        return [self.records[user_id] for user_id in user_ids if user_id in self.records]

    def find_one_by_username(self, username):
        key = collation_key(username)
        return next(
            (user for user in self.records.values() if collation_key(user.username) == key),
            None,
        )

    def create(self, username, password, roles=None):
        user = FakeUser(username=username, password=password)
        if roles:
            user.roles = list(roles)
        return self._store(user)


class FakeNoteRepository(_FakeCollection):
    key_attr = "title"

    def find_one_by_title(self, title):
        key = collation_key(title)
        return next(
            (note for note in self.records.values() if collation_key(note.title) == key),
            None,
        )

    def find_one_by_user(self, user_id):
        return next((note for note in self.records.values() if note.user_id == user_id), None)

    def find_one_owned(self, note_id, user_id):
        note = self.records.get(note_id)
        if note and note.user_id == user_id:
            return note
        return None

    def create(self, user_id, title, text):
        return self._store(FakeNote(user_id=user_id, title=title, text=text))


class FakeHasher:
    """Deterministic stand-in for PasswordHasher."""

    def __init__(self):
        self.calls = 0

    def hash(self, password):
        self.calls += 1
        return f"hashed:{password}"

    def verify(self, password, hashed_password):
        return hashed_password == f"hashed:{password}"
