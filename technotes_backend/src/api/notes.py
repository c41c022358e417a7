"""
Note ledger: notes with globally unique (collated) titles, each owned by
an existing user.
"""
import logging

from technotes_database.repositories import DuplicateKeyError, StoreWriteError

from .errors import ConflictError, InvalidDataError, NoteOwnerNotFoundError, NotFoundError
from .schemas import NoteCreateRequest, NoteDeleteRequest, NoteUpdateRequest

LOGGER = logging.getLogger(__name__)

NOTE_NOT_FOUND = "Note is not found"
INVALID_NOTE_DATA = "Invalid note data received"


def note_to_dict(note, username=None):
    return {
        "id": note.id,
        "user": note.user_id,
        "username": username,
        "title": note.title,
        "text": note.text,
        "completed": note.completed,
        "created_at": note.created_at,
        "updated_at": note.updated_at,
    }


# PUBLIC_INTERFACE
class NoteLedger:
    """
    Owns note records. Reads users only to resolve owners.
    """

    def __init__(self, notes, users):
        self.notes = notes
        self.users = users

    def list_notes(self):
        """
        Returns every note joined with its owner's username.

        Owners are fetched in one batch lookup. An empty collection is
        reported as not found.
        """
        notes = self.notes.find_all()
        if not notes:
            raise NotFoundError("No notes found")

        owners = self.users.find_by_ids({note.user_id for note in notes})
        usernames = {user.id: user.username for user in owners}
        return [note_to_dict(note, usernames.get(note.user_id)) for note in notes]

    def create_note(self, request: NoteCreateRequest) -> str:
        if not self.users.find_by_id(request.user):
            raise NoteOwnerNotFoundError("user is not found")

        if self.notes.find_one_by_title(request.title):
            LOGGER.debug("Rejected duplicate note title %r", request.title)
            raise ConflictError("Duplicate note title")

        try:
            note = self.notes.create(request.user, request.title, request.text)
        except DuplicateKeyError as exc:
            raise ConflictError("Duplicate note title") from exc
        except StoreWriteError as exc:
            raise InvalidDataError(INVALID_NOTE_DATA) from exc

        LOGGER.info("Created note %s for user %s", note.id, note.user_id)
        return f"New note {request.title} created"

    def update_note(self, request: NoteUpdateRequest) -> str:
        if not self.users.find_by_id(request.user):
            raise NotFoundError("User is not found")

        note = self.notes.find_by_id(request.id)
        if not note:
            raise NotFoundError(NOTE_NOT_FOUND)

        # a note may keep its own title
        duplicate = self.notes.find_one_by_title(request.title)
        if duplicate and duplicate.id != request.id:
            LOGGER.debug("Rejected duplicate note title %r for note %s", request.title, request.id)
            raise ConflictError("Duplicate title")

        note.title = request.title
        note.text = request.text

        # only a truthy value is applied; completed cannot be cleared here
        if request.completed:
            note.completed = request.completed

        try:
            updated_note = self.notes.save(note)
        except DuplicateKeyError as exc:
            raise ConflictError("Duplicate title") from exc
        except StoreWriteError as exc:
            raise InvalidDataError(INVALID_NOTE_DATA) from exc

        LOGGER.info("Updated note %s", updated_note.id)
        return f"{updated_note.title} updated"

    def delete_note(self, request: NoteDeleteRequest) -> str:
        note = self.notes.find_one_owned(request.id, request.user)
        if not note:
            raise NotFoundError(NOTE_NOT_FOUND)

        result = self.notes.delete(note)

        LOGGER.info("Deleted note %s", result.id)
        return f"Note title {result.title} with ID {result.id} deleted"
