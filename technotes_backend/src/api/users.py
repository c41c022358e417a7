"""
User directory: create, update and delete users with collated username
uniqueness and the "no assigned notes" deletion rule.

Every operation re-reads the store before deciding and performs at most
one write. Checks are check-then-act; a write that loses a race against a
concurrent duplicate is still rejected by the unique username key.
"""
import logging

from technotes_database.models import ROLES
from technotes_database.repositories import DuplicateKeyError, StoreWriteError

from .errors import ConflictError, DependencyError, InvalidDataError, NotFoundError
from .schemas import UserCreateRequest, UserDeleteRequest, UserUpdateRequest

LOGGER = logging.getLogger(__name__)

DUPLICATE_USERNAME = "Duplicate username"
USER_NOT_FOUND = "User is not found"
INVALID_USER_DATA = "Invalid user data received"


def _check_roles(roles):
    if roles and any(role not in ROLES for role in roles):
        raise InvalidDataError(INVALID_USER_DATA)


# PUBLIC_INTERFACE
class UserDirectory:
    """
    Owns user records. Stateless; build one per request around the
    repositories bound to that request's session.
    """

    def __init__(self, users, notes, hasher):
        self.users = users
        self.notes = notes
        self.hasher = hasher

    def list_users(self):
        """Returns all users. An empty collection is reported as not found."""
        users = self.users.find_all()
        if not users:
            raise NotFoundError("No users found")
        return users

    def create_user(self, request: UserCreateRequest) -> str:
        _check_roles(request.roles)

        if self.users.find_one_by_username(request.username):
            LOGGER.debug("Rejected duplicate username %r", request.username)
            raise ConflictError(DUPLICATE_USERNAME)

        hashed_password = self.hasher.hash(request.password)
        try:
            user = self.users.create(request.username, hashed_password, roles=request.roles)
        except DuplicateKeyError as exc:
            raise ConflictError(DUPLICATE_USERNAME) from exc
        except StoreWriteError as exc:
            raise InvalidDataError(INVALID_USER_DATA) from exc

        LOGGER.info("Created user %s", user.id)
        return f"New user {request.username} created"

    def update_user(self, request: UserUpdateRequest) -> str:
        _check_roles(request.roles)

        user = self.users.find_by_id(request.id)
        if not user:
            raise NotFoundError(USER_NOT_FOUND)

        # a user may keep its own username
        duplicate = self.users.find_one_by_username(request.username)
        if duplicate and duplicate.id != request.id:
            LOGGER.debug("Rejected duplicate username %r for user %s", request.username, request.id)
            raise ConflictError(DUPLICATE_USERNAME)

        user.username = request.username
        user.roles = list(request.roles)
        user.active = request.active

        if request.password:
            user.password = self.hasher.hash(request.password)

        try:
            updated_user = self.users.save(user)
        except DuplicateKeyError as exc:
            raise ConflictError(DUPLICATE_USERNAME) from exc
        except StoreWriteError as exc:
            raise InvalidDataError(INVALID_USER_DATA) from exc

        LOGGER.info("Updated user %s", updated_user.id)
        return f"{updated_user.username} updated"

    def delete_user(self, request: UserDeleteRequest) -> str:
        if self.notes.find_one_by_user(request.id):
            raise DependencyError("User has assigned notes")

        user = self.users.find_by_id(request.id)
        if not user:
            raise NotFoundError(USER_NOT_FOUND)

        result = self.users.delete(user)

        LOGGER.info("Deleted user %s", result.id)
        return f"Username {result.username} with ID {result.id} deleted"
