"""
Request and response schemas for the users and notes endpoints.

Request bodies are validated here, before they reach the consistency
layer. A body that does not fit its schema is rejected as a whole with the
operation's message; there is no per-field error report.
"""
from datetime import datetime
from typing import Annotated, Any, ClassVar, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError, field_validator

from technotes_database.models import TITLE_MAX_LENGTH, USERNAME_MAX_LENGTH

from .errors import InvalidDataError

RequiredStr = Annotated[str, Field(min_length=1, strict=True)]
UsernameStr = Annotated[str, Field(min_length=1, max_length=USERNAME_MAX_LENGTH, strict=True)]
TitleStr = Annotated[str, Field(min_length=1, max_length=TITLE_MAX_LENGTH, strict=True)]

ALL_FIELDS_REQUIRED = "All fields are required"


class RequestSchema(BaseModel):
    missing_message: ClassVar[str] = ALL_FIELDS_REQUIRED


def _unique_roles(roles):
    # roles form a set; the first occurrence keeps its position
    return list(dict.fromkeys(roles))


# PUBLIC_INTERFACE
def parse_request(schema, payload: Any):
    """
    Validates payload against schema.

    Raises InvalidDataError carrying the schema's message on the first
    violation.
    """
    if not isinstance(payload, dict):
        raise InvalidDataError(schema.missing_message)
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        raise InvalidDataError(schema.missing_message) from exc


class UserCreateRequest(RequestSchema):
    username: UsernameStr
    password: RequiredStr
    roles: Optional[List[str]] = None

    @field_validator("roles", mode="before")
    @classmethod
    def _roles_only_when_given(cls, value):
        # anything but a non-empty list falls back to the default role
        if not isinstance(value, list) or not value:
            return None
        return value

    @field_validator("roles")
    @classmethod
    def _dedupe_roles(cls, value):
        return _unique_roles(value) if value else value


class UserUpdateRequest(RequestSchema):
    id: RequiredStr
    username: UsernameStr
    password: Optional[str] = None
    roles: Annotated[List[str], Field(min_length=1)]
    active: StrictBool

    @field_validator("roles")
    @classmethod
    def _dedupe_roles(cls, value):
        return _unique_roles(value)


class UserDeleteRequest(RequestSchema):
    missing_message: ClassVar[str] = "User ID is required"

    id: RequiredStr


class NoteCreateRequest(RequestSchema):
    user: RequiredStr
    title: TitleStr
    text: RequiredStr


class NoteUpdateRequest(RequestSchema):
    id: RequiredStr
    user: RequiredStr
    title: TitleStr
    text: RequiredStr
    completed: Optional[StrictBool] = None

    @field_validator("completed", mode="before")
    @classmethod
    def _falsy_completed_is_absent(cls, value):
        if not value:
            return None
        return value


class NoteDeleteRequest(RequestSchema):
    missing_message: ClassVar[str] = "Note ID and user ID are required"

    id: RequiredStr
    user: RequiredStr


class MessageOut(BaseModel):
    message: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    roles: List[str]
    active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class NoteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user: str
    username: Optional[str] = None
    title: str
    text: str
    completed: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
