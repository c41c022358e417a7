import logging
import os
from contextlib import asynccontextmanager
from typing import Any, List

from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from technotes_database.db import create_db_engine, create_session_factory
from technotes_database.init_db import init_db
from technotes_database.repositories import NoteRepository, UserRepository

from .config import AppConfig, load_config_from_env
from .errors import TechnotesError
from .logging_config import ERROR_LOGGER, RequestLoggingMiddleware, configure_logging, describe_request
from .notes import NoteLedger
from .schemas import (
    MessageOut,
    NoteCreateRequest,
    NoteDeleteRequest,
    NoteOut,
    NoteUpdateRequest,
    UserCreateRequest,
    UserDeleteRequest,
    UserOut,
    UserUpdateRequest,
    parse_request,
)
from .security import PasswordHasher
from .users import UserDirectory

LOGGER = logging.getLogger(__name__)


# DATABASE Dependency
def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def get_user_directory(db=Depends(get_db), hasher: PasswordHasher = Depends(get_hasher)) -> UserDirectory:
    return UserDirectory(UserRepository(db), NoteRepository(db), hasher)


def get_note_ledger(db=Depends(get_db)) -> NoteLedger:
    return NoteLedger(NoteRepository(db), UserRepository(db))


#####################
# USERS ENDPOINTS
#####################

users_router = APIRouter()


# PUBLIC_INTERFACE
@users_router.get("", response_model=List[UserOut], summary="List all users")
def list_users(directory: UserDirectory = Depends(get_user_directory)):
    """
    Returns every user without credentials.
    Responds 400 when there are no users at all.
    """
    return directory.list_users()


# PUBLIC_INTERFACE
@users_router.post("", response_model=MessageOut, status_code=201, summary="Create a new user")
def create_user(payload: Any = Body(None), directory: UserDirectory = Depends(get_user_directory)):
    """
    Create a user. Usernames are unique regardless of case and accents.
    Roles default to Employee when none are given.
    """
    request = parse_request(UserCreateRequest, payload)
    return {"message": directory.create_user(request)}


# PUBLIC_INTERFACE
@users_router.patch("", response_model=MessageOut, summary="Update a user")
def update_user(payload: Any = Body(None), directory: UserDirectory = Depends(get_user_directory)):
    """
    Update username, roles and active flag of a user, and its password
    when a new one is supplied.
    """
    request = parse_request(UserUpdateRequest, payload)
    return {"message": directory.update_user(request)}


# PUBLIC_INTERFACE
@users_router.delete("", response_model=MessageOut, summary="Delete a user")
def delete_user(payload: Any = Body(None), directory: UserDirectory = Depends(get_user_directory)):
    """
    Delete a user that has no notes assigned.
    """
    request = parse_request(UserDeleteRequest, payload)
    return {"message": directory.delete_user(request)}


#####################
# NOTES ENDPOINTS
#####################

notes_router = APIRouter()


# PUBLIC_INTERFACE
@notes_router.get("", response_model=List[NoteOut], summary="List all notes")
def list_notes(ledger: NoteLedger = Depends(get_note_ledger)):
    """
    Returns every note together with the username of its owner.
    Responds 400 when there are no notes at all.
    """
    return ledger.list_notes()


# PUBLIC_INTERFACE
@notes_router.post("", response_model=MessageOut, status_code=201, summary="Create a new note")
def create_note(payload: Any = Body(None), ledger: NoteLedger = Depends(get_note_ledger)):
    """
    Create a note for an existing user. Titles are unique across all notes.
    """
    request = parse_request(NoteCreateRequest, payload)
    return {"message": ledger.create_note(request)}


# PUBLIC_INTERFACE
@notes_router.patch("", response_model=MessageOut, summary="Update a note")
def update_note(payload: Any = Body(None), ledger: NoteLedger = Depends(get_note_ledger)):
    """
    Update title and text of a note; completed is only ever set, never cleared.
    """
    request = parse_request(NoteUpdateRequest, payload)
    return {"message": ledger.update_note(request)}


# PUBLIC_INTERFACE
@notes_router.delete("", response_model=MessageOut, summary="Delete a note")
def delete_note(payload: Any = Body(None), ledger: NoteLedger = Depends(get_note_ledger)):
    """
    Delete a note identified by its id and the id of its owner.
    """
    request = parse_request(NoteDeleteRequest, payload)
    return {"message": ledger.delete_note(request)}


#####################
# ERROR HANDLERS
#####################

def technotes_error_handler(request: Request, exc: TechnotesError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


def custom_http_exception_handler(request: Request, exc: StarletteHTTPException):
    # an unsupported method on a known path is answered like an unknown route
    if exc.status_code in (404, 405):
        accept = request.headers.get("accept", "*/*")
        if "json" in accept or "*/*" in accept:
            return JSONResponse(status_code=404, content={"message": "404 Not Found"})
        return PlainTextResponse("404 Not Found", status_code=404)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"message": "Invalid request body"})


def unhandled_error_handler(request: Request, exc: Exception):
    ERROR_LOGGER.error("%s: %s\t%s", type(exc).__name__, exc, describe_request(request), exc_info=exc)
    return JSONResponse(status_code=500, content={"message": str(exc), "isError": True})


# PUBLIC_INTERFACE
def create_app(config: AppConfig = None) -> FastAPI:
    """
    Build the technotes API.

    Without an explicit config it is loaded from the environment, reading
    the file named by ENV_FILE (default .env) first.
    """
    if config is None:
        config = load_config_from_env(os.environ.get("ENV_FILE", ".env"))
    configure_logging(config)

    engine = create_db_engine(config.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(engine)
        LOGGER.info("Connected to database %s", engine.url.render_as_string(hide_password=True))
        yield
        engine.dispose()
        LOGGER.info("technotes API is shutting down")

    app = FastAPI(
        title="technotes API",
        description="Users and notes with case-insensitive uniqueness and ownership checks.",
        version="1.0.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Users", "description": "Create, update, list and delete users"},
            {"name": "Notes", "description": "Create, update, list and delete notes"},
        ],
    )
    app.state.config = config
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.hasher = PasswordHasher(config.bcrypt_rounds)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(TechnotesError, technotes_error_handler)
    app.add_exception_handler(StarletteHTTPException, custom_http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Root Health Check
    @app.get("/", summary="Health Check", tags=["General"])
    def health_check():
        """Simple health check endpoint."""
        return {"message": "Healthy"}

    app.include_router(users_router, prefix="/users", tags=["Users"])
    app.include_router(notes_router, prefix="/notes", tags=["Notes"])

    return app
