"""
Logging setup and request logging.

With a log directory configured, requests go to reqLog.log and unhandled
errors to errLog.log in that directory, in addition to the console.
"""
import logging
from pathlib import Path

from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_LOGGER = logging.getLogger("technotes.requests")
ERROR_LOGGER = logging.getLogger("technotes.errors")

LOG_FORMAT = "%(asctime)s\t%(name)s\t%(levelname)s\t%(message)s"


def _attach_file_handler(logger, path):
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == str(path):
            return
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)


# PUBLIC_INTERFACE
def configure_logging(config) -> None:
    """Configure logging based on the application configuration."""
    level = getattr(logging, (config.log_level or "INFO").upper(), None)
    if not isinstance(level, int):
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logging.getLogger(__name__).warning("Invalid log level: %s, using INFO", config.log_level)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)

    if config.log_dir:
        log_dir = Path(config.log_dir).resolve()
        log_dir.mkdir(parents=True, exist_ok=True)
        _attach_file_handler(REQUEST_LOGGER, log_dir / "reqLog.log")
        _attach_file_handler(ERROR_LOGGER, log_dir / "errLog.log")


def describe_request(request) -> str:
    origin = request.headers.get("origin", "")
    return f"{request.method}\t{request.url}\t{origin}"


# PUBLIC_INTERFACE
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, url and origin of every request."""

    async def dispatch(self, request, call_next):
        REQUEST_LOGGER.info(describe_request(request))
        return await call_next(request)
