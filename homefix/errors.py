# homefix/errors.py
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class HomefixError(Exception):
    """Base for errors raised by the domain operations."""
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationFailed(HomefixError):
    status_code = 422


class NotFound(HomefixError):
    status_code = 404


class InvalidTransition(HomefixError):
    status_code = 409

    def __init__(self, current: str, target: str):
        super().__init__(f"invalid transition: {current} -> {target}")
        self.current = current
        self.target = target


class AssignmentFailed(HomefixError):
    status_code = 409

    def __init__(self, detail: str, status_code: int = 409):
        super().__init__(detail)
        self.status_code = status_code


class NoTechniciansAvailable(HomefixError):
    status_code = 404

    def __init__(self, detail: str = "no technicians available"):
        super().__init__(detail)


class RequestNotCompleted(HomefixError):
    status_code = 409


class BackendError(HomefixError):
    status_code = 502


class ConfigurationError(Exception):
    pass


async def homefix_error_handler(request: Request, exc: HomefixError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HomefixError, homefix_error_handler)
