"""
Domain error taxonomy and the FastAPI handlers that render it.

Services raise these exceptions; routers never build error responses
themselves.  Each kind carries a stable ``code`` so callers (and tests)
can branch on the kind of failure rather than on message text.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BlogAPIError(Exception):
    status_code: int = 500
    code: str = "internal"
    default_message: str = "Server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(BlogAPIError):
    status_code = 400
    code = "invalid_input"
    default_message = "Invalid input"

    def __init__(self, message: str | None = None, errors: list[dict] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class Conflict(BlogAPIError):
    status_code = 400
    code = "conflict"
    default_message = "Email already registered"


class InvalidCredentials(BlogAPIError):
    status_code = 400
    code = "invalid_credentials"
    default_message = "Invalid credentials"


class Unauthenticated(BlogAPIError):
    status_code = 401
    code = "unauthenticated"
    default_message = "Authentication required"


class Forbidden(BlogAPIError):
    status_code = 403
    code = "forbidden"
    default_message = "Forbidden"


class NotFound(BlogAPIError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def _field_errors(exc: RequestValidationError) -> list[dict]:
    """Flatten pydantic errors to ``{field, message}`` pairs."""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "path", "query", "header")]
        errors.append({
            "field": ".".join(loc) or None,
            "message": err.get("msg", "Invalid value"),
        })
    return errors


async def blog_api_error_handler(request: Request, exc: BlogAPIError) -> JSONResponse:
    if isinstance(exc, InvalidInput) and exc.errors:
        content = {"errors": exc.errors}
    else:
        content = {"message": exc.message}
    return JSONResponse(status_code=exc.status_code, content=content)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await blog_api_error_handler(request, InvalidInput(errors=_field_errors(exc)))


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": BlogAPIError.default_message})


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BlogAPIError, blog_api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)
