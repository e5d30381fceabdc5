"""Error translators turning raised errors into client responses.

Two stateless translators are installed on every service:

- **internal server**: unexpected failures in handlers or pipeline steps
- **validation**: malformed input rejected by a pipeline step, a handler or
  FastAPI's own parameter validation

Both answer with status 406 and the body ``{"message": ..., "details": ...}``.
Clients of existing services depend on 406, so it is kept for both.
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger

from src.api.constants import HTTP_406_NOT_ACCEPTABLE
from src.api.schemas.errors import ErrorResponse
from src.api.utils.responses import ORJSONResponse
from src.core.exceptions import InternalServerError, ValidationError

REQUEST_VALIDATION_MESSAGE = "Request validation failed"


def _error_response(message: str, details: object) -> Response:
    body = ErrorResponse(message=message, details=jsonable_encoder(details))
    return ORJSONResponse(
        status_code=HTTP_406_NOT_ACCEPTABLE,
        content=body.model_dump(mode="json"),
    )


async def internal_server_error_handler(request: Request, exc: Exception) -> Response:
    """Translate an unexpected error into a 406 response.

    The message is the error's ``message`` attribute when it has one, its
    string form otherwise; ``details`` is its ``errors`` attribute, if any.

    Args:
        request: The request that caused the exception
        exc: The exception to translate

    Returns:
        Response: ORJSONResponse with the error body
    """
    message = getattr(exc, "message", None)
    if not isinstance(message, str):
        message = str(exc) or type(exc).__name__
    details = getattr(exc, "errors", None)

    logger.opt(exception=exc).error(
        "Unhandled {exception_type} on {method} {path}: {message}",
        exception_type=type(exc).__name__,
        method=request.method,
        path=request.url.path,
        message=message,
    )

    return _error_response(message, details)


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Translate a validation error into a 406 response.

    Args:
        request: The request that caused the exception
        exc: ValidationError raised by the service, or FastAPI's
            RequestValidationError

    Returns:
        Response: ORJSONResponse with the error body

    Raises:
        TypeError: If exc is neither kind of validation error
    """
    if isinstance(exc, ValidationError):
        message, details = exc.message, exc.errors
    elif isinstance(exc, RequestValidationError):
        message, details = REQUEST_VALIDATION_MESSAGE, exc.errors()
    else:
        msg = f"Expected a validation error, got {type(exc).__name__}"
        raise TypeError(msg)

    logger.warning(
        "Request validation failed on {method} {path}: {message}",
        method=request.method,
        path=request.url.path,
        message=message,
    )

    return _error_response(message, details)


def register_exception_handlers(app: FastAPI) -> None:
    """Install both translators on the application.

    Args:
        app: The FastAPI application instance
    """
    logger.debug("Listen for validation errors")
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    logger.debug("Listen for internal server errors")
    app.add_exception_handler(InternalServerError, internal_server_error_handler)
    app.add_exception_handler(Exception, internal_server_error_handler)
