"""
Error taxonomy for the purchase lifecycle and the FastAPI handlers that
translate it into `{"success": false, "message": ...}` responses.
"""
import logfire
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Missing or malformed request fields, unknown package."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    """Unknown token, invalid item index or missing file."""

    status_code = status.HTTP_404_NOT_FOUND


class OrderNotFoundError(NotFoundError):
    """Unknown, expired or already consumed order during verification."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Order not found"):
        super().__init__(message)


class RejectedPaymentError(AppError):
    """Final negative verification outcome. The order stays pending."""

    status_code = status.HTTP_400_BAD_REQUEST


class GatewayError(AppError):
    """The payment gateway could not be reached or answered with an error."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class EmailDeliveryError(AppError):
    """Outbound mail failed. Purchase mails swallow it, the contact form answers 500."""


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logfire.error(
            f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}"
        )
    return error_response(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logfire.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
