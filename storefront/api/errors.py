import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.exceptions import (
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    StorefrontError,
    TransactionError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Every domain error kind has exactly one status code
STATUS_CODES = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InsufficientStockError: status.HTTP_409_CONFLICT,
    ConflictError: status.HTTP_409_CONFLICT,
    TransactionError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(exc: StorefrontError) -> int:
    """Map a domain error to its HTTP status code."""
    for error_type in type(exc).__mro__:
        if error_type in STATUS_CODES:
            return STATUS_CODES[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(exc: StorefrontError) -> dict:
    body = {"kind": exc.kind, "detail": exc.message}
    if isinstance(exc, InsufficientStockError):
        body["productIds"] = [str(product_id) for product_id in exc.product_ids]
    return body


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.kind}): {exc.message}")
    return JSONResponse(status_code=status_code, content=error_body(exc))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report FastAPI request validation failures as ValidationError."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )
    return await storefront_error_handler(request, ValidationError(f"Invalid request: {problems}"))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for errors outside the domain hierarchy."""
    logger.error(f"{request.method} {request.url.path} crashed: {exc!r}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"kind": "internal_error", "detail": "Internal server error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
