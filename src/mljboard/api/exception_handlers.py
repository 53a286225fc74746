"""Custom exception handlers for FastAPI application.

This module registers global exception handlers that convert domain exceptions
into HTTP responses with the matching status codes.

Hey future me - relay resolution failures are 409 (the user's pairing code is in
a state we can't act on), NOT 5xx. Their messages are written for end users and
go straight into "detail".
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from mljboard.domain.exceptions import (
    ConfigurationError,
    DuplicateEntityException,
    NoIdentityFoundError,
    RelayResolutionError,
    ValidationException,
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers for domain exceptions.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(RelayResolutionError)
    async def relay_resolution_exception_handler(
        request: Request, exc: RelayResolutionError
    ) -> JSONResponse:
        """Handle relay resolution failures with 409 Conflict."""
        logger.warning(
            "Relay resolution failed at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error_type": type(exc).__name__},
        )
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": exc.message},
        )

    @app.exception_handler(NoIdentityFoundError)
    async def no_identity_exception_handler(
        request: Request, exc: NoIdentityFoundError
    ) -> JSONResponse:
        """Handle users with nothing set up with 404 Not Found."""
        logger.info(
            "No identity at %s for %s",
            request.url.path,
            exc.user_handle,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": exc.message},
        )

    @app.exception_handler(ValidationException)
    async def validation_exception_handler(
        request: Request, exc: ValidationException
    ) -> JSONResponse:
        """Handle domain validation exceptions with 422 Unprocessable Entity."""
        logger.warning(
            "Validation error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error": exc.message},
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.message},
        )

    @app.exception_handler(DuplicateEntityException)
    async def duplicate_entity_exception_handler(
        request: Request, exc: DuplicateEntityException
    ) -> JSONResponse:
        """Handle duplicate entity exceptions with 409 Conflict."""
        logger.warning(
            "Duplicate entity at %s: %s %s",
            request.url.path,
            exc.entity_type,
            exc.entity_id,
            extra={
                "path": request.url.path,
                "entity_type": exc.entity_type,
                "entity_id": str(exc.entity_id),
            },
        )
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": exc.message},
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_exception_handler(
        request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        """Handle missing configuration with 503 Service Unavailable."""
        logger.error(
            "Configuration error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": exc.message},
        )
