import logging
from fastapi import status
from fastapi.responses import JSONResponse
from fastapi.requests import Request

logger = logging.getLogger(__name__)

# ---------------------------
# Storage tiers
# ---------------------------

class JournalStoreError(Exception):
    """Base class for failures of a journal storage tier."""
    pass

class Unauthenticated(JournalStoreError):
    """Raised when no user identity can be resolved for a remote operation."""

    def __init__(self, detail: str = "User not authenticated"):
        super().__init__(detail)

class RemoteUnavailable(JournalStoreError):
    """Raised when the remote backend fails; carries the backend's message."""
    pass

# ---------------------------
# Service (Business logic)
# ---------------------------

class BusinessError(Exception):
    """Base class for all business logic errors."""
    pass

class ServiceError(BusinessError):
    """Generic error for unexpected service failures."""
    pass

class NotFoundError(BusinessError):
    """Raised when a requested resource does not exist."""
    pass

class ConflictError(BusinessError):
    """Raised when a resource already exists or conflicts with another resource."""
    pass

class ValidationError(BusinessError):
    """Raised when business rule validation fails (e.g., invalid input)."""
    pass

class UnauthorizedError(BusinessError):
    """Raised when authentication fails."""
    pass


# ---------------------------
# FastAPI Exception Handlers
# ---------------------------

def _unauthorized(detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": detail},
        headers={"WWW-Authenticate": "Bearer"},
    )


def register_exception_handlers(app):
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc)},
        )

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc)},
        )

    @app.exception_handler(UnauthorizedError)
    async def unauthorized_handler(request: Request, exc: UnauthorizedError):
        return _unauthorized(str(exc))

    @app.exception_handler(Unauthenticated)
    async def unauthenticated_handler(request: Request, exc: Unauthenticated):
        return _unauthorized(str(exc))

    @app.exception_handler(RemoteUnavailable)
    async def remote_unavailable_handler(request: Request, exc: RemoteUnavailable):
        logger.warning(f"Remote journal store unavailable: {exc}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": str(exc)},
        )

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        logger.error(f"Service error: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )
