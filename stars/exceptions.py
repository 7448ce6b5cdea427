"""
Custom exception classes and error handling.

This module provides custom exceptions and utilities for consistent
error handling across the application. Every exception carries a ``kind``
discriminant so callers never have to match on message text.
"""
import logging
import uuid
from typing import Any, Dict, Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StarsException(Exception):
    """Base exception for all S.T.A.R.S-specific errors."""

    kind = "error"

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Validation
# =============================================================================

class ValidationError(StarsException):
    """Raised when input validation fails."""

    kind = "validation"

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)
        self.field = field


class InvalidStageError(ValidationError):
    """Raised when a pipeline stage is not one of the known values."""

    kind = "invalid_stage"

    def __init__(self, stage: Any):
        super().__init__(f"Invalid stage: {stage}", field="stage")
        self.stage = stage


class InvalidUUIDError(ValidationError):
    """Raised when a UUID format is invalid."""

    kind = "invalid_uuid"

    def __init__(self, uuid_str: str, field: str = "id"):
        message = f"Invalid UUID format: {uuid_str}"
        super().__init__(message, field=field)
        self.uuid_str = uuid_str


# =============================================================================
# Lookup / state conflicts
# =============================================================================

class NotFoundError(StarsException):
    """Raised when a requested resource is not found."""

    kind = "not_found"

    def __init__(self, resource: str, resource_id: str, details: Optional[Dict[str, Any]] = None):
        message = f"{resource} not found: {resource_id}"
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(StarsException):
    """Raised when a write would violate a uniqueness rule."""

    kind = "conflict"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_409_CONFLICT, details)


class DuplicateAssignmentError(ConflictError):
    """Raised when a candidate is already assigned to a position."""

    kind = "duplicate_assignment"

    def __init__(self, candidate_id: str, position_id: str):
        super().__init__(
            "Candidate is already assigned to this position",
            details={"candidate_id": candidate_id, "position_id": position_id},
        )
        self.candidate_id = candidate_id
        self.position_id = position_id


class AlreadyImportedError(ConflictError):
    """Raised when an ATS candidate has already been imported."""

    kind = "already_imported"

    def __init__(self, manatal_id: int, candidate_id: Optional[str] = None):
        super().__init__(
            "Candidate has already been imported from Manatal",
            details={"manatal_id": manatal_id, "candidate_id": candidate_id},
        )
        self.manatal_id = manatal_id
        self.candidate_id = candidate_id


# =============================================================================
# External dependencies
# =============================================================================

class DependencyError(StarsException):
    """Raised when a third-party service (email, storage, ATS) fails."""

    kind = "dependency"

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, status_code, details)


class EmailDeliveryError(DependencyError):
    """Raised when the email provider rejects a request."""

    kind = "email_delivery"


class StorageError(DependencyError):
    """Raised when an object storage operation fails."""

    kind = "storage"


class ATSProviderError(DependencyError):
    """Raised for unexpected ATS (Manatal) failures."""

    kind = "ats_provider"


class ATSCredentialError(ATSProviderError):
    """Raised when the ATS API key is missing or rejected."""

    kind = "ats_invalid_credential"


class ATSNotFoundError(ATSProviderError):
    """Raised when the ATS has no record for the requested id."""

    kind = "ats_not_found"

    def __init__(self, message: str = "Candidate not found in Manatal"):
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class ATSRateLimitedError(ATSProviderError):
    """Raised when the ATS rate-limits us."""

    kind = "ats_rate_limited"

    def __init__(self, message: str = "Rate limited by Manatal, try again later"):
        super().__init__(message, status.HTTP_429_TOO_MANY_REQUESTS)


class ATSTimeoutError(ATSProviderError):
    """Raised when an ATS request exceeds its timeout."""

    kind = "ats_timeout"

    def __init__(self, message: str = "Manatal API request timed out"):
        super().__init__(message, status.HTTP_504_GATEWAY_TIMEOUT)


# =============================================================================
# Exception Handlers
# =============================================================================

async def stars_exception_handler(request: Request, exc: StarsException) -> JSONResponse:
    """Handle StarsException instances."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.message,
            "kind": exc.kind,
            "details": exc.details
        }
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "kind": "internal",
            "details": {"message": str(exc)}
        }
    )


# =============================================================================
# Helper Functions
# =============================================================================

def parse_uuid(uuid_str: str, field: str = "id") -> uuid.UUID:
    """
    Parse a UUID string and raise InvalidUUIDError if invalid.

    Args:
        uuid_str: The UUID string to parse
        field: The field name for error messages (default: "id")

    Returns:
        A validated UUID object

    Raises:
        InvalidUUIDError: If the UUID format is invalid

    Example:
        >>> position_uuid = parse_uuid(position_id, field="position_id")
    """
    if isinstance(uuid_str, uuid.UUID):
        return uuid_str
    try:
        return uuid.UUID(uuid_str)
    except (ValueError, AttributeError, TypeError):
        raise InvalidUUIDError(str(uuid_str), field=field)


def register_exception_handlers(app):
    """
    Register all custom exception handlers with the FastAPI app.

    Call this during app initialization:
        from stars.exceptions import register_exception_handlers
        register_exception_handlers(app)
    """
    app.add_exception_handler(StarsException, stars_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
