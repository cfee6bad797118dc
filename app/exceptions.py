# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error response carries a human-readable message, a machine-readable
# code and, where possible, a suggestion telling the editor how to fix it.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class CMSException(Exception):
    """
    Base exception for the CMS API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "CMS_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Lookup Exceptions
# =============================================================================

class NotFoundError(CMSException):
    """Raised when a record doesn't exist (or isn't visible to the caller)."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {resource.lower()} id or slug is correct",
            details={"resource": resource, "id": identifier},
        )


class UnknownSectionError(CMSException):
    """Raised when an admin asks for a section key that isn't registered."""

    def __init__(self, key: str, known: list[str]):
        super().__init__(
            message=f"Unknown page section: {key}",
            code="UNKNOWN_SECTION",
            status_code=404,
            suggestion=f"Use one of: {', '.join(known)}",
            details={"section": key},
        )


# =============================================================================
# Validation Exceptions
# =============================================================================

class ValidationFailedError(CMSException):
    """Raised when a required field is missing or a value is unusable."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details={"field": field} if field else None,
        )


class ConflictError(CMSException):
    """Raised when a unique value (slug, title, name) is already taken."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="CONFLICT",
            status_code=400,
            suggestion="Choose a different value and try again",
            details={"field": field} if field else None,
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(CMSException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed},
        )


class FileTooLargeError(CMSException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb},
        )


class StorageUploadError(CMSException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error},
        )


class StorageDeleteError(CMSException):
    """Raised when storage refuses to remove files."""

    def __init__(self, bucket: str, paths: list[str]):
        super().__init__(
            message="Failed to delete files from storage",
            code="STORAGE_DELETE_ERROR",
            status_code=500,
            suggestion="Check that the files exist and try again",
            details={"bucket": bucket, "paths": paths},
        )


# =============================================================================
# Database Exceptions
# =============================================================================

class DatabaseError(CMSException):
    """Raised when a table or RPC call fails for a reason we can't classify."""

    def __init__(self, action: str, error: str):
        super().__init__(
            message=f"Failed to {action}: {error}",
            code="DATABASE_ERROR",
            status_code=500,
            suggestion="Try again. If it keeps failing, check the database schema and permissions",
            details={"error": error},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def cms_exception_handler(
    request: Request,
    exc: CMSException
) -> JSONResponse:
    """
    Convert CMSException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
