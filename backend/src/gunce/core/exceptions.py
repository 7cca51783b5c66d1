"""
Custom exception classes for the Günce Defteri application.

Every layer raises one of these; adapters wrap driver errors into them and
the HTTP layer converts them with to_http_exception.
"""

from typing import Optional

from fastapi import HTTPException, status


class GunceError(Exception):
    """Base exception for the diary application."""

    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(GunceError):
    """Raised when an id does not resolve to a live record."""

    def __init__(self, resource: str, resource_id: int | str):
        self.resource = resource
        self.resource_id = resource_id
        message = f"{resource} with id {resource_id} not found"
        super().__init__(message, "RESOURCE_NOT_FOUND")


class ValidationError(GunceError):
    """Raised when input fails validation; names the offending field."""

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Invalid value for field '{field}'", "VALIDATION_ERROR")


class HashingError(GunceError):
    """Raised when the password KDF fails internally."""

    def __init__(self, message: str = "Password could not be hashed"):
        super().__init__(message, "HASHING_ERROR")


class DecryptionError(GunceError):
    """Raised when ciphertext cannot be opened: wrong password or corrupted data."""

    def __init__(self, message: str = "Wrong password or corrupted data"):
        super().__init__(message, "DECRYPTION_ERROR")


class StorageError(GunceError):
    """Raised when the underlying database or network call fails."""

    def __init__(self, message: str):
        super().__init__(message, "STORAGE_ERROR")


class AppLockedError(GunceError):
    """Raised when a mutating call is made while the password gate is locked."""

    def __init__(self, message: str = "Diary is locked"):
        super().__init__(message, "APP_LOCKED")


class ConfigurationError(GunceError):
    """Raised when there's a configuration error."""

    def __init__(self, message: str):
        super().__init__(message, "CONFIGURATION_ERROR")


class SentimentError(GunceError):
    """Raised when the sentiment pipeline cannot be loaded or run."""

    def __init__(self, message: str):
        super().__init__(message, "SENTIMENT_ERROR")


STATUS_CODE_MAP = {
    "RESOURCE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "VALIDATION_ERROR": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "DECRYPTION_ERROR": status.HTTP_400_BAD_REQUEST,
    "APP_LOCKED": status.HTTP_423_LOCKED,
    "HASHING_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "STORAGE_ERROR": status.HTTP_503_SERVICE_UNAVAILABLE,
    "SENTIMENT_ERROR": status.HTTP_503_SERVICE_UNAVAILABLE,
    "CONFIGURATION_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "INTERNAL_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_body(exc: GunceError) -> dict:
    """Response body shared by HTTP exceptions and exception handlers."""
    body = {"error": exc.code, "message": exc.message}
    if isinstance(exc, ValidationError):
        body["field"] = exc.field
    return body


# HTTP Exception converters
def to_http_exception(exc: GunceError) -> HTTPException:
    """Convert GunceError to HTTPException."""
    status_code = STATUS_CODE_MAP.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(status_code=status_code, detail=error_body(exc))
