"""
Shared error handling for the Guestbook service.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class GuestbookException(Exception):
    """Base exception for Guestbook services."""

    status_code = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class StoreError(GuestbookException):
    """Relational store errors: connection, query, or decoding."""

    def __init__(self, message: str = "Store error", details: Optional[Dict[str, Any]] = None):
        super().__init__("STORE_ERROR", message, details)


class CacheError(GuestbookException):
    """Cache tier errors."""

    status_code = 503

    def __init__(self, message: str = "Cache error", details: Optional[Dict[str, Any]] = None,
                 code: str = "CACHE_ERROR"):
        super().__init__(code, message, details)


class CacheMissError(CacheError):
    """The requested list key is absent or empty."""

    def __init__(self, key: str):
        super().__init__(f"Cache miss for {key}", {"key": key}, code="CACHE_MISS")


class CacheUnavailableError(CacheError):
    """The cache tier could not be reached."""

    def __init__(self, message: str = "Cache unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="CACHE_UNAVAILABLE")


class ConfigError(GuestbookException):
    """Configuration errors."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIG_ERROR", message, details)
