"""Custom exception classes for the application"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Machine-readable codes carried in the error envelope"""
    VALIDATION_ERROR = "E001"
    NOT_FOUND = "E002"
    DATABASE_FAILURE = "E003"
    CONFLICT = "E004"
    UNAUTHORIZED = "E005"
    FORBIDDEN = "E006"
    RATE_LIMITED = "E007"
    INTERNAL_ERROR = "E500"


class BaseAPIException(Exception):
    """Base exception for all API errors"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


# Token codec errors (never rendered directly)
class InvalidTokenError(Exception):
    """Signature, expiry, claim shape or token kind check failed"""


# Authentication Errors
class AuthenticationError(BaseAPIException):
    """Missing, invalid or expired credential"""
    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, status_code=401, code=ErrorCode.UNAUTHORIZED)


class InvalidCredentialsError(AuthenticationError):
    """Invalid email or password"""
    def __init__(self):
        super().__init__("Invalid credentials")


# Authorization Errors
class AuthorizationError(BaseAPIException):
    """Authenticated but not permitted, or cross-origin policy violation"""
    def __init__(self, message: str = "Access denied: insufficient permissions."):
        super().__init__(message, status_code=403, code=ErrorCode.FORBIDDEN)


# Resource Errors
class ResourceNotFoundError(BaseAPIException):
    """Resource not found"""
    def __init__(self, resource: str):
        super().__init__(f"{resource} not found", status_code=404, code=ErrorCode.NOT_FOUND)


class ResourceAlreadyExistsError(BaseAPIException):
    """Resource already exists"""
    def __init__(self, resource: str):
        super().__init__(f"{resource} already exists", status_code=409, code=ErrorCode.CONFLICT)


# Validation Errors
class ValidationError(BaseAPIException):
    """Validation error"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=422, code=ErrorCode.VALIDATION_ERROR, details=details)


# System Errors
class DatabaseError(BaseAPIException):
    """Database operation failed"""
    def __init__(self, message: str = "A database error occurred. Please try again later."):
        super().__init__(message, status_code=500, code=ErrorCode.DATABASE_FAILURE)


class InternalError(BaseAPIException):
    """Unexpected failure"""
    def __init__(self, message: str = "Something went wrong. Please try again later."):
        super().__init__(message, status_code=500, code=ErrorCode.INTERNAL_ERROR)


class RateLimitExceededError(BaseAPIException):
    """Rate limit exceeded"""
    def __init__(self, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message, status_code=429, code=ErrorCode.RATE_LIMITED)
