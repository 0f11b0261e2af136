"""Pydantic schemas for API validation"""

from spark_rentals.schemas.user import (
    LoginRequest,
    SignupRequest,
    UserCreate,
    UserResponse,
    SessionPrincipalResponse,
)
from spark_rentals.schemas.response import APIResponse, ErrorResponse, ErrorBody

__all__ = [
    "LoginRequest", "SignupRequest", "UserCreate", "UserResponse", "SessionPrincipalResponse",
    "APIResponse", "ErrorResponse", "ErrorBody",
]
