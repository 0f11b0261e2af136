"""User and session schemas"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from spark_rentals.core.roles import Role


class LoginRequest(BaseModel):
    """Login body"""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class SignupRequest(BaseModel):
    """Self-service signup body; new accounts are always customers"""
    name: str = Field(..., min_length=2, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, v):
        """Collapse whitespace and drop angle brackets from display names"""
        if not isinstance(v, str):
            return v
        cleaned = " ".join(v.replace("<", "").replace(">", "").split())
        return cleaned

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class UserCreate(SignupRequest):
    """Internal creation schema (admin bootstrap, seeding)"""
    role: Role = Role.CUSTOMER
    phone: Optional[str] = Field(None, max_length=32)


class UserResponse(BaseModel):
    """Public user representation"""
    id: int
    name: str
    email: str
    role: str
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SessionPrincipalResponse(BaseModel):
    """Identity carried by the caller's access token"""
    id: int
    email: str
    role: Optional[str] = None
