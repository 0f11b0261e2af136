"""Generic API response schemas"""

from pydantic import BaseModel
from typing import Optional, Any, Dict


class APIResponse(BaseModel):
    """Generic API success envelope"""
    success: bool = True
    message: str
    data: Optional[Any] = None
    timestamp: str


class ErrorBody(BaseModel):
    code: str
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Generic API error envelope"""
    success: bool = False
    message: str
    error: ErrorBody
    timestamp: str
