"""JSON envelope helpers shared by routes, gates and exception handlers"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from spark_rentals.core.exceptions import BaseAPIException, ErrorCode


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def success_response(data: Any = None, message: str = "Success", status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": True,
            "message": message,
            "data": jsonable_encoder(data if data is not None else {}),
            "timestamp": _timestamp(),
        },
    )


def error_response(
    message: str,
    code: ErrorCode = ErrorCode.INTERNAL_ERROR,
    status_code: int = 500,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    error: Dict[str, Any] = {"code": code.value}
    if details:
        error["details"] = jsonable_encoder(details)
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "error": error,
            "timestamp": _timestamp(),
        },
    )


def exception_response(exc: BaseAPIException) -> JSONResponse:
    return error_response(exc.message, exc.code, exc.status_code, exc.details)
