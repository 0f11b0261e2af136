"""Session cookie writers"""

from starlette.responses import Response

from spark_rentals.config import settings
from spark_rentals.core.auth import ACCESS_TOKEN_COOKIE, LEGACY_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE


def _secure() -> bool:
    return settings.is_production


def set_session_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    secure = _secure()
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
        httponly=True,
        secure=secure,
        samesite="lax",
    )
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        path="/",
        httponly=True,
        secure=secure,
        samesite="strict",
    )


def clear_legacy_cookie(response: Response) -> None:
    response.set_cookie(
        LEGACY_TOKEN_COOKIE, "", max_age=0, path="/", httponly=False, secure=_secure(), samesite="lax"
    )


def clear_session_cookies(response: Response) -> None:
    secure = _secure()
    response.set_cookie(
        ACCESS_TOKEN_COOKIE, "", max_age=0, path="/", httponly=True, secure=secure, samesite="lax"
    )
    response.set_cookie(
        REFRESH_TOKEN_COOKIE, "", max_age=0, path="/", httponly=True, secure=secure, samesite="strict"
    )
    clear_legacy_cookie(response)
