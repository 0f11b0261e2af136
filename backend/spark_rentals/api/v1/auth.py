"""Authentication routes"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from spark_rentals.api.deps import get_current_principal, require_same_origin
from spark_rentals.config import settings
from spark_rentals.core.auth import REFRESH_TOKEN_COOKIE
from spark_rentals.core.cookies import clear_legacy_cookie, clear_session_cookies, set_session_cookies
from spark_rentals.core.database import get_db
from spark_rentals.core.responses import success_response
from spark_rentals.core.tokens import Principal
from spark_rentals.schemas.user import LoginRequest, SessionPrincipalResponse, SignupRequest, UserResponse
from spark_rentals.services.rate_limiter import client_key, rate_limiter
from spark_rentals.services.session_service import session_service
from spark_rentals.services.user_service import user_service

router = APIRouter()


def _expiry_payload() -> dict:
    return {
        "access_token_expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        "refresh_token_expires_in": settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
    }


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(body: SignupRequest, db: Session = Depends(get_db)):
    """
    Create a customer account

    Returns:
        Public user record (201), or 409 if the email is taken
    """
    user = user_service.create_user(db, body)
    return success_response(
        UserResponse.model_validate(user).model_dump(),
        "Signup successful",
        status.HTTP_201_CREATED,
    )


@router.post("/login")
def login(body: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """
    Login endpoint - verify credentials, open a refresh session and set
    the access/refresh cookies

    Args:
        body: Email and password
        db: Database session

    Returns:
        Public user info; tokens travel only as cookies
    """
    rate_limiter.enforce(
        f"login:{client_key(request)}:{body.email}",
        settings.LOGIN_RATE_LIMIT_PER_MINUTE,
        60,
        "Too many login attempts. Please wait a minute.",
    )

    user, issued = session_service.login(db, body.email, body.password)

    response = success_response(
        {"user": UserResponse.model_validate(user).model_dump(), **_expiry_payload()},
        "Login successful",
    )
    set_session_cookies(response, issued.access_token, issued.refresh_token)
    clear_legacy_cookie(response)
    return response


@router.post("/refresh", dependencies=[Depends(require_same_origin)])
def refresh(request: Request, db: Session = Depends(get_db)):
    """
    Rotate the refresh cookie and mint a new access token

    Every failure is a generic 401; cross-origin calls are 403.
    """
    rate_limiter.enforce(
        f"refresh:{client_key(request)}",
        settings.REFRESH_RATE_LIMIT_PER_MINUTE,
        60,
        "Too many refresh attempts. Slow down.",
    )

    issued = session_service.refresh(db, request.cookies.get(REFRESH_TOKEN_COOKIE))

    response = success_response(
        {"access_token_expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60},
        "Token refreshed",
    )
    set_session_cookies(response, issued.access_token, issued.refresh_token)
    return response


@router.post("/logout", dependencies=[Depends(require_same_origin)])
def logout(request: Request, db: Session = Depends(get_db)):
    """
    Logout endpoint - revoke the refresh session (best effort) and clear
    every auth cookie
    """
    revoked = session_service.logout(db, request.cookies.get(REFRESH_TOKEN_COOKIE))

    response = success_response({"refresh_token_revoked": revoked}, "Logged out")
    clear_session_cookies(response)
    return response


@router.get("/me")
def me(principal: Principal = Depends(get_current_principal)):
    """Identity carried by the caller's access token"""
    data = SessionPrincipalResponse(
        id=principal.id,
        email=principal.email,
        role=principal.role.value if principal.role else None,
    )
    return success_response(data.model_dump(), "Session active")
