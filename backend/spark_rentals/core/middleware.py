"""Edge interceptor: authentication ahead of route dispatch, plus security headers"""

import logging
from typing import Iterable

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.responses import Response

from spark_rentals.config import settings
from spark_rentals.core.auth import get_cookie_token, require_auth, verify_token
from spark_rentals.core.rbac import require_permission
from spark_rentals.core.roles import Action, Resource

logger = logging.getLogger(__name__)

FORWARDED_EMAIL_HEADER = "x-user-email"
FORWARDED_ROLE_HEADER = "x-user-role"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Content-Security-Policy": "frame-ancestors 'none'",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
}

PRODUCTION_SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=63072000; includeSubDomains; preload",
    "Content-Security-Policy": (
        "default-src 'self'; img-src 'self' data: https:; script-src 'self'; "
        "style-src 'self' 'unsafe-inline'; connect-src 'self'; "
        "frame-ancestors 'none'; base-uri 'self'; form-action 'self'"
    ),
}


def path_matches(path: str, prefixes: Iterable[str]) -> bool:
    """Prefix match on whole path segments (/api/admin matches /api/admin/x, not /api/administrator)."""
    for prefix in prefixes:
        base = prefix.rstrip("/")
        if not base:
            continue
        if path == base or path.startswith(base + "/"):
            return True
    return False


def apply_security_headers(response: Response) -> Response:
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    if settings.is_production:
        for name, value in PRODUCTION_SECURITY_HEADERS.items():
            response.headers[name] = value
    return response


def _set_forwarded_identity(request: Request, email: str = None, role: str = None) -> None:
    """Replace any client-supplied identity headers with verified values."""
    blocked = {FORWARDED_EMAIL_HEADER.encode("latin-1"), FORWARDED_ROLE_HEADER.encode("latin-1")}
    headers = [(k, v) for k, v in request.scope["headers"] if k.lower() not in blocked]
    if email:
        headers.append((FORWARDED_EMAIL_HEADER.encode("latin-1"), email.encode("utf-8")))
    if role:
        headers.append((FORWARDED_ROLE_HEADER.encode("latin-1"), role.encode("latin-1")))
    request.scope["headers"] = headers


def _login_redirect() -> RedirectResponse:
    return RedirectResponse(url=settings.LOGIN_PAGE_PATH, status_code=307)


async def _guard(request: Request, call_next) -> Response:
    path = request.url.path
    _set_forwarded_identity(request)

    if path.startswith("/api"):
        if not path_matches(path, settings.PROTECTED_API_PREFIXES):
            return await call_next(request)

        result = require_auth(request)
        if not result.ok:
            return result.response

        principal = result.principal
        if path_matches(path, settings.ADMIN_API_PREFIXES):
            gate = require_permission(principal, Resource.ADMIN, Action.READ)
            if not gate.ok:
                return gate.response

        request.state.principal = principal
        _set_forwarded_identity(
            request,
            email=principal.email,
            role=principal.role.value if principal.role else None,
        )
        return await call_next(request)

    if not path_matches(path, settings.PROTECTED_PAGE_PREFIXES):
        return await call_next(request)

    # Browser navigation: cookie only, and failures redirect instead of erroring.
    result = verify_token(get_cookie_token(request))
    if not result.ok:
        logger.debug("Redirecting unauthenticated page request for %s", path)
        return _login_redirect()

    request.state.principal = result.principal
    return await call_next(request)


async def edge_interceptor(request: Request, call_next) -> Response:
    """
    Runs before route dispatch.

    Protected API prefixes get 401/403 JSON envelopes; protected page
    prefixes redirect to the login page. Every response carries the
    security headers.
    """
    response = await _guard(request, call_next)
    return apply_security_headers(response)
