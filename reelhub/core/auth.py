"""Optional HTTP Basic authentication for the store API.

Active only when AUTH_USERNAME and AUTH_PASSWORD are both configured.
"""

import base64
import binascii
import secrets

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from reelhub.core.config import Settings, get_settings

PUBLIC_PATHS = ("/api/health",)


def parse_basic_auth(header: str | None) -> tuple[str, str] | None:
    """Split a Basic Authorization header into (username, password)."""
    if not header:
        return None
    try:
        scheme, credentials = header.split(" ", 1)
        if scheme.lower() != "basic":
            return None
        decoded = base64.b64decode(credentials, validate=True).decode("utf-8")
        username, password = decoded.split(":", 1)
    except (ValueError, binascii.Error, UnicodeDecodeError):
        return None
    return username, password


def credentials_match(username: str, password: str, settings: Settings) -> bool:
    # Both comparisons always run so timing does not leak which one failed
    username_ok = secrets.compare_digest(
        username.encode("utf-8"), settings.auth_username.encode("utf-8")
    )
    password_ok = secrets.compare_digest(
        password.encode("utf-8"),
        settings.auth_password.get_secret_value().encode("utf-8"),
    )
    return username_ok and password_ok


class BasicAuthMiddleware(BaseHTTPMiddleware):
    """Rejects unauthenticated requests when credentials are configured."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        settings = get_settings()
        if not settings.auth_username or not settings.auth_password:
            return await call_next(request)
        if request.url.path in PUBLIC_PATHS:
            return await call_next(request)

        parsed = parse_basic_auth(request.headers.get("Authorization"))
        if parsed is None or not credentials_match(*parsed, settings):
            return Response(
                content="Unauthorized",
                status_code=401,
                headers={"WWW-Authenticate": 'Basic realm="Reelhub"'},
            )
        return await call_next(request)
