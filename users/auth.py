import logging
from typing import Optional

from django.http import HttpRequest
from ninja.security import HttpBearer

from myapp.exceptions import AuthenticationError, AuthorizationError
from users.tokens import (
    TokenClaims,
    TokenExpired,
    TokenInvalidSignature,
    TokenVerificationError,
    verify_token,
)

logger = logging.getLogger(__name__)


def _claims_or_error(token: str) -> TokenClaims:
    try:
        return verify_token(token)
    except TokenExpired as e:
        logger.warning(f"Rejected expired token (expired at {e.expired_at})")
        raise AuthenticationError(
            "Please login again",
            error=e.reason,
            extra={
                "expired_at": e.expired_at.isoformat() if e.expired_at else None
            },
        )
    except TokenInvalidSignature as e:
        logger.warning(f"Rejected token with bad signature: {e}")
        raise AuthenticationError("Token signature is invalid", error=e.reason)
    except TokenVerificationError as e:
        logger.warning(f"Rejected malformed token: {e}")
        raise AuthenticationError("Token is invalid or malformed", error=e.reason)


class JWTAuth(HttpBearer):
    """
    Mandatory bearer authentication. ``request.auth`` holds the token claims.
    A missing header is answered by the global ninja AuthenticationError
    handler.
    """

    def authenticate(self, request: HttpRequest, token: str) -> Optional[TokenClaims]:
        if not token:
            return None
        return _claims_or_error(token)


class AdminAuth(JWTAuth):
    """
    Bearer authentication that also requires the ``admin`` role claim.
    """

    def authenticate(self, request: HttpRequest, token: str) -> Optional[TokenClaims]:
        claims = super().authenticate(request, token)
        if claims is None:
            return None
        if not claims.is_admin:
            logger.warning(f"User {claims.id} denied access to an admin endpoint")
            raise AuthorizationError("Admin access required")
        return claims


# Function-based auth for partially protected endpoints
def OptionalJWTAuth(request: HttpRequest):
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return True  # No token provided, proceed without authentication
    if not auth_header.startswith("Bearer "):
        return True  # Token not in correct format, proceed without authentication

    token = auth_header.split("Bearer ", 1)[1].strip()
    try:
        return verify_token(token)
    except TokenVerificationError as e:
        logger.debug(f"Ignoring invalid optional token: {e}")
        return True


def viewer_of(request: HttpRequest) -> Optional[TokenClaims]:
    """Claims of the caller, or None for anonymous requests."""
    auth = getattr(request, "auth", None)
    return auth if isinstance(auth, TokenClaims) else None
