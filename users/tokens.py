"""
Session tokens.

Tokens are simplejwt access tokens carrying a snapshot of the account
(``id``, ``username``, ``email``, ``role``). Verification only checks the
signature and expiry, it never goes back to the database, so a role or ban
change is only visible once the token is re-issued (see ``/auth/me``).
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import jwt
from django.conf import settings
from ninja import Schema
from rest_framework_simplejwt.tokens import AccessToken

from users.models import User

logger = logging.getLogger(__name__)

CLAIM_FIELDS = ("id", "username", "email", "role")


class TokenClaims(Schema):
    id: int
    username: str
    email: str
    role: str
    expires_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == User.ADMIN


class TokenVerificationError(Exception):
    reason = "Invalid token"


class TokenExpired(TokenVerificationError):
    reason = "Token expired"

    def __init__(self, expired_at: Optional[datetime]):
        super().__init__(f"Token expired at {expired_at}")
        self.expired_at = expired_at


class TokenMalformed(TokenVerificationError):
    reason = "Invalid token"


class TokenInvalidSignature(TokenVerificationError):
    reason = "Invalid signature"


def issue_token(user: User) -> str:
    token = AccessToken.for_user(user)
    token["username"] = user.username
    token["email"] = user.email
    token["role"] = user.role
    return str(token)


def _signing_key() -> str:
    return settings.SIMPLE_JWT["SIGNING_KEY"]


def _algorithm() -> str:
    return settings.SIMPLE_JWT["ALGORITHM"]


def _expired_at(raw: str) -> Optional[datetime]:
    payload = jwt.decode(
        raw,
        _signing_key(),
        algorithms=[_algorithm()],
        options={"verify_exp": False},
    )
    exp = payload.get("exp")
    if exp is None:
        return None
    return datetime.fromtimestamp(exp, tz=timezone.utc)


def verify_token(raw: str) -> TokenClaims:
    """
    Decode ``raw`` and return its claims.

    Raises ``TokenExpired`` (with the original expiry), ``TokenInvalidSignature``
    or ``TokenMalformed``.
    """
    if not raw:
        raise TokenMalformed("Empty token")

    try:
        payload = jwt.decode(
            raw,
            _signing_key(),
            algorithms=[_algorithm()],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpired(_expired_at(raw))
    except jwt.InvalidSignatureError as e:
        raise TokenInvalidSignature(str(e))
    except jwt.InvalidTokenError as e:
        raise TokenMalformed(str(e))

    if payload.get("token_type", "access") != "access":
        raise TokenMalformed("Not an access token")

    missing = [field for field in CLAIM_FIELDS if field not in payload]
    if missing:
        raise TokenMalformed(f"Missing claims: {', '.join(missing)}")

    try:
        return TokenClaims(
            id=int(payload["id"]),
            username=payload["username"],
            email=payload["email"],
            role=payload["role"],
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (TypeError, ValueError) as e:
        raise TokenMalformed(f"Bad claim values: {e}")
