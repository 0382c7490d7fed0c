"""Authentication Gate — JWT access tokens to RequesterIdentity.

Invariants:
    - authenticate() never raises: it attaches a RequesterIdentity or None
    - Missing, malformed, expired, or badly-signed tokens all resolve to None
    - Deciding 401 is left to the handler's authentication check, after
      input validation
    - Token claims: sub (user id as string), role, email, iat, exp

Design Decisions:
    - PyJWT HS256 with a shared secret from Settings
    - Bearer header first, then cookie
"""

import logging
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, Header, Request

from app.config import Settings, get_settings
from app.core.domain_types import RequesterIdentity, UserId, UserRole

logger = logging.getLogger(__name__)


def create_access_token(
    identity: RequesterIdentity, settings: Settings | None = None,
) -> str:
    """Sign an access token for the given identity."""
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(identity.id),
        "role": identity.role.value,
        "email": identity.email,
        "iat": int(now.timestamp()),
        "exp": int(
            (now + timedelta(minutes=settings.jwt_access_ttl_minutes)).timestamp(),
        ),
    }
    return jwt.encode(
        payload, settings.jwt_secret, algorithm=settings.jwt_algorithm,
    )


def decode_access_token(
    token: str, settings: Settings | None = None,
) -> RequesterIdentity | None:
    """Verify a token and build the identity. None when anything is off."""
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError:
        logger.warning("Rejected expired access token")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected invalid access token: {e}")
        return None

    try:
        user_id = int(payload["sub"])
        role = UserRole(payload["role"])
    except (KeyError, TypeError, ValueError):
        logger.warning("Rejected access token with malformed claims")
        return None
    return RequesterIdentity(
        id=UserId(user_id), role=role, email=payload.get("email"),
    )


def extract_access_token(
    request: Request, authorization: str | None, cookie_name: str,
) -> str | None:
    """Resolve the raw token from `Authorization: Bearer` or the auth cookie."""
    if authorization:
        scheme, _, credentials = authorization.strip().partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return request.cookies.get(cookie_name) or None


async def authenticate(
    request: Request,
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> RequesterIdentity | None:
    """FastAPI dependency — resolves the requester, or None without a valid token."""
    token = extract_access_token(
        request, authorization, settings.jwt_cookie_name,
    )
    return decode_access_token(token, settings) if token else None
