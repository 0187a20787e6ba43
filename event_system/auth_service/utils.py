"""
Shared authentication helpers.
Provides token creation, token decoding, and the `login_required` guard used
by protected routes.
"""

import functools
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional, Tuple

import jwt
from flask import g, request

from event_system.auth_service.models import User
from event_system.errors import UnauthorizedError
from event_system.timeutils import utcnow

JWT_ALGORITHM = "HS256"


# --- JWT CREATION ---
def create_token(user: User, secret: str, expiration_minutes: int) -> Tuple[str, datetime]:
    """
    Generates a new JWT for a given user.

    Args:
        user (User): The authenticated user.
        secret (str): Signing secret.
        expiration_minutes (int): Token lifetime.

    Returns:
        tuple: (encoded JWT string, expiry datetime in UTC)
    """
    now = utcnow()
    expires_at = now + timedelta(minutes=expiration_minutes)

    payload = {
        "user_id": user.id,
        "username": user.username,
        "email": user.email,
        "iat": now,
        "exp": expires_at,
    }

    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM), expires_at


# --- JWT VALIDATION ---
def decode_token(token: str, secret: str) -> Dict[str, Any]:
    """
    Verify signature, algorithm and expiry of a JWT and return its claims.

    Raises:
        UnauthorizedError: For any invalid, foreign-signed or expired token.
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "user_id"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("token expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("invalid token")

    user_id = payload.get("user_id")
    # bool is an int subclass; reject it explicitly
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise UnauthorizedError("invalid token")

    return payload


# --- REQUEST CONTEXT ---
@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller, attached to `flask.g` by `login_required`."""
    user_id: int


def bearer_token_from_request() -> Optional[str]:
    """
    Extract the token from `Authorization: Bearer <token>`.

    Raises:
        UnauthorizedError: If the header is present but not a bearer token.

    Returns:
        str: The token, or None when no Authorization header was sent.
    """
    auth = request.headers.get("Authorization", "")
    if not auth:
        return None
    if not auth.startswith("Bearer "):
        raise UnauthorizedError("Invalid authorization format")
    token = auth.split(" ", 1)[1].strip()
    if not token:
        raise UnauthorizedError("Invalid authorization format")
    return token


def login_required(view: Callable) -> Callable:
    """
    Reject the request with 401 unless it carries a valid bearer token.

    On success the caller's identity is available through `current_auth()`.
    """
    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        # Imported here to avoid a cycle with the gateway package
        from event_system.gateway.container import get_services

        token = bearer_token_from_request()
        if token is None:
            raise UnauthorizedError("Unauthorized")

        user_id = get_services().auth.validate_token(token)
        g.auth = AuthContext(user_id=user_id)
        return view(*args, **kwargs)

    return wrapper


def current_auth() -> AuthContext:
    auth = g.get("auth")
    if not isinstance(auth, AuthContext):
        raise UnauthorizedError("Unauthorized")
    return auth
