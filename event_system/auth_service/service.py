"""
Authentication business logic: registration, login and token validation.
"""

import logging
import secrets
from typing import Any, Dict

import psycopg2.errors
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from event_system.auth_service.models import User
from event_system.auth_service.repository import UserRepository
from event_system.auth_service.utils import create_token, decode_token
from event_system.config import Config
from event_system.errors import ConflictError, InternalError, NotFoundError, UnauthorizedError
from event_system.timeutils import iso

ph = PasswordHasher()

INVALID_CREDENTIALS = "invalid email or password"

# Checked when the email is unknown so both failure paths cost one argon2 verify
DUMMY_HASH = ph.hash(secrets.token_hex(16))


class AuthService:
    def __init__(self, users: UserRepository, config: Config) -> None:
        self.users = users
        self.config = config

    def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        """
        Create an account and sign the new user in.

        Args:
            username (str): Unique username.
            email (str): Unique email address.
            password (str): Plain-text password, hashed with Argon2 before storage.

        Returns:
            dict: {"token", "expires_at", "user"}

        Raises:
            ConflictError: Username or email already taken.
            InternalError: Hashing or storage failure.
        """
        if self.users.get_by_username(username) is not None:
            raise ConflictError("username already exists")
        if self.users.get_by_email(email) is not None:
            raise ConflictError("email already exists")

        try:
            pw_hash = ph.hash(password)
        except Exception as e:
            logging.error(f"Error hashing password: {e}")
            raise InternalError("error processing registration")

        try:
            user = self.users.create(username, email, pw_hash)
        except psycopg2.errors.UniqueViolation:
            # Lost a race with a concurrent registration
            raise ConflictError("username or email already exists")

        logging.info(f"[Auth] Registered user {user.id}")
        return self._token_response(user)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Authenticate by email and password.

        Unknown email and wrong password produce the same error after the
        same amount of hashing work.

        Raises:
            UnauthorizedError: Invalid credentials.
        """
        user = self.users.get_by_email(email)
        password_hash = user.password_hash if user is not None else DUMMY_HASH

        try:
            ph.verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if user is None:
            raise UnauthorizedError(INVALID_CREDENTIALS)

        return self._token_response(user)

    def validate_token(self, token: str) -> int:
        """
        Returns:
            int: The user id embedded in a valid token.

        Raises:
            UnauthorizedError: Bad signature, unexpected algorithm or expired.
        """
        payload = decode_token(token, self.config.jwt_secret)
        return payload["user_id"]

    def get_user_by_id(self, user_id: int) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("user not found")
        return user

    def _token_response(self, user: User) -> Dict[str, Any]:
        token, expires_at = create_token(
            user, self.config.jwt_secret, self.config.token_expiration_minutes
        )
        return {"token": token, "expires_at": iso(expires_at), "user": user.to_dict()}
