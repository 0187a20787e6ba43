"""
Authentication route handlers.

Provides routes for:
- User registration
- User login
- Profile retrieval

Business rules live in `AuthService`; these handlers only validate input
shape and translate results to JSON.
"""

import re
from typing import Tuple

from flask import Blueprint, Response, jsonify

from event_system.auth_service.utils import current_auth, login_required
from event_system.errors import ValidationError
from event_system.gateway.container import get_services
from event_system.validation import json_body, string_field

auth_bp = Blueprint("auth", __name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 6


# --- REGISTER ---
@auth_bp.route("/register", methods=["POST"])
def register() -> Tuple[Response, int]:
    """
    Register a new user in the system.

    Expects a JSON body with:
    - username (str): 3-50 characters, unique.
    - email (str): Valid, unique email address.
    - password (str): Minimum 6 characters.

    Returns:
        201: JSON with token, expires_at and user.
        400: Missing fields, invalid input, or username/email already exists.
    """
    data = json_body()
    username: str = string_field(data, "username").strip()
    email: str = string_field(data, "email").strip().lower()
    password: str = string_field(data, "password")

    # Validate input
    if not username or not email or not password:
        raise ValidationError("Username, email, and password are required")
    if not (USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH):
        raise ValidationError(
            f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
        )
    if len(email) > EMAIL_MAX_LENGTH or not EMAIL_RE.match(email):
        raise ValidationError("Invalid email address")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")

    result = get_services().auth.register(username, email, password)
    return jsonify(result), 201


# --- LOGIN ---
@auth_bp.route("/login", methods=["POST"])
def login() -> Tuple[Response, int]:
    """
    Authenticate a user and return a JWT.

    Expects a JSON body with:
    - email (str)
    - password (str)

    Returns:
        200: JSON with token, expires_at and user.
        400: Missing credentials.
        401: Invalid credentials (wrong password or email).
    """
    data = json_body()
    email: str = string_field(data, "email").strip().lower()
    password: str = string_field(data, "password")

    if not email or not password:
        raise ValidationError("Email and password are required")

    result = get_services().auth.login(email, password)
    return jsonify(result), 200


# --- GET CURRENT USER ---
@auth_bp.route("/profile", methods=["GET"])
@login_required
def get_profile() -> Tuple[Response, int]:
    """
    Retrieve the current user's public profile.

    Requires Authorization header: Bearer <token>

    Returns:
        200: User profile object.
        401: Authentication failure.
        404: User no longer exists.
    """
    user = get_services().auth.get_user_by_id(current_auth().user_id)
    return jsonify(user.to_dict()), 200
