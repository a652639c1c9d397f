# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/outletstock/routes/auth.py
"""
Authentication API routes

- POST /api/auth/login: email + password -> signed session token + user
- GET  /api/auth/me: decode the caller's token and return who they are

Unknown email and wrong password produce the same 401 body.
"""

from flask import Blueprint, request, g, current_app

from ..decorators import require_auth, require_policy
from ..errors import InvalidCredentials
from ..extensions import db
from ..models import User
from ..responses import ok
from ..services import auth_service


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and issue a session token.

    Token must be sent as "Authorization: Bearer <token>" on protected routes
    and expires after 24 hours.
    """
    email, password = auth_service.validate_login_payload(request.get_json(silent=True))

    try:
        token, user = auth_service.login(email, password)
    except InvalidCredentials:
        current_app.logger.warning("Failed login for %s from %s", email, request.remote_addr)
        raise

    current_app.logger.info("User %s logged in", user.id)
    return ok({"token": token, "user": user.to_public_dict()})


@auth_bp.get("/me")
@require_auth
@require_policy("auth.me")
def me_route():
    """Return the decoded credential and the current user projection."""
    user = db.session.get(User, g.user_id)
    return ok({
        "session": g.session_context.to_dict(),
        "user": user.to_public_dict() if user else None,
    })
