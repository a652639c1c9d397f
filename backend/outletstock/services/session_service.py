# Overview: Service-layer operations for session tokens; issues and verifies signed credentials.

"""
Stateless Session Token Service

The credential is the only session artifact. It is a signed JWT that
carries everything an endpoint needs for authorization, so requests never
touch a session table.

CLAIMS:
- sub: user id (string, per RFC 7519)
- email, role
- outletId: outlet affiliation or null

SECURITY FEATURES:
- HS256 signature with JWT_SECRET_KEY
- 24-hour absolute expiry (JWT_ACCESS_TOKEN_EXPIRES)
- Any holder of a valid, unexpired, correctly signed token is authenticated;
  there is no server-side revocation
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from ..models import User


@dataclass(frozen=True)
class SessionContext:
    """
    Decoded credential.

    Built from token claims only; the user row is not reloaded.
    """
    user_id: int
    email: str
    role: str
    outlet_id: int | None

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "email": self.email,
            "role": self.role,
            "outletId": self.outlet_id,
        }


def issue_token(user: User) -> str:
    """Sign a credential for an authenticated user."""
    return create_access_token(
        identity=str(user.id),
        additional_claims={
            "email": user.email,
            "role": user.role,
            "outletId": user.outlet_id,
        },
    )


def validate_token(token: str) -> SessionContext | None:
    """
    Verify signature and expiry and return the session context.

    Returns None for anything that is not a valid credential: bad signature,
    expired, malformed, or missing claims.
    """
    try:
        claims = decode_token(token)
    except (PyJWTError, JWTExtendedException, ValueError) as exc:
        current_app.logger.info("Rejected session token: %s", exc.__class__.__name__)
        return None

    try:
        outlet_id = claims.get("outletId")
        return SessionContext(
            user_id=int(claims["sub"]),
            email=claims["email"],
            role=claims["role"],
            outlet_id=int(outlet_id) if outlet_id is not None else None,
        )
    except (KeyError, TypeError, ValueError):
        current_app.logger.warning("Session token missing required claims")
        return None
