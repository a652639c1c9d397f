# Overview: Request and policy decorators for API routes.

from functools import wraps
from flask import request, g, current_app

from .errors import Unauthorized, Forbidden
from .permissions import is_role_allowed, effective_outlet_id
from .services import session_service


def _is_authenticated() -> bool:
    return hasattr(g, 'session_context')


def require_auth(f):
    """
    Require a valid session credential.

    Sets the following Flask g attributes:
    - g.session_context: decoded SessionContext (user id, email, role, outlet)
    - g.user_id, g.role, g.outlet_id: shortcuts into the context

    Raises Unauthorized if:
    - No Authorization header / not a Bearer header
    - Invalid signature, malformed or expired token
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")

        if not auth_header or not auth_header.startswith("Bearer "):
            raise Unauthorized("Authentication required")

        token = auth_header.split(" ", 1)[1].strip()

        context = session_service.validate_token(token)
        if not context:
            raise Unauthorized("Invalid or expired token")

        g.session_context = context
        g.user_id = context.user_id
        g.role = context.role
        g.outlet_id = context.outlet_id

        return f(*args, **kwargs)

    return decorated_function


def require_policy(policy_name: str):
    """
    Require the caller's role to be on the named endpoint policy.

    Must be stacked under @require_auth. Policies live in permissions.py.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not _is_authenticated():
                raise Unauthorized("Authentication required")

            if not is_role_allowed(policy_name, g.role):
                current_app.logger.warning(
                    "Permission denied: user=%s role=%s policy=%s path=%s",
                    g.user_id, g.role, policy_name, request.path,
                )
                raise Forbidden("Insufficient permissions")

            return f(*args, **kwargs)

        return decorated_function
    return decorator


def scoped_outlet_id(requested_outlet_id: int | None) -> int | None:
    """Effective outlet filter for the current caller."""
    return effective_outlet_id(g.role, g.outlet_id, requested_outlet_id)
