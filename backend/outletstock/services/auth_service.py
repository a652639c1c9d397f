# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

Every recorded event is attributable to a user. Uses bcrypt for
password hashing and validates password strength when accounts are created.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor 12)
- Minimum 8 characters, upper, lower, digit and special char required
- Login never reveals whether the email exists
- Session credentials are issued by session_service
"""

import re

import bcrypt

from ..errors import InvalidCredentials, ValidationError
from ..extensions import db
from ..models import User, Outlet
from ..permissions import ALL_ROLES, OUTLET_ROLES, ROLE_OUTLET_TYPE
from . import session_service


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Hash of a throwaway password, compared against when the email is unknown so
# both failure paths spend the same bcrypt time.
_DUMMY_HASH = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=12)).decode("utf-8")


class PasswordValidationError(ValidationError):
    """Raised when password doesn't meet strength requirements."""
    pass


def validate_password_strength(password: str) -> None:
    """
    Validate password meets strength requirements.

    Requirements:
    - Minimum 8 characters
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - At least one special character (!@#$%^&*(),.'":{}|<>)

    Raises PasswordValidationError if requirements not met.
    """
    if len(password) < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Z]', password):
        raise PasswordValidationError("Password must contain at least one uppercase letter")

    if not re.search(r'[a-z]', password):
        raise PasswordValidationError("Password must contain at least one lowercase letter")

    if not re.search(r'\d', password):
        raise PasswordValidationError("Password must contain at least one digit")

    if not re.search(r"[!@#$%^&*(),.'\":{}|<>]", password):
        raise PasswordValidationError("Password must contain at least one special character")


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt with cost factor 12.

    Password is validated for strength before hashing.
    """
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    bcrypt.checkpw() compares in constant time.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed hash in the database
        return False


def validate_login_payload(data) -> tuple[str, str]:
    if not isinstance(data, dict):
        data = {}
    email = data.get("email")
    password = data.get("password")

    if not isinstance(email, str) or not EMAIL_RE.match(email.strip()):
        raise ValidationError("Valid email is required")
    if not isinstance(password, str) or password == "":
        raise ValidationError("Password is required")
    return email.strip(), password


def authenticate(email: str, password: str) -> User:
    """
    Authenticate user by email and password.

    Raises InvalidCredentials for an unknown email and for a wrong password
    alike.
    """
    user = db.session.query(User).filter_by(email=email).first()

    if not user:
        verify_password(password, _DUMMY_HASH)
        raise InvalidCredentials()

    if not verify_password(password, user.password_hash):
        raise InvalidCredentials()

    return user


def login(email: str, password: str) -> tuple[str, User]:
    """Authenticate and issue a session credential. Returns (token, user)."""
    user = authenticate(email, password)
    token = session_service.issue_token(user)
    return token, user


def create_user(
    email: str,
    password: str,
    name: str,
    role: str,
    outlet_id: int | None = None,
) -> User:
    """
    Create new user with bcrypt password hashing.

    Outlet roles must be affiliated with an outlet of the matching type;
    OWNER and PURCHASING must not be affiliated with any outlet.

    Raises:
        ValidationError: bad role, outlet mismatch, duplicate email
        PasswordValidationError: weak password
    """
    if role not in ALL_ROLES:
        raise ValidationError(f"Unknown role: {role}")

    if role in OUTLET_ROLES:
        if outlet_id is None:
            raise ValidationError(f"{role} users require an outlet")
        outlet = db.session.get(Outlet, outlet_id)
        if not outlet:
            raise ValidationError("Outlet not found")
        if outlet.type != ROLE_OUTLET_TYPE[role]:
            raise ValidationError(f"{role} users must belong to a {ROLE_OUTLET_TYPE[role]} outlet")
    elif outlet_id is not None:
        raise ValidationError(f"{role} users cannot belong to an outlet")

    existing = db.session.query(User).filter_by(email=email).first()
    if existing:
        raise ValidationError("Email already exists")

    user = User(
        email=email,
        password_hash=hash_password(password),
        name=name,
        role=role,
        outlet_id=outlet_id,
    )
    db.session.add(user)
    db.session.commit()
    return user
