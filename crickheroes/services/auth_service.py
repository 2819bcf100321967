"""
Authentication service: password hashing, session tokens and reset codes.

Session tokens are stateless JWTs. Nothing is stored server side, so a token
stays valid until it expires.
"""

import os
import secrets
import logging
from datetime import timedelta
from typing import Optional, Dict, Any

import bcrypt
import jwt
from dotenv import load_dotenv

from crickheroes.utils.constants import (
    BCRYPT_ROUNDS,
    VERIFICATION_CODE_MIN,
    VERIFICATION_CODE_MAX,
)
from crickheroes.utils.datetime_utils import utcnow

load_dotenv()

logger = logging.getLogger(__name__)

SESSION_SECRET = os.getenv("SESSION_SECRET", "dev-session-secret-change-me")
JWT_ALGORITHM = "HS256"
SESSION_TOKEN_EXPIRE_MINUTES = int(os.getenv("SESSION_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 30)))
SESSION_COOKIE_NAME = "session_token"
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """
    Hash a password with bcrypt at the club's cost factor.

    Args:
        password: Plain text password

    Returns:
        bcrypt hash as a string
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode(
        "utf-8"
    )


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain text password against a stored bcrypt hash."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash or over-long password
        return False


def build_session_claims(account: Dict[str, Any]) -> Dict[str, Any]:
    """Identity and role claims carried by a session token."""
    return {
        "sub": str(account["id"]),
        "role": account["role"],
        "username": account["username"],
        "phone": account["phone"],
    }


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed session token.

    Args:
        data: Claims to embed
        expires_delta: Optional lifetime override

    Returns:
        Encoded JWT
    """
    to_encode = data.copy()
    now = utcnow()
    expire = now + (expires_delta or timedelta(minutes=SESSION_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "iat": now})
    return jwt.encode(to_encode, SESSION_SECRET, algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and verify a session token.

    Returns:
        Claims dictionary, or None if the token is invalid or expired
    """
    try:
        return jwt.decode(token, SESSION_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.debug("Session token expired")
        return None
    except jwt.InvalidTokenError:
        return None


def claims_to_user(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Convert verified token claims to the user dict routes work with."""
    sub = payload.get("sub")
    if sub is None or not payload.get("username"):
        return None
    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        return None
    return {
        "id": user_id,
        "role": payload.get("role"),
        "username": payload["username"],
        "phone": payload.get("phone"),
    }


def generate_verification_code() -> str:
    """Generate a six-digit reset code from a cryptographically strong source."""
    span = VERIFICATION_CODE_MAX - VERIFICATION_CODE_MIN
    return str(VERIFICATION_CODE_MIN + secrets.randbelow(span + 1))


def normalize_phone(phone: str) -> str:
    """Trim a phone number. Numbers are matched exactly as registered."""
    return phone.strip() if phone else phone


def normalize_email(email: Optional[str]) -> Optional[str]:
    """Lowercase and trim an email; empty values become None."""
    if not email:
        return None
    email = email.strip().lower()
    return email or None
