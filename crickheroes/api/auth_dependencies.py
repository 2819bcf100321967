"""
Authentication dependencies for FastAPI routes.

The session token is read from the `Authorization: Bearer` header or the
session cookie. Tokens are stateless: the claims are trusted as-is and no
account lookup is made.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from crickheroes.database.models import AccountRole
from crickheroes.services import auth_service
from crickheroes.services.route_guard import evaluate_guard, GuardState
from crickheroes.utils.exceptions import Unauthorized, Forbidden

security = HTTPBearer(auto_error=False)


async def get_current_user_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[dict]:
    """
    Resolve the caller's session claims.

    Returns:
        User dictionary (id, role, username, phone) or None when there is no
        valid token
    """
    token = None
    if credentials is not None:
        token = credentials.credentials
    else:
        token = request.cookies.get(auth_service.SESSION_COOKIE_NAME)

    if not token:
        return None

    payload = auth_service.verify_token(token)
    if payload is None:
        return None
    return auth_service.claims_to_user(payload)


def _raise_for_guard(state: GuardState) -> None:
    if state == GuardState.UNAUTHENTICATED:
        raise Unauthorized("Unauthorized")
    if state == GuardState.INSUFFICIENT_ROLE:
        raise Forbidden("Admin access required")
    if state == GuardState.WRONG_IDENTITY:
        raise Forbidden("You can only modify your own profile")


async def get_current_user(user: Optional[dict] = Depends(get_current_user_optional)) -> dict:
    """Require any authenticated user."""
    _raise_for_guard(evaluate_guard(user).state)
    return user


async def require_admin(user: Optional[dict] = Depends(get_current_user_optional)) -> dict:
    """Require the admin role."""
    _raise_for_guard(evaluate_guard(user, required_role=AccountRole.ADMIN.value).state)
    return user


def is_admin(user: Optional[dict]) -> bool:
    return bool(user) and user.get("role") == AccountRole.ADMIN.value


def ensure_owner_or_admin(user: dict, username: str) -> None:
    """
    Allow the account owner or an admin to act on `username`.

    Raises:
        Unauthorized / Forbidden: According to the guard state
    """
    if is_admin(user):
        return
    _raise_for_guard(evaluate_guard(user, required_username=username).state)
