"""
Route guard state machine.

A page (or endpoint) may require a specific username, a role, or both. Once the
visitor's session has been resolved the guard is evaluated exactly once and
lands in a terminal state; a failed check becomes a redirect and is never
retried.

    loading -> unauthenticated
            -> authenticated-insufficient-role
            -> authenticated-wrong-identity
            -> authorized
"""

import enum
from dataclasses import dataclass
from typing import Optional, Dict, Any

from crickheroes.database.models import AccountRole
from crickheroes.utils.constants import SIGN_IN_PATH, UNAUTHORIZED_PATH, PLAYER_PAGE_PATH


class GuardState(str, enum.Enum):
    """Route guard states."""

    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    WRONG_IDENTITY = "authenticated-wrong-identity"
    INSUFFICIENT_ROLE = "authenticated-insufficient-role"
    AUTHORIZED = "authorized"


@dataclass(frozen=True)
class GuardDecision:
    state: GuardState
    redirect: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.state != GuardState.LOADING

    @property
    def allowed(self) -> bool:
        return self.state == GuardState.AUTHORIZED


def _has_role(claims: Dict[str, Any], required_role: str) -> bool:
    role = claims.get("role")
    return role == required_role or role == AccountRole.ADMIN.value


def evaluate_guard(
    claims: Optional[Dict[str, Any]],
    resolved: bool = True,
    required_username: Optional[str] = None,
    required_role: Optional[str] = None,
) -> GuardDecision:
    """
    Evaluate the guard for a visitor.

    Args:
        claims: Session claims (role, username, ...) or None when signed out
        resolved: False while the session is still being looked up
        required_username: Page owner; visitors must match it
        required_role: Role the page requires (admin satisfies any role)

    Returns:
        GuardDecision with the resulting state and redirect target
    """
    if not resolved:
        return GuardDecision(GuardState.LOADING)

    if not claims:
        return GuardDecision(GuardState.UNAUTHENTICATED, SIGN_IN_PATH)

    if required_role and not _has_role(claims, required_role):
        return GuardDecision(GuardState.INSUFFICIENT_ROLE, UNAUTHORIZED_PATH)

    if required_username is not None and claims.get("username") != required_username:
        return GuardDecision(
            GuardState.WRONG_IDENTITY, PLAYER_PAGE_PATH.format(username=claims.get("username"))
        )

    return GuardDecision(GuardState.AUTHORIZED)
