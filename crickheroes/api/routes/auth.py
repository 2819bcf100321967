"""Authentication route handlers."""

import logging
from typing import Dict, Any, Optional

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from crickheroes.api.routes import limiter
from crickheroes.api.auth_dependencies import get_current_user, get_current_user_optional
from crickheroes.database.db import get_db_session
from crickheroes.services import auth_service, user_service, email_service
from crickheroes.services.player_service import parse_age
from crickheroes.services.route_guard import evaluate_guard
from crickheroes.models.schemas import (
    RegisterRequest,
    RegisterResponse,
    LoginRequest,
    AuthResponse,
    ForgotPasswordRequest,
    VerifyCodeRequest,
    ResetPasswordRequest,
    SessionUserResponse,
    GuardResponse,
    MessageResponse,
)
from crickheroes.utils.constants import VERIFICATION_CODE_EXPIRATION_MINUTES
from crickheroes.utils.exceptions import (
    ClubError,
    ValidationError,
    AccountNotFound,
    InvalidCode,
    UpstreamFailure,
    InternalError,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _check_password_length(password: str) -> None:
    # bcrypt only accepts the first 72 bytes of a password
    if len(password.encode("utf-8")) > auth_service.MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"Password must be at most {auth_service.MAX_PASSWORD_BYTES} bytes"
        )


@router.post("/api/auth/register", response_model=RegisterResponse, status_code=201)
@limiter.limit("10/minute")
async def register(
    request: Request, payload: RegisterRequest, session: AsyncSession = Depends(get_db_session)
):
    """
    Register a new player. The account starts out pending until an admin
    approves it.
    """
    try:
        name = (payload.name or "").strip()
        phone = auth_service.normalize_phone(payload.phone or "")
        if not name or not phone or not payload.password:
            raise ValidationError("Name, phone and password are required")
        _check_password_length(payload.password)

        age = parse_age(payload.age) if payload.age not in (None, "") else None

        account = await user_service.create_account(
            session,
            name=name,
            phone=phone,
            password_hash=auth_service.hash_password(payload.password),
            email=auth_service.normalize_email(payload.email),
            image=payload.photo,
            category=payload.category,
            specialties=payload.specialties,
            batting_style=payload.batting_style,
            bowling_style=payload.bowling_style,
            age=age,
            profile_url=payload.profile_url,
        )
        return RegisterResponse(
            message="Registration successful! Waiting for admin approval.",
            player_id=account["id"],
            username=account["username"],
        )
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error during registration: {e}", exc_info=True)
        raise InternalError("Error during registration")


@router.post("/api/auth/login", response_model=AuthResponse)
@limiter.limit("10/minute")
async def login(
    request: Request,
    response: Response,
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
):
    """Login with phone and password."""
    try:
        phone = auth_service.normalize_phone(payload.phone or "")
        account = await user_service.authenticate(session, phone, payload.password)

        claims = auth_service.build_session_claims(account)
        access_token = auth_service.create_access_token(data=claims)
        response.set_cookie(
            key=auth_service.SESSION_COOKIE_NAME,
            value=access_token,
            max_age=auth_service.SESSION_TOKEN_EXPIRE_MINUTES * 60,
            httponly=True,
            samesite="lax",
        )
        return AuthResponse(
            message="Login successful",
            access_token=access_token,
            token_type="bearer",
            user=account,
        )
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error during login: {e}", exc_info=True)
        raise InternalError("Error during login")


@router.post("/api/auth/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Clear the session cookie. Issued tokens stay valid until they expire."""
    response.delete_cookie(auth_service.SESSION_COOKIE_NAME)
    return MessageResponse(message="Logged out")


@router.post("/api/auth/forgot-password", response_model=MessageResponse)
@limiter.limit("10/minute")
async def forgot_password(
    request: Request,
    payload: ForgotPasswordRequest,
    session: AsyncSession = Depends(get_db_session),
):
    """Email a six-digit reset code to the account's address."""
    try:
        email = auth_service.normalize_email(payload.email)
        account = await user_service.get_account_by_email(session, email) if email else None
        if not account:
            raise AccountNotFound()

        code = auth_service.generate_verification_code()
        await user_service.create_verification_code(
            session, email, code, expires_in_minutes=VERIFICATION_CODE_EXPIRATION_MINUTES
        )

        if not email_service.send_reset_code(email, code):
            raise UpstreamFailure("Failed to send verification code")

        return MessageResponse(message="Verification code sent to your email")
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error during forgot password: {e}", exc_info=True)
        raise InternalError("Error sending verification code")


@router.post("/api/auth/verify-code", response_model=Dict[str, Any])
@limiter.limit("10/minute")
async def verify_code(
    request: Request, payload: VerifyCodeRequest, session: AsyncSession = Depends(get_db_session)
):
    """Check a reset code without consuming it."""
    try:
        email = auth_service.normalize_email(payload.email)
        code_id = await user_service.find_valid_code(session, email, payload.code.strip())
        if code_id is None:
            raise InvalidCode()
        return {"message": "Code verified successfully", "valid": True}
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error verifying code: {e}", exc_info=True)
        raise InternalError("Error verifying code")


@router.post("/api/auth/reset-password", response_model=MessageResponse)
@limiter.limit("10/minute")
async def reset_password(
    request: Request,
    payload: ResetPasswordRequest,
    session: AsyncSession = Depends(get_db_session),
):
    """Set a new password using a valid reset code. The code is consumed."""
    try:
        if not payload.new_password:
            raise ValidationError("New password is required")
        _check_password_length(payload.new_password)

        email = auth_service.normalize_email(payload.email)
        code_id = await user_service.find_valid_code(session, email, payload.code.strip())
        if code_id is None:
            raise InvalidCode()

        await user_service.reset_password_with_code(
            session, email, code_id, auth_service.hash_password(payload.new_password)
        )
        return MessageResponse(message="Password reset successfully")
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error resetting password: {e}", exc_info=True)
        raise InternalError("Error resetting password")


@router.get("/api/auth/me", response_model=SessionUserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Claims carried by the caller's session token."""
    return SessionUserResponse(**user)


@router.get("/api/auth/guard", response_model=GuardResponse)
async def get_guard_state(
    username: Optional[str] = None,
    role: Optional[str] = None,
    user: Optional[dict] = Depends(get_current_user_optional),
):
    """Evaluate the route guard for the caller against a page's requirements."""
    decision = evaluate_guard(user, required_username=username, required_role=role)
    return GuardResponse(state=decision.state.value, redirect=decision.redirect)
