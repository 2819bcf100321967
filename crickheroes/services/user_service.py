"""
User service layer for account and verification code database operations.
"""

from typing import Optional, Dict, Any, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, update, delete, or_
from crickheroes.database.models import Account, AccountStatus, AccountRole, VerificationCode
from crickheroes.services import auth_service
from crickheroes.utils.constants import VERIFICATION_CODE_EXPIRATION_MINUTES
from crickheroes.utils.datetime_utils import utcnow, utc_iso_in
from crickheroes.utils.exceptions import (
    AccountNotFound,
    DuplicateCredential,
    InvalidCode,
    InvalidCredentials,
    ValidationError,
)
from crickheroes.utils.slugify import slugify, suffixed
import logging

logger = logging.getLogger(__name__)

# Attempts at inserting a fresh username when a concurrent registration wins the race
MAX_USERNAME_ATTEMPTS = 3


def base_username(name: str) -> str:
    """Derive the URL-safe base username for a display name."""
    base = slugify(name)
    if not base:
        raise ValidationError("Name must contain at least one letter or digit")
    return base


async def username_exists(session: AsyncSession, username: str) -> bool:
    result = await session.execute(select(Account.id).where(Account.username == username))
    return result.scalar_one_or_none() is not None


async def generate_unique_username(session: AsyncSession, name: str) -> str:
    """
    Pick a unique username for a name.

    Probes `base`, `base-1`, `base-2`, ... in order and returns the first free one.
    """
    base = base_username(name)
    if not await username_exists(session, base):
        return base

    counter = 1
    while await username_exists(session, suffixed(base, counter)):
        counter += 1
    return suffixed(base, counter)


async def _check_duplicate_credentials(
    session: AsyncSession, phone: str, email: Optional[str]
) -> None:
    conditions = [Account.phone == phone]
    if email:
        conditions.append(Account.email == email)
    result = await session.execute(select(Account).where(or_(*conditions)).limit(1))
    existing = result.scalar_one_or_none()
    if existing is None:
        return
    conflict = "phone number" if existing.phone == phone else "email"
    raise DuplicateCredential(f"User with this {conflict} already exists")


async def create_account(
    session: AsyncSession,
    name: str,
    phone: str,
    password_hash: str,
    email: Optional[str] = None,
    image: Optional[str] = None,
    category: Optional[str] = None,
    specialties: Optional[List[str]] = None,
    batting_style: Optional[str] = None,
    bowling_style: Optional[str] = None,
    age: Optional[int] = None,
    profile_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a new account in `pending` status with zero likes.

    Args:
        session: Database session
        name: Display name, used to derive the username
        phone: Phone number (unique)
        password_hash: bcrypt hash of the password
        email: Optional email (unique when present)

    Returns:
        Account dictionary (without password hash)

    Raises:
        DuplicateCredential: If the phone or email is already registered
    """
    await _check_duplicate_credentials(session, phone, email)

    for attempt in range(MAX_USERNAME_ATTEMPTS):
        username = await generate_unique_username(session, name)
        account = Account(
            name=name,
            username=username,
            phone=phone,
            email=email,
            password_hash=password_hash,
            image=image or "",
            category=category,
            specialties=specialties or [],
            batting_style=batting_style,
            bowling_style=bowling_style,
            age=age,
            profile_url=profile_url or "",
            role=AccountRole.PLAYER.value,
            status=AccountStatus.PENDING.value,
            likes=0,
        )
        session.add(account)
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            # Either the username was taken in between, or phone/email was
            await _check_duplicate_credentials(session, phone, email)
            logger.warning(f"Username {username} taken concurrently, retrying ({attempt + 1})")
            continue
        await session.refresh(account)
        logger.info(f"Registered account {account.id} as {username}")
        return account_to_dict(account)

    raise DuplicateCredential("Could not allocate a unique username, please retry")


def account_to_dict(account: Account, include_password: bool = False) -> Dict[str, Any]:
    """
    Convert an Account ORM instance to a dictionary.

    The password hash is only included when explicitly requested.
    """
    data = {
        "id": account.id,
        "name": account.name,
        "username": account.username,
        "phone": account.phone,
        "email": account.email or "",
        "image": account.image or "",
        "category": account.category,
        "specialties": account.specialties or [],
        "batting_style": account.batting_style,
        "bowling_style": account.bowling_style,
        "age": account.age,
        "profile_url": account.profile_url or "",
        "role": account.role,
        "status": account.status,
        "likes": account.likes or 0,
        "created_at": account.created_at.isoformat() if account.created_at else None,
        "updated_at": account.updated_at.isoformat() if account.updated_at else None,
    }
    if include_password:
        data["password_hash"] = account.password_hash
    return data


async def get_account_by_phone(
    session: AsyncSession, phone: str, include_password: bool = False
) -> Optional[Dict[str, Any]]:
    result = await session.execute(select(Account).where(Account.phone == phone).limit(1))
    account = result.scalar_one_or_none()
    return account_to_dict(account, include_password) if account else None


async def get_account_by_email(session: AsyncSession, email: str) -> Optional[Dict[str, Any]]:
    email = auth_service.normalize_email(email)
    if not email:
        return None
    result = await session.execute(select(Account).where(Account.email == email).limit(1))
    account = result.scalar_one_or_none()
    return account_to_dict(account) if account else None


async def authenticate(session: AsyncSession, phone: str, password: str) -> Dict[str, Any]:
    """
    Validate phone and password.

    Unknown phone and wrong password raise the same error so callers cannot
    tell which accounts exist.

    Returns:
        Account dictionary (without password hash)

    Raises:
        InvalidCredentials: On any mismatch
    """
    account = await get_account_by_phone(session, phone, include_password=True)
    if not account:
        raise InvalidCredentials()
    if not auth_service.verify_password(password, account.pop("password_hash")):
        raise InvalidCredentials()
    return account


async def update_password_by_email(session: AsyncSession, email: str, password_hash: str) -> bool:
    """
    Replace the password hash of the account registered with an email.

    The caller owns the transaction; nothing is committed here.

    Returns:
        True if an account was updated
    """
    result = await session.execute(
        update(Account)
        .where(Account.email == email)
        .values(password_hash=password_hash, updated_at=utcnow())
    )
    return result.rowcount > 0


async def reset_password_with_code(
    session: AsyncSession, email: str, code_id: int, password_hash: str
) -> None:
    """
    Consume a reset code and set the new password in one transaction.

    The code row is deleted first; if another request already consumed it the
    delete matches nothing and the reset is refused, so a code authorizes at
    most one password change.

    Raises:
        InvalidCode: If the code was already used
        AccountNotFound: If no account is registered with the email
    """
    consumed = await session.execute(
        delete(VerificationCode).where(
            VerificationCode.id == code_id, VerificationCode.email == email
        )
    )
    if not consumed.rowcount:
        await session.rollback()
        raise InvalidCode()

    if not await update_password_by_email(session, email, password_hash):
        await session.rollback()
        raise AccountNotFound()

    await session.commit()
    logger.info(f"Password reset for {email}")


async def purge_expired_codes(session: AsyncSession) -> int:
    """Delete every verification code whose expiry has passed."""
    result = await session.execute(
        delete(VerificationCode).where(VerificationCode.expires_at <= utc_iso_in())
    )
    return result.rowcount or 0


async def create_verification_code(
    session: AsyncSession,
    email: str,
    code: str,
    expires_in_minutes: int = VERIFICATION_CODE_EXPIRATION_MINUTES,
) -> Dict[str, Any]:
    """
    Store a password reset code for an email.

    Expired codes (for any email) are purged first so stale rows don't pile up.

    Args:
        session: Database session
        email: Account email the code was sent to
        code: Six-digit code
        expires_in_minutes: Lifetime of the code

    Returns:
        Dictionary with the email, code and ISO expiry
    """
    purged = await purge_expired_codes(session)
    if purged:
        logger.info(f"Purged {purged} expired verification codes")

    expires_at = utc_iso_in(expires_in_minutes)
    session.add(VerificationCode(email=email, code=code, expires_at=expires_at))
    await session.commit()
    return {"email": email, "code": code, "expires_at": expires_at}


async def find_valid_code(session: AsyncSession, email: str, code: str) -> Optional[int]:
    """
    Look up an unexpired code for an email.

    Returns:
        The code row id, or None if the code doesn't match or has expired
    """
    result = await session.execute(
        select(VerificationCode.id)
        .where(
            VerificationCode.email == email,
            VerificationCode.code == code,
            VerificationCode.expires_at > utc_iso_in(),
        )
        .limit(1)
    )
    return result.scalar_one_or_none()
