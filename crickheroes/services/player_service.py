"""
Player service: roster queries, moderation, self-service profile updates,
likes, and career statistics (player details).
"""

import logging
from typing import Optional, Dict, Any, List

from sqlalchemy import select, update, delete, case
from sqlalchemy.ext.asyncio import AsyncSession

from crickheroes.database.models import Account, AccountStatus, PlayerDetails
from crickheroes.services.user_service import account_to_dict
from crickheroes.utils.constants import MIN_PLAYER_AGE, MAX_PLAYER_AGE
from crickheroes.utils.datetime_utils import utcnow
from crickheroes.utils.exceptions import NotFound, ValidationError

logger = logging.getLogger(__name__)

PLAYER_DETAIL_FIELDS = (
    "matches",
    "runs",
    "wickets",
    "average",
    "strike_rate",
    "best_batting",
    "economy",
    "best_bowling",
    "half_centuries",
    "centuries",
    "thirties",
    "three_wickets",
    "five_wickets",
    "maidens",
    "recent_performance",
)


def default_player_details() -> Dict[str, Any]:
    """Statistics returned for a player with no recorded details yet."""
    return {
        "matches": 0,
        "runs": 0,
        "wickets": 0,
        "average": 0,
        "strike_rate": 0,
        "best_batting": "0 (0)",
        "economy": 0,
        "best_bowling": "0/0",
        "half_centuries": 0,
        "centuries": 0,
        "thirties": 0,
        "three_wickets": 0,
        "five_wickets": 0,
        "maidens": 0,
        "recent_performance": [],
    }


async def list_players(session: AsyncSession, status: Optional[str] = None) -> List[Dict[str, Any]]:
    """List accounts, newest first, optionally filtered by moderation status."""
    query = select(Account).order_by(Account.created_at.desc(), Account.id.desc())
    if status:
        query = query.where(Account.status == status)
    result = await session.execute(query)
    return [account_to_dict(a) for a in result.scalars().all()]


async def _get_account(session: AsyncSession, **filters) -> Optional[Account]:
    result = await session.execute(select(Account).filter_by(**filters).limit(1))
    return result.scalar_one_or_none()


async def get_player(session: AsyncSession, id_or_username: str) -> Dict[str, Any]:
    """
    Fetch a player by numeric id or by username.

    Numeric values are tried as an id first, then as a username.

    Raises:
        NotFound: If neither lookup matches
    """
    account = None
    if id_or_username.isdigit():
        account = await _get_account(session, id=int(id_or_username))
    if account is None:
        account = await _get_account(session, username=id_or_username)
    if account is None:
        raise NotFound("Player not found")
    return account_to_dict(account)


async def get_player_by_phone(session: AsyncSession, phone: str) -> Dict[str, Any]:
    account = await _get_account(session, phone=phone)
    if account is None:
        raise NotFound("Player not found")
    return account_to_dict(account)


async def approve_player(session: AsyncSession, player_id: int) -> None:
    result = await session.execute(
        update(Account)
        .where(Account.id == player_id)
        .values(status=AccountStatus.APPROVED.value, updated_at=utcnow())
    )
    await session.commit()
    if result.rowcount == 0:
        raise NotFound("Player not found")
    logger.info(f"Approved player {player_id}")


async def reject_player(session: AsyncSession, player_id: int) -> None:
    """Delete a registration that is still pending."""
    result = await session.execute(
        delete(Account).where(
            Account.id == player_id, Account.status == AccountStatus.PENDING.value
        )
    )
    await session.commit()
    if result.rowcount == 0:
        raise NotFound("Player not found or already processed")
    logger.info(f"Rejected pending player {player_id}")


async def delete_player(session: AsyncSession, player_id: int) -> None:
    result = await session.execute(delete(Account).where(Account.id == player_id))
    await session.commit()
    if result.rowcount == 0:
        raise NotFound("Player not found")
    logger.info(f"Deleted player {player_id}")


def parse_age(age: Any) -> int:
    """
    Parse and bound-check an age value.

    Raises:
        ValidationError: If the value isn't an integer between the allowed bounds
    """
    try:
        age_num = int(str(age).strip())
    except (TypeError, ValueError):
        age_num = None
    if age_num is None or age_num < MIN_PLAYER_AGE or age_num > MAX_PLAYER_AGE:
        raise ValidationError(
            f"Invalid age. Must be between {MIN_PLAYER_AGE} and {MAX_PLAYER_AGE}."
        )
    return age_num


async def update_player_age(session: AsyncSession, username: str, age: Any) -> int:
    age_num = parse_age(age)
    result = await session.execute(
        update(Account)
        .where(Account.username == username)
        .values(age=age_num, updated_at=utcnow())
    )
    await session.commit()
    if result.rowcount == 0:
        raise NotFound("Player not found")
    return age_num


async def update_player_image(session: AsyncSession, username: str, image: str) -> None:
    if not image or not image.strip():
        raise ValidationError("Image is required")
    result = await session.execute(
        update(Account)
        .where(Account.username == username)
        .values(image=image.strip(), updated_at=utcnow())
    )
    await session.commit()
    if result.rowcount == 0:
        raise NotFound("Player not found")


async def update_player_likes(session: AsyncSession, username: str, liked: bool) -> int:
    """
    Like or unlike a player profile.

    The counter is changed with a single UPDATE so concurrent likes don't
    overwrite each other; unliking never goes below zero.

    Returns:
        The new like count
    """
    if liked:
        new_value = Account.likes + 1
    else:
        new_value = case((Account.likes > 0, Account.likes - 1), else_=0)

    result = await session.execute(
        update(Account).where(Account.username == username).values(likes=new_value)
    )
    if result.rowcount == 0:
        await session.rollback()
        raise NotFound("Player not found")
    await session.commit()

    likes = await session.execute(select(Account.likes).where(Account.username == username))
    return likes.scalar_one()


def _details_to_dict(details: PlayerDetails) -> Dict[str, Any]:
    data = {field: getattr(details, field) for field in PLAYER_DETAIL_FIELDS}
    data["recent_performance"] = data["recent_performance"] or []
    data["username"] = details.username
    return data


async def get_player_details(session: AsyncSession, username: str) -> Dict[str, Any]:
    """Stored statistics for a player, or the zeroed defaults if none exist."""
    result = await session.execute(
        select(PlayerDetails).where(PlayerDetails.username == username)
    )
    details = result.scalar_one_or_none()
    if details is None:
        return default_player_details()
    return _details_to_dict(details)


async def list_player_details(session: AsyncSession) -> List[Dict[str, Any]]:
    """
    All statistics rows joined with the player's display fields.

    Rows whose player no longer exists fall back to the username and
    category "Unknown".
    """
    result = await session.execute(
        select(PlayerDetails, Account.name, Account.image, Account.category)
        .outerjoin(Account, Account.username == PlayerDetails.username)
        .order_by(PlayerDetails.runs.desc())
    )
    stats = []
    for details, name, image, category in result.all():
        row = _details_to_dict(details)
        row["name"] = name or details.username
        row["image"] = image or None
        row["category"] = category or "Unknown"
        stats.append(row)
    return stats


async def upsert_player_details(
    session: AsyncSession, username: str, updates: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Create or update a player's statistics. Unknown keys are ignored.

    Returns:
        The stored statistics
    """
    values = {k: v for k, v in updates.items() if k in PLAYER_DETAIL_FIELDS and v is not None}

    result = await session.execute(
        select(PlayerDetails).where(PlayerDetails.username == username)
    )
    details = result.scalar_one_or_none()
    if details is None:
        details = PlayerDetails(username=username, **{**default_player_details(), **values})
        session.add(details)
    else:
        for key, value in values.items():
            setattr(details, key, value)
        details.updated_at = utcnow()

    await session.commit()
    await session.refresh(details)
    return _details_to_dict(details)
