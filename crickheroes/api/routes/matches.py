"""Match fixture route handlers."""

import logging
from typing import List, Dict, Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from crickheroes.database.db import get_db_session
from crickheroes.services import match_service
from crickheroes.api.auth_dependencies import require_admin
from crickheroes.models.schemas import CreateMatchRequest, UpdateMatchRequest, MessageResponse
from crickheroes.utils.exceptions import ClubError, InternalError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/matches", response_model=List[Dict[str, Any]])
async def list_matches(session: AsyncSession = Depends(get_db_session)):
    try:
        return await match_service.list_matches(session)
    except Exception as e:
        logger.error(f"Error loading matches: {e}", exc_info=True)
        raise InternalError("Error loading matches")


@router.get("/api/matches/{match_id}", response_model=Dict[str, Any])
async def get_match(match_id: int, session: AsyncSession = Depends(get_db_session)):
    return await match_service.get_match(session, match_id)


@router.post("/api/matches", response_model=Dict[str, Any], status_code=201)
async def create_match(
    payload: CreateMatchRequest,
    admin: dict = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    """Schedule a new match (admin only)."""
    try:
        return await match_service.create_match(session, payload.model_dump(exclude_none=True))
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error creating match: {e}", exc_info=True)
        raise InternalError("Error creating match")


@router.put("/api/matches/{match_id}", response_model=Dict[str, Any])
async def update_match(
    match_id: int,
    payload: UpdateMatchRequest,
    admin: dict = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    """Update fields of a match (admin only). Omitted fields are left as-is."""
    try:
        return await match_service.update_match(
            session, match_id, payload.model_dump(exclude_unset=True)
        )
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error updating match {match_id}: {e}", exc_info=True)
        raise InternalError("Error updating match")


@router.delete("/api/matches/{match_id}", response_model=MessageResponse)
async def delete_match(
    match_id: int,
    admin: dict = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        await match_service.delete_match(session, match_id)
        return MessageResponse(message="Match deleted successfully")
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error deleting match {match_id}: {e}", exc_info=True)
        raise InternalError("Error deleting match")
