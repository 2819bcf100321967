"""Match result route handlers."""

import logging
from typing import List, Dict, Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from crickheroes.database.db import get_db_session
from crickheroes.services import match_service
from crickheroes.api.auth_dependencies import require_admin
from crickheroes.models.schemas import PublishResultRequest
from crickheroes.utils.exceptions import ClubError, InternalError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/results", response_model=List[Dict[str, Any]])
async def list_results(session: AsyncSession = Depends(get_db_session)):
    try:
        return await match_service.list_results(session)
    except Exception as e:
        logger.error(f"Error loading results: {e}", exc_info=True)
        raise InternalError("Error loading results")


@router.post("/api/results", response_model=Dict[str, Any], status_code=201)
async def publish_result(
    payload: PublishResultRequest,
    admin: dict = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Publish the result of a match (admin only).

    Stores the scorecard summary and marks the match completed.
    """
    try:
        return await match_service.publish_result(
            session,
            match_id=payload.match_id,
            team1_score=payload.team1.model_dump(),
            team2_score=payload.team2.model_dump(),
            first_batting_team=payload.first_batting_team,
            winner=payload.winner,
        )
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error publishing result for match {payload.match_id}: {e}", exc_info=True)
        raise InternalError("Error publishing result")
