"""
Match service: fixtures CRUD and result publishing.
"""

import logging
from typing import Optional, Dict, Any, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from crickheroes.database.models import Match, MatchResult, MatchStatus
from crickheroes.utils.constants import WICKETS_PER_INNINGS
from crickheroes.utils.datetime_utils import utcnow
from crickheroes.utils.exceptions import NotFound, ValidationError

logger = logging.getLogger(__name__)

TEAM_KEYS = ("team1", "team2")
WINNER_CHOICES = ("team1", "team2", "tie")
MATCH_FIELDS = (
    "opponent",
    "opponent_logo",
    "team1",
    "team2",
    "overs",
    "venue",
    "date",
    "time",
    "match_type",
    "status",
    "selected_players",
)
DEFAULT_TEAM1_NAME = "Our Team"
DEFAULT_TEAM2_NAME = "Opponent"


def _match_to_dict(match: Match) -> Dict[str, Any]:
    return {
        "id": match.id,
        "opponent": match.opponent,
        "opponent_logo": match.opponent_logo or "",
        "team1": match.team1 or {},
        "team2": match.team2 or {},
        "overs": match.overs,
        "venue": match.venue,
        "date": match.date,
        "time": match.time,
        "match_type": match.match_type,
        "status": match.status,
        "selected_players": match.selected_players or [],
        "result": match.result,
        "created_at": match.created_at.isoformat() if match.created_at else None,
        "updated_at": match.updated_at.isoformat() if match.updated_at else None,
    }


def _result_to_dict(result: MatchResult) -> Dict[str, Any]:
    return {
        "id": result.id,
        "match_id": result.match_id,
        "team1": result.team1,
        "team2": result.team2,
        "first_batting_team": result.first_batting_team,
        "winner": result.winner,
        "result": result.result,
        "created_at": result.created_at.isoformat() if result.created_at else None,
    }


def _validate_status(status: Optional[str]) -> None:
    if status is not None and status not in {s.value for s in MatchStatus}:
        raise ValidationError(f"Invalid match status '{status}'")


async def list_matches(session: AsyncSession) -> List[Dict[str, Any]]:
    result = await session.execute(select(Match).order_by(Match.date, Match.id))
    return [_match_to_dict(m) for m in result.scalars().all()]


async def get_match(session: AsyncSession, match_id: int) -> Dict[str, Any]:
    match = await session.get(Match, match_id)
    if match is None:
        raise NotFound("Match not found")
    return _match_to_dict(match)


async def create_match(session: AsyncSession, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Schedule a match.

    When team descriptors are omitted, team1 is the club and team2 is built
    from the opponent name and logo.
    """
    opponent = (data.get("opponent") or "").strip()
    if not opponent:
        raise ValidationError("Opponent is required")
    _validate_status(data.get("status"))

    team1 = data.get("team1") or {"name": DEFAULT_TEAM1_NAME}
    team2 = data.get("team2") or {"name": opponent, "logo": data.get("opponent_logo") or ""}

    match = Match(
        opponent=opponent,
        opponent_logo=data.get("opponent_logo") or "",
        team1=team1,
        team2=team2,
        overs=data.get("overs"),
        venue=data.get("venue"),
        date=data.get("date"),
        time=data.get("time"),
        match_type=data.get("match_type") or "T20",
        status=data.get("status") or MatchStatus.SCHEDULED.value,
        selected_players=data.get("selected_players") or [],
    )
    session.add(match)
    await session.commit()
    await session.refresh(match)
    logger.info(f"Created match {match.id} vs {opponent}")
    return _match_to_dict(match)


async def update_match(
    session: AsyncSession, match_id: int, updates: Dict[str, Any]
) -> Dict[str, Any]:
    """Apply a partial update. Last write wins; there is no version check."""
    _validate_status(updates.get("status"))
    match = await session.get(Match, match_id)
    if match is None:
        raise NotFound("Match not found")

    for key, value in updates.items():
        if key in MATCH_FIELDS and value is not None:
            setattr(match, key, value)
    match.updated_at = utcnow()

    await session.commit()
    await session.refresh(match)
    return _match_to_dict(match)


async def delete_match(session: AsyncSession, match_id: int) -> None:
    result = await session.execute(
        select(Match)
        .options(selectinload(Match.match_result))
        .where(Match.id == match_id)
        .execution_options(populate_existing=True)
    )
    match = result.scalar_one_or_none()
    if match is None:
        raise NotFound("Match not found")
    await session.delete(match)
    await session.commit()
    logger.info(f"Deleted match {match_id}")


def summarize_result(
    team1: Dict[str, Any], team2: Dict[str, Any], first_batting_team: str, winner: str
) -> str:
    """
    Build the result line for a finished match.

    A side that batted first wins by the run margin; a chasing side wins by
    the wickets it had in hand.

    Args:
        team1, team2: Dicts with "name", "runs" and "wickets"
        first_batting_team: "team1" or "team2"
        winner: "team1", "team2" or "tie"
    """
    if winner == "tie":
        return "Match tied"

    teams = {"team1": team1, "team2": team2}
    won = teams[winner]
    lost = teams["team2" if winner == "team1" else "team1"]

    if winner == first_batting_team:
        return f"{won['name']} won by {won['runs'] - lost['runs']} runs"
    return f"{won['name']} won by {WICKETS_PER_INNINGS - won['wickets']} wickets"


def _team_outcome(team_key: str, winner: str) -> str:
    if winner == "tie":
        return "tie"
    return "won" if winner == team_key else "lost"


def _validate_score(team: Dict[str, Any], label: str) -> None:
    for field in ("runs", "wickets", "overs"):
        if team.get(field) is None:
            raise ValidationError("Please fill in all score fields")
    if team["runs"] < 0 or team["overs"] < 0:
        raise ValidationError(f"{label} runs and overs must not be negative")
    if not 0 <= team["wickets"] <= WICKETS_PER_INNINGS:
        raise ValidationError(f"{label} wickets must be between 0 and {WICKETS_PER_INNINGS}")


def _validate_outcome(team1: Dict[str, Any], team2: Dict[str, Any], winner: str) -> None:
    runs = {"team1": int(team1["runs"]), "team2": int(team2["runs"])}
    if winner == "tie":
        if runs["team1"] != runs["team2"]:
            raise ValidationError("A tied match needs equal runs for both teams")
        return
    loser = "team2" if winner == "team1" else "team1"
    if runs[winner] <= runs[loser]:
        raise ValidationError("The winning team must have scored more runs")


async def publish_result(
    session: AsyncSession,
    match_id: int,
    team1_score: Dict[str, Any],
    team2_score: Dict[str, Any],
    first_batting_team: str,
    winner: str,
) -> Dict[str, Any]:
    """
    Attach a result to a match and mark it completed.

    The result row and the match update are committed together. Player
    statistics are not touched here; they are maintained through the player
    details endpoints as separate writes.

    Args:
        session: Database session
        match_id: Match to publish for
        team1_score, team2_score: Dicts with "runs", "wickets", "overs"
        first_batting_team: "team1" or "team2"
        winner: "team1", "team2" or "tie"

    Returns:
        The stored result

    Raises:
        ValidationError: On inconsistent input
        NotFound: If the match doesn't exist
    """
    if winner not in WINNER_CHOICES:
        raise ValidationError("Please select a winner or tie")
    if first_batting_team not in TEAM_KEYS:
        raise ValidationError("First batting team must be team1 or team2")
    _validate_score(team1_score, "Team 1")
    _validate_score(team2_score, "Team 2")
    _validate_outcome(team1_score, team2_score, winner)

    result = await session.execute(
        select(Match)
        .options(selectinload(Match.match_result))
        .where(Match.id == match_id)
        .execution_options(populate_existing=True)
    )
    match = result.scalar_one_or_none()
    if match is None:
        raise NotFound("Match not found")

    names = {
        "team1": (match.team1 or {}).get("name") or DEFAULT_TEAM1_NAME,
        "team2": (match.team2 or {}).get("name") or DEFAULT_TEAM2_NAME,
    }
    teams = {}
    for key, score in (("team1", team1_score), ("team2", team2_score)):
        teams[key] = {
            "name": names[key],
            "runs": int(score["runs"]),
            "wickets": int(score["wickets"]),
            "overs": float(score["overs"]),
            "score": f"{int(score['runs'])}/{int(score['wickets'])}",
            "result": _team_outcome(key, winner),
        }

    summary = summarize_result(teams["team1"], teams["team2"], first_batting_team, winner)

    if match.match_result is None:
        match.match_result = MatchResult(
            team1=teams["team1"],
            team2=teams["team2"],
            first_batting_team=first_batting_team,
            winner=winner,
            result=summary,
        )
    else:
        # Re-publishing corrects the earlier scorecard
        match.match_result.team1 = teams["team1"]
        match.match_result.team2 = teams["team2"]
        match.match_result.first_batting_team = first_batting_team
        match.match_result.winner = winner
        match.match_result.result = summary

    match.status = MatchStatus.COMPLETED.value
    match.result = summary
    match.updated_at = utcnow()

    await session.commit()
    await session.refresh(match.match_result)
    logger.info(f"Published result for match {match_id}: {summary}")
    return _result_to_dict(match.match_result)


async def list_results(session: AsyncSession) -> List[Dict[str, Any]]:
    result = await session.execute(select(MatchResult).order_by(MatchResult.created_at.desc()))
    return [_result_to_dict(r) for r in result.scalars().all()]
