"""
Pydantic models for API request/response validation.
"""

from typing import Optional, List, Any, Dict, Union
from pydantic import BaseModel, ConfigDict, Field


# Authentication schemas


class RegisterRequest(BaseModel):
    """Request to register a new player account."""

    name: str
    phone: str
    password: str
    email: Optional[str] = None
    photo: Optional[str] = None
    category: Optional[str] = None
    specialties: Optional[List[str]] = None
    batting_style: Optional[str] = None
    bowling_style: Optional[str] = None
    age: Optional[Union[int, str]] = None
    profile_url: Optional[str] = None


class RegisterResponse(BaseModel):
    message: str
    player_id: int
    username: str


class LoginRequest(BaseModel):
    """Request to login with phone and password."""

    phone: str
    password: str


class AuthResponse(BaseModel):
    """Authentication response with session token."""

    message: str
    access_token: str
    token_type: str = "bearer"
    user: Dict[str, Any]


class ForgotPasswordRequest(BaseModel):
    email: str


class VerifyCodeRequest(BaseModel):
    email: str
    code: str


class ResetPasswordRequest(BaseModel):
    email: str
    code: str
    new_password: str


class SessionUserResponse(BaseModel):
    """Claims carried by the caller's session token."""

    id: int
    role: Optional[str] = None
    username: str
    phone: Optional[str] = None


class GuardResponse(BaseModel):
    state: str
    redirect: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


# Player schemas


class PlayerIdRequest(BaseModel):
    """Body for admin moderation endpoints."""

    player_id: int


class PlayerLikeRequest(BaseModel):
    liked: bool


class PlayerLikeResponse(BaseModel):
    message: str
    likes: int


class UpdateAgeRequest(BaseModel):
    username: str
    age: Union[int, str]


class UpdateImageRequest(BaseModel):
    username: str
    image: Optional[str] = None


class PlayerDetailsUpdate(BaseModel):
    """Partial update of a player's career statistics."""

    model_config = ConfigDict(extra="ignore")

    matches: Optional[int] = Field(default=None, ge=0)
    runs: Optional[int] = Field(default=None, ge=0)
    wickets: Optional[int] = Field(default=None, ge=0)
    average: Optional[float] = Field(default=None, ge=0)
    strike_rate: Optional[float] = Field(default=None, ge=0)
    best_batting: Optional[str] = None
    economy: Optional[float] = Field(default=None, ge=0)
    best_bowling: Optional[str] = None
    half_centuries: Optional[int] = Field(default=None, ge=0)
    centuries: Optional[int] = Field(default=None, ge=0)
    thirties: Optional[int] = Field(default=None, ge=0)
    three_wickets: Optional[int] = Field(default=None, ge=0)
    five_wickets: Optional[int] = Field(default=None, ge=0)
    maidens: Optional[int] = Field(default=None, ge=0)
    recent_performance: Optional[List[Dict[str, Any]]] = None


# Match schemas


class TeamDescriptor(BaseModel):
    name: str
    short_name: Optional[str] = None
    logo: Optional[str] = None


class CreateMatchRequest(BaseModel):
    """Request to schedule a match."""

    opponent: str
    opponent_logo: Optional[str] = None
    team1: Optional[TeamDescriptor] = None
    team2: Optional[TeamDescriptor] = None
    overs: Optional[int] = Field(default=None, gt=0)
    venue: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    match_type: Optional[str] = "T20"
    status: Optional[str] = None
    selected_players: Optional[List[str]] = None


class UpdateMatchRequest(BaseModel):
    """Partial update of a match."""

    opponent: Optional[str] = None
    opponent_logo: Optional[str] = None
    team1: Optional[TeamDescriptor] = None
    team2: Optional[TeamDescriptor] = None
    overs: Optional[int] = Field(default=None, gt=0)
    venue: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    match_type: Optional[str] = None
    status: Optional[str] = None
    selected_players: Optional[List[str]] = None


class TeamScore(BaseModel):
    runs: int
    wickets: int
    overs: float


class PublishResultRequest(BaseModel):
    """Scorecard summary for a finished match."""

    match_id: int
    team1: TeamScore
    team2: TeamScore
    first_batting_team: str = "team1"
    winner: str


# Gallery schemas


class GalleryAddRequest(BaseModel):
    username: str
    name: Optional[str] = None
    image: Optional[str] = None


class GalleryLikeRequest(BaseModel):
    image_id: int
