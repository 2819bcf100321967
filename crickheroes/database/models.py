"""
SQLAlchemy ORM models for the CrickHeroes club portal.
"""

import enum
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Float,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    Index,
    JSON,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from crickheroes.database.db import Base


class AccountRole(str, enum.Enum):
    """Account role enum. Admins are designated out of band."""

    PLAYER = "player"
    ADMIN = "admin"


class AccountStatus(str, enum.Enum):
    """Moderation status enum."""

    PENDING = "pending"
    APPROVED = "approved"


class MatchStatus(str, enum.Enum):
    """Match lifecycle status enum."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Account(Base):
    """Registered club member: credentials plus player profile."""

    __tablename__ = "players"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    username = Column(String, nullable=False, unique=True)
    phone = Column(String, nullable=False, unique=True)
    email = Column(String, nullable=True, unique=True)
    password_hash = Column(String, nullable=False)
    image = Column(String, nullable=True)
    category = Column(String, nullable=True)  # Batsman, Bowler, All-Rounder, Wicket Keeper
    specialties = Column(JSON, nullable=True)
    batting_style = Column(String, nullable=True)
    bowling_style = Column(String, nullable=True)
    age = Column(Integer, nullable=True)
    profile_url = Column(String, nullable=True)
    role = Column(String, default=AccountRole.PLAYER.value, nullable=False)
    status = Column(String, default=AccountStatus.PENDING.value, nullable=False)
    likes = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("idx_players_phone", "phone"),
        Index("idx_players_username", "username"),
        Index("idx_players_status", "status"),
    )


class VerificationCode(Base):
    """Password reset codes sent by email."""

    __tablename__ = "verification_codes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String, nullable=False)
    code = Column(String, nullable=False)
    expires_at = Column(String, nullable=False)  # ISO timestamp
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_verification_codes_email", "email"),
        Index("idx_verification_codes_expires", "expires_at"),
    )


class Match(Base):
    """Scheduled or completed match against an opponent."""

    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    opponent = Column(String, nullable=False)
    opponent_logo = Column(String, nullable=True)
    team1 = Column(JSON, nullable=False)  # {"name", "short_name", "logo"}
    team2 = Column(JSON, nullable=False)
    overs = Column(Integer, nullable=True)
    venue = Column(String, nullable=True)
    date = Column(String, nullable=True)  # ISO date
    time = Column(String, nullable=True)  # HH:MM
    match_type = Column(String, default="T20", nullable=False)
    status = Column(String, default=MatchStatus.SCHEDULED.value, nullable=False)
    selected_players = Column(JSON, nullable=True)  # list of usernames
    result = Column(Text, nullable=True)  # Summary line, set when a result is published
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    match_result = relationship(
        "MatchResult", back_populates="match", uselist=False, cascade="all, delete-orphan"
    )

    __table_args__ = (Index("idx_matches_status", "status"),)


class MatchResult(Base):
    """Published scorecard summary for a match."""

    __tablename__ = "results"

    id = Column(Integer, primary_key=True, autoincrement=True)
    match_id = Column(
        Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    team1 = Column(JSON, nullable=False)  # {"name", "runs", "wickets", "overs", "score", "result"}
    team2 = Column(JSON, nullable=False)
    first_batting_team = Column(String, nullable=False)  # team1 | team2
    winner = Column(String, nullable=False)  # team1 | team2 | tie
    result = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    match = relationship("Match", back_populates="match_result")


class PlayerDetails(Base):
    """Career statistics for a player, keyed by username."""

    __tablename__ = "player_details"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, nullable=False, unique=True)
    matches = Column(Integer, default=0, nullable=False)
    runs = Column(Integer, default=0, nullable=False)
    wickets = Column(Integer, default=0, nullable=False)
    average = Column(Float, default=0, nullable=False)
    strike_rate = Column(Float, default=0, nullable=False)
    best_batting = Column(String, default="0 (0)", nullable=False)
    economy = Column(Float, default=0, nullable=False)
    best_bowling = Column(String, default="0/0", nullable=False)
    half_centuries = Column(Integer, default=0, nullable=False)
    centuries = Column(Integer, default=0, nullable=False)
    thirties = Column(Integer, default=0, nullable=False)
    three_wickets = Column(Integer, default=0, nullable=False)
    five_wickets = Column(Integer, default=0, nullable=False)
    maidens = Column(Integer, default=0, nullable=False)
    recent_performance = Column(JSON, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class GalleryItem(Base):
    """Photo in the club gallery."""

    __tablename__ = "gallery"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, nullable=False)
    name = Column(String, nullable=True)
    image = Column(String, nullable=False)  # Hosted image URL
    category = Column(String, nullable=True)
    title = Column(String, default="Untitled", nullable=False)
    likes = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    liked_by = relationship("GalleryLike", back_populates="item", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("username", "image", name="uq_gallery_username_image"),
        Index("idx_gallery_created", "created_at"),
    )


class GalleryLike(Base):
    """One like per account per gallery item."""

    __tablename__ = "gallery_likes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    gallery_id = Column(Integer, ForeignKey("gallery.id", ondelete="CASCADE"), nullable=False)
    account_id = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    item = relationship("GalleryItem", back_populates="liked_by")

    __table_args__ = (
        UniqueConstraint("gallery_id", "account_id", name="uq_gallery_likes_item_account"),
    )
