# src/foosrank/db/models.py

"""Database models for the FoosRank application."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List

from sqlalchemy import (
    Float,
    ForeignKey,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import (
    Mapped,
    declarative_base,
    mapped_column,
    relationship,
)

from foosrank.rating.belief import DEFAULT_DEVIATION, DEFAULT_MEAN, SkillBelief

Base = declarative_base()


# ===============================================
# Mixins for Common Columns
# ===============================================


class TimestampMixin:
    """Mixin providing created_at and updated_at timestamp columns."""

    created_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        default=None,
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=True,
    )


class VersionMixin:
    """Mixin providing a version counter bumped on every rating write."""

    version: Mapped[int] = mapped_column(default=1, nullable=False)


# ===============================================
# Players and their stored beliefs
# ===============================================


class Player(Base, TimestampMixin, VersionMixin):
    """A person who plays matches, identified by a unique name."""

    __tablename__ = "players"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)

    # One rating per role ("defender"/"attacker"), or a single "any" rating
    ratings: Mapped[List["PlayerRating"]] = relationship(
        back_populates="player", cascade="all, delete-orphan", lazy="selectin"
    )
    match_participations: Mapped[List["MatchParticipant"]] = relationship(
        back_populates="player"
    )

    def __init__(self, name: str, **kw: Any):
        super().__init__(**kw)
        self.name = name

    def rating_for(self, role: str) -> "PlayerRating | None":
        """The stored rating for a role, if the player has one."""
        for rating in self.ratings:
            if rating.role == role:
                return rating
        return None


class PlayerRating(Base, TimestampMixin, VersionMixin):
    """One stored skill belief of a player, kept for a single role."""

    __tablename__ = "player_ratings"
    id: Mapped[int] = mapped_column(primary_key=True)
    player_id: Mapped[int] = mapped_column(
        ForeignKey("players.id"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(String, nullable=False)
    mean: Mapped[float] = mapped_column(Float, default=DEFAULT_MEAN, nullable=False)
    deviation: Mapped[float] = mapped_column(
        Float, default=DEFAULT_DEVIATION, nullable=False
    )

    player: Mapped["Player"] = relationship(back_populates="ratings")

    __table_args__ = (UniqueConstraint("player_id", "role", name="_player_role_uc"),)

    def __init__(self, **kw: Any):
        super().__init__(**kw)

    def to_belief(self) -> SkillBelief:
        return SkillBelief(self.mean, self.deviation)


# ===============================================
# Match and Results Tables
# ===============================================


class Match(Base, TimestampMixin, VersionMixin):
    """A recorded two-versus-two match and the forecast made before it."""

    __tablename__ = "matches"
    id: Mapped[int] = mapped_column(primary_key=True)
    # 1 or 2
    winner: Mapped[int] = mapped_column(nullable=False)
    team1_win_probability: Mapped[float] = mapped_column(Float, nullable=False)
    team2_win_probability: Mapped[float] = mapped_column(Float, nullable=False)
    # Business timestamp: when the match was actually played
    played_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(timezone.utc), index=True
    )

    participants: Mapped[List["MatchParticipant"]] = relationship(
        back_populates="match", cascade="all, delete-orphan"
    )


class MatchParticipant(Base):
    """Links a Player to a Match, recording their slot and belief before/after."""

    __tablename__ = "match_participants"
    id: Mapped[int] = mapped_column(primary_key=True)
    match_id: Mapped[int] = mapped_column(
        ForeignKey("matches.id"), nullable=False, index=True
    )
    player_id: Mapped[int] = mapped_column(
        ForeignKey("players.id"), nullable=False, index=True
    )
    # 1 or 2
    team: Mapped[int] = mapped_column(nullable=False)
    # The slot played in this match: "defender" or "attacker"
    role: Mapped[str] = mapped_column(String, nullable=False)

    # For auditing and historical analysis
    mean_before: Mapped[float] = mapped_column(Float, nullable=False)
    deviation_before: Mapped[float] = mapped_column(Float, nullable=False)
    mean_after: Mapped[float] = mapped_column(Float, nullable=False)
    deviation_after: Mapped[float] = mapped_column(Float, nullable=False)

    player: Mapped["Player"] = relationship(back_populates="match_participations")
    match: Mapped["Match"] = relationship(back_populates="participants")
