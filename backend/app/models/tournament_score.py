from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class TournamentScore(Base):
    __tablename__ = "tournament_scores"
    __table_args__ = (
        UniqueConstraint("tournament_id", "player_id", name="uq_tournament_score_player"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tournament_id: Mapped[int] = mapped_column(
        ForeignKey("tournaments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    participant_id: Mapped[int] = mapped_column(
        ForeignKey("tournament_participants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    player_id: Mapped[int] = mapped_column(
        ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True
    )

    gross_score: Mapped[int] = mapped_column(Integer, nullable=False)
    # Snapshot of the player's handicap when the score was submitted.
    handicap_at_time: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    net_score: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    # Stableford tournaments with hole-by-hole input only.
    stableford_points: Mapped[int | None] = mapped_column(Integer)

    # Written once, on tournament completion.
    position: Mapped[int | None] = mapped_column(Integer)
    handicap_adjustment: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    tournament = relationship("Tournament", back_populates="scores")
    player = relationship("Player")
    hole_scores: Mapped[list["HoleScore"]] = relationship(
        back_populates="tournament_score",
        cascade="all, delete-orphan",
    )


class HoleScore(Base):
    __tablename__ = "hole_scores"
    __table_args__ = (
        UniqueConstraint("tournament_score_id", "hole_id", name="uq_hole_score_score_hole"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tournament_score_id: Mapped[int] = mapped_column(
        ForeignKey("tournament_scores.id", ondelete="CASCADE"), nullable=False, index=True
    )
    hole_id: Mapped[int] = mapped_column(
        ForeignKey("holes.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    strokes: Mapped[int] = mapped_column(Integer, nullable=False)
    stableford_points: Mapped[int | None] = mapped_column(Integer)

    putts: Mapped[int | None] = mapped_column(Integer)
    fairway_hit: Mapped[bool | None] = mapped_column(Boolean)
    green_in_regulation: Mapped[bool | None] = mapped_column(Boolean)

    tournament_score: Mapped["TournamentScore"] = relationship(back_populates="hole_scores")
    hole = relationship("Hole")
