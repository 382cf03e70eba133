from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base

REASON_TOURNAMENT_WIN = "tournament_win"
REASON_TOURNAMENT_LAST = "tournament_last"
REASON_MANUAL_ADJUSTMENT = "manual_adjustment"
REASON_INITIAL_HANDICAP = "initial_handicap"


class HandicapHistory(Base):
    """Append-only ledger of handicap changes. Rows are never updated or deleted."""

    __tablename__ = "handicap_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    player_id: Mapped[int] = mapped_column(
        ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # The new handicap index after the change.
    handicap_index: Mapped[float] = mapped_column(Float, nullable=False)
    reason: Mapped[str] = mapped_column(String(32), nullable=False)
    tournament_id: Mapped[int | None] = mapped_column(
        ForeignKey("tournaments.id", ondelete="SET NULL"), index=True
    )
    effective_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
