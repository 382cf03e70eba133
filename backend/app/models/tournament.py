from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

FORMAT_STROKE_PLAY = "Stroke Play"
FORMAT_STABLEFORD = "Stableford"

STATUS_UPCOMING = "upcoming"
STATUS_COMPLETED = "completed"


class Tournament(Base):
    __tablename__ = "tournaments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    club_id: Mapped[int | None] = mapped_column(
        ForeignKey("clubs.id", ondelete="CASCADE"), index=True
    )
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    format: Mapped[str] = mapped_column(String(32), nullable=False, default=FORMAT_STROKE_PLAY)
    is_major: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # upcoming -> completed, never back.
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_UPCOMING)
    tournament_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    course = relationship("Course")
    club = relationship("Club")
    scores: Mapped[list["TournamentScore"]] = relationship(  # noqa: F821
        back_populates="tournament",
        cascade="all, delete-orphan",
        order_by="TournamentScore.id",
    )

    @property
    def is_stableford(self) -> bool:
        return self.format == FORMAT_STABLEFORD

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED
